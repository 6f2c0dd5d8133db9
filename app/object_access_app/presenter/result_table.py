from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from object_access_app.core.models import AccessRecord

COLUMN_FIELD_NAME = "FieldName"
COLUMN_IS_ACCESSIBLE = "IsAccessible"
COLUMN_IS_UPDATABLE = "IsUpdatable"
COLUMN_IS_CREATABLE = "IsCreatable"

COLUMNS: tuple[dict[str, Any], ...] = (
    {"label": COLUMN_FIELD_NAME, "field_name": COLUMN_FIELD_NAME, "type": "text", "sortable": True},
    {"label": COLUMN_IS_ACCESSIBLE, "field_name": COLUMN_IS_ACCESSIBLE, "type": "boolean", "sortable": True},
    {"label": COLUMN_IS_UPDATABLE, "field_name": COLUMN_IS_UPDATABLE, "type": "boolean", "sortable": True},
    {"label": COLUMN_IS_CREATABLE, "field_name": COLUMN_IS_CREATABLE, "type": "boolean", "sortable": True},
)
COLUMN_NAMES = tuple(column["field_name"] for column in COLUMNS)


def build_rows(records: Iterable[AccessRecord] | None) -> list[dict[str, Any]]:
    """Shape access records into rows keyed by the fixed column names."""
    return [
        {
            COLUMN_FIELD_NAME: record.field_name,
            COLUMN_IS_ACCESSIBLE: record.is_accessible,
            COLUMN_IS_UPDATABLE: record.is_updatable,
            COLUMN_IS_CREATABLE: record.is_creatable,
        }
        for record in (records or ())
    ]


def sort_rows(rows: list[dict[str, Any]], column: str, *, descending: bool = False) -> list[dict[str, Any]]:
    if column not in COLUMN_NAMES:
        raise ValueError(f"Unknown sort column: {column}")
    present = [row for row in rows if row.get(column) is not None]
    missing = [row for row in rows if row.get(column) is None]
    # Rows without a value always sort last, whichever the direction.
    return sorted(present, key=lambda row: row[column], reverse=descending) + missing


@dataclass(frozen=True)
class ResultTable:
    rows: list[dict[str, Any]] = field(default_factory=list)
    sorted_by: str | None = None
    sort_descending: bool = False

    @property
    def columns(self) -> tuple[dict[str, Any], ...]:
        return COLUMNS

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def as_dict(self) -> dict[str, Any]:
        return {
            "columns": [dict(column) for column in COLUMNS],
            "rows": [dict(row) for row in self.rows],
            "sorted_by": self.sorted_by,
            "sort_direction": "desc" if self.sort_descending else "asc",
        }


def render_table(
    records: Iterable[AccessRecord] | None,
    *,
    sort_by: str | None = None,
    descending: bool = False,
) -> ResultTable:
    rows = build_rows(records)
    if sort_by:
        rows = sort_rows(rows, sort_by, descending=descending)
    return ResultTable(rows=rows, sorted_by=sort_by, sort_descending=descending)
