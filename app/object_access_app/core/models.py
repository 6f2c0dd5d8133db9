from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from object_access_app.core.defaults import NO_FIELD_OPTION_LABEL, NO_FIELD_OPTION_VALUE


@dataclass(frozen=True)
class SelectableOption:
    """Display/value pair used for objects, fields and users.

    ``value`` is the canonical backend identifier; ``label`` is presentation only.
    """

    label: str
    value: str

    def as_dict(self) -> dict[str, str]:
        return {"label": self.label, "value": self.value}


NO_FIELD_OPTION = SelectableOption(label=NO_FIELD_OPTION_LABEL, value=NO_FIELD_OPTION_VALUE)


@dataclass(frozen=True)
class Selection:
    object_name: str | None = None
    field_name: str | None = None
    user_id: str | None = None

    def as_dict(self) -> dict[str, str | None]:
        return {
            "object_name": self.object_name,
            "field_name": self.field_name,
            "user_id": self.user_id,
        }


def _pick(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in payload:
            return payload[key]
    return None


def _as_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "y"}
    return bool(value)


@dataclass(frozen=True)
class AccessRecord:
    is_accessible: bool
    is_updatable: bool
    is_creatable: bool
    field_name: str | None = None

    @staticmethod
    def from_backend(payload: Mapping[str, Any]) -> "AccessRecord":
        field_name = _pick(payload, "FieldName", "field_name", "fieldName")
        return AccessRecord(
            field_name=(str(field_name) if field_name not in (None, "") else None),
            is_accessible=_as_flag(_pick(payload, "IsAccessible", "is_accessible", "isAccessible")),
            is_updatable=_as_flag(_pick(payload, "IsUpdatable", "is_updatable", "isUpdatable")),
            is_creatable=_as_flag(_pick(payload, "IsCreatable", "is_creatable", "isCreatable")),
        )


# Row count is backend-controlled: one row for a field query, any number for an object query.
ResultSet = tuple[AccessRecord, ...]


def result_set_from_payload(payload: Any) -> ResultSet:
    if payload is None:
        return ()
    if isinstance(payload, Mapping):
        payload = payload.get("records", payload.get("items", [payload]))
    records = []
    for item in payload:
        if not isinstance(item, Mapping):
            raise TypeError(f"Access row must be a mapping, got {type(item).__name__}")
        records.append(AccessRecord.from_backend(item))
    return tuple(records)
