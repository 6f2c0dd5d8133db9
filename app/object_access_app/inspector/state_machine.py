"""Selection state machine behind the object access viewer.

An ``AccessInspector`` owns one administrator's selection (object, field,
user), the option lists shown in the selects, and the last access result.
Selecting an object resets the field and reloads the field list; submitting
dispatches exactly one of the two access queries.

Backend calls are scheduled as tasks so a transition never waits on the
network. Each field-list load and each access query is stamped with a
generation number; a response that arrives after a newer request has been
issued is discarded instead of overwriting the display.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import replace
from enum import Enum
from typing import Any, Protocol

from object_access_app.core.errors import ServiceError, ValidationGap
from object_access_app.core.models import (
    NO_FIELD_OPTION,
    ResultSet,
    SelectableOption,
    Selection,
)
from object_access_app.inspector.events import (
    FieldSelected,
    InspectorEvent,
    ObjectSelected,
    SubmitClicked,
    UserSelected,
)
from object_access_app.presenter.result_table import COLUMN_NAMES, ResultTable, render_table

LOGGER = logging.getLogger(__name__)


class DirectoryService(Protocol):
    async def list_objects(self) -> list[str]: ...

    async def list_fields(self, object_name: str) -> list[dict[str, str]]: ...

    async def list_users(self) -> list[dict[str, str]]: ...


class AccessQueryService(Protocol):
    async def query_object_access(self, object_name: str, user_id: str) -> ResultSet: ...

    async def query_field_access(self, object_name: str, field_name: str, user_id: str) -> ResultSet: ...


class InspectorState(str, Enum):
    EMPTY = "empty"
    OBJECT_CHOSEN = "object_chosen"
    FIELD_CHOSEN = "field_chosen"


OBJECT_SET = "object_set"
OBJECT_CLEARED = "object_cleared"
FIELD_SET = "field_set"
FIELD_CLEARED = "field_cleared"

_TRANSITIONS: dict[tuple[InspectorState, str], InspectorState] = {
    (InspectorState.EMPTY, OBJECT_SET): InspectorState.OBJECT_CHOSEN,
    (InspectorState.EMPTY, OBJECT_CLEARED): InspectorState.EMPTY,
    (InspectorState.EMPTY, FIELD_SET): InspectorState.EMPTY,
    (InspectorState.EMPTY, FIELD_CLEARED): InspectorState.EMPTY,
    (InspectorState.OBJECT_CHOSEN, OBJECT_SET): InspectorState.OBJECT_CHOSEN,
    (InspectorState.OBJECT_CHOSEN, OBJECT_CLEARED): InspectorState.EMPTY,
    (InspectorState.OBJECT_CHOSEN, FIELD_SET): InspectorState.FIELD_CHOSEN,
    (InspectorState.OBJECT_CHOSEN, FIELD_CLEARED): InspectorState.OBJECT_CHOSEN,
    (InspectorState.FIELD_CHOSEN, OBJECT_SET): InspectorState.OBJECT_CHOSEN,
    (InspectorState.FIELD_CHOSEN, OBJECT_CLEARED): InspectorState.EMPTY,
    (InspectorState.FIELD_CHOSEN, FIELD_SET): InspectorState.FIELD_CHOSEN,
    (InspectorState.FIELD_CHOSEN, FIELD_CLEARED): InspectorState.OBJECT_CHOSEN,
}


class AccessInspector:
    def __init__(self, directory: DirectoryService, access: AccessQueryService) -> None:
        self._directory = directory
        self._access = access
        self.state = InspectorState.EMPTY
        self.selection = Selection()
        self.object_options: list[SelectableOption] = []
        self.field_options: list[SelectableOption] = [NO_FIELD_OPTION]
        self.user_options: list[SelectableOption] = []
        self.result_set: ResultSet | None = None
        self.last_dispatch: tuple[str, tuple[str, ...]] | None = None
        self.sort_by: str | None = None
        self.sort_descending = False
        self._field_generation = 0
        self._query_generation = 0
        self._pending: set[asyncio.Task[Any]] = set()
        self._handlers: dict[type, Callable[[Any], asyncio.Task[Any] | None]] = {
            ObjectSelected: lambda event: self.set_object(event.value),
            FieldSelected: lambda event: self.set_field(event.value),
            UserSelected: lambda event: self.set_user(event.value),
            SubmitClicked: lambda _event: self.submit(),
        }

    def _transition(self, kind: str) -> None:
        self.state = _TRANSITIONS[(self.state, kind)]

    def _schedule(self, coro: Awaitable[Any]) -> asyncio.Task[Any]:
        task = asyncio.get_running_loop().create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def load(self) -> None:
        """Populate the object and user lists; each failure leaves its list empty."""
        await asyncio.gather(self._load_objects(), self._load_users())

    async def _load_objects(self) -> None:
        try:
            names = await self._directory.list_objects()
        except ServiceError as exc:
            self._log_failure("list_objects", exc)
            return
        except Exception as exc:
            self._log_failure("list_objects", exc, exc_info=True)
            return
        self.object_options = [SelectableOption(label=name, value=name) for name in names]

    async def _load_users(self) -> None:
        try:
            users = await self._directory.list_users()
        except ServiceError as exc:
            self._log_failure("list_users", exc)
            return
        except Exception as exc:
            self._log_failure("list_users", exc, exc_info=True)
            return
        self.user_options = [SelectableOption(label=user["Name"], value=user["Id"]) for user in users]

    def set_object(self, name: str | None) -> asyncio.Task[Any] | None:
        self.selection = replace(self.selection, object_name=name or None, field_name=None)
        self.field_options = [NO_FIELD_OPTION]
        self._field_generation += 1
        if not name:
            self._transition(OBJECT_CLEARED)
            self._query_generation += 1
            self.result_set = None
            return None
        self._transition(OBJECT_SET)
        return self._schedule(self._load_fields(name, self._field_generation))

    async def _load_fields(self, object_name: str, generation: int) -> None:
        try:
            fields = await self._directory.list_fields(object_name)
        except ServiceError as exc:
            self._log_failure("list_fields", exc, object_name=object_name)
            return
        except Exception as exc:
            self._log_failure("list_fields", exc, exc_info=True, object_name=object_name)
            return
        if generation != self._field_generation:
            LOGGER.info(
                "Discarded stale field list. object=%s generation=%s current=%s",
                object_name,
                generation,
                self._field_generation,
                extra={"event": "stale_field_list", "object_name": object_name},
            )
            return
        self.field_options = [NO_FIELD_OPTION] + [
            SelectableOption(label=field["Label"], value=field["Name"]) for field in fields
        ]

    def set_field(self, value: str | None) -> None:
        self.selection = replace(self.selection, field_name=value)
        self._transition(FIELD_SET if value else FIELD_CLEARED)

    def set_user(self, user_id: str | None) -> None:
        self.selection = replace(self.selection, user_id=user_id or None)

    def set_sort(self, column: str | None, *, descending: bool = False) -> None:
        if column and column not in COLUMN_NAMES:
            raise ValueError(f"Unknown sort column: {column}")
        self.sort_by = column or None
        self.sort_descending = bool(descending)

    def _require_complete_selection(self) -> tuple[str, str]:
        missing = tuple(
            name
            for name, value in (("object_name", self.selection.object_name), ("user_id", self.selection.user_id))
            if not value
        )
        if missing:
            raise ValidationGap(missing)
        return self.selection.object_name, self.selection.user_id

    def submit(self) -> asyncio.Task[Any] | None:
        try:
            object_name, user_id = self._require_complete_selection()
        except ValidationGap as gap:
            LOGGER.debug("Submit ignored. %s", gap)
            return None

        field_name = self.selection.field_name
        if field_name:
            args: tuple[str, ...] = (object_name, field_name, user_id)
            self.last_dispatch = ("query_field_access", args)
            call = self._access.query_field_access(object_name, field_name, user_id)
        else:
            args = (object_name, user_id)
            self.last_dispatch = ("query_object_access", args)
            call = self._access.query_object_access(object_name, user_id)

        self._query_generation += 1
        return self._schedule(self._apply_query(call, self.last_dispatch[0], self._query_generation))

    async def _apply_query(self, call: Awaitable[ResultSet], operation: str, generation: int) -> None:
        try:
            rows = await call
        except ServiceError as exc:
            self._log_failure(operation, exc)
            return
        except Exception as exc:
            self._log_failure(operation, exc, exc_info=True)
            return
        if generation != self._query_generation:
            LOGGER.info(
                "Discarded stale access result. operation=%s generation=%s current=%s",
                operation,
                generation,
                self._query_generation,
                extra={"event": "stale_access_result", "operation": operation},
            )
            return
        self.result_set = tuple(rows)

    def _log_failure(self, operation: str, exc: Exception, *, exc_info: bool = False, **context: str) -> None:
        LOGGER.warning(
            "Backend call failed. operation=%s status=%s error=%s",
            operation,
            getattr(exc, "status_code", None),
            exc,
            exc_info=exc_info,
            extra={"event": "backend_call_failed", "operation": operation, **context},
        )

    def handle(self, event: InspectorEvent) -> asyncio.Task[Any] | None:
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"Unsupported inspector event: {event!r}")
        return handler(event)

    async def consume(self, queue: asyncio.Queue[InspectorEvent | None]) -> None:
        """Apply queued UI events in order until a ``None`` sentinel arrives."""
        while True:
            event = await queue.get()
            try:
                if event is None:
                    return
                self.handle(event)
            finally:
                queue.task_done()

    async def wait_idle(self) -> None:
        while self._pending:
            await asyncio.gather(*list(self._pending))

    def table(self) -> ResultTable:
        return render_table(self.result_set, sort_by=self.sort_by, descending=self.sort_descending)

    def snapshot(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "selection": self.selection.as_dict(),
            "objects": [option.as_dict() for option in self.object_options],
            "fields": [option.as_dict() for option in self.field_options],
            "users": [option.as_dict() for option in self.user_options],
            "table": self.table().as_dict(),
        }
