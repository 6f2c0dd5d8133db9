from __future__ import annotations

import logging
import uuid
from collections import OrderedDict
from collections.abc import Callable

from object_access_app.core.defaults import DEFAULT_INSPECTOR_REGISTRY_MAX
from object_access_app.inspector.state_machine import AccessInspector

LOGGER = logging.getLogger(__name__)


class InspectorRegistry:
    """Holds one ``AccessInspector`` per UI session, evicting the least recently used."""

    def __init__(
        self,
        factory: Callable[[], AccessInspector],
        *,
        max_entries: int = DEFAULT_INSPECTOR_REGISTRY_MAX,
    ) -> None:
        self._factory = factory
        self._max_entries = max(1, int(max_entries))
        self._entries: OrderedDict[str, AccessInspector] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, inspector_id: object) -> bool:
        return inspector_id in self._entries

    async def get_or_create(self, inspector_id: str | None) -> tuple[str, AccessInspector]:
        if inspector_id and inspector_id in self._entries:
            self._entries.move_to_end(inspector_id)
            return inspector_id, self._entries[inspector_id]

        new_id = uuid.uuid4().hex
        inspector = self._factory()
        await inspector.load()
        self._entries[new_id] = inspector
        while len(self._entries) > self._max_entries:
            evicted_id, _ = self._entries.popitem(last=False)
            LOGGER.info(
                "Evicted inspector session. id=%s",
                evicted_id,
                extra={"event": "inspector_evicted", "inspector_id": evicted_id},
            )
        return new_id, inspector

    def drop(self, inspector_id: str) -> None:
        self._entries.pop(inspector_id, None)

    def clear(self) -> None:
        self._entries.clear()
