from __future__ import annotations

from typing import Any
from urllib.parse import quote

from object_access_app.backend.http import BackendHttpClient
from object_access_app.core.errors import ServiceError


def _as_list(payload: Any, *, operation: str) -> list[Any]:
    if isinstance(payload, dict):
        payload = payload.get("items", payload.get("records"))
    if not isinstance(payload, list):
        raise ServiceError(f"Backend returned a non-list payload for {operation}.", operation=operation)
    return payload


def _pairs(payload: Any, key: str, label_key: str, *, operation: str) -> list[dict[str, str]]:
    try:
        return [
            {key: str(item[key]), label_key: str(item.get(label_key) or item[key])}
            for item in _as_list(payload, operation=operation)
        ]
    except (KeyError, TypeError, AttributeError) as exc:
        raise ServiceError(
            f"Backend returned an item without '{key}' for {operation}.",
            operation=operation,
        ) from exc


class DirectoryServiceClient:
    """Lists objects, object fields and users from the authorization backend."""

    def __init__(self, http: BackendHttpClient) -> None:
        self._http = http

    async def list_objects(self) -> list[str]:
        payload = await self._http.get_json("/objects", operation="list_objects")
        names = _as_list(payload, operation="list_objects")
        if not all(isinstance(name, str) for name in names):
            raise ServiceError(
                "Backend returned a non-string object name for list_objects.",
                operation="list_objects",
            )
        return names

    async def list_fields(self, object_name: str) -> list[dict[str, str]]:
        payload = await self._http.get_json(
            f"/objects/{quote(object_name, safe='')}/fields",
            operation="list_fields",
        )
        return _pairs(payload, "Name", "Label", operation="list_fields")

    async def list_users(self) -> list[dict[str, str]]:
        payload = await self._http.get_json("/users", operation="list_users")
        return _pairs(payload, "Id", "Name", operation="list_users")
