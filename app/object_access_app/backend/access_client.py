from __future__ import annotations

from typing import Any
from urllib.parse import quote

from object_access_app.backend.http import BackendHttpClient
from object_access_app.core.errors import ServiceError
from object_access_app.core.models import ResultSet, result_set_from_payload


def _parse_result_set(payload: Any, *, operation: str) -> ResultSet:
    try:
        return result_set_from_payload(payload)
    except (TypeError, AttributeError) as exc:
        raise ServiceError(f"Backend returned malformed access rows for {operation}.", operation=operation) from exc


class AccessQueryClient:
    def __init__(self, http: BackendHttpClient) -> None:
        self._http = http

    async def query_object_access(self, object_name: str, user_id: str) -> ResultSet:
        payload = await self._http.get_json(
            f"/access/objects/{quote(object_name, safe='')}",
            operation="query_object_access",
            params={"userId": user_id},
        )
        return _parse_result_set(payload, operation="query_object_access")

    async def query_field_access(self, object_name: str, field_name: str, user_id: str) -> ResultSet:
        payload = await self._http.get_json(
            f"/access/objects/{quote(object_name, safe='')}/fields/{quote(field_name, safe='')}",
            operation="query_field_access",
            params={"userId": user_id},
        )
        return _parse_result_set(payload, operation="query_field_access")
