from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from object_access_app.core.config import AppConfig
from object_access_app.core.errors import ServiceError

LOGGER = logging.getLogger(__name__)


class BackendHttpClient:
    """Thin JSON-over-HTTP wrapper around the authorization backend.

    Every transport or status failure is translated into ``ServiceError`` so
    callers only ever handle one exception type.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: str = "",
        timeout_sec: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout_sec,
            transport=transport,
        )

    @classmethod
    def from_config(cls, config: AppConfig, **kwargs: Any) -> "BackendHttpClient":
        return cls(
            config.backend_base_url,
            token=config.backend_token,
            timeout_sec=config.backend_timeout_sec,
            **kwargs,
        )

    async def get_json(self, path: str, *, operation: str, params: dict[str, str] | None = None) -> Any:
        started = time.perf_counter()
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            raise ServiceError(
                f"Backend rejected {operation} with HTTP {status_code}.",
                operation=operation,
                status_code=status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise ServiceError(
                f"Backend unreachable during {operation}: {exc}",
                operation=operation,
            ) from exc
        except ValueError as exc:
            raise ServiceError(
                f"Backend returned malformed JSON for {operation}.",
                operation=operation,
            ) from exc
        LOGGER.debug(
            "backend_call op=%s path=%s ms=%.2f",
            operation,
            path,
            (time.perf_counter() - started) * 1000.0,
            extra={"event": "backend_call", "operation": operation},
        )
        return payload

    async def aclose(self) -> None:
        await self._client.aclose()
