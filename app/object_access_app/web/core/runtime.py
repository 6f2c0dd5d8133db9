from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from object_access_app.backend import (
    AccessQueryClient,
    BackendHttpClient,
    DirectoryServiceClient,
    MockAccessBackend,
)
from object_access_app.core.config import AppConfig
from object_access_app.inspector import AccessInspector, InspectorRegistry

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class BackendServices:
    directory: Any
    access: Any
    resource: Any
    mode: str

    async def aclose(self) -> None:
        await self.resource.aclose()


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    return AppConfig.from_env()


def build_backend_services(config: AppConfig) -> BackendServices:
    if config.use_mock_backend:
        backend = MockAccessBackend()
        return BackendServices(directory=backend, access=backend, resource=backend, mode=config.backend_mode)
    http = BackendHttpClient.from_config(config)
    return BackendServices(
        directory=DirectoryServiceClient(http),
        access=AccessQueryClient(http),
        resource=http,
        mode=config.backend_mode,
    )


@lru_cache(maxsize=1)
def get_backend() -> BackendServices:
    services = build_backend_services(get_config())
    LOGGER.info(
        "Backend services initialized. mode=%s",
        services.mode,
        extra={"event": "backend_init", "backend_mode": services.mode},
    )
    return services


@lru_cache(maxsize=1)
def get_registry() -> InspectorRegistry:
    def _factory() -> AccessInspector:
        services = get_backend()
        return AccessInspector(services.directory, services.access)

    return InspectorRegistry(_factory)


async def close_runtime() -> None:
    if get_registry.cache_info().currsize:
        get_registry().clear()
        get_registry.cache_clear()
    if get_backend.cache_info().currsize == 0:
        return
    try:
        await get_backend().aclose()
    except Exception:
        LOGGER.warning("Failed to close backend resources cleanly.", exc_info=True)
    finally:
        get_backend.cache_clear()
