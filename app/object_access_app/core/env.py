from __future__ import annotations

import os
from collections.abc import Iterable

OAV_ENV = "OAV_ENV"
OAV_USE_MOCK_BACKEND = "OAV_USE_MOCK_BACKEND"
OAV_BACKEND_TOKEN = "OAV_BACKEND_TOKEN"
OAV_BACKEND_TIMEOUT_SEC = "OAV_BACKEND_TIMEOUT_SEC"
OAV_SESSION_SECRET = "OAV_SESSION_SECRET"
OAV_SESSION_HTTPS_ONLY = "OAV_SESSION_HTTPS_ONLY"
OAV_ALLOW_DEFAULT_SESSION_SECRET = "OAV_ALLOW_DEFAULT_SESSION_SECRET"
OAV_LOG_LEVEL = "OAV_LOG_LEVEL"
OAV_LOG_JSON = "OAV_LOG_JSON"
OAV_LOG_CAPTURE_ROOT = "OAV_LOG_CAPTURE_ROOT"
OAV_ERROR_INCLUDE_DETAILS = "OAV_ERROR_INCLUDE_DETAILS"
OAV_REQUEST_ID_HEADER_ENABLED = "OAV_REQUEST_ID_HEADER_ENABLED"

BACKEND_URL_KEYS = (
    "OAV_BACKEND_URL",
    "ACCESS_BACKEND_URL",
)

_TRUE_VALUES = {"1", "true", "yes", "y", "on"}


def get_env(key: str, default: str = "") -> str:
    return str(os.getenv(key, default) or "").strip()


def get_first_env(keys: Iterable[str], default: str = "") -> str:
    for key in keys:
        value = get_env(key)
        if value:
            return value
    return default


def get_env_bool(key: str, default: bool = False) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUE_VALUES


def get_env_float(key: str, default: float, *, min_value: float | None = None) -> float:
    try:
        value = float(get_env(key, str(default)))
    except ValueError:
        value = default
    if min_value is not None:
        value = max(min_value, value)
    return value
