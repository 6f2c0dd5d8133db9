from __future__ import annotations

from dataclasses import dataclass

from object_access_app.core.defaults import (
    DEFAULT_BACKEND_TIMEOUT_SEC,
    DEFAULT_DEV_ENV_NAMES,
    DEFAULT_ENV_NAME,
)
from object_access_app.core.env import (
    BACKEND_URL_KEYS,
    OAV_BACKEND_TIMEOUT_SEC,
    OAV_BACKEND_TOKEN,
    OAV_ENV,
    OAV_USE_MOCK_BACKEND,
    get_env,
    get_env_bool,
    get_env_float,
    get_first_env,
)


DEV_ENV_NAMES = set(DEFAULT_DEV_ENV_NAMES)


def _clean_base_url(raw_url: str) -> str:
    value = str(raw_url or "").strip()
    if not value:
        return ""
    if not value.startswith(("http://", "https://")):
        value = f"https://{value}"
    return value.rstrip("/")


@dataclass(frozen=True)
class AppConfig:
    backend_base_url: str
    backend_token: str = ""
    backend_timeout_sec: float = DEFAULT_BACKEND_TIMEOUT_SEC
    env: str = DEFAULT_ENV_NAME
    use_mock_backend: bool = False

    @property
    def is_dev_env(self) -> bool:
        return self.env in DEV_ENV_NAMES

    @property
    def backend_mode(self) -> str:
        return "mock" if self.use_mock_backend else "http"

    @staticmethod
    def from_env() -> "AppConfig":
        env_name = get_env(OAV_ENV, DEFAULT_ENV_NAME).lower() or DEFAULT_ENV_NAME
        default_mock = env_name in DEV_ENV_NAMES
        requested_mock = get_env_bool(OAV_USE_MOCK_BACKEND, default=default_mock)
        if requested_mock and env_name not in DEV_ENV_NAMES:
            raise RuntimeError(
                "OAV_USE_MOCK_BACKEND=true is allowed only for dev/local environments. "
                "Set OAV_ENV=dev (or local), or disable OAV_USE_MOCK_BACKEND."
            )
        base_url = _clean_base_url(get_first_env(BACKEND_URL_KEYS))
        if not requested_mock and not base_url:
            raise RuntimeError(
                "OAV_BACKEND_URL is required when the mock backend is disabled "
                "(or set ACCESS_BACKEND_URL)."
            )
        return AppConfig(
            backend_base_url=base_url,
            backend_token=get_env(OAV_BACKEND_TOKEN),
            backend_timeout_sec=get_env_float(
                OAV_BACKEND_TIMEOUT_SEC,
                default=DEFAULT_BACKEND_TIMEOUT_SEC,
                min_value=0.1,
            ),
            env=env_name,
            use_mock_backend=requested_mock,
        )
