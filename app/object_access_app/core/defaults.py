from __future__ import annotations

# Environment and config defaults
DEFAULT_ENV_NAME = "dev"
DEFAULT_DEV_ENV_NAMES = ("dev", "development", "local")
DEFAULT_SESSION_SECRET = "object-access-dev-secret"
DEFAULT_BACKEND_TIMEOUT_SEC = 10.0

# Selection defaults
NO_FIELD_OPTION_LABEL = "---Select Field---"
NO_FIELD_OPTION_VALUE = ""
INSPECTOR_SESSION_KEY = "oav_inspector_id"
DEFAULT_INSPECTOR_REGISTRY_MAX = 500
