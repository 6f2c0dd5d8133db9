from __future__ import annotations

import sys
from pathlib import Path

import pytest

APP_ROOT = Path(__file__).resolve().parents[1] / "app"
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))

from object_access_app.core.errors import ServiceError  # noqa: E402
from object_access_app.core.models import AccessRecord  # noqa: E402


class RecordingBackend:
    """Directory and access backend double that records every call it receives."""

    def __init__(
        self,
        *,
        objects: list[str] | None = None,
        fields: dict[str, list[dict[str, str]]] | None = None,
        users: list[dict[str, str]] | None = None,
        object_rows: tuple[AccessRecord, ...] | None = None,
        field_rows: tuple[AccessRecord, ...] | None = None,
        fail: set[str] | None = None,
    ) -> None:
        self.objects = objects if objects is not None else ["Account", "Contact"]
        self.fields = fields if fields is not None else {"Account": [{"Name": "Name", "Label": "Name"}]}
        self.users = users if users is not None else [{"Id": "005", "Name": "Ada Admin"}]
        self.object_rows = object_rows if object_rows is not None else (
            AccessRecord(field_name="Name", is_accessible=True, is_updatable=True, is_creatable=False),
        )
        self.field_rows = field_rows if field_rows is not None else (
            AccessRecord(field_name="Name", is_accessible=True, is_updatable=False, is_creatable=False),
        )
        self.fail = set(fail or ())
        self.calls: list[tuple[str, ...]] = []
        self.closed = False

    def _record(self, operation: str, *args: str) -> None:
        self.calls.append((operation, *args))
        if operation in self.fail:
            raise ServiceError(f"{operation} failed", operation=operation, status_code=503)

    async def list_objects(self) -> list[str]:
        self._record("list_objects")
        return list(self.objects)

    async def list_fields(self, object_name: str) -> list[dict[str, str]]:
        self._record("list_fields", object_name)
        return [dict(field) for field in self.fields.get(object_name, [])]

    async def list_users(self) -> list[dict[str, str]]:
        self._record("list_users")
        return [dict(user) for user in self.users]

    async def query_object_access(self, object_name: str, user_id: str):
        self._record("query_object_access", object_name, user_id)
        return self.object_rows

    async def query_field_access(self, object_name: str, field_name: str, user_id: str):
        self._record("query_field_access", object_name, field_name, user_id)
        return self.field_rows

    async def aclose(self) -> None:
        self.closed = True

    def calls_for(self, operation: str) -> list[tuple[str, ...]]:
        return [call for call in self.calls if call[0] == operation]


@pytest.fixture()
def make_backend():
    return RecordingBackend


@pytest.fixture()
def dev_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("OAV_ENV", "OAV_USE_MOCK_BACKEND", "OAV_BACKEND_URL", "ACCESS_BACKEND_URL"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("OAV_ENV", "dev")
    monkeypatch.setenv("OAV_SESSION_SECRET", "test-session-secret")
