from __future__ import annotations

from object_access_app.core.errors import ServiceError
from object_access_app.core.models import AccessRecord, ResultSet

_OBJECT_FIELDS: dict[str, list[dict[str, str]]] = {
    "Account": [
        {"Name": "Name", "Label": "Account Name"},
        {"Name": "Industry", "Label": "Industry"},
        {"Name": "AnnualRevenue", "Label": "Annual Revenue"},
    ],
    "Contact": [
        {"Name": "FirstName", "Label": "First Name"},
        {"Name": "LastName", "Label": "Last Name"},
        {"Name": "Email", "Label": "Email"},
    ],
    "Opportunity": [
        {"Name": "Name", "Label": "Opportunity Name"},
        {"Name": "Amount", "Label": "Amount"},
        {"Name": "StageName", "Label": "Stage"},
    ],
}

_USERS: list[dict[str, str]] = [
    {"Id": "0055g00000AdminAAA", "Name": "Ada Admin", "profile": "admin"},
    {"Id": "0055g00000SalesAAA", "Name": "Sam Sales", "profile": "sales"},
    {"Id": "0055g00000ReadOAAA", "Name": "Rita Readonly", "profile": "read_only"},
]

# (accessible, updatable, creatable) per profile.
_PROFILE_FLAGS: dict[str, tuple[bool, bool, bool]] = {
    "admin": (True, True, True),
    "sales": (True, True, False),
    "read_only": (True, False, False),
}

# Fields hidden or locked for a profile regardless of its default flags.
_FIELD_OVERRIDES: dict[tuple[str, str, str], tuple[bool, bool, bool]] = {
    ("sales", "Account", "AnnualRevenue"): (True, False, False),
    ("read_only", "Account", "AnnualRevenue"): (False, False, False),
    ("read_only", "Opportunity", "Amount"): (False, False, False),
}


class MockAccessBackend:
    """In-memory stand-in for both the directory and the access query backend."""

    def __init__(
        self,
        *,
        object_fields: dict[str, list[dict[str, str]]] | None = None,
        users: list[dict[str, str]] | None = None,
    ) -> None:
        self._object_fields = object_fields if object_fields is not None else _OBJECT_FIELDS
        self._users = users if users is not None else _USERS

    async def list_objects(self) -> list[str]:
        return sorted(self._object_fields)

    async def list_fields(self, object_name: str) -> list[dict[str, str]]:
        return [dict(field) for field in self._fields_for(object_name, operation="list_fields")]

    async def list_users(self) -> list[dict[str, str]]:
        return [{"Id": user["Id"], "Name": user["Name"]} for user in self._users]

    async def query_object_access(self, object_name: str, user_id: str) -> ResultSet:
        profile = self._profile_for(user_id, operation="query_object_access")
        fields = self._fields_for(object_name, operation="query_object_access")
        return tuple(self._record(profile, object_name, field["Name"]) for field in fields)

    async def query_field_access(self, object_name: str, field_name: str, user_id: str) -> ResultSet:
        profile = self._profile_for(user_id, operation="query_field_access")
        fields = self._fields_for(object_name, operation="query_field_access")
        if field_name not in {field["Name"] for field in fields}:
            raise ServiceError(
                f"Unknown field '{field_name}' on object '{object_name}'.",
                operation="query_field_access",
                status_code=404,
            )
        return (self._record(profile, object_name, field_name),)

    async def aclose(self) -> None:
        return None

    def _fields_for(self, object_name: str, *, operation: str) -> list[dict[str, str]]:
        fields = self._object_fields.get(object_name)
        if fields is None:
            raise ServiceError(f"Unknown object '{object_name}'.", operation=operation, status_code=404)
        return fields

    def _profile_for(self, user_id: str, *, operation: str) -> str:
        for user in self._users:
            if user["Id"] == user_id:
                return user.get("profile", "read_only")
        raise ServiceError(f"Unknown user '{user_id}'.", operation=operation, status_code=404)

    @staticmethod
    def _record(profile: str, object_name: str, field_name: str) -> AccessRecord:
        flags = _FIELD_OVERRIDES.get((profile, object_name, field_name), _PROFILE_FLAGS.get(profile))
        accessible, updatable, creatable = flags or (False, False, False)
        return AccessRecord(
            field_name=field_name,
            is_accessible=accessible,
            is_updatable=updatable,
            is_creatable=creatable,
        )
