from object_access_app.backend.access_client import AccessQueryClient
from object_access_app.backend.directory_client import DirectoryServiceClient
from object_access_app.backend.http import BackendHttpClient
from object_access_app.backend.mock_backend import MockAccessBackend

__all__ = [
    "AccessQueryClient",
    "BackendHttpClient",
    "DirectoryServiceClient",
    "MockAccessBackend",
]
