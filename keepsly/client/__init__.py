from .api import KeepslyClient, KeepslyClientError
from .local_store import HostKeyStore, LocalStore, UploadCounter

__all__ = [
    "HostKeyStore",
    "KeepslyClient",
    "KeepslyClientError",
    "LocalStore",
    "UploadCounter",
]
