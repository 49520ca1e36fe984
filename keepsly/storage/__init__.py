import os

from .filesystem_storage import FileSystemStorage
from .object_storage import ObjectStorage, StoredObject
from .s3_storage import S3Storage

__all__ = [
    "FileSystemStorage",
    "ObjectStorage",
    "S3Storage",
    "StoredObject",
    "get_storage_backend",
]


def get_storage_backend() -> ObjectStorage:
    """
    Factory for storage backend based on STORAGE_BACKEND env var.
    Defaults to S3Storage.

    Supported values (case-insensitive):
      - 'filesystem'
      - 's3'
    """
    backend = os.getenv("STORAGE_BACKEND", "s3").lower()
    if backend == "filesystem":
        return FileSystemStorage(os.getenv("STORAGE_ROOT", "./data"))
    if backend in ("s3", ""):  # default
        return S3Storage()
    error_message = f"Unknown storage backend: {backend}"
    raise ValueError(error_message)
