from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from keepsly.dao import EventDAO
from keepsly.storage import ObjectStorage, get_storage_backend


@lru_cache(maxsize=1)
def _storage_backend() -> ObjectStorage:
    # A failed construction raises and is not cached
    return get_storage_backend()


def get_storage() -> ObjectStorage:
    """
    Dependency that provides the configured object storage backend.
    The backend is built once per process and shared across requests.
    Tests override this to point at a temporary directory.
    """
    return _storage_backend()


def get_dao(storage: Annotated[ObjectStorage, Depends(get_storage)]) -> EventDAO:
    return EventDAO(storage)
