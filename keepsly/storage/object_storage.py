from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

PUT_OPERATION = "put"


@dataclass(frozen=True)
class StoredObject:
    path: str
    last_modified: datetime


class ObjectStorage(ABC):
    """
    Interface for object storage backends.

    Blobs are opaque bytes addressed by '/'-separated string paths.
    """

    @abstractmethod
    def put(self, path: str, data: bytes, content_type: str) -> None:
        """
        Write data at path, replacing any existing object.
        """
        error_message = "put not implemented"
        raise NotImplementedError(error_message)

    @abstractmethod
    def get(self, path: str) -> bytes | None:
        """
        Return the bytes stored at path, or None if there is no such object.
        """
        error_message = "get not implemented"
        raise NotImplementedError(error_message)

    @abstractmethod
    def list(self, prefix: str) -> list[StoredObject]:
        """
        Return every object whose path starts with prefix.
        No ordering is guaranteed.
        """
        error_message = "list not implemented"
        raise NotImplementedError(error_message)

    @abstractmethod
    def delete(self, path: str) -> None:
        """
        Delete the object at path. Deleting a missing object is not an error.
        """
        error_message = "delete not implemented"
        raise NotImplementedError(error_message)

    @abstractmethod
    def presign(self, path: str, operation: str, ttl_seconds: int) -> str:
        """
        Return a URL that lets a client perform operation on path directly
        against the store until ttl_seconds have elapsed. Only 'put' is
        supported.
        """
        error_message = "presign not implemented"
        raise NotImplementedError(error_message)

    @abstractmethod
    def public_url(self, path: str) -> str:
        """
        Return the URL at which the object at path can be read.
        """
        error_message = "public_url not implemented"
        raise NotImplementedError(error_message)


def check_operation(operation: str) -> None:
    if operation != PUT_OPERATION:
        error_message = f"Unsupported presign operation: {operation}"
        raise ValueError(error_message)
