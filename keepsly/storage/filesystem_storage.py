import os
from datetime import UTC, datetime
from pathlib import Path

from keepsly.errors import StorageError
from keepsly.utils.jwt import create_upload_token

from .object_storage import ObjectStorage, StoredObject, check_operation


class FileSystemStorage(ObjectStorage):
    """
    Object storage using the local filesystem.

    Presigned URLs point back at this service's /uploads route and carry a
    signed, expiring token instead of store credentials.
    """

    def __init__(self, base_path: str = "./data", base_url: str | None = None) -> None:
        self.base_path = Path(base_path)
        if base_url is None:
            base_url = os.getenv("PUBLIC_BASE_URL", "")
        self.base_url = base_url.rstrip("/")

    def _resolve(self, path: str) -> Path:
        target = (self.base_path / path).resolve()
        if not target.is_relative_to(self.base_path.resolve()):
            error_message = f"Path escapes storage root: {path}"
            raise StorageError(error_message)
        return target

    def put(self, path: str, data: bytes, content_type: str) -> None:
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            error_message = f"Failed to write {path}: {exc}"
            raise StorageError(error_message) from exc

    def get(self, path: str) -> bytes | None:
        target = self._resolve(path)
        try:
            return target.read_bytes()
        except (FileNotFoundError, IsADirectoryError):
            return None
        except OSError as exc:
            error_message = f"Failed to read {path}: {exc}"
            raise StorageError(error_message) from exc

    def list(self, prefix: str) -> list[StoredObject]:
        # Prefixes are matched on full paths, not directory boundaries
        root = self.base_path.resolve()
        directory = self._resolve(prefix.rsplit("/", 1)[0]) if "/" in prefix else root
        if not directory.is_dir():
            return []
        objects = []
        for p in directory.rglob("*"):
            if not p.is_file():
                continue
            key = p.relative_to(root).as_posix()
            if not key.startswith(prefix):
                continue
            modified = datetime.fromtimestamp(p.stat().st_mtime, tz=UTC)
            objects.append(StoredObject(path=key, last_modified=modified))
        return objects

    def delete(self, path: str) -> None:
        target = self._resolve(path)
        try:
            target.unlink(missing_ok=True)
        except OSError as exc:
            error_message = f"Failed to delete {path}: {exc}"
            raise StorageError(error_message) from exc

    def presign(self, path: str, operation: str, ttl_seconds: int) -> str:
        check_operation(operation)
        self._resolve(path)
        token = create_upload_token(path, operation, ttl_seconds)
        return f"{self.base_url}/uploads/{token}"

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/files/{path}"
