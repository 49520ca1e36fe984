import logging

from pydantic import ValidationError

from keepsly.models import EventMeta, PhotoRef
from keepsly.storage import ObjectStorage

logger = logging.getLogger(__name__)

JPEG_SUFFIX = ".jpg"
BANNER_NAME = "banner"
UPLOAD_URL_TTL_SECONDS = 600


def event_prefix(event_id: str) -> str:
    return f"events/{event_id}/"


def meta_path(event_id: str) -> str:
    return f"events/{event_id}/meta.json"


def photo_path(event_id: str, photo_id: str) -> str:
    return f"events/{event_id}/{photo_id}{JPEG_SUFFIX}"


def banner_path(event_id: str) -> str:
    return photo_path(event_id, BANNER_NAME)


def is_photo_key(key: str) -> bool:
    return key.endswith(JPEG_SUFFIX) and not key.endswith(f"{BANNER_NAME}{JPEG_SUFFIX}")


class EventDAO:
    """Event-shaped operations over an object store."""

    def __init__(self, storage: ObjectStorage) -> None:
        self.storage = storage

    def save_meta(self, event_id: str, meta: EventMeta) -> None:
        self.storage.put(
            meta_path(event_id), meta.to_json().encode("utf-8"), "application/json"
        )

    def get_meta(self, event_id: str) -> EventMeta | None:
        raw = self.storage.get(meta_path(event_id))
        if raw is None:
            return None
        try:
            return EventMeta.model_validate_json(raw)
        except ValidationError:
            logger.warning("Unreadable metadata for event %s", event_id)
            return None

    def upload_photo(self, event_id: str, photo_id: str, data: bytes) -> None:
        self.storage.put(photo_path(event_id, photo_id), data, "image/jpeg")

    def get_photo(self, event_id: str, photo_id: str) -> bytes | None:
        return self.storage.get(photo_path(event_id, photo_id))

    def delete_photo(self, event_id: str, photo_id: str) -> None:
        self.storage.delete(photo_path(event_id, photo_id))

    def list_photos(self, event_id: str) -> list[PhotoRef]:
        """
        Return every photo of the event, newest first.

        Objects with equal timestamps keep whatever order the store listed
        them in, which is not guaranteed to be stable across calls.
        """
        objects = [
            obj
            for obj in self.storage.list(event_prefix(event_id))
            if is_photo_key(obj.path)
        ]
        objects.sort(key=lambda obj: obj.last_modified, reverse=True)
        return [
            PhotoRef(
                id=obj.path.rsplit("/", 1)[-1].removesuffix(JPEG_SUFFIX),
                key=obj.path,
                url=self.storage.public_url(obj.path),
                last_modified=obj.last_modified,
            )
            for obj in objects
        ]

    def count_photos(self, event_id: str) -> int:
        return len(self.list_photos(event_id))

    def upload_banner(self, event_id: str, data: bytes) -> str:
        path = banner_path(event_id)
        self.storage.put(path, data, "image/jpeg")
        return self.storage.public_url(path)

    def issue_upload_url(
        self, event_id: str, photo_id: str, ttl_seconds: int = UPLOAD_URL_TTL_SECONDS
    ) -> str:
        return self.storage.presign(photo_path(event_id, photo_id), "put", ttl_seconds)
