"""
Upload gating.

There are two ways a photo gets into an event. A proxied upload sends the
bytes through this service, so every check can run. A presigned upload
hands the client a URL to write to the store directly; the service never
sees the bytes or the write, so only the checks that can run before the URL
is issued are applied. Each strategy lists the checks it runs.

Capacity is check-then-write against a fresh listing with no lock or
conditional write, so concurrent uploads near the cap can all pass and
overshoot maxPhotos. That is accepted.
"""

import re
from datetime import UTC, datetime

from keepsly.errors import (
    CapacityExceededError,
    DeadlineExceededError,
    EmptyPayloadError,
    InvalidEventIdError,
    InvalidPhotoIdError,
)
from keepsly.models import EventMeta

MIN_EVENT_ID_LENGTH = 5
_PHOTO_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")

DEADLINE = "deadline"
CAPACITY = "capacity"
PAYLOAD = "payload"


def validate_event_id(event_id: str | None) -> str:
    if not event_id or len(event_id) < MIN_EVENT_ID_LENGTH:
        raise InvalidEventIdError
    return event_id


def validate_photo_id(photo_id: str | None) -> str:
    photo_id = (photo_id or "").removesuffix(".jpg")
    if not _PHOTO_ID_PATTERN.match(photo_id) or photo_id == "banner":
        raise InvalidPhotoIdError
    return photo_id


def check_deadline(meta: EventMeta | None, now: datetime) -> None:
    if meta is None or meta.upload_deadline is None:
        return
    deadline = meta.upload_deadline
    if deadline.tzinfo is None:
        deadline = deadline.replace(tzinfo=UTC)
    if now > deadline:
        raise DeadlineExceededError


def check_capacity(meta: EventMeta | None, photo_count: int) -> None:
    if meta is None or meta.max_photos is None:
        return
    if photo_count >= meta.max_photos:
        raise CapacityExceededError


def check_payload(payload: bytes | None) -> None:
    if not payload:
        raise EmptyPayloadError


class UploadStrategy:
    name: str = ""
    checks: tuple[str, ...] = ()

    def runs(self, check: str) -> bool:
        return check in self.checks

    def check(
        self,
        event_id: str,
        meta: EventMeta | None,
        photo_count: int = 0,
        payload: bytes | None = None,
        now: datetime | None = None,
    ) -> None:
        """
        Raise the first failing check, in the order id shape, deadline,
        capacity, payload. Checks the strategy does not run are skipped.
        """
        validate_event_id(event_id)
        now = now or datetime.now(UTC)
        if self.runs(DEADLINE):
            check_deadline(meta, now)
        if self.runs(CAPACITY):
            check_capacity(meta, photo_count)
        if self.runs(PAYLOAD):
            check_payload(payload)


class ProxyUpload(UploadStrategy):
    name = "proxy"
    checks = (DEADLINE, CAPACITY, PAYLOAD)


class PresignedUpload(UploadStrategy):
    name = "presigned"
    checks = (DEADLINE,)
