import logging
import os
from collections.abc import Generator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from keepsly.dao import EventDAO, photo_path
from keepsly.deps import get_storage
from keepsly.main import app
from keepsly.models import EventMeta
from keepsly.storage import FileSystemStorage

# Configure basic logging for tests
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
logger = logging.getLogger(__name__)

EVENT_ID = "evt12345ab"
HOST_KEY = "the-host-key"  # noqa: S105
BASE_TIME = datetime(2026, 1, 1, tzinfo=UTC)


@pytest.fixture(autouse=True)
def signing_key_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("UPLOAD_SIGNING_KEY", "test-signing-key-0123456789abcdef0123456789")


@pytest.fixture
def storage(tmp_path: Path) -> FileSystemStorage:
    return FileSystemStorage(base_path=str(tmp_path / "store"), base_url="")


@pytest.fixture
def dao(storage: FileSystemStorage) -> EventDAO:
    return EventDAO(storage)


@pytest.fixture
def client(storage: FileSystemStorage) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_storage] = lambda: storage
    yield TestClient(app)
    del app.dependency_overrides[get_storage]


def make_meta(
    max_photos: int | None = 5,
    deadline: datetime | None = None,
    host_key: str | None = HOST_KEY,
) -> EventMeta:
    return EventMeta(
        id=EVENT_ID,
        name="Summer party",
        max_photos=max_photos,
        upload_deadline=deadline or datetime.now(UTC) + timedelta(days=1),
        host_key=host_key,
    )


def put_photo(
    storage: FileSystemStorage,
    photo_id: str,
    modified: datetime,
    event_id: str = EVENT_ID,
) -> None:
    """Write a photo and pin its modification time."""
    path = photo_path(event_id, photo_id)
    storage.put(path, b"jpeg-" + photo_id.encode(), "image/jpeg")
    stamp = modified.timestamp()
    os.utime(storage.base_path / path, (stamp, stamp))


def seed_photos(storage: FileSystemStorage, count: int, event_id: str = EVENT_ID) -> list[str]:
    """Seed count photos, one second apart. Returns ids oldest first."""
    ids = [f"p{i:03d}" for i in range(count)]
    for i, photo_id in enumerate(ids):
        put_photo(storage, photo_id, BASE_TIME + timedelta(seconds=i), event_id)
    return ids
