import logging
from pathlib import Path
from typing import Any

import httpx

from keepsly.client.local_store import HostKeyStore, UploadCounter

logger = logging.getLogger(__name__)

STATE_FILE = "keepsly_state.json"


class KeepslyClientError(Exception):
    """Raised when the service answers with an error status."""

    def __init__(self, status_code: int, detail: str) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"{status_code}: {detail}")


def _raise_for_status(response: httpx.Response) -> None:
    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        try:
            detail = str(response.json().get("detail", response.text))
        except ValueError:
            detail = response.text
        raise KeepslyClientError(response.status_code, detail) from exc


class KeepslyClient:
    """
    Thin client for the Keepsly HTTP API.

    Host keys and per-event upload counts are remembered locally so a user
    can come back to manage an event. Those local values are hints only;
    the service decides what is allowed.
    """

    def __init__(self, http: httpx.Client, state_dir: str | Path = ".") -> None:
        self.http = http
        state_file = Path(state_dir) / STATE_FILE
        self.host_keys = HostKeyStore(state_file)
        self.upload_counts = UploadCounter(state_file)

    def create_event(
        self, name: str, duration: str, max_photos: int | None = None
    ) -> dict[str, Any]:
        body: dict[str, Any] = {"eventName": name, "duration": duration}
        if max_photos is not None:
            body["maxPhotos"] = max_photos
        response = self.http.post("/events", json=body, follow_redirects=False)
        if response.status_code != httpx.codes.SEE_OTHER:
            _raise_for_status(response)
        created = response.json()
        self.host_keys.set(created["eventId"], created["hostKey"])
        logger.info("Created event %s", created["eventId"])
        return created

    def get_event(self, event_id: str) -> dict[str, Any]:
        response = self.http.get(f"/events/{event_id}")
        _raise_for_status(response)
        return response.json()

    def get_photos(
        self,
        event_id: str,
        limit: int | None = None,
        cursor: str | None = None,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {}
        if limit is not None:
            params["limit"] = limit
        if cursor is not None:
            params["cursor"] = cursor
        response = self.http.get(f"/events/{event_id}/photos", params=params)
        _raise_for_status(response)
        return response.json()

    def iter_photos(self, event_id: str, limit: int = 20) -> list[dict[str, Any]]:
        """Walk every page and return all photos, newest first."""
        photos: list[dict[str, Any]] = []
        cursor = None
        while True:
            page = self.get_photos(event_id, limit=limit, cursor=cursor)
            photos.extend(page["photos"])
            cursor = page.get("nextCursor")
            if not cursor:
                return photos

    def upload_photo(self, event_id: str, data: bytes) -> str:
        response = self.http.post(
            f"/events/{event_id}/photos",
            content=data,
            headers={"Content-Type": "image/jpeg"},
        )
        _raise_for_status(response)
        self.upload_counts.increment(event_id)
        return response.json()["photoId"]

    def upload_via_presigned_url(self, event_id: str, photo_id: str, data: bytes) -> None:
        response = self.http.get(f"/events/{event_id}/photos/{photo_id}/upload-url")
        _raise_for_status(response)
        upload_url = response.json()["uploadUrl"]
        response = self.http.put(
            upload_url, content=data, headers={"Content-Type": "image/jpeg"}
        )
        _raise_for_status(response)
        self.upload_counts.increment(event_id)

    def delete_photo(self, event_id: str, photo_id: str, key: str | None = None) -> None:
        key = key or self.host_keys.get(event_id)
        params = {"key": key} if key else {}
        response = self.http.delete(f"/events/{event_id}/photos/{photo_id}", params=params)
        _raise_for_status(response)

    def set_banner(self, event_id: str, data: bytes, key: str | None = None) -> str:
        key = key or self.host_keys.get(event_id)
        params = {"key": key} if key else {}
        response = self.http.put(
            f"/events/{event_id}/banner",
            params=params,
            content=data,
            headers={"Content-Type": "image/jpeg"},
        )
        _raise_for_status(response)
        return response.json()["bannerUrl"]

    def uploaded_count(self, event_id: str) -> int:
        return self.upload_counts.get(event_id)
