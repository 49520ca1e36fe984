from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from keepsly.models import EventMeta, PhotoRef


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateEventRequest(CamelModel):
    event_name: str | None = None
    max_photos: int | float | str | None = None
    duration: str | None = None


class EventCreatedResponse(CamelModel):
    event_id: str
    host_key: str
    location: str


class EventResponse(CamelModel):
    event_id: str
    name: str
    max_photos: int | None
    upload_deadline: datetime | None
    banner_url: str | None

    @classmethod
    def from_meta(cls, event_id: str, meta: EventMeta) -> "EventResponse":
        return cls(
            event_id=event_id,
            name=meta.name,
            max_photos=meta.max_photos,
            upload_deadline=meta.upload_deadline,
            banner_url=meta.banner_url,
        )


class PhotoItem(CamelModel):
    id: str
    key: str
    url: str
    last_modified: datetime

    @classmethod
    def from_ref(cls, ref: PhotoRef) -> "PhotoItem":
        return cls(id=ref.id, key=ref.key, url=ref.url, last_modified=ref.last_modified)


class PhotoListResponse(CamelModel):
    event_name: str | None
    max_photos: int
    upload_deadline: datetime | None
    banner_url: str | None
    photos: list[PhotoItem]
    # Only set for paginated requests
    next_cursor: str | None = None
    total: int | None = None


class ManageResponse(EventResponse):
    host_key: str
    photos: list[PhotoItem]


class UploadResponse(CamelModel):
    photo_id: str


class UploadUrlResponse(CamelModel):
    photo_id: str
    upload_url: str
    expires_in: int


class DeleteResponse(CamelModel):
    success: bool


class BannerResponse(CamelModel):
    banner_url: str | None
