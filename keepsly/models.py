from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

MIN_PHOTOS = 5
MAX_PHOTOS = 15
DEFAULT_MAX_PHOTOS = MIN_PHOTOS


class EventMeta(BaseModel):
    """
    The metadata document stored at events/{eventId}/meta.json.

    Only name is required when reading; documents written before ids and
    host keys existed still load, with those fields set to None.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    name: str
    max_photos: int | None = Field(default=None, alias="maxPhotos")
    upload_deadline: datetime | None = Field(default=None, alias="uploadDeadline")
    banner_url: str | None = Field(default=None, alias="bannerUrl")
    host_key: str | None = Field(default=None, alias="hostKey")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


@dataclass(frozen=True)
class PhotoRef:
    id: str
    key: str
    url: str
    last_modified: datetime


def clamp_max_photos(raw: object) -> int:
    """
    Parse and clamp a requested photo cap to [MIN_PHOTOS, MAX_PHOTOS].
    Anything that does not parse as an integer becomes the default.
    """
    try:
        value = int(float(str(raw).strip()))
    except (TypeError, ValueError, OverflowError):
        value = DEFAULT_MAX_PHOTOS
    return max(MIN_PHOTOS, min(MAX_PHOTOS, value))
