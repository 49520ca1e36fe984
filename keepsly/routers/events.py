import logging
from datetime import UTC, datetime, timedelta
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from starlette.status import HTTP_303_SEE_OTHER, HTTP_404_NOT_FOUND

from keepsly.auth import authorize_host
from keepsly.dao import EventDAO
from keepsly.deps import get_dao
from keepsly.errors import EmptyPayloadError, InvalidEventRequestError
from keepsly.gate import MIN_EVENT_ID_LENGTH, validate_event_id
from keepsly.models import EventMeta, clamp_max_photos
from keepsly.routers.common import handle_errors
from keepsly.schemas import (
    BannerResponse,
    CreateEventRequest,
    EventCreatedResponse,
    EventResponse,
    ManageResponse,
    PhotoItem,
)
from keepsly.utils.ids import new_host_key, new_id

logger = logging.getLogger(__name__)

router = APIRouter()

DURATIONS = {
    "1d": timedelta(days=1),
    "3d": timedelta(days=3),
    "7d": timedelta(days=7),
    "14d": timedelta(days=14),
    "30d": timedelta(days=30),
}


@router.post("/events", response_model=EventCreatedResponse)
@handle_errors
def create_event(
    body: CreateEventRequest,
    dao: Annotated[EventDAO, Depends(get_dao)],
) -> JSONResponse:
    """
    Create an event and redirect to it. The host key is returned exactly
    once, in this response.
    """
    name = (body.event_name or "").strip()
    if not name:
        error_message = "Event name is required"
        raise InvalidEventRequestError(error_message)
    duration = DURATIONS.get(body.duration or "")
    if duration is None:
        error_message = "Please select a valid duration"
        raise InvalidEventRequestError(error_message)

    event_id = new_id()
    meta = EventMeta(
        id=event_id,
        name=name,
        max_photos=clamp_max_photos(body.max_photos),
        upload_deadline=datetime.now(UTC) + duration,
        host_key=new_host_key(),
    )
    dao.save_meta(event_id, meta)
    logger.info("Created event %s (maxPhotos=%s)", event_id, meta.max_photos)

    location = f"/events/{event_id}"
    created = EventCreatedResponse(
        event_id=event_id, host_key=meta.host_key or "", location=location
    )
    return JSONResponse(
        status_code=HTTP_303_SEE_OTHER,
        headers={"Location": location},
        content=created.model_dump(by_alias=True),
    )


@router.get("/events/{event_id}", response_model=EventResponse)
@handle_errors
def get_event(
    event_id: str,
    dao: Annotated[EventDAO, Depends(get_dao)],
) -> EventResponse | JSONResponse:
    validate_event_id(event_id)
    meta = dao.get_meta(event_id)
    if meta is None:
        return JSONResponse(
            status_code=HTTP_404_NOT_FOUND, content={"detail": "Event not found"}
        )
    return EventResponse.from_meta(event_id, meta)


@router.get("/events/{event_id}/banner", response_model=BannerResponse)
@handle_errors
def get_banner(
    event_id: str,
    dao: Annotated[EventDAO, Depends(get_dao)],
) -> BannerResponse:
    # Gallery lookups never fail on a bad or unknown id, they just get no banner
    if len(event_id) < MIN_EVENT_ID_LENGTH:
        return BannerResponse(banner_url=None)
    meta = dao.get_meta(event_id)
    return BannerResponse(banner_url=meta.banner_url if meta else None)


@router.put("/events/{event_id}/banner", response_model=BannerResponse)
@handle_errors
async def put_banner(
    event_id: str,
    request: Request,
    dao: Annotated[EventDAO, Depends(get_dao)],
    key: Annotated[str | None, Query()] = None,
) -> BannerResponse:
    """
    Host-only: store the banner image and record its URL in the metadata.
    """
    validate_event_id(event_id)
    meta = await run_in_threadpool(authorize_host, dao, event_id, key)
    payload = await request.body()
    if not payload:
        raise EmptyPayloadError
    banner_url = await run_in_threadpool(dao.upload_banner, event_id, payload)
    meta.banner_url = banner_url
    await run_in_threadpool(dao.save_meta, event_id, meta)
    logger.info("Updated banner for event %s", event_id)
    return BannerResponse(banner_url=banner_url)


@router.get("/events/{event_id}/manage", response_model=ManageResponse)
@handle_errors
def manage_event(
    event_id: str,
    dao: Annotated[EventDAO, Depends(get_dao)],
    key: Annotated[str | None, Query()] = None,
) -> ManageResponse:
    validate_event_id(event_id)
    meta = authorize_host(dao, event_id, key)
    photos = dao.list_photos(event_id)
    return ManageResponse(
        event_id=event_id,
        name=meta.name,
        max_photos=meta.max_photos,
        upload_deadline=meta.upload_deadline,
        banner_url=meta.banner_url,
        host_key=meta.host_key or "",
        photos=[PhotoItem.from_ref(ref) for ref in photos],
    )
