import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response
from starlette.status import HTTP_404_NOT_FOUND

from keepsly.auth import authorize_host
from keepsly.dao import UPLOAD_URL_TTL_SECONDS, EventDAO
from keepsly.deps import get_dao
from keepsly.gate import (
    PresignedUpload,
    ProxyUpload,
    validate_event_id,
    validate_photo_id,
)
from keepsly.models import DEFAULT_MAX_PHOTOS
from keepsly.pagination import paginate
from keepsly.routers.common import handle_errors
from keepsly.schemas import (
    DeleteResponse,
    PhotoItem,
    PhotoListResponse,
    UploadResponse,
    UploadUrlResponse,
)
from keepsly.utils.ids import new_id

logger = logging.getLogger(__name__)

router = APIRouter()

proxy_upload = ProxyUpload()
presigned_upload = PresignedUpload()


@router.get(
    "/events/{event_id}/photos",
    response_model=PhotoListResponse,
    response_model_exclude_unset=True,
)
@handle_errors
def list_photos(
    event_id: str,
    dao: Annotated[EventDAO, Depends(get_dao)],
    limit: Annotated[str | None, Query()] = None,
    cursor: Annotated[str | None, Query()] = None,
    offset: Annotated[str | None, Query()] = None,
    page: Annotated[str | None, Query()] = None,
) -> PhotoListResponse:
    """
    Event display fields plus its photos, newest first.

    Without any pagination parameter the whole list is returned. With one,
    a page of it is returned together with nextCursor and total.
    """
    validate_event_id(event_id)
    meta = dao.get_meta(event_id)
    photos = [PhotoItem.from_ref(ref) for ref in dao.list_photos(event_id)]
    fields = {
        "event_name": meta.name if meta else None,
        "max_photos": (meta.max_photos if meta else None) or DEFAULT_MAX_PHOTOS,
        "upload_deadline": meta.upload_deadline if meta else None,
        "banner_url": meta.banner_url if meta else None,
    }
    if all(param is None for param in (limit, cursor, offset, page)):
        return PhotoListResponse(photos=photos, **fields)
    result = paginate(photos, limit=limit, cursor=cursor, offset=offset, page=page)
    return PhotoListResponse(
        photos=result.items,
        next_cursor=result.next_cursor,
        total=result.total,
        **fields,
    )


@router.post("/events/{event_id}/photos", response_model=UploadResponse)
@handle_errors
async def upload_photo(
    event_id: str,
    request: Request,
    dao: Annotated[EventDAO, Depends(get_dao)],
) -> UploadResponse:
    validate_event_id(event_id)
    meta = await run_in_threadpool(dao.get_meta, event_id)
    count = await run_in_threadpool(dao.count_photos, event_id)
    payload = await request.body()
    proxy_upload.check(event_id, meta, photo_count=count, payload=payload)

    photo_id = new_id()
    await run_in_threadpool(dao.upload_photo, event_id, photo_id, payload)
    logger.info("Stored photo %s for event %s (%d bytes)", photo_id, event_id, len(payload))
    return UploadResponse(photo_id=photo_id)


@router.get("/events/{event_id}/photos/{photo_id}", response_model=None)
@handle_errors
def get_photo(
    event_id: str,
    photo_id: str,
    dao: Annotated[EventDAO, Depends(get_dao)],
) -> Response:
    validate_event_id(event_id)
    photo_id = validate_photo_id(photo_id)
    data = dao.get_photo(event_id, photo_id)
    if data is None:
        return JSONResponse(
            status_code=HTTP_404_NOT_FOUND, content={"detail": "Photo not found"}
        )
    return Response(content=data, media_type="image/jpeg")


@router.delete("/events/{event_id}/photos/{photo_id}", response_model=DeleteResponse)
@handle_errors
def delete_photo(
    event_id: str,
    photo_id: str,
    dao: Annotated[EventDAO, Depends(get_dao)],
    key: Annotated[str | None, Query()] = None,
) -> DeleteResponse:
    validate_event_id(event_id)
    photo_id = validate_photo_id(photo_id)
    authorize_host(dao, event_id, key)
    dao.delete_photo(event_id, photo_id)
    logger.info("Deleted photo %s from event %s", photo_id, event_id)
    return DeleteResponse(success=True)


@router.get(
    "/events/{event_id}/photos/{photo_id}/upload-url",
    response_model=UploadUrlResponse,
)
@handle_errors
def get_upload_url(
    event_id: str,
    photo_id: str,
    dao: Annotated[EventDAO, Depends(get_dao)],
) -> UploadUrlResponse:
    """
    Issue a short-lived URL for writing the photo straight to the store.

    The write itself never passes through this service, so only the
    deadline is checked here; the photo cap is not enforced on this path.
    """
    validate_event_id(event_id)
    photo_id = validate_photo_id(photo_id)
    presigned_upload.check(event_id, dao.get_meta(event_id))
    url = dao.issue_upload_url(event_id, photo_id, UPLOAD_URL_TTL_SECONDS)
    return UploadUrlResponse(
        photo_id=photo_id, upload_url=url, expires_in=UPLOAD_URL_TTL_SECONDS
    )
