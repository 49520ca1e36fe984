"""
Store-side endpoints for the filesystem backend.

With S3 the bucket itself serves presigned writes and public reads; with
local storage this service stands in for the bucket. Writes here are
checked against the signed token only, never against event policy.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response
from starlette.status import HTTP_404_NOT_FOUND

from keepsly.deps import get_storage
from keepsly.errors import EmptyPayloadError
from keepsly.routers.common import handle_errors
from keepsly.storage import FileSystemStorage, ObjectStorage
from keepsly.utils.jwt import decode_upload_token

logger = logging.getLogger(__name__)

router = APIRouter()

_NOT_AVAILABLE = {"detail": "Not available for this storage backend"}


@router.put("/uploads/{token}", response_model=None)
@handle_errors
async def direct_upload(
    token: str,
    request: Request,
    storage: Annotated[ObjectStorage, Depends(get_storage)],
) -> Response:
    if not isinstance(storage, FileSystemStorage):
        return JSONResponse(status_code=HTTP_404_NOT_FOUND, content=_NOT_AVAILABLE)
    claims = decode_upload_token(token)
    payload = await request.body()
    if not payload:
        raise EmptyPayloadError
    content_type = request.headers.get("content-type", "image/jpeg")
    await run_in_threadpool(storage.put, claims["path"], payload, content_type)
    logger.info("Direct upload stored at %s", claims["path"])
    return Response(status_code=200)


@router.get("/files/{path:path}", response_model=None)
@handle_errors
def read_file(
    path: str,
    storage: Annotated[ObjectStorage, Depends(get_storage)],
) -> Response:
    if not isinstance(storage, FileSystemStorage):
        return JSONResponse(status_code=HTTP_404_NOT_FOUND, content=_NOT_AVAILABLE)
    # Only images are public; meta.json carries the host key
    data = storage.get(path) if path.endswith(".jpg") else None
    if data is None:
        return JSONResponse(
            status_code=HTTP_404_NOT_FOUND, content={"detail": "File not found"}
        )
    return Response(content=data, media_type="image/jpeg")
