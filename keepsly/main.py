import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from keepsly.errors import KeepslyError
from keepsly.routers.common import error_response
from keepsly.routers.events import router as events_router
from keepsly.routers.photos import router as photos_router
from keepsly.routers.uploads import router as uploads_router

load_dotenv()

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper(), format=LOG_FORMAT)

app = FastAPI(title="Keepsly")


@app.exception_handler(KeepslyError)
async def keepsly_error_handler(_request: Request, exc: KeepslyError) -> JSONResponse:
    # Errors raised while resolving dependencies never reach handle_errors
    return error_response(exc)


app.include_router(events_router)
app.include_router(photos_router)
app.include_router(uploads_router)

# Reminder: UPLOAD_SIGNING_KEY must be set for presigned uploads on local storage

__all__ = ["app"]
