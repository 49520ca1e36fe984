import inspect
import logging
from collections.abc import Callable
from functools import wraps

from fastapi.responses import JSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from keepsly.errors import KeepslyError

logger = logging.getLogger(__name__)


def error_response(exc: Exception) -> JSONResponse:
    if isinstance(exc, KeepslyError):
        if exc.status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("Backend fault while serving request", exc_info=exc)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})
    logger.error("Unhandled error while serving request", exc_info=exc)
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc) or exc.__class__.__name__},
    )


def handle_errors(func: Callable[..., object]) -> Callable[..., object]:
    """
    Turn domain errors into their HTTP status and anything else into a 500,
    always with a {"detail": message} body.
    """
    if inspect.iscoroutinefunction(func):

        @wraps(func)
        async def async_wrapper(*args: object, **kwargs: object) -> object:
            try:
                return await func(*args, **kwargs)
            except Exception as exc:  # noqa: BLE001
                return error_response(exc)

        return async_wrapper

    @wraps(func)
    def wrapper(*args: object, **kwargs: object) -> object:
        try:
            return func(*args, **kwargs)
        except Exception as exc:  # noqa: BLE001
            return error_response(exc)

    return wrapper
