from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_500_INTERNAL_SERVER_ERROR,
)


class KeepslyError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ShapeError(KeepslyError):
    """Malformed input. Never retried."""

    status_code = HTTP_400_BAD_REQUEST
    default_message = "Bad request"


class InvalidEventIdError(ShapeError):
    default_message = "Invalid event ID"


class InvalidPhotoIdError(ShapeError):
    default_message = "Invalid photo ID"


class EmptyPayloadError(ShapeError):
    default_message = "No file provided"


class InvalidEventRequestError(ShapeError):
    pass


class PolicyError(KeepslyError):
    """Business-rule rejection. Not transient."""

    status_code = HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class AuthorizationRequiredError(PolicyError):
    status_code = HTTP_401_UNAUTHORIZED
    default_message = "Host key required"


class ForbiddenError(PolicyError):
    default_message = "Invalid host key"


class DeadlineExceededError(PolicyError):
    default_message = "Upload deadline has passed"


class CapacityExceededError(PolicyError):
    default_message = "Photo limit reached for this event"


class StorageError(KeepslyError):
    """Object store call failed."""

    default_message = "Storage backend error"
