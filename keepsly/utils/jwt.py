"""
JWT helpers for signed direct-upload tokens.
"""

import os
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import ExpiredSignatureError, InvalidTokenError, PyJWTError

from keepsly.errors import PolicyError

ALGORITHM = "HS256"


class UploadTokenExpiredError(PolicyError):
    default_message = "Upload URL has expired"


class InvalidUploadTokenError(PolicyError):
    default_message = "Invalid upload URL"


def get_signing_key() -> str:
    secret = os.getenv("UPLOAD_SIGNING_KEY")
    if not secret:
        msg = "UPLOAD_SIGNING_KEY not set in environment"
        raise RuntimeError(msg)
    return secret


def create_upload_token(path: str, operation: str, ttl_seconds: int) -> str:
    expire = datetime.now(UTC) + timedelta(seconds=ttl_seconds)
    claims = {"path": path, "op": operation, "exp": expire}
    return jwt.encode(claims, get_signing_key(), algorithm=ALGORITHM)


def decode_upload_token(token: str) -> dict[str, Any]:
    """
    Decode an upload token and return its claims.
    Expired tokens and tokens that fail verification are rejected.
    """
    try:
        claims = jwt.decode(token, get_signing_key(), algorithms=[ALGORITHM])
    except ExpiredSignatureError as exc:
        raise UploadTokenExpiredError from exc
    except (InvalidTokenError, PyJWTError) as exc:
        raise InvalidUploadTokenError from exc
    if not isinstance(claims.get("path"), str) or not isinstance(claims.get("op"), str):
        raise InvalidUploadTokenError
    return claims
