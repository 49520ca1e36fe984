import logging

from keepsly.dao import EventDAO
from keepsly.errors import AuthorizationRequiredError, ForbiddenError
from keepsly.models import EventMeta

logger = logging.getLogger(__name__)


def check_host_key(meta: EventMeta | None, key: str | None) -> EventMeta:
    """
    Compare a caller-supplied key with the event's stored host key.

    Possession of the key is the whole trust boundary: plain equality,
    no hashing, no rate limiting, no rotation. A missing event fails closed.
    """
    if not key:
        raise AuthorizationRequiredError
    if meta is None or meta.host_key is None or meta.host_key != key:
        raise ForbiddenError
    return meta


def authorize_host(dao: EventDAO, event_id: str, key: str | None) -> EventMeta:
    if not key:
        raise AuthorizationRequiredError
    meta = dao.get_meta(event_id)
    try:
        return check_host_key(meta, key)
    except ForbiddenError:
        logger.warning("Rejected host key for event %s", event_id)
        raise
