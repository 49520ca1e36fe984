import secrets
import string

# URL-safe alphabet, same as nanoid's default
ALPHABET = string.ascii_letters + string.digits + "_-"
ID_LENGTH = 10
HOST_KEY_BYTES = 24


def new_id(size: int = ID_LENGTH) -> str:
    return "".join(secrets.choice(ALPHABET) for _ in range(size))


def new_host_key() -> str:
    return secrets.token_urlsafe(HOST_KEY_BYTES)
