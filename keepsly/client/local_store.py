import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class LocalStore:
    """
    A small JSON-file key/value store keyed by event id.

    This is a per-client convenience cache. The server's event metadata is
    always authoritative for capacity and authorization.
    """

    def __init__(self, path: str | Path, namespace: str) -> None:
        self.path = Path(path)
        self.namespace = namespace

    def _read(self) -> dict[str, Any]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable client state at %s", self.path)
            return {}
        section = data.get(self.namespace) if isinstance(data, dict) else None
        return section if isinstance(section, dict) else {}

    def get(self, event_id: str) -> Any:
        return self._read().get(event_id)

    def set(self, event_id: str, value: Any) -> None:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            data = {}
        if not isinstance(data, dict):
            data = {}
        section = self._read()
        section[event_id] = value
        data[self.namespace] = section
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")


class HostKeyStore(LocalStore):
    def __init__(self, path: str | Path) -> None:
        super().__init__(path, "keepsly_host_keys")

    def get(self, event_id: str) -> str | None:
        value = super().get(event_id)
        return value if isinstance(value, str) else None


class UploadCounter(LocalStore):
    def __init__(self, path: str | Path) -> None:
        super().__init__(path, "photoshoot-uploads")

    def get(self, event_id: str) -> int:
        value = super().get(event_id)
        return value if isinstance(value, int) else 0

    def increment(self, event_id: str) -> int:
        count = self.get(event_id) + 1
        self.set(event_id, count)
        return count
