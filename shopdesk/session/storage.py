"""
Durable storage for the dashboard session.

Holds exactly one serialized principal under a single key. Both backends
expose read/write/clear of a raw string; (de)serialization lives in the
session store so a corrupt payload is handled in one place.
"""

import os
from pathlib import Path
from typing import Optional, Protocol

from shopdesk.utils import Logger

logger = Logger("session")


class SessionStorage(Protocol):
    def read(self) -> Optional[str]: ...

    def write(self, payload: str) -> None: ...

    def clear(self) -> None: ...


class MemorySessionStorage:
    """Process-local storage; used by tests and embedded dashboards."""

    def __init__(self, payload: Optional[str] = None):
        self._payload = payload

    def read(self) -> Optional[str]:
        return self._payload

    def write(self, payload: str) -> None:
        self._payload = payload

    def clear(self) -> None:
        self._payload = None


class FileSessionStorage:
    """A single JSON file, replaced atomically on every write."""

    def __init__(self, path: "str | os.PathLike[str]"):
        self.path = Path(path).expanduser()

    def read(self) -> Optional[str]:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"Cannot read session file {self.path}: {e}")
            return None

    def write(self, payload: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(payload, encoding="utf-8")
        os.replace(tmp, self.path)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
