from .storage import FileSessionStorage, MemorySessionStorage, SessionStorage
from .store import SessionStore

__all__ = ["SessionStore", "SessionStorage", "FileSessionStorage", "MemorySessionStorage"]
