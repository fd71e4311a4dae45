"""
Session module.

Public API:
- SessionStore: Authenticated-user state with login/register/logout/restore
- ISessionStorage: Durable key/value storage interface
- InMemoryStorage / JsonFileStorage / SupabaseStorage: Storage backends
- Session / SessionState: Models
"""

from .interfaces import ISessionStorage
from .models import (
    AUTH_EXPIRY_KEY,
    AUTH_TOKEN_KEY,
    AUTH_USER_KEY,
    SESSION_KEYS,
    Session,
    SessionState,
)
from .exceptions import StorageError
from .storage import InMemoryStorage, JsonFileStorage, SupabaseStorage
from .store import SessionStore

__all__ = [
    "SessionStore",
    "ISessionStorage",
    "InMemoryStorage",
    "JsonFileStorage",
    "SupabaseStorage",
    "Session",
    "SessionState",
    "StorageError",
    "AUTH_TOKEN_KEY",
    "AUTH_USER_KEY",
    "AUTH_EXPIRY_KEY",
    "SESSION_KEYS",
]
