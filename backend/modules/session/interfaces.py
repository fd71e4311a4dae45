"""
Session module interfaces.

The session store persists through ISessionStorage so the same store can
run against memory (tests), a JSON file (CLI) or Supabase.
"""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class ISessionStorage(Protocol):
    """
    Durable string key/value storage.

    Methods are async because a persistent backend may perform I/O.
    """

    async def get_item(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent."""
        ...

    async def set_item(self, key: str, value: str) -> None:
        ...

    async def remove_item(self, key: str) -> None:
        """Remove a key; removing a missing key is a no-op."""
        ...
