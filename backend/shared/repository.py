"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase client access.
"""

from typing import TypeVar, Generic
from supabase import Client


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Generic type parameter for model type hints

    Example:
        class SupabaseStorage(BaseRepository[str]):
            async def get_item(self, key: str) -> Optional[str]:
                result = self._db.table("client_storage").select("value").eq("key", key).execute()
                return result.data[0]["value"] if result.data else None
    """

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db
