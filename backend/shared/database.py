"""
Database client factory for Supabase.

Supabase is optional in PurdueRide: it only backs durable session storage
when configured. The mock API keeps its dataset in memory.
"""

from typing import Optional
from supabase import create_client, Client

from .config import get_settings

# Module-level client cache
_service_client: Optional[Client] = None


def is_supabase_configured() -> bool:
    """Check whether Supabase credentials are present in the settings."""
    settings = get_settings()
    return bool(settings.supabase_url and settings.supabase_service_role_key)


def get_supabase_client() -> Client:
    """
    Get Supabase client with service role (bypasses RLS).

    Returns:
        Supabase client configured with service role key

    Raises:
        RuntimeError: If SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY is missing
    """
    global _service_client

    if _service_client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_service_role_key:
            raise RuntimeError(
                "Supabase configuration missing. "
                "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY environment variables."
            )
        _service_client = create_client(
            settings.supabase_url,
            settings.supabase_service_role_key,
        )

    return _service_client


def reset_client_cache() -> None:
    """
    Reset the cached database client.

    Useful for testing or when configuration changes.
    """
    global _service_client
    _service_client = None
