"""
Supabase client factory.

The session layer runs on the user's side of the wire, so the only client
it ever needs is the async one configured with the anon key. The client
keeps its own auth session storage; this module only caches the instance.
"""

from typing import Optional
from supabase import acreate_client, AsyncClient

from .config import get_settings

# Module-level client cache
_client: Optional[AsyncClient] = None


async def get_supabase_client() -> AsyncClient:
    """
    Get the async Supabase client configured with the anon key.

    Returns:
        Supabase client shared by the identity provider adapter

    Raises:
        RuntimeError: If SUPABASE_URL or SUPABASE_ANON_KEY is not set
    """
    global _client

    if _client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_anon_key:
            raise RuntimeError(
                "Supabase configuration missing. "
                "Set SUPABASE_URL and SUPABASE_ANON_KEY environment variables."
            )
        _client = await acreate_client(
            settings.supabase_url,
            settings.supabase_anon_key,
        )

    return _client


def reset_client_cache() -> None:
    """
    Reset the cached client.

    Useful for testing or when configuration changes.
    """
    global _client
    _client = None
