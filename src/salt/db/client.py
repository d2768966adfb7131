"""
Salt - Supabase Client.

Low-level backend access. Services receive a client explicitly; these
helpers build the shared instances used by the CLI and web entry points.
"""

from supabase import AsyncClient, acreate_client

from salt.config import settings

# Singleton client instances
_client: AsyncClient | None = None
_service_client: AsyncClient | None = None


async def get_client() -> AsyncClient:
    """
    Get the anonymous Supabase client.

    Uses singleton pattern to reuse connection.
    """
    global _client

    if _client is None:
        _client = await acreate_client(
            settings.supabase_url,
            settings.supabase_anon_key,
        )

    return _client


async def get_service_client() -> AsyncClient:
    """
    Get the service-role Supabase client.

    Only used server-side (JWT validation). Falls back to the anon key
    when no service key is configured.
    """
    global _service_client

    if _service_client is None:
        _service_client = await acreate_client(
            settings.supabase_url,
            settings.supabase_service_role_key or settings.supabase_anon_key,
        )

    return _service_client


async def get_authenticated_client(access_token: str) -> AsyncClient:
    """
    Get a client scoped to a signed-in user.

    A new client per request so row-level security applies to the token's
    owner and tokens never leak between requests.
    """
    client = await acreate_client(settings.supabase_url, settings.supabase_anon_key)
    client.postgrest.auth(access_token)
    return client
