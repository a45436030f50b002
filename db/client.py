"""Async Supabase PostgREST client wrapper."""

from postgrest import AsyncPostgrestClient, AsyncRequestBuilder

from core.config import Settings


class SupabaseClient:
    """Thin wrapper around AsyncPostgrestClient with Supabase auth headers.

    `key` always goes in the `apikey` header. The bearer token is the user's
    JWT when one is given (RLS applies), otherwise the key itself.
    """

    def __init__(self, url: str, key: str, access_token: str | None = None) -> None:
        rest_url = f"{url}/rest/v1"
        headers = {"apikey": key, "Authorization": f"Bearer {access_token or key}"}
        self._client = AsyncPostgrestClient(rest_url, headers=headers)

    def table(self, name: str) -> AsyncRequestBuilder:
        """Return a request builder for the given table."""
        return self._client.table(name)

    async def close(self) -> None:
        """Close the underlying HTTP connections."""
        await self._client.aclose()


def create_admin_client(settings: Settings) -> SupabaseClient:
    """Service-role client. Bypasses Row Level Security.

    Only for membership lookups in the workspace guard and server-side
    token storage.
    """
    return SupabaseClient(
        url=settings.supabase_url,
        key=settings.supabase_service_role_key.get_secret_value(),
    )


def create_user_client(settings: Settings, access_token: str) -> SupabaseClient:
    """Tenant-scoped client acting as the signed-in user (RLS enforced)."""
    return SupabaseClient(
        url=settings.supabase_url,
        key=settings.supabase_anon_key.get_secret_value(),
        access_token=access_token,
    )
