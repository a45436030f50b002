"""Base repository with shared DB access and typed response helpers."""

from typing import Any

from postgrest import AsyncRequestBuilder

from core.exceptions import DependencyError
from db.client import SupabaseClient


class BaseRepository:
    """Base class for all repositories. Provides table access via SupabaseClient.

    The helpers below unwrap PostgREST responses, which are loosely typed.
    """

    def __init__(self, db: SupabaseClient) -> None:
        self._db = db

    def _table(self, name: str) -> AsyncRequestBuilder:
        """Return a PostgREST request builder for the given table."""
        return self._db.table(name)

    @staticmethod
    def _single(resp: Any) -> dict[str, Any] | None:
        """Extract single row dict from maybe_single() response."""
        if resp is None:
            return None
        return resp.data if resp.data else None  # type: ignore[no-any-return]

    @staticmethod
    def _rows(resp: Any) -> list[dict[str, Any]]:
        """Extract list of row dicts from response."""
        return resp.data if resp.data is not None else []  # type: ignore[no-any-return]

    @staticmethod
    def _first(resp: Any) -> dict[str, Any] | None:
        """First row of an update/delete response, if any."""
        if resp.data:
            return resp.data[0]  # type: ignore[no-any-return]
        return None

    @staticmethod
    def _require_first(resp: Any) -> dict[str, Any]:
        """First row of an insert/upsert response. Empty means the write did not land."""
        if resp.data:
            return resp.data[0]  # type: ignore[no-any-return]
        raise DependencyError("Database write returned no data")
