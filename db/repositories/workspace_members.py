"""Repository for workspace_members table (read-only)."""

from typing import Any

from core.exceptions import DependencyError
from db.models import WorkspaceMember
from db.repositories.base import BaseRepository

_TABLE = "workspace_members"


class WorkspaceMembersRepository(BaseRepository):
    """Membership lookups. Must be built on the service-role client.

    RLS on workspace_members is defined in terms of membership itself, so the
    guard cannot read it through a tenant-scoped client.
    """

    async def get_roles(self, user_id: str, workspace_id: str) -> list[Any]:
        """Raw role values for (user, workspace).

        Fetches up to two rows so a broken uniqueness constraint is visible
        to the caller instead of being hidden by .single().

        Raises:
            DependencyError: the response rows are not objects.
        """
        resp = (
            await self._table(_TABLE)
            .select("role")
            .eq("workspace_id", workspace_id)
            .eq("user_id", user_id)
            .limit(2)
            .execute()
        )
        rows = self._rows(resp)
        if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
            raise DependencyError("Malformed membership response")
        return [row.get("role") for row in rows]

    async def list_for_user(self, user_id: str) -> list[WorkspaceMember]:
        """All memberships of a user, oldest first."""
        resp = (
            await self._table(_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("joined_at")
            .execute()
        )
        return [WorkspaceMember(**row) for row in self._rows(resp)]
