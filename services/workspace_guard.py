"""Workspace access guard: the authorization check in front of every multi-tenant operation.

Roles are checked by plain set membership against an explicit allow-list.
There is no hierarchy: "owner" does not satisfy a check for "admin" unless
both are listed.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import httpx
import structlog
from postgrest.exceptions import APIError

from core.exceptions import AccessDeniedError, DependencyError
from db.models import WORKSPACE_ROLES, WorkspaceRole
from db.repositories.workspace_members import WorkspaceMembersRepository

log = structlog.get_logger()

ACCESS_DENIED = "Workspace access denied"
INSUFFICIENT_PERMISSIONS = "Insufficient permissions. Required: {roles}"


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of check_access.

    `dependency_failure` marks denials caused by a store outage rather than a
    real refusal, so the boundary can answer 5xx instead of 403.
    """

    allowed: bool
    role: WorkspaceRole | None = None
    reason: str | None = None
    dependency_failure: bool = False


class WorkspaceGuard:
    """Resolves a user's role in a workspace and enforces required roles.

    `members` must wrap the service-role client; see WorkspaceMembersRepository.
    """

    def __init__(self, members: WorkspaceMembersRepository) -> None:
        self._members = members

    async def resolve_role(self, user_id: str, workspace_id: str) -> WorkspaceRole | None:
        """Role of the user in the workspace, or None when there is no membership.

        Raises:
            DependencyError: the store failed, returned an unknown role, or
                returned more than one membership for the pair.
        """
        try:
            roles = await self._members.get_roles(user_id, workspace_id)
        except (APIError, httpx.HTTPError) as exc:
            log.error(
                "membership_lookup_failed",
                user_id=user_id,
                workspace_id=workspace_id,
                error_type=type(exc).__name__,
            )
            raise DependencyError(f"Membership lookup failed: {type(exc).__name__}") from exc
        except DependencyError:
            log.error("membership_response_malformed", user_id=user_id, workspace_id=workspace_id)
            raise

        if not roles:
            return None
        if len(roles) > 1:
            log.error("membership_integrity_violation", user_id=user_id, workspace_id=workspace_id, rows=len(roles))
            raise DependencyError("Multiple memberships for one user and workspace")

        role = roles[0]
        if role not in WORKSPACE_ROLES:
            log.error("membership_unknown_role", user_id=user_id, workspace_id=workspace_id)
            raise DependencyError("Membership row has an unknown role")
        return role  # type: ignore[no-any-return]

    async def require_access(
        self,
        user_id: str,
        workspace_id: str,
        required_roles: Iterable[WorkspaceRole] | None = None,
    ) -> WorkspaceRole:
        """Return the user's role or raise.

        Raises:
            AccessDeniedError: no membership, or role not in required_roles.
            DependencyError: the membership store could not answer.
        """
        role = await self.resolve_role(user_id, workspace_id)
        if role is None:
            log.info("workspace_access_denied", user_id=user_id, workspace_id=workspace_id)
            raise AccessDeniedError(ACCESS_DENIED)

        required = list(required_roles or [])
        if required and role not in required:
            log.info(
                "workspace_role_insufficient",
                user_id=user_id,
                workspace_id=workspace_id,
                role=role,
                required=required,
            )
            raise AccessDeniedError(INSUFFICIENT_PERMISSIONS.format(roles=" or ".join(required)))

        return role

    async def check_access(
        self,
        user_id: str,
        workspace_id: str,
        required_roles: Iterable[WorkspaceRole] | None = None,
    ) -> AccessDecision:
        """Non-raising variant of require_access for response-building code."""
        try:
            role = await self.require_access(user_id, workspace_id, required_roles)
        except AccessDeniedError as exc:
            return AccessDecision(allowed=False, reason=exc.message)
        except DependencyError as exc:
            return AccessDecision(allowed=False, reason=exc.user_message, dependency_failure=True)
        except Exception:
            log.exception("workspace_access_check_failed", user_id=user_id, workspace_id=workspace_id)
            return AccessDecision(allowed=False, reason="Access denied", dependency_failure=True)
        return AccessDecision(allowed=True, role=role)
