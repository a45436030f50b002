"""Tests for db/repositories/workspace_members.py."""

import pytest

from core.exceptions import DependencyError
from db.models import WorkspaceMember
from db.repositories.workspace_members import WorkspaceMembersRepository
from services.workspace_guard import AccessDecision, WorkspaceGuard

from .conftest import MockResponse, MockSupabaseClient


@pytest.fixture
def repo(mock_db: MockSupabaseClient) -> WorkspaceMembersRepository:
    return WorkspaceMembersRepository(mock_db)  # type: ignore[arg-type]


class TestGetRoles:
    async def test_single_membership(self, repo: WorkspaceMembersRepository, mock_db: MockSupabaseClient) -> None:
        mock_db.set_response("workspace_members", MockResponse(data=[{"role": "admin"}]))
        assert await repo.get_roles("user-123", "workspace-456") == ["admin"]

    async def test_no_membership(self, repo: WorkspaceMembersRepository, mock_db: MockSupabaseClient) -> None:
        mock_db.set_response("workspace_members", MockResponse(data=[]))
        assert await repo.get_roles("user-123", "workspace-456") == []

    async def test_duplicate_rows_are_returned(
        self, repo: WorkspaceMembersRepository, mock_db: MockSupabaseClient
    ) -> None:
        mock_db.set_response("workspace_members", MockResponse(data=[{"role": "member"}, {"role": "owner"}]))
        assert await repo.get_roles("user-123", "workspace-456") == ["member", "owner"]

    async def test_filters_on_both_ids_and_limits_to_two(
        self, repo: WorkspaceMembersRepository, mock_db: MockSupabaseClient
    ) -> None:
        await repo.get_roles("user-123", "workspace-456")
        calls = mock_db.last_calls("workspace_members")
        assert ("select", ("role",), {}) in calls
        assert ("eq", ("workspace_id", "workspace-456"), {}) in calls
        assert ("eq", ("user_id", "user-123"), {}) in calls
        assert ("limit", (2,), {}) in calls

    @pytest.mark.parametrize("data", [["admin"], [None], [{"role": "admin"}, "member"]])
    async def test_non_object_rows_raise(
        self, repo: WorkspaceMembersRepository, mock_db: MockSupabaseClient, data: list
    ) -> None:
        mock_db.set_response("workspace_members", MockResponse(data=data))
        with pytest.raises(DependencyError, match="Malformed membership response"):
            await repo.get_roles("user-123", "workspace-456")


class TestGuardOverRepository:
    async def test_malformed_rows_are_dependency_error(
        self, repo: WorkspaceMembersRepository, mock_db: MockSupabaseClient
    ) -> None:
        mock_db.set_response("workspace_members", MockResponse(data=["admin"]))
        guard = WorkspaceGuard(repo)
        with pytest.raises(DependencyError):
            await guard.require_access("u", "w")

    async def test_malformed_rows_flagged_in_check_access(
        self, repo: WorkspaceMembersRepository, mock_db: MockSupabaseClient
    ) -> None:
        mock_db.set_response("workspace_members", MockResponse(data=["admin"]))
        decision = await WorkspaceGuard(repo).check_access("u", "w")
        assert decision == AccessDecision(
            allowed=False, reason="Could not verify workspace access", dependency_failure=True
        )

    async def test_valid_row_grants(self, repo: WorkspaceMembersRepository, mock_db: MockSupabaseClient) -> None:
        mock_db.set_response("workspace_members", MockResponse(data=[{"role": "admin"}]))
        assert await WorkspaceGuard(repo).require_access("u", "w", ["admin", "owner"]) == "admin"


class TestListForUser:
    async def test_returns_models(self, repo: WorkspaceMembersRepository, mock_db: MockSupabaseClient) -> None:
        mock_db.set_response(
            "workspace_members",
            MockResponse(
                data=[
                    {
                        "id": "m-1",
                        "workspace_id": "workspace-456",
                        "user_id": "user-123",
                        "role": "owner",
                        "joined_at": "2026-01-01T00:00:00+00:00",
                    }
                ]
            ),
        )
        members = await repo.list_for_user("user-123")
        assert len(members) == 1
        assert isinstance(members[0], WorkspaceMember)
        assert members[0].role == "owner"

    async def test_empty(self, repo: WorkspaceMembersRepository, mock_db: MockSupabaseClient) -> None:
        mock_db.set_response("workspace_members", MockResponse(data=None))
        assert await repo.list_for_user("nobody") == []
