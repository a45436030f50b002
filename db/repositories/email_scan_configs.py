"""Repository for email_scan_configs table.

Token columns hold CredentialCipher blobs. This layer never sees plaintext
tokens; EmailConnectionService encrypts before writing and decrypts on use.
"""

from db.models import EmailProvider, EmailScanConfig, EmailScanConfigUpdate, EmailScanConfigUpsert
from db.repositories.base import BaseRepository

_TABLE = "email_scan_configs"


class EmailScanConfigsRepository(BaseRepository):
    """CRUD for email_scan_configs (one row per workspace + user)."""

    async def get_by_id(self, config_id: str) -> EmailScanConfig | None:
        """Get config by ID."""
        resp = await self._table(_TABLE).select("*").eq("id", config_id).maybe_single().execute()
        row = self._single(resp)
        return EmailScanConfig(**row) if row else None

    async def get_for_user(self, workspace_id: str, user_id: str) -> EmailScanConfig | None:
        """The user's connection in this workspace, if any."""
        resp = (
            await self._table(_TABLE)
            .select("*")
            .eq("workspace_id", workspace_id)
            .eq("user_id", user_id)
            .maybe_single()
            .execute()
        )
        row = self._single(resp)
        return EmailScanConfig(**row) if row else None

    async def list_enabled(self) -> list[EmailScanConfig]:
        """All enabled configs, for the periodic scanner."""
        resp = await self._table(_TABLE).select("*").eq("enabled", True).execute()
        return [EmailScanConfig(**row) for row in self._rows(resp)]

    async def upsert(self, data: EmailScanConfigUpsert) -> EmailScanConfig:
        """Insert or replace the (workspace_id, user_id) row."""
        resp = (
            await self._table(_TABLE)
            .upsert(data.model_dump(), on_conflict="workspace_id,user_id")
            .execute()
        )
        row = self._require_first(resp)
        return EmailScanConfig(**row)

    async def update(self, config_id: str, data: EmailScanConfigUpdate) -> EmailScanConfig | None:
        """Partial update of scan settings. Returns None if config not found."""
        payload = data.model_dump(exclude_none=True)
        if not payload:
            return await self.get_by_id(config_id)
        resp = await self._table(_TABLE).update(payload).eq("id", config_id).execute()
        row = self._first(resp)
        return EmailScanConfig(**row) if row else None

    async def update_access_token(self, config_id: str, encrypted_access_token: str) -> None:
        """Store a freshly encrypted access token after a refresh."""
        await (
            self._table(_TABLE)
            .update({"encrypted_access_token": encrypted_access_token})
            .eq("id", config_id)
            .execute()
        )

    async def delete_for_user(self, workspace_id: str, user_id: str, provider: EmailProvider) -> bool:
        """Delete the user's connection for one provider. True if a row was removed."""
        resp = (
            await self._table(_TABLE)
            .delete()
            .eq("workspace_id", workspace_id)
            .eq("user_id", user_id)
            .eq("provider", provider)
            .execute()
        )
        return len(self._rows(resp)) > 0
