"""Email connection service: Gmail/Outlook OAuth tokens per workspace member.

Zero dependencies on the HTTP layer and on the provider SDKs: token exchange
and refresh are performed by callers and handed in as plain values or an
async refresher callable.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

import structlog

from core.exceptions import ConfigurationError
from db.client import SupabaseClient
from db.credential_cipher import CredentialCipher
from db.models import (
    EmailConnectionStatus,
    EmailProvider,
    EmailScanConfig,
    EmailScanConfigUpdate,
    EmailScanConfigUpsert,
    OAuthTokens,
)
from db.repositories.email_scan_configs import EmailScanConfigsRepository
from services.workspace_guard import WorkspaceGuard

log = structlog.get_logger()

# Receives a plaintext refresh token, returns a new plaintext access token.
TokenRefresher = Callable[[str], Awaitable[str]]


class EmailConnectionService:
    """Connect, inspect, reconfigure and disconnect mail providers.

    Every user-initiated operation goes through WorkspaceGuard first. Tokens
    are encrypted before they reach the repository and decrypted only inside
    refresh_access_token.
    """

    def __init__(self, db: SupabaseClient, cipher: CredentialCipher, guard: WorkspaceGuard) -> None:
        self._configs = EmailScanConfigsRepository(db)
        self._cipher = cipher
        self._guard = guard

    async def connect(
        self,
        user_id: str,
        workspace_id: str,
        provider: EmailProvider,
        tokens: OAuthTokens,
    ) -> EmailScanConfig:
        """Store freshly exchanged tokens, replacing any previous connection."""
        await self._guard.require_access(user_id, workspace_id)

        data = EmailScanConfigUpsert(
            workspace_id=workspace_id,
            user_id=user_id,
            provider=provider,
            email_address=tokens.email,
            encrypted_access_token=self._cipher.encrypt(tokens.access_token),
            encrypted_refresh_token=self._cipher.encrypt(tokens.refresh_token),
        )
        config = await self._configs.upsert(data)
        log.info("email_connection_saved", workspace_id=workspace_id, user_id=user_id, provider=provider)
        return config

    async def disconnect(self, user_id: str, workspace_id: str, provider: EmailProvider) -> bool:
        """Remove the connection. Returns False if there was nothing to remove."""
        await self._guard.require_access(user_id, workspace_id)
        removed = await self._configs.delete_for_user(workspace_id, user_id, provider)
        log.info(
            "email_connection_removed",
            workspace_id=workspace_id,
            user_id=user_id,
            provider=provider,
            removed=removed,
        )
        return removed

    async def get_status(self, user_id: str, workspace_id: str) -> EmailConnectionStatus:
        await self._guard.require_access(user_id, workspace_id)
        config = await self._configs.get_for_user(workspace_id, user_id)
        if config is None:
            return EmailConnectionStatus()
        return EmailConnectionStatus(
            connected=True,
            provider=config.provider,
            email=config.email_address,
            last_scan_at=config.last_scan_at,
            enabled=config.enabled,
            config_id=config.id,
        )

    async def update_settings(
        self,
        user_id: str,
        workspace_id: str,
        update: EmailScanConfigUpdate,
    ) -> EmailScanConfig | None:
        """Change scan settings. Returns None if the user has no connection here."""
        await self._guard.require_access(user_id, workspace_id)
        config = await self._configs.get_for_user(workspace_id, user_id)
        if config is None:
            return None
        return await self._configs.update(config.id, update)

    async def refresh_access_token(self, config: EmailScanConfig, refresher: TokenRefresher) -> str:
        """Exchange the stored refresh token for a new access token.

        The new token is persisted encrypted and returned in plaintext for
        immediate use. Cipher failures propagate; the scan must not proceed.
        """
        if not config.encrypted_refresh_token:
            msg = f"Email config {config.id} has no refresh token"
            raise ConfigurationError(msg)

        refresh_token = self._cipher.decrypt(config.encrypted_refresh_token)
        access_token = await refresher(refresh_token)
        await self._configs.update_access_token(config.id, self._cipher.encrypt(access_token))
        log.info("email_access_token_refreshed", config_id=config.id, provider=config.provider)
        return access_token
