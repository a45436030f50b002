"""Pydantic v2 models for the tables the security core touches."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

WorkspaceRole = Literal["owner", "admin", "member"]
EmailProvider = Literal["gmail", "outlook"]

WORKSPACE_ROLES: frozenset[str] = frozenset({"owner", "admin", "member"})

# ---------------------------------------------------------------------------
# 1. workspace_members
# ---------------------------------------------------------------------------


class WorkspaceMember(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    workspace_id: str
    user_id: str
    role: WorkspaceRole
    joined_at: datetime | None = None


# ---------------------------------------------------------------------------
# 2. email_scan_configs
# ---------------------------------------------------------------------------


class EmailScanConfig(BaseModel):
    """Read model for email_scan_configs.

    Tokens stay encrypted here. Decrypt them through CredentialCipher only at
    the moment a provider call needs them.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str
    workspace_id: str
    user_id: str
    provider: EmailProvider
    enabled: bool = True
    scan_interval_hours: int = 3
    quiet_hours_start: str | None = None
    quiet_hours_end: str | None = None
    weekend_scan: bool = False
    confidence_threshold: float = 0.7
    email_address: str | None = None
    encrypted_access_token: str | None = None
    encrypted_refresh_token: str | None = None
    last_scan_at: datetime | None = None
    created_at: datetime | None = None


class EmailScanConfigUpsert(BaseModel):
    """Write model. Token fields must already be encrypted blobs."""

    workspace_id: str
    user_id: str
    provider: EmailProvider
    enabled: bool = True
    scan_interval_hours: int = 3
    weekend_scan: bool = False
    confidence_threshold: float = 0.7
    email_address: str | None = None
    encrypted_access_token: str
    encrypted_refresh_token: str


class EmailScanConfigUpdate(BaseModel):
    """Partial update of scan settings. Tokens are changed only via the repository token methods."""

    enabled: bool | None = None
    scan_interval_hours: int | None = Field(default=None, ge=1, le=24)
    quiet_hours_start: str | None = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    quiet_hours_end: str | None = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    weekend_scan: bool | None = None
    confidence_threshold: float | None = Field(default=None, ge=0, le=1)


# ---------------------------------------------------------------------------
# Non-table models
# ---------------------------------------------------------------------------


class OAuthTokens(BaseModel):
    """Plaintext tokens straight from a provider's token endpoint. Never persisted as-is."""

    access_token: str
    refresh_token: str
    email: str | None = None


class EmailConnectionStatus(BaseModel):
    """What the settings screen may know about a connection. No token material."""

    connected: bool = False
    provider: EmailProvider | None = None
    email: str | None = None
    last_scan_at: datetime | None = None
    enabled: bool = False
    config_id: str | None = None
