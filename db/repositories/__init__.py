"""Repository layer — all database access goes through here."""

from db.repositories.email_scan_configs import EmailScanConfigsRepository
from db.repositories.workspace_members import WorkspaceMembersRepository

__all__ = [
    "EmailScanConfigsRepository",
    "WorkspaceMembersRepository",
]
