"""Pydantic models for reconciliation and sync runs.

Defines the data contracts shared by the sync modules:

- ``VaultNote``: a publishable note as seen from the vault.
- ``RemoteRecord``: a document record as seen from the repository.
- ``SyncUpdate`` / ``SyncDiff``: reconciliation output.
- ``SyncAction``: Enum of operations a run can perform.
- ``SyncResult``: Outcome of one note or record.
- ``SyncReport``: Aggregate results for a full run.

All models are frozen (immutable).
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel


class VaultNote(BaseModel):
    """A publishable vault note.

    Attributes:
        file_path: Vault-relative path of the note file.
        path: Document path derived from ``file_path`` (matching key).
        rkey: Record key from the note's frontmatter, once published.
    """

    file_path: str
    path: str
    rkey: str | None = None

    model_config = {"frozen": True}


class RemoteRecord(BaseModel):
    """A document record listed from the repository.

    Attributes:
        uri: AT-URI of the record.
        rkey: Final segment of ``uri``.
        path: The record's ``path`` value (empty when absent).
        value: Raw record value.
    """

    uri: str
    rkey: str
    path: str = ""
    value: dict[str, Any] = {}

    model_config = {"frozen": True}


class SyncUpdate(BaseModel):
    """A note matched to an existing record.

    ``rkey`` is the matched record's key. It differs from ``note.rkey``
    when the match came from the path fallback.
    """

    note: VaultNote
    rkey: str

    model_config = {"frozen": True}


class SyncDiff(BaseModel):
    """Three-way classification of vault notes and remote records.

    Attributes:
        to_create: Notes with no matching record.
        to_update: Notes matched to a record, with that record's key.
        orphans: Records no note matched.
    """

    to_create: list[VaultNote] = []
    to_update: list[SyncUpdate] = []
    orphans: list[RemoteRecord] = []

    model_config = {"frozen": True}

    @property
    def in_sync(self) -> bool:
        """``True`` when nothing needs creating or pulling."""
        return not self.to_create and not self.orphans


class SyncAction(str, Enum):
    """Operations a sync run can perform on one item."""

    SKIP = "skip"
    CREATE_REMOTE = "create_remote"
    UPDATE_REMOTE = "update_remote"
    DELETE_REMOTE = "delete_remote"
    CREATE_LOCAL = "create_local"


class SyncResult(BaseModel):
    """Result of syncing one note or record.

    Attributes:
        file_path: Vault-relative note path (may be empty when a remote
            record could not be mapped to a path).
        action: Action that was performed or attempted.
        success: Whether the operation succeeded.
        record_path: Document path of the record, when known.
        rkey: Record key written or deleted, when known.
        error: Error or skip reason.
    """

    file_path: str
    action: SyncAction
    success: bool
    record_path: str | None = None
    rkey: str | None = None
    error: str | None = None

    model_config = {"frozen": True}


class SyncReport(BaseModel):
    """Aggregate report for a sync run.

    Attributes:
        operation: Name of the run (``publish``, ``sync``, ``pull`` ...).
        results: Individual results.
        started_at: ISO 8601 timestamp when the run started.
        completed_at: ISO 8601 timestamp when the run completed.
    """

    operation: str
    results: list[SyncResult] = []
    started_at: str
    completed_at: str | None = None

    model_config = {"frozen": True}

    @property
    def created_remote(self) -> list[SyncResult]:
        """Successful results where action is CREATE_REMOTE."""
        return [
            r
            for r in self.results
            if r.success and r.action == SyncAction.CREATE_REMOTE
        ]

    @property
    def updated_remote(self) -> list[SyncResult]:
        """Successful results where action is UPDATE_REMOTE."""
        return [
            r
            for r in self.results
            if r.success and r.action == SyncAction.UPDATE_REMOTE
        ]

    @property
    def deleted_remote(self) -> list[SyncResult]:
        """Successful results where action is DELETE_REMOTE."""
        return [
            r
            for r in self.results
            if r.success and r.action == SyncAction.DELETE_REMOTE
        ]

    @property
    def created_local(self) -> list[SyncResult]:
        """Successful results where action is CREATE_LOCAL."""
        return [
            r
            for r in self.results
            if r.success and r.action == SyncAction.CREATE_LOCAL
        ]

    @property
    def skipped(self) -> list[SyncResult]:
        """Results where action is SKIP."""
        return [r for r in self.results if r.action == SyncAction.SKIP]

    @property
    def errors(self) -> list[SyncResult]:
        """Results where success is False."""
        return [r for r in self.results if not r.success]

    def summary(self) -> str:
        """Format a one-line summary of the run."""
        return (
            f"{self.operation}: "
            f"{len(self.created_remote)} published, "
            f"{len(self.updated_remote)} updated, "
            f"{len(self.deleted_remote)} unpublished, "
            f"{len(self.created_local)} pulled, "
            f"{len(self.skipped)} skipped, "
            f"{len(self.errors)} failed"
        )
