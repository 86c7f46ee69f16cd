from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.exceptions import SyncError
from ..records.model import Record, RecordDraft


@dataclass(frozen=True)
class FetchResult:
    records: list[Record] = field(default_factory=list)
    error: Optional[SyncError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class SaveOutcome:
    ok: bool
    record_id: Optional[int] = None
    error: Optional[SyncError] = None


@dataclass(frozen=True)
class ItemFailure:
    index: int
    draft: RecordDraft
    reason: str


@dataclass(frozen=True)
class BulkSaveResult:
    accepted: int
    total: int
    failures: list[ItemFailure] = field(default_factory=list)
    saved_ids: list[int] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return self.accepted == self.total


@dataclass(frozen=True)
class DeleteOutcome:
    ok: bool
    # True when nothing had to be sent (temporary id).
    skipped: bool = False
    error: Optional[SyncError] = None


@dataclass(frozen=True)
class CommitResult:
    accepted: int
    total: int
    failures: list[ItemFailure] = field(default_factory=list)
    refreshed: bool = False
    refresh_error: Optional[SyncError] = None

    @property
    def processed(self) -> int:
        return self.total
