from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, Optional, Sequence, Union

from ..core.exceptions import ValidationError
from ..records.model import Record, RecordDraft
from .identifiers import Identifier, TemporaryId, new_temporary_id
from .model import StagedRecord
from .slot import LocalSlot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AddManyResult:
    added: list[StagedRecord] = field(default_factory=list)
    # (position in the input, reason)
    rejected: list[tuple[int, str]] = field(default_factory=list)


class StagingCache:
    """Working set of records the user currently sees.

    Holds records before and after they are persisted. Display order is
    insertion order, newest last. When a slot is given, every mutation
    rewrites the whole set to it before the in-memory set changes, so a
    failed write leaves the cache as it was; without a slot the set lives
    only in memory.
    """

    def __init__(
        self,
        slot: Optional[LocalSlot] = None,
        *,
        id_factory: Callable[[], TemporaryId] = new_temporary_id,
    ):
        self._slot = slot
        self._id_factory = id_factory
        self._records: list[StagedRecord] = []

    @property
    def durable(self) -> bool:
        return self._slot is not None

    @property
    def records(self) -> list[StagedRecord]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[StagedRecord]:
        return iter(list(self._records))

    def get(self, identifier: Identifier) -> Optional[StagedRecord]:
        return next((r for r in self._records if r.identifier == identifier), None)

    def staged(self) -> list[StagedRecord]:
        """Records that only exist locally (temporary id)."""
        return [r for r in self._records if r.is_temporary]

    def _next_id(self, taken: set[Identifier]) -> TemporaryId:
        identifier = self._id_factory()
        while identifier in taken:
            identifier = self._id_factory()
        return identifier

    def _commit(self, records: list[StagedRecord]) -> None:
        if self._slot is not None:
            self._slot.write([r.to_dict() for r in records])
        self._records = records

    def add_one(self, draft: RecordDraft) -> StagedRecord:
        valid = draft.validated()
        taken = {r.identifier for r in self._records}
        record = StagedRecord(identifier=self._next_id(taken), draft=valid)
        self._commit([*self._records, record])
        return record

    def add_many(self, drafts: Sequence[RecordDraft]) -> AddManyResult:
        taken = {r.identifier for r in self._records}
        added: list[StagedRecord] = []
        rejected: list[tuple[int, str]] = []

        for index, draft in enumerate(drafts):
            try:
                valid = draft.validated()
            except ValidationError as e:
                rejected.append((index, str(e)))
                continue
            record = StagedRecord(identifier=self._next_id(taken), draft=valid)
            taken.add(record.identifier)
            added.append(record)

        if added:
            self._commit([*self._records, *added])
        if rejected:
            logger.info("add_many: %d added, %d rejected", len(added), len(rejected))
        return AddManyResult(added=added, rejected=rejected)

    def remove(self, identifier: Identifier) -> bool:
        """Drop a record from the working set. Local only, never touches storage."""
        remaining = [r for r in self._records if r.identifier != identifier]
        if len(remaining) == len(self._records):
            return False
        self._commit(remaining)
        return True

    def clear(self) -> None:
        if self._slot is not None:
            self._slot.clear()
        self._records = []

    def replace_all(self, records: Iterable[Union[StagedRecord, Record]]) -> None:
        self._commit([r if isinstance(r, StagedRecord) else StagedRecord.from_record(r) for r in records])

    def restore(self) -> bool:
        """Load the set saved in the slot. True when there was something to load."""
        if self._slot is None:
            return False
        items = self._slot.read()
        if not items:
            return False

        restored: list[StagedRecord] = []
        for item in items:
            try:
                restored.append(StagedRecord.from_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping unreadable staged record %r: %s", item, e)
        self._records = restored
        return bool(restored)
