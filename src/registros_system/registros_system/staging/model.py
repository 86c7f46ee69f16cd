from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..core.enums import RecordState
from ..records.model import Record, RecordDraft
from ..records.wire import draft_from_wire, draft_to_wire
from .identifiers import AuthoritativeId, Identifier, TemporaryId, parse_identifier


@dataclass(frozen=True)
class StagedRecord:
    """A record in the working set, with either kind of identifier."""

    identifier: Identifier
    draft: RecordDraft

    @property
    def state(self) -> RecordState:
        return self.identifier.state

    @property
    def is_temporary(self) -> bool:
        return isinstance(self.identifier, TemporaryId)

    @classmethod
    def from_record(cls, record: Record) -> "StagedRecord":
        return cls(identifier=AuthoritativeId(record.record_id), draft=record.to_draft())

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.identifier.text, **draft_to_wire(self.draft)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StagedRecord":
        return cls(identifier=parse_identifier(data["id"]), draft=draft_from_wire(data))
