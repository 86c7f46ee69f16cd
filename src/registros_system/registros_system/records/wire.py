"""Translation between the Python record shape and the JSON used by the API.

The API speaks the column names of the registros table: multi-word fields
are snake_case (``centro_operacion``), everything else is a single word.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional

from ..core.enums import ActiveStatus
from .model import Record, RecordDraft

WIRE_FIELDS = {
    "project": "proyecto",
    "operation_center": "centro_operacion",
    "role": "cargo",
    "national_id": "cedula",
    "full_name": "nombre",
    "phone_number": "numero",
    "status": "status",
}

# Older clients posted the camelCase key.
LEGACY_ALIASES = {"centroOperacion": "centro_operacion"}


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def draft_to_wire(draft: RecordDraft) -> dict[str, str]:
    payload = {wire: _text(getattr(draft, attr)) for attr, wire in WIRE_FIELDS.items() if attr != "status"}
    payload["status"] = draft.status.value
    return payload


def draft_from_wire(payload: Mapping[str, Any]) -> RecordDraft:
    data = dict(payload)
    for legacy, wire in LEGACY_ALIASES.items():
        if legacy in data and not data.get(wire):
            data[wire] = data[legacy]
    values = {attr: _text(data.get(wire)) for attr, wire in WIRE_FIELDS.items() if attr != "status"}
    return RecordDraft(status=ActiveStatus.parse(data.get("status")), **values)


def record_to_wire(record: Record) -> dict[str, Any]:
    return {
        "id": record.record_id,
        "proyecto": record.project,
        "centro_operacion": record.operation_center,
        "cargo": record.role,
        "cedula": record.national_id,
        "nombre": record.full_name,
        "numero": record.phone_number,
        "status": record.status.value,
        "created_at": record.created_at.isoformat() if record.created_at else None,
    }


def _optional(value: Any) -> Optional[str]:
    text = _text(value)
    return text or None


def _timestamp(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def record_from_row(row: Mapping[str, Any]) -> Record:
    """Build a Record from a DB row or an API list item (same keys)."""
    return Record(
        record_id=int(row["id"]),
        project=_text(row.get("proyecto")),
        national_id=_text(row.get("cedula")),
        full_name=_text(row.get("nombre")),
        operation_center=_optional(row.get("centro_operacion")),
        role=_optional(row.get("cargo")),
        phone_number=_optional(row.get("numero")),
        status=ActiveStatus.parse(row.get("status")),
        created_at=_timestamp(row.get("created_at")),
    )
