from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from ..common.validators import require_non_empty
from ..core.enums import ActiveStatus

REQUIRED_FIELDS = {
    "project": "Proyecto",
    "national_id": "Cédula",
    "full_name": "Nombre",
}


@dataclass(frozen=True)
class RecordDraft:
    """Datos de un registro todavía sin identificador.

    Es la forma que producen el formulario y la carga masiva, y la que se
    envía al API al guardar.
    """

    project: str = ""
    operation_center: str = ""
    role: str = ""
    national_id: str = ""
    full_name: str = ""
    phone_number: str = ""
    status: ActiveStatus = ActiveStatus.ACTIVE

    def missing_fields(self) -> list[str]:
        return [label for attr, label in REQUIRED_FIELDS.items() if not str(getattr(self, attr) or "").strip()]

    def validated(self) -> "RecordDraft":
        """Return a trimmed copy, or raise ValidationError on a missing required field."""
        return replace(
            self,
            project=require_non_empty(self.project, "Proyecto"),
            national_id=require_non_empty(self.national_id, "Cédula"),
            full_name=require_non_empty(self.full_name, "Nombre"),
            operation_center=(self.operation_center or "").strip(),
            role=(self.role or "").strip(),
            phone_number=(self.phone_number or "").strip(),
        )


@dataclass(frozen=True)
class Record:
    """Fila de la tabla registros con id asignado por MySQL."""

    record_id: int
    project: str
    national_id: str
    full_name: str
    operation_center: Optional[str] = None
    role: Optional[str] = None
    phone_number: Optional[str] = None
    status: ActiveStatus = ActiveStatus.ACTIVE
    created_at: Optional[datetime] = None

    def to_draft(self) -> RecordDraft:
        return RecordDraft(
            project=self.project,
            operation_center=self.operation_center or "",
            role=self.role or "",
            national_id=self.national_id,
            full_name=self.full_name,
            phone_number=self.phone_number or "",
            status=self.status,
        )
