from __future__ import annotations

import logging
from typing import Sequence

from ..common.validators import optional_text
from ..core.exceptions import ValidationError
from .model import Record, RecordDraft
from .repository import RecordRepository

logger = logging.getLogger(__name__)


class RecordService:
    """Use cases of the persistence gateway (list, create, delete)."""

    def __init__(self, records: RecordRepository):
        self._records = records

    def list_records(self) -> Sequence[Record]:
        rows = self._records.list_all()
        logger.info("Registros obtenidos: %d", len(rows))
        return rows

    def create_record(self, draft: RecordDraft) -> int:
        if draft.missing_fields():
            raise ValidationError("Campos obligatorios faltantes")
        draft = draft.validated()

        logger.info(
            "Guardando registro: proyecto=%s cedula=%s nombre=%s",
            draft.project,
            draft.national_id,
            draft.full_name,
        )
        return self._records.create(
            project=draft.project,
            operation_center=optional_text(draft.operation_center),
            role=optional_text(draft.role),
            national_id=draft.national_id,
            full_name=draft.full_name,
            phone_number=optional_text(draft.phone_number),
            status=draft.status,
        )

    def delete_record(self, record_id: int) -> None:
        # Deleting a missing id is not an error.
        removed = self._records.delete_by_id(int(record_id))
        logger.info("Registro %s eliminado (filas=%d)", record_id, removed)

    def delete_all(self) -> int:
        removed = self._records.delete_all()
        logger.info("Todos los registros eliminados (filas=%d)", removed)
        return removed

    def check_database(self) -> None:
        self._records.ping()
