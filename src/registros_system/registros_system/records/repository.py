from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import ActiveStatus
from .model import Record


class RecordRepository(Protocol):
    """Repository de la tabla registros.

    El servicio depende de esta interfaz, no de MySQL directamente.
    """

    def list_all(self) -> Sequence[Record]:
        raise NotImplementedError

    def create(
        self,
        *,
        project: str,
        operation_center: Optional[str],
        role: Optional[str],
        national_id: str,
        full_name: str,
        phone_number: Optional[str],
        status: ActiveStatus,
    ) -> int:
        raise NotImplementedError

    def delete_by_id(self, record_id: int) -> int:
        raise NotImplementedError

    def delete_all(self) -> int:
        raise NotImplementedError

    def ping(self) -> None:
        raise NotImplementedError
