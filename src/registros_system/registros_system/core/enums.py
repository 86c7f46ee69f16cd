from __future__ import annotations

from enum import Enum


class ActiveStatus(str, Enum):
    """Estado del registro; el valor es el código literal que viaja y se guarda."""

    ACTIVE = "SI"
    INACTIVE = "NO"

    @classmethod
    def parse(cls, value: object) -> "ActiveStatus":
        text = str(value or "").strip().upper()
        if text in {"NO", "INACTIVO", "INACTIVE"}:
            return cls.INACTIVE
        return cls.ACTIVE


class RecordState(str, Enum):
    """Ciclo de vida de un registro visto desde el cliente."""

    DRAFT = "DRAFT"
    STAGED = "STAGED"
    COMMITTED = "COMMITTED"
    DELETED = "DELETED"


class NoticeLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
