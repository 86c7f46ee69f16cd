from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import TABLE_NAME
from ..core.enums import ActiveStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Record
from .repository import RecordRepository
from .wire import record_from_row


class MySQLRecordRepository(RecordRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Record]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT id, proyecto, centro_operacion, cargo, cedula, nombre, numero, status, created_at
                FROM {TABLE_NAME}
                ORDER BY id DESC
                """
            )
            return [record_from_row(r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO {TABLE_NAME}
                    (proyecto, centro_operacion, cargo, cedula, nombre, numero, status)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                """,
                (project, operation_center, role, national_id, full_name, phone_number, status.value),
            )
            return int(cur.lastrowid)

    def delete_by_id(self, record_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM {TABLE_NAME} WHERE id=%s", (record_id,))
            return int(cur.rowcount)

    def delete_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM {TABLE_NAME}")
            return int(cur.rowcount)

    def ping(self) -> None:
        self._conn_factory.ping()
