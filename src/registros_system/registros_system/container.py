from __future__ import annotations

from dataclasses import dataclass

from .database.connection import DBConfig, DatabaseConnection
from .records.mysql_record_repository import MySQLRecordRepository
from .records.repository import RecordRepository
from .records.service import RecordService


@dataclass(frozen=True)
class Container:
    records_repo: RecordRepository
    record_service: RecordService


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    records_repo = MySQLRecordRepository(conn)
    return Container(records_repo=records_repo, record_service=RecordService(records_repo))


def build_container_for(records_repo: RecordRepository) -> Container:
    """Wire the services around an already-built repository (tests, scripts)."""
    return Container(records_repo=records_repo, record_service=RecordService(records_repo))
