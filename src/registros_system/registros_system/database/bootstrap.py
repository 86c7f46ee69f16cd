from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Iterator

import mysql.connector

from ..core.constants import TABLE_NAME
from .connection import DBConfig

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATH = Path(__file__).with_name("schema.sql")


def _strip_create_db_and_use(sql: str) -> str:
    # schema.sql names a database for manual use; the configured DB_NAME wins.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a script on ';' outside of quoted strings."""
    buf: list[str] = []
    quote: str | None = None
    escaped = False

    for ch in sql:
        buf.append(ch)
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf[:-1]).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_sql(cur, statements: Iterable[str]) -> int:
    count = 0
    for stmt in statements:
        cur.execute(stmt)
        count += 1
    return count


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        connection_timeout=target.connect_timeout,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = DEFAULT_SCHEMA_PATH) -> int:
    """Create the database and the registros table if missing.

    Idempotent: schema.sql only uses CREATE ... IF NOT EXISTS.
    Returns the number of statements executed.
    """
    target = DBConfig.from_dict(db_config)
    ensure_database_exists(db_config)

    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        executed = _exec_sql(cur, iter_sql_statements(sql))
        conn.commit()
    finally:
        conn.close()

    logger.info("Schema applied to %s (%d statements)", target.describe(), executed)
    return executed


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()


def count_records(db_config: dict) -> int:
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute(f"SELECT COUNT(*) FROM {TABLE_NAME}")
        (total,) = cur.fetchone()
        return int(total)
    finally:
        conn.close()
