from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import mysql.connector

from ..core.constants import DEFAULT_CONNECT_TIMEOUT, DEFAULT_DB_PORT


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host") or "localhost"),
            port=int(db_config.get("port") or DEFAULT_DB_PORT),
            user=str(db_config.get("user") or "root"),
            password=str(db_config.get("password") or ""),
            database=str(db_config.get("database") or "registros_db"),
            connect_timeout=int(db_config.get("connect_timeout") or DEFAULT_CONNECT_TIMEOUT),
        )

    def describe(self) -> str:
        return f"{self.user}@{self.host}:{self.port}/{self.database}"


class DatabaseConnection:
    """Singleton-like DB connection factory.

    Note: We create short-lived connections per operation (safe for simple Flask apps).
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    @property
    def config(self) -> DBConfig:
        return self._config

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
            connection_timeout=int(self._config.connect_timeout),
        )

    def ping(self) -> None:
        conn = self.connect()
        try:
            conn.ping(reconnect=False)
        finally:
            conn.close()
