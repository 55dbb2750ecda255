from __future__ import annotations

import logging
import threading
from dataclasses import asdict, dataclass
from typing import Optional

from mysql.connector import pooling

logger = logging.getLogger(__name__)

# mysql-connector refuses pools larger than this
MAX_POOL_SIZE = 32


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_mapping(cls, values: dict) -> "DBConfig":
        return cls(
            host=str(values["host"]),
            port=int(values.get("port", 3306)),
            user=str(values["user"]),
            password=str(values.get("password") or ""),
            database=str(values["database"]),
        )


class DatabaseConnection:
    """Process-wide connection source for the MySQL repositories.

    Connections are borrowed from a mysql-connector pool created on first
    use; closing a borrowed connection hands it back. The pool is sized so
    every roll-up worker can hold one connection at a time.
    """

    _instance: Optional["DatabaseConnection"] = None
    _instance_lock = threading.Lock()

    def __init__(self, config: DBConfig, *, pool_size: int = 5):
        self._config = config
        self._pool_size = max(1, min(int(pool_size), MAX_POOL_SIZE))
        self._pool: Optional[pooling.MySQLConnectionPool] = None
        self._pool_lock = threading.Lock()

    @classmethod
    def get_instance(cls, config: DBConfig, *, pool_size: int = 5) -> "DatabaseConnection":
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = DatabaseConnection(config, pool_size=pool_size)
            return cls._instance

    def _get_pool(self) -> pooling.MySQLConnectionPool:
        with self._pool_lock:
            if self._pool is None:
                logger.info(
                    "opening connection pool",
                    extra={"host": self._config.host, "database": self._config.database, "size": self._pool_size},
                )
                self._pool = pooling.MySQLConnectionPool(
                    pool_name="hr_attendance",
                    pool_size=self._pool_size,
                    **asdict(self._config),
                )
            return self._pool

    def connect(self):
        return self._get_pool().get_connection()
