"""
MySQL connection over a DB-API driver (PyMySQL or mysqlclient).
"""

from __future__ import annotations

from typing import Any

from ..drivers.base import (
    Connection,
    DriverConfigurationError,
    DriverConnectionError,
    QueryExecutionError,
)
from ..drivers.mysql import MySQLDriver
from ..utils import get_logger
from .base import ConnectionConfig

# Applied by MySQLDriver as session statements, never passed to connect().
_SESSION_OPTIONS = frozenset({"charset", "sql_mode", "sqlmode"})


def _load_driver():
    try:
        import pymysql

        return pymysql
    except ImportError:
        try:
            import MySQLdb

            return MySQLdb
        except ImportError:
            return None


def _error_code(exc: BaseException) -> int | None:
    if exc.args and isinstance(exc.args[0], int):
        return exc.args[0]
    return None


class MySQLConnection(Connection):
    """
    :class:`Connection` implementation wrapping an open DB-API connection.

    Rows are returned as dicts keyed by ``cursor.description`` names, in result
    column order. Engine errors surface as :class:`QueryExecutionError`.
    """

    def __init__(self, connection: Any, *, config: ConnectionConfig | None = None) -> None:
        self.raw = connection
        self.config = config
        self.logger = get_logger("adapters.mysql")

    @classmethod
    def connect(cls, config: ConnectionConfig) -> "MySQLConnection":
        driver = _load_driver()
        if driver is None:
            raise DriverConfigurationError(
                "PyMySQL or mysqlclient is required to open a MySQL connection."
            )
        if not config.dsn:
            raise DriverConfigurationError(
                "ConnectionConfig must be built from a DSN for MySQL connections."
            )

        options = {
            key: value
            for key, value in (config.options or {}).items()
            if key not in _SESSION_OPTIONS
        }
        if config.ssl:
            for key, value in config.ssl.mysql_options().items():
                options.setdefault(key, value)
        if config.timeout and "connect_timeout" not in options:
            options["connect_timeout"] = int(config.timeout)

        dsn = config.dsn
        connect_kwargs = {
            "host": dsn.host or "localhost",
            "user": dsn.username,
            "password": dsn.password or "",
            "database": dsn.database,
            **options,
        }
        if dsn.port:
            connect_kwargs["port"] = dsn.port

        logger = get_logger("adapters.mysql")
        logger.info(
            "Connecting to MySQL %s (autocommit=%s)",
            config.descriptive_label(),
            config.autocommit,
        )
        try:
            connection = driver.connect(**connect_kwargs)
        except Exception as exc:
            if _error_code(exc) == MySQLDriver.ERROR_ACCESS_DENIED:
                raise DriverConnectionError(
                    f"MySQL denied access for {config.redacted_dsn()}; check the credentials."
                ) from exc
            raise DriverConnectionError(
                f"Failed to connect to MySQL {config.redacted_dsn()}."
            ) from exc
        if hasattr(connection, "autocommit"):
            connection.autocommit(config.autocommit)
        return cls(connection, config=config)

    def execute(self, sql: str) -> list[dict[str, Any]]:
        cursor = self.raw.cursor()
        try:
            try:
                cursor.execute(sql)
            except Exception as exc:
                raise QueryExecutionError(
                    f"MySQL query failed: {exc}", code=_error_code(exc), sql=sql
                ) from exc
            if not cursor.description:
                return []
            names = [entry[0] for entry in cursor.description]
            return [dict(zip(names, row)) for row in cursor.fetchall()]
        finally:
            cursor.close()

    def quote_literal(self, value: Any) -> str:
        literal = self.raw.literal(value)
        if isinstance(literal, bytes):
            # mysqlclient returns bytes encoded in the connection charset
            return literal.decode(self.raw.character_set_name())
        return literal

    def close(self) -> None:
        if self.raw is not None:
            try:
                self.raw.close()
            finally:
                self.raw = None
