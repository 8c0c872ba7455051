"""
MySQL supplemental driver implementation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Final, Mapping, Sequence

from pymysql.constants import FIELD_TYPE

from ..schema.models import ColumnInfo, ForeignKeyInfo, IndexInfo, TableInfo
from ..types import ColumnType, detect_type
from ..utils import get_logger, resolve_slow_query_ms, time_call
from .base import (
    SUPPORT_MULTI_COLUMN_AS_OR_COND,
    SUPPORT_SELECT_UNGROUPED_COLUMNS,
    Connection,
    DriverConfigurationError,
    MalformedMetadataError,
    SupplementalDriver,
    require_field,
)

if TYPE_CHECKING:
    from ..adapters.base import ConnectionConfig


# Largest row count MySQL accepts; used when only an OFFSET is requested.
MAX_ROW_COUNT: Final[str] = "18446744073709551615"

_FIELD_TYPE_NAMES: Final[dict[int, str]] = {}
for _name, _code in vars(FIELD_TYPE).items():
    # aliases (CHAR = TINY, INTERVAL = ENUM) come last; keep the canonical name
    if _name.isupper() and isinstance(_code, int):
        _FIELD_TYPE_NAMES.setdefault(_code, _name)

_LIKE_ESCAPES: Final[dict[str, str]] = {
    "\x00": "\\0",
    "\n": "\\n",
    "\r": "\\r",
    "\\": "\\\\",
    "'": "\\'",
    "%": "\\%",
    "_": "\\_",
}

_LEADING_INT_RE = re.compile(r"\s*(\d+)")


@dataclass(frozen=True)
class DriverOptions:
    """
    Session options applied when a driver is created.

    ``sql_mode`` is written into ``SET sql_mode='...'`` verbatim. It is admin
    configuration and must never carry user input.
    """

    charset: str | None = "utf8"
    sql_mode: str | None = None

    def __post_init__(self) -> None:
        # only an explicit empty string opts out of SET NAMES
        if self.charset is None:
            object.__setattr__(self, "charset", "utf8")

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "DriverOptions":
        sql_mode = options.get("sql_mode", options.get("sqlmode"))
        return cls(charset=options.get("charset"), sql_mode=sql_mode)

    @classmethod
    def from_config(cls, config: "ConnectionConfig") -> "DriverOptions":
        """
        Read ``charset`` and ``sql_mode`` (or ``sqlmode``) from the DSN options.
        """

        return cls.from_mapping(config.options or {})


class MySQLDriver(SupplementalDriver):
    """
    MySQL dialect behaviors on top of any :class:`Connection`.
    """

    name: Final[str] = "mysql"

    ERROR_ACCESS_DENIED: Final[int] = 1045
    ERROR_DUPLICATE_ENTRY: Final[int] = 1062
    ERROR_DATA_TRUNCATED: Final[int] = 1265

    # See http://bugs.mysql.com/bug.php?id=31188 and bug 35819 for the
    # multi-column OR condition problems.
    _SUPPORTED: Final[frozenset[str]] = frozenset(
        {SUPPORT_SELECT_UNGROUPED_COLUMNS, SUPPORT_MULTI_COLUMN_AS_OR_COND}
    )

    def __init__(
        self,
        connection: Connection,
        options: DriverOptions | Mapping[str, Any] | None = None,
        *,
        slow_query_ms: int | None = None,
    ) -> None:
        self.connection = connection
        self.logger = get_logger("drivers.mysql")
        self.slow_query_ms = resolve_slow_query_ms(default=100, override=slow_query_ms)
        if options is None:
            options = DriverOptions()
        elif not isinstance(options, DriverOptions):
            options = DriverOptions.from_mapping(options)
        self.options = options
        self._configure_session()

    def _configure_session(self) -> None:
        statements: list[str] = []
        if self.options.charset:
            statements.append(f"SET NAMES '{self.options.charset}'")
        if self.options.sql_mode is not None:
            statements.append(f"SET sql_mode='{self.options.sql_mode}'")
        for sql in statements:
            self.logger.info("Configuring MySQL session: %s", sql)
            try:
                self._query("mysql.session", sql)
            except Exception as exc:
                raise DriverConfigurationError(
                    f"MySQL rejected session setting {sql!r}."
                ) from exc

    def _query(self, name: str, sql: str) -> list[dict[str, Any]]:
        with time_call(name, self.logger, sql=sql, threshold_ms=self.slow_query_ms):
            return self.connection.execute(sql)

    # SQL ---------------------------------------------------------------
    def delimit(self, identifier: str) -> str:
        # http://dev.mysql.com/doc/refman/5.0/en/identifiers.html
        return "`" + identifier.replace("`", "``") + "`"

    def format_table(self, table_name: str) -> str:
        if "." in table_name:
            schema, table = table_name.split(".", 1)
            return f"{self.delimit(schema)}.{self.delimit(table)}"
        return self.delimit(table_name)

    def format_bool(self, value: bool) -> str:
        return "1" if value else "0"

    def format_datetime(self, value: date) -> str:
        if not isinstance(value, datetime):
            value = datetime(value.year, value.month, value.day)
        return (
            f"'{value.year:04d}-{value.month:02d}-{value.day:02d} "
            f"{value.hour:02d}:{value.minute:02d}:{value.second:02d}'"
        )

    def format_like(self, value: str, anchoring: int) -> str:
        """
        Encode ``value`` for a LIKE pattern.

        Negative ``anchoring`` matches a suffix, positive a prefix, zero a substring.
        """

        doubled = value.replace("\\", "\\\\")
        escaped = "".join(_LIKE_ESCAPES.get(char, char) for char in doubled)
        prefix = "'%" if anchoring <= 0 else "'"
        suffix = "%'" if anchoring >= 0 else "'"
        return prefix + escaped + suffix

    def limit_clause(self, limit: int | float | None, offset: int | float | None) -> str:
        if limit is None:
            limit = -1
        if offset is None:
            offset = 0
        if limit < 0 and offset <= 0:
            return ""
        # http://dev.mysql.com/doc/refman/5.0/en/select.html
        clause = "LIMIT " + (MAX_ROW_COUNT if limit < 0 else str(int(limit)))
        if offset > 0:
            clause += f" OFFSET {int(offset)}"
        return clause

    def apply_limit(self, sql: str, limit: int | float | None, offset: int | float | None) -> str:
        clause = self.limit_clause(limit, offset)
        if not clause:
            return sql
        return f"{sql} {clause}"

    def normalize_row(self, row: dict[str, Any]) -> dict[str, Any]:
        return row

    # Reflection --------------------------------------------------------
    def get_tables(self) -> list[TableInfo]:
        tables: list[TableInfo] = []
        for row in self._query("mysql.tables", "SHOW FULL TABLES"):
            values = list(row.values())
            if not values:
                raise MalformedMetadataError("SHOW FULL TABLES returned an empty row.")
            is_view = len(values) > 1 and values[1] == "VIEW"
            tables.append(TableInfo(name=values[0], is_view=is_view))
        return tables

    def get_columns(self, table: str) -> list[ColumnInfo]:
        sql = f"SHOW FULL COLUMNS FROM {self.delimit(table)}"
        columns: list[ColumnInfo] = []
        for row in self._query("mysql.columns", sql):
            raw_type = require_field(row, "Type", source=sql)
            native_type, _, params = raw_type.partition("(")
            columns.append(
                ColumnInfo(
                    name=require_field(row, "Field", source=sql),
                    table=table,
                    native_type=native_type.strip().upper(),
                    size=_leading_int(params),
                    unsigned="unsigned" in raw_type,
                    nullable=require_field(row, "Null", source=sql) == "YES",
                    default=require_field(row, "Default", source=sql),
                    auto_increment=require_field(row, "Extra", source=sql) == "auto_increment",
                    primary=require_field(row, "Key", source=sql) == "PRI",
                    vendor=dict(row),
                )
            )
        return columns

    def get_indexes(self, table: str) -> list[IndexInfo]:
        sql = f"SHOW INDEX FROM {self.delimit(table)}"
        grouped: dict[str, dict[str, Any]] = {}
        for row in self._query("mysql.indexes", sql):
            key_name = require_field(row, "Key_name", source=sql)
            position = int(require_field(row, "Seq_in_index", source=sql)) - 1
            column = require_field(row, "Column_name", source=sql)
            if column is None:
                # functional key parts report an expression instead of a column
                column = require_field(row, "Expression", source=sql)
            entry = grouped.setdefault(
                key_name,
                {
                    "unique": not int(require_field(row, "Non_unique", source=sql)),
                    "columns": {},
                },
            )
            if position in entry["columns"]:
                raise MalformedMetadataError(
                    f"Index {key_name!r} on {table!r} reports key position {position + 1} twice."
                )
            entry["columns"][position] = column

        indexes: list[IndexInfo] = []
        for key_name, entry in grouped.items():
            positions = entry["columns"]
            if sorted(positions) != list(range(len(positions))):
                raise MalformedMetadataError(
                    f"Index {key_name!r} on {table!r} has non-contiguous key positions "
                    f"{sorted(p + 1 for p in positions)}."
                )
            indexes.append(
                IndexInfo(
                    name=key_name,
                    unique=entry["unique"],
                    primary=key_name == "PRIMARY",
                    columns=tuple(positions[i] for i in range(len(positions))),
                )
            )
        return indexes

    def get_foreign_keys(self, table: str) -> list[ForeignKeyInfo]:
        sql = (
            "SELECT CONSTRAINT_NAME, COLUMN_NAME, REFERENCED_TABLE_NAME, REFERENCED_COLUMN_NAME "
            "FROM information_schema.KEY_COLUMN_USAGE "
            "WHERE TABLE_SCHEMA = DATABASE() AND REFERENCED_TABLE_NAME IS NOT NULL "
            f"AND TABLE_NAME = {self.connection.quote_literal(table)}"
        )
        return [
            ForeignKeyInfo(
                name=require_field(row, "CONSTRAINT_NAME", source=sql),
                local=require_field(row, "COLUMN_NAME", source=sql),
                table=require_field(row, "REFERENCED_TABLE_NAME", source=sql),
                foreign=require_field(row, "REFERENCED_COLUMN_NAME", source=sql),
            )
            for row in self._query("mysql.foreign_keys", sql)
        ]

    def get_column_types(self, description: Sequence[Sequence[Any]] | None) -> dict[str, str]:
        """
        Map result column names to canonical tags using a DB-API ``cursor.description``.

        Columns whose native type is not reported are left out.
        """

        types: dict[str, str] = {}
        for entry in description or ():
            name, type_code = entry[0], entry[1] if len(entry) > 1 else None
            native_type = _native_type_name(type_code)
            if native_type is None:
                continue
            column_type = detect_type(native_type)
            if column_type == ColumnType.TIME:
                # MySQL TIME holds a duration, not a time of day
                column_type = ColumnType.TIME_INTERVAL
            types[name] = column_type
        return types

    def is_supported(self, feature: str) -> bool:
        return feature in self._SUPPORTED


def _leading_int(text: str) -> int | None:
    match = _LEADING_INT_RE.match(text)
    if match is None:
        return None
    return int(match.group(1))


def _native_type_name(type_code: Any) -> str | None:
    if type_code is None:
        return None
    if isinstance(type_code, str):
        return type_code or None
    if isinstance(type_code, int):
        return _FIELD_TYPE_NAMES.get(type_code)
    return None
