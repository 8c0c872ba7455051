"""
Driver protocol definitions shared by every SQL engine implementation.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Protocol, Sequence

from ..schema.models import ColumnInfo, ForeignKeyInfo, IndexInfo, TableInfo

# Capability flags a generic layer may ask a driver about.
SUPPORT_SEQUENCE = "sequence"
SUPPORT_SELECT_UNGROUPED_COLUMNS = "ungrouped_cols"
SUPPORT_MULTI_INSERT_AS_SELECT = "insert_as_select"
SUPPORT_MULTI_COLUMN_AS_OR_COND = "multi_column_as_or"
SUPPORT_SUBSELECT = "subselect"
SUPPORT_SCHEMA = "schema"


class DriverError(RuntimeError):
    """Base error for driver-related failures."""


class DriverConfigurationError(DriverError):
    """Raised when driver options, session setup, or required modules are unusable."""


class DriverConnectionError(DriverError):
    """Raised when establishing a database connection fails."""


class QueryExecutionError(DriverError):
    """Raised when the engine rejects a statement."""

    def __init__(self, message: str, *, code: int | None = None, sql: str | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.sql = sql


class MalformedMetadataError(DriverError):
    """Raised when an introspection row lacks a field or is internally inconsistent."""


class Connection(Protocol):
    """
    Minimal connection capability the drivers issue their statements through.
    """

    def execute(self, sql: str) -> list[dict[str, Any]]:
        """
        Run a literal SQL statement and return its rows in result order.
        """

    def quote_literal(self, value: Any) -> str:
        """
        Render ``value`` as a quoted SQL literal.
        """


class SupplementalDriver(Protocol):
    """
    Engine-specific behavior consumed by the engine-agnostic data-access layer.
    """

    def delimit(self, identifier: str) -> str: ...

    def format_bool(self, value: bool) -> str: ...

    def format_datetime(self, value: date) -> str: ...

    def format_like(self, value: str, anchoring: int) -> str: ...

    def apply_limit(self, sql: str, limit: int | float | None, offset: int | float | None) -> str: ...

    def normalize_row(self, row: dict[str, Any]) -> dict[str, Any]: ...

    def get_tables(self) -> list[TableInfo]: ...

    def get_columns(self, table: str) -> list[ColumnInfo]: ...

    def get_indexes(self, table: str) -> list[IndexInfo]: ...

    def get_foreign_keys(self, table: str) -> list[ForeignKeyInfo]: ...

    def get_column_types(self, description: Sequence[Sequence[Any]] | None) -> dict[str, str]: ...

    def is_supported(self, feature: str) -> bool: ...


def require_field(row: Mapping[str, Any], field: str, *, source: str) -> Any:
    """
    Return ``row[field]``, failing loudly when the engine did not report it.
    """

    try:
        return row[field]
    except KeyError:
        raise MalformedMetadataError(
            f"{source} returned a row without the '{field}' field: {sorted(row)!r}"
        ) from None
