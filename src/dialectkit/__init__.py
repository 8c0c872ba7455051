"""
dialectkit public package initialization.

Engine-specific SQL formatting, schema reflection and result type detection
behind one driver interface.
"""

from .adapters import ConnectionConfig, MySQLConnection  # noqa: F401
from .drivers import (  # noqa: F401
    Connection,
    DriverConfigurationError,
    DriverConnectionError,
    DriverError,
    DriverOptions,
    MalformedMetadataError,
    MySQLDriver,
    QueryExecutionError,
    SupplementalDriver,
)
from .schema import ColumnInfo, ForeignKeyInfo, IndexInfo, TableInfo  # noqa: F401
from .types import ColumnType, detect_type  # noqa: F401

__all__ = [
    "Connection",
    "ConnectionConfig",
    "MySQLConnection",
    "SupplementalDriver",
    "MySQLDriver",
    "DriverOptions",
    "DriverError",
    "DriverConfigurationError",
    "DriverConnectionError",
    "QueryExecutionError",
    "MalformedMetadataError",
    "TableInfo",
    "ColumnInfo",
    "IndexInfo",
    "ForeignKeyInfo",
    "ColumnType",
    "detect_type",
]
