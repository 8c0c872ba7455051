"""
Supplemental driver registry.
"""

from .base import (
    SUPPORT_MULTI_COLUMN_AS_OR_COND,
    SUPPORT_MULTI_INSERT_AS_SELECT,
    SUPPORT_SCHEMA,
    SUPPORT_SELECT_UNGROUPED_COLUMNS,
    SUPPORT_SEQUENCE,
    SUPPORT_SUBSELECT,
    Connection,
    DriverConfigurationError,
    DriverConnectionError,
    DriverError,
    MalformedMetadataError,
    QueryExecutionError,
    SupplementalDriver,
)
from .mysql import DriverOptions, MySQLDriver

__all__ = [
    "Connection",
    "SupplementalDriver",
    "DriverOptions",
    "MySQLDriver",
    "DriverError",
    "DriverConfigurationError",
    "DriverConnectionError",
    "QueryExecutionError",
    "MalformedMetadataError",
    "SUPPORT_SEQUENCE",
    "SUPPORT_SELECT_UNGROUPED_COLUMNS",
    "SUPPORT_MULTI_INSERT_AS_SELECT",
    "SUPPORT_MULTI_COLUMN_AS_OR_COND",
    "SUPPORT_SUBSELECT",
    "SUPPORT_SCHEMA",
]
