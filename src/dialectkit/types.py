"""
Canonical column type tags and the shared native-type classifier.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Final


class ColumnType:
    """
    Engine-independent type tags used by the generic layer for value coercion.
    """

    TEXT: Final[str] = "string"
    BINARY: Final[str] = "bin"
    BOOL: Final[str] = "bool"
    INTEGER: Final[str] = "int"
    FLOAT: Final[str] = "float"
    DECIMAL: Final[str] = "decimal"
    DATE: Final[str] = "date"
    TIME: Final[str] = "time"
    DATETIME: Final[str] = "datetime"
    TIME_INTERVAL: Final[str] = "timeint"
    UNKNOWN: Final[str] = "unknown"


# Order matters: the first matching pattern wins.
_TYPE_PATTERNS: Final[tuple[tuple[re.Pattern[str], str], ...]] = tuple(
    (re.compile(pattern), tag)
    for pattern, tag in (
        (r"^_", ColumnType.TEXT),  # PostgreSQL arrays
        (r"BYTEA|BLOB|BIN", ColumnType.BINARY),
        (r"TEXT|CHAR|POINT|INTERVAL|STRING|ENUM|^SET$|JSON", ColumnType.TEXT),
        (r"YEAR|BYTE|COUNTER|SERIAL|INT|LONG|SHORT|^TINY$", ColumnType.INTEGER),
        (r"DECIMAL|NUMERIC", ColumnType.DECIMAL),
        (r"CURRENCY|REAL|MONEY|FLOAT|DOUBLE|NUMBER", ColumnType.FLOAT),
        (r"^TIME$", ColumnType.TIME),
        (r"TIME", ColumnType.DATETIME),  # DATETIME, TIMESTAMP
        (r"DATE", ColumnType.DATE),
        (r"BOOL", ColumnType.BOOL),
    )
)


@lru_cache(maxsize=256)
def detect_type(native_type: str) -> str:
    """
    Classify a native type name (``VARCHAR``, ``LONGLONG``, ``timestamp`` ...).
    """

    normalized = native_type.strip().upper()
    for pattern, tag in _TYPE_PATTERNS:
        if pattern.search(normalized):
            return tag
    return ColumnType.UNKNOWN
