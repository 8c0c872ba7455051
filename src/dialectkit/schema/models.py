"""
Read-only reflection entities.

Each reflection call builds fresh instances; none of them keep a reference to
the connection they were read through.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class TableInfo:
    name: str
    is_view: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("TableInfo.name must be non-empty.")


@dataclass(frozen=True)
class ColumnInfo:
    """
    Column metadata. ``vendor`` keeps the raw introspection row for diagnostics.
    """

    name: str
    table: str
    native_type: str
    size: int | None = None
    unsigned: bool = False
    nullable: bool = False
    default: str | None = None
    auto_increment: bool = False
    primary: bool = False
    vendor: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class IndexInfo:
    name: str
    unique: bool
    primary: bool
    columns: tuple[str, ...] = ()


@dataclass(frozen=True)
class ForeignKeyInfo:
    """
    One local/referenced column pair. Composite keys yield several rows sharing ``name``.
    """

    name: str
    local: str
    table: str
    foreign: str
