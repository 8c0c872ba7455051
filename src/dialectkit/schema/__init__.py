"""
Normalized schema snapshots produced by driver reflection.
"""

from .models import ColumnInfo, ForeignKeyInfo, IndexInfo, TableInfo

__all__ = ["TableInfo", "ColumnInfo", "IndexInfo", "ForeignKeyInfo"]
