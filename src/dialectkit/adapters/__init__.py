"""
Connection configuration and DB-API backed connection implementations.
"""

from .base import ConnectionConfig, SSLConfig
from .mysql import MySQLConnection

__all__ = ["ConnectionConfig", "SSLConfig", "MySQLConnection"]
