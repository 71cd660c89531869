# ==============================================
# STORAGE (MySQL + SQLite)
# ==============================================
#
# This package handles all database operations:
# connecting, checking and creating tables, and running
# parameterized selects, inserts and updates.
#
# Modules:
# --------
# - base.py            → SQL rendering shared by both clients
# - mysql_client.py    → MySQL connection and operations
# - sqlite_client.py   → SQLite connection and operations
# - schema.py          → Logical column types and the meta table layout
#
# ==============================================

from .mysql_client import MySQLClient
from .sqlite_client import SQLiteClient
from .base import SQLClient
from .schema import Column, ColumnType, UniqueIndex, meta_table_columns, meta_unique_index

__all__ = [
    "MySQLClient",
    "SQLiteClient",
    "SQLClient",
    "Column",
    "ColumnType",
    "UniqueIndex",
    "meta_table_columns",
    "meta_unique_index"
]
