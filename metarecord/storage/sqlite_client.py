# ==============================================
# SQLiteClient
# ==============================================
#
# PURPOSE:
#   The same data-access interface as MySQLClient, backed by a
#   local SQLite file (or ":memory:"). Used for single-process
#   deployments, the CLI against a local file, and the test suite.
#
# CLASS: SQLiteClient
# -------------------
#   Stateful — holds a sqlite3 connection.
#
#   Constructor:
#   ------------
#   - __init__(path: str = ":memory:", table_prefix: str = "")
#
#   Methods:
#   --------
#   - connect() / disconnect()
#   - table_exists(table_name) -> bool   (sqlite_master lookup)
#   - get_current_columns(table_name) -> dict[str, str]
#
#   Errors:
#   -------
#   - IntegrityError "UNIQUE constraint failed" → DuplicateKeyError
#   - OperationalError "already exists"         → TableExistsError
#
# ==============================================

import sqlite3
from typing import Any, Dict, List, Optional, Sequence, Tuple

from metarecord.errors import DataAccessError, DuplicateKeyError, TableExistsError
from metarecord.storage.base import SQLClient


class SQLiteClient(SQLClient):
    dialect = "sqlite"
    placeholder = "?"
    quote_char = '"'

    def __init__(self, path: str = ":memory:", table_prefix: str = ""):
        super().__init__(database="main", table_prefix=table_prefix)
        self.path = path

    def connect(self) -> None:
        self.connection = sqlite3.connect(self.path)
        self.connection.row_factory = sqlite3.Row

    def disconnect(self) -> None:
        if self.connection:
            self.connection.close()
            self.connection = None

    def _require_connection(self) -> sqlite3.Connection:
        if self.connection is None:
            raise DataAccessError("Not connected to SQLite")
        return self.connection

    def table_exists(self, table_name: str) -> bool:
        row = self._require_connection().execute(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?",
            (table_name,)
        ).fetchone()
        return row is not None

    def get_current_columns(self, table_name: str) -> Dict[str, str]:
        rows = self._require_connection().execute(
            f"PRAGMA table_info({self.quote(table_name)})"
        ).fetchall()
        return {row["name"]: row["type"] for row in rows}

    def _run(self, query: str, params: Sequence[Any] = ()) -> Tuple[int, Optional[int]]:
        connection = self._require_connection()
        try:
            cursor = connection.execute(query, tuple(params))
            connection.commit()
        except sqlite3.IntegrityError as e:
            connection.rollback()
            if "UNIQUE constraint failed" in str(e):
                raise DuplicateKeyError(str(e)) from e
            raise
        except sqlite3.OperationalError as e:
            connection.rollback()
            if "already exists" in str(e):
                raise TableExistsError(str(e)) from e
            raise
        return cursor.rowcount, cursor.lastrowid

    def _query(self, query: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        rows = self._require_connection().execute(query, tuple(params)).fetchall()
        return [dict(row) for row in rows]
