# ==============================================
# MySQLClient
# ==============================================
#
# PURPOSE:
#   Manages the MySQL connection and all SQL operations the
#   record and meta layers need: table existence checks,
#   table creation, filtered selects, inserts and updates.
#
# WHY THIS CLASS EXISTS:
#   Meta tables are created ON THE FLY the first time a record
#   type writes a meta attribute. There is no migration step.
#   This class answers "does <table>_meta exist in this schema?"
#   through INFORMATION_SCHEMA and creates it when asked.
#
# CLASS: MySQLClient
# ------------------
#   Stateful — holds connection to MySQL.
#
#   Constructor:
#   ------------
#   - __init__(host, port, user, password, database, table_prefix="")
#       Store connection params. Don't connect yet.
#
#   Methods:
#   --------
#   - connect() -> None
#       Establish connection. Create database if it doesn't exist.
#       Connects with CLIENT.FOUND_ROWS so UPDATE reports matched
#       rows, not only changed ones, and with autocommit on so a
#       read-only SELECT never pins an old InnoDB snapshot.
#
#   - disconnect() -> None
#       Close connection cleanly.
#
#   - table_exists(table_name: str) -> bool
#       Query INFORMATION_SCHEMA.TABLES for the active schema.
#
#   - get_current_columns(table_name: str) -> dict[str, str]
#       Query INFORMATION_SCHEMA.COLUMNS for column names and types.
#
#   Everything else (create_table, select, insert, update, ...)
#   comes from SQLClient.
#
#   Errors:
#   -------
#   - ER_DUP_ENTRY (1062)          → DuplicateKeyError
#   - ER_TABLE_EXISTS_ERROR (1050) → TableExistsError
#   - anything else propagates as the pymysql error
#
# ==============================================

from typing import Any, Dict, List, Optional, Sequence, Tuple, cast

import pymysql
import pymysql.cursors
from pymysql.constants import CLIENT, ER

from metarecord.errors import DataAccessError, DuplicateKeyError, TableExistsError
from metarecord.storage.base import SQLClient


class MySQLClient(SQLClient):
    dialect = "mysql"
    placeholder = "%s"
    quote_char = "`"

    def __init__(self, host, port, user, password, database, table_prefix: str = ""):
        super().__init__(database=database, table_prefix=table_prefix)
        self.host = host
        self.port = port
        self.user = user
        self.password = password

    def connect(self) -> None:
        # Establish connection to MySQL, create database if it doesn't exist
        self.connection = pymysql.connect(
            host=self.host,
            port=self.port,
            user=self.user,
            password=self.password,
            charset="utf8mb4",
            client_flag=CLIENT.FOUND_ROWS,
            autocommit=True,
        )
        cursor = self.connection.cursor()
        try:
            cursor.execute(f"CREATE DATABASE IF NOT EXISTS {self.quote(self.database)}")
            cursor.execute(f"USE {self.quote(self.database)}")
        finally:
            cursor.close()

    def disconnect(self) -> None:
        # Close connection cleanly
        if self.connection:
            self.connection.close()
            self.connection = None

    def _require_connection(self):
        if self.connection is None:
            raise DataAccessError("Not connected to MySQL")
        return self.connection

    def table_exists(self, table_name: str) -> bool:
        connection = self._require_connection()
        cursor = connection.cursor()
        cursor.execute(
            "SELECT COUNT(*) FROM INFORMATION_SCHEMA.TABLES "
            "WHERE TABLE_SCHEMA = %s AND TABLE_NAME = %s",
            (self.database, table_name)
        )
        cf = cursor.fetchone()
        cursor.close()
        if cf is None:
            raise DataAccessError("COUNT query returned no rows")
        return cf[0] > 0

    def get_current_columns(self, table_name: str) -> dict[str, str]:
        # Query INFORMATION_SCHEMA to get current column names and types
        connection = self._require_connection()
        cursor = connection.cursor()
        cursor.execute(
            "SELECT COLUMN_NAME, DATA_TYPE FROM INFORMATION_SCHEMA.COLUMNS "
            "WHERE TABLE_SCHEMA = %s AND TABLE_NAME = %s",
            (self.database, table_name)
        )
        # Each row is a tuple: (column_name, data_type)
        columns: dict[str, str] = {
            str(name): str(dtype)
            for name, dtype in cursor.fetchall()
        }
        cursor.close()
        return columns

    def _run(self, query: str, params: Sequence[Any] = ()) -> Tuple[int, Optional[int]]:
        connection = self._require_connection()
        cursor = connection.cursor()
        try:
            cursor.execute(query, tuple(params) if params else None)
            connection.commit()
            return cursor.rowcount, cursor.lastrowid
        except pymysql.err.MySQLError as e:
            connection.rollback()
            code = e.args[0] if e.args else None
            if code == ER.DUP_ENTRY:
                raise DuplicateKeyError(str(e)) from e
            if code == ER.TABLE_EXISTS_ERROR:
                raise TableExistsError(str(e)) from e
            raise
        finally:
            cursor.close()

    def _query(self, query: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        connection = self._require_connection()
        cursor = connection.cursor(pymysql.cursors.DictCursor)
        try:
            cursor.execute(query, tuple(params) if params else None)
            return cast(List[Dict[str, Any]], list(cursor.fetchall()))
        finally:
            cursor.close()
