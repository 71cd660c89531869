# ==============================================
# SQLClient (shared data-access behaviour)
# ==============================================
#
# PURPOSE:
#   Common SQL rendering for the MySQL and SQLite clients.
#   Subclasses own the connection and the driver calls;
#   this class turns (table, values, where) into parameterized
#   statements and hands them to the subclass.
#
# CLASS: SQLClient
# ----------------
#   Abstract — subclasses set `dialect`, `placeholder` and
#   implement the driver hooks.
#
#   Driver hooks (subclass):
#   ------------------------
#   - connect() / disconnect()
#   - table_exists(table_name) -> bool
#   - _run(query, params) -> (rowcount, lastrowid)
#   - _query(query, params) -> list[dict]
#
#   Public methods:
#   ---------------
#   - quote(identifier) -> str
#   - create_table(table_name, columns, unique=None, if_not_exists=True)
#   - select(table_name, where, columns=None, limit=None) -> list[dict]
#   - select_one(table_name, where, columns=None) -> dict | None
#   - insert(table_name, values) -> int        (generated id)
#   - update(table_name, values, where) -> int (rows matched)
#   - delete(table_name, where) -> int         (rows removed)
#   - execute(query, params=None) -> int
#   - fetch_all(query, params=None) -> list[dict]
#   - fetch_one(query, params=None) -> dict | None
#
#   Context Manager:
#   ----------------
#   - __enter__ / __exit__ for `with Client(...) as db:` usage.
#
# ==============================================

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from metarecord.storage.schema import Column, UniqueIndex, render_column


class SQLClient:
    dialect = ""
    placeholder = "%s"
    quote_char = '"'

    def __init__(self, database: str = "", table_prefix: str = ""):
        self.database = database
        self.table_prefix = table_prefix
        self.connection = None

    # ---- driver hooks ----

    def connect(self) -> None:
        raise NotImplementedError

    def disconnect(self) -> None:
        raise NotImplementedError

    def table_exists(self, table_name: str) -> bool:
        raise NotImplementedError

    def _run(self, query: str, params: Sequence[Any] = ()) -> Tuple[int, Optional[int]]:
        raise NotImplementedError

    def _query(self, query: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        raise NotImplementedError

    # ---- rendering ----

    def quote(self, identifier: str) -> str:
        q = self.quote_char
        return q + identifier.replace(q, q + q) + q

    def _where(self, where: Mapping[str, Any]) -> Tuple[str, List[Any]]:
        if not where:
            return "", []
        clauses = []
        params: List[Any] = []
        for column, value in where.items():
            if value is None:
                clauses.append(f"{self.quote(column)} IS NULL")
            else:
                clauses.append(f"{self.quote(column)} = {self.placeholder}")
                params.append(value)
        return " WHERE " + " AND ".join(clauses), params

    def _unique_clause(self, unique: UniqueIndex) -> str:
        cols = ", ".join(self.quote(c) for c in unique.columns)
        return f"CONSTRAINT {self.quote(unique.name)} UNIQUE ({cols})"

    # ---- statements ----

    def create_table(
        self,
        table_name: str,
        columns: Iterable[Column],
        unique: Optional[UniqueIndex] = None,
        if_not_exists: bool = True
    ) -> None:
        """
        Create a table in a single statement, unique constraint included.

        Args:
            table_name: Fully resolved table name
            columns: Column definitions in order
            unique: Optional unique constraint
            if_not_exists: Emit CREATE TABLE IF NOT EXISTS
        """
        parts = [render_column(col, self.dialect, self.quote) for col in columns]
        if unique is not None:
            parts.append(self._unique_clause(unique))
        guard = "IF NOT EXISTS " if if_not_exists else ""
        query = f"CREATE TABLE {guard}{self.quote(table_name)} ({', '.join(parts)})"
        self._run(query)

    def select(
        self,
        table_name: str,
        where: Optional[Mapping[str, Any]] = None,
        columns: Optional[Sequence[str]] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        cols = ", ".join(self.quote(c) for c in columns) if columns else "*"
        clause, params = self._where(where or {})
        query = f"SELECT {cols} FROM {self.quote(table_name)}{clause}"
        if limit is not None:
            query += f" LIMIT {int(limit)}"
        return self._query(query, params)

    def select_one(
        self,
        table_name: str,
        where: Optional[Mapping[str, Any]] = None,
        columns: Optional[Sequence[str]] = None
    ) -> Optional[Dict[str, Any]]:
        rows = self.select(table_name, where, columns, limit=1)
        return rows[0] if rows else None

    def insert(self, table_name: str, values: Mapping[str, Any]) -> int:
        """Insert one row. Returns the generated id (0 if the table has none)."""
        if not values:
            query = f"INSERT INTO {self.quote(table_name)} DEFAULT VALUES"
            if self.dialect == "mysql":
                query = f"INSERT INTO {self.quote(table_name)} () VALUES ()"
            _, lastrowid = self._run(query)
            return lastrowid or 0
        columns = ", ".join(self.quote(c) for c in values)
        placeholders = ", ".join([self.placeholder] * len(values))
        query = f"INSERT INTO {self.quote(table_name)} ({columns}) VALUES ({placeholders})"
        _, lastrowid = self._run(query, list(values.values()))
        return lastrowid or 0

    def update(self, table_name: str, values: Mapping[str, Any], where: Mapping[str, Any]) -> int:
        """Update matching rows. Returns the number of rows matched."""
        set_clause = ", ".join(f"{self.quote(c)} = {self.placeholder}" for c in values)
        clause, params = self._where(where)
        query = f"UPDATE {self.quote(table_name)} SET {set_clause}{clause}"
        rowcount, _ = self._run(query, list(values.values()) + params)
        return rowcount

    def delete(self, table_name: str, where: Mapping[str, Any]) -> int:
        clause, params = self._where(where)
        query = f"DELETE FROM {self.quote(table_name)}{clause}"
        rowcount, _ = self._run(query, params)
        return rowcount

    def execute(self, query: str, params: Optional[Sequence[Any]] = None) -> int:
        # Execute a raw SQL statement, return rowcount
        rowcount, _ = self._run(query, params or ())
        return rowcount

    def fetch_all(self, query: str, params: Optional[Sequence[Any]] = None) -> List[Dict[str, Any]]:
        # Execute SELECT and return rows as dicts
        return self._query(query, params or ())

    def fetch_one(self, query: str, params: Optional[Sequence[Any]] = None) -> Optional[Dict[str, Any]]:
        rows = self._query(query, params or ())
        return rows[0] if rows else None

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
