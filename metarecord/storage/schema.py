# ==============================================
# Schema (Table Definitions)
# ==============================================
#
# PURPOSE:
#   Dialect-neutral description of tables the library creates:
#   the meta table every host entity gets, and host tables for
#   records that want the library to create them.
#
# WHY THIS FILE EXISTS:
#   MySQL and SQLite spell column types differently
#   (AUTO_INCREMENT vs AUTOINCREMENT, LONGTEXT vs TEXT).
#   Keeping one logical definition here lets both clients render
#   the same table, and keeps the meta schema in one place.
#
# ENUMS:
# ------
# - ColumnType(Enum): BIGPK, BIGINT, INTEGER, STRING, TEXT, FLOAT, BOOLEAN
#
# CLASSES:
# --------
# - Column (dataclass)
#     name, type, nullable, default
#
# - UniqueIndex (dataclass)
#     name, columns
#
# FUNCTIONS:
# ----------
# - meta_table_columns() -> list[Column]
# - meta_unique_index(table_name) -> UniqueIndex
# - render_column(column, dialect, quote) -> str
#
# META TABLE LAYOUT:
# ------------------
#   id          BIGINT auto increment primary key
#   record_id   BIGINT NOT NULL DEFAULT 0   (host primary key, no FK)
#   meta_key    VARCHAR(255) DEFAULT NULL
#   meta_value  LONGTEXT / TEXT
#   UNIQUE (record_id, meta_key)
#
# ==============================================

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional


class ColumnType(Enum):
    """Logical column types understood by both clients."""
    BIGPK = "bigpk"
    BIGINT = "bigint"
    INTEGER = "integer"
    STRING = "string"
    TEXT = "text"
    FLOAT = "float"
    BOOLEAN = "boolean"


MYSQL_TYPES = {
    ColumnType.BIGPK: "BIGINT NOT NULL AUTO_INCREMENT PRIMARY KEY",
    ColumnType.BIGINT: "BIGINT",
    ColumnType.INTEGER: "INT",
    ColumnType.STRING: "VARCHAR(255)",
    ColumnType.TEXT: "LONGTEXT",
    ColumnType.FLOAT: "DOUBLE",
    ColumnType.BOOLEAN: "TINYINT(1)",
}

SQLITE_TYPES = {
    ColumnType.BIGPK: "INTEGER PRIMARY KEY AUTOINCREMENT",
    ColumnType.BIGINT: "INTEGER",
    ColumnType.INTEGER: "INTEGER",
    ColumnType.STRING: "VARCHAR(255)",
    ColumnType.TEXT: "TEXT",
    ColumnType.FLOAT: "REAL",
    ColumnType.BOOLEAN: "INTEGER",
}

DIALECT_TYPES = {
    "mysql": MYSQL_TYPES,
    "sqlite": SQLITE_TYPES,
}


@dataclass
class Column:
    """A single column of a table definition."""
    name: str
    type: ColumnType
    nullable: bool = True
    default: Optional[Any] = None


@dataclass
class UniqueIndex:
    """A named unique constraint over one or more columns."""
    name: str
    columns: List[str] = field(default_factory=list)


def meta_table_columns() -> List[Column]:
    """Columns of a meta table, in creation order."""
    return [
        Column("id", ColumnType.BIGPK, nullable=False),
        Column("record_id", ColumnType.BIGINT, nullable=False, default=0),
        Column("meta_key", ColumnType.STRING, nullable=True),
        Column("meta_value", ColumnType.TEXT, nullable=True),
    ]


def meta_unique_index(table_name: str) -> UniqueIndex:
    # SQLite index names are global to the schema, so include the table
    return UniqueIndex(f"uq_{table_name}_record_key", ["record_id", "meta_key"])


def _render_default(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float)):
        return f"'{value}'"
    escaped = str(value).replace("'", "''")
    return f"'{escaped}'"


def render_column(column: Column, dialect: str, quote: Callable[[str], str]) -> str:
    """
    Render one column definition for CREATE TABLE.

    Args:
        column: Column to render
        dialect: "mysql" or "sqlite"
        quote: Identifier quoting function of the target client

    Returns:
        SQL fragment such as "`record_id` BIGINT NOT NULL DEFAULT '0'"
    """
    types = DIALECT_TYPES[dialect]
    parts = [quote(column.name), types[column.type]]
    if column.type is not ColumnType.BIGPK:
        if not column.nullable:
            parts.append("NOT NULL")
        if column.default is not None:
            parts.append(f"DEFAULT {_render_default(column.default)}")
        elif column.nullable and column.type is not ColumnType.TEXT:
            parts.append("DEFAULT NULL")
    return " ".join(parts)
