# ==============================================
# Configuration Management
# ==============================================
#
# PURPOSE:
#   Load and validate all configuration from environment
#   variables / .env file. Provides typed config objects
#   to all other modules.
#
# CLASSES:
# --------
# - MySQLConfig (dataclass)
#     host: str          (default "localhost")
#     port: int          (default 3306)
#     user: str          (default "root")
#     password: str      (default "root")
#     database: str      (default "metarecord")
#
# - SQLiteConfig (dataclass)
#     path: str          (default "metarecord.db", ":memory:" allowed)
#
# - MetaConfig (dataclass)
#     auto_load_meta_data: bool   (default True)
#     auto_save_meta_fields: bool (default False)
#     meta_table_suffix: str      (default "_meta")
#     table_prefix: str           (default "", overrides the client prefix
#                                  for meta table names when set)
#
# - AppConfig (dataclass)
#     backend: str                (default "mysql", or "sqlite")
#     mysql: MySQLConfig
#     sqlite: SQLiteConfig
#     meta: MetaConfig
#
# FUNCTIONS:
# ----------
# - get_config() -> AppConfig
#     Load .env using python-dotenv, construct AppConfig.
#     Returns the same singleton on repeated calls.
#
# - reset_config() -> None
#     Forget the singleton (tests, reloading .env).
#
# - create_client(config: AppConfig | None = None)
#     Build the data-access client for the configured backend.
#     The client is returned unconnected.
#
# USAGE:
# ------
#   from metarecord.config import get_config, create_client
#   config = get_config()
#   with create_client(config) as db:
#       ...
#
# ==============================================

import os
from dataclasses import dataclass, field
from typing import Optional
from pathlib import Path

from dotenv import load_dotenv


_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class MySQLConfig:
    """MySQL database configuration."""
    host: str = "localhost"
    port: int = 3306
    user: str = "root"
    password: str = "root"
    database: str = "metarecord"


@dataclass
class SQLiteConfig:
    """SQLite database configuration."""
    path: str = "metarecord.db"


@dataclass
class MetaConfig:
    """Behaviour of the meta attribute extension."""
    auto_load_meta_data: bool = True
    auto_save_meta_fields: bool = False
    meta_table_suffix: str = "_meta"
    table_prefix: str = ""


@dataclass
class AppConfig:
    """Main application configuration."""
    mysql: MySQLConfig = field(default_factory=MySQLConfig)
    sqlite: SQLiteConfig = field(default_factory=SQLiteConfig)
    meta: MetaConfig = field(default_factory=MetaConfig)
    backend: str = "mysql"


# Singleton instance
_config_instance: Optional[AppConfig] = None


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in _TRUE_VALUES


def get_config() -> AppConfig:
    """
    Load configuration from environment variables / .env file.
    Returns the same singleton instance on repeated calls.

    Returns:
        AppConfig: Application configuration
    """
    global _config_instance

    if _config_instance is not None:
        return _config_instance

    # Load .env file from project root
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    mysql_config = MySQLConfig(
        host=os.getenv("MYSQL_HOST", "localhost"),
        port=int(os.getenv("MYSQL_PORT", "3306")),
        user=os.getenv("MYSQL_USER", "root"),
        password=os.getenv("MYSQL_PASSWORD", "root"),
        database=os.getenv("MYSQL_DATABASE", "metarecord")
    )

    sqlite_config = SQLiteConfig(
        path=os.getenv("SQLITE_PATH", "metarecord.db")
    )

    meta_config = MetaConfig(
        auto_load_meta_data=_env_flag("META_AUTO_LOAD", True),
        auto_save_meta_fields=_env_flag("META_AUTO_SAVE", False),
        meta_table_suffix=os.getenv("META_TABLE_SUFFIX", "_meta"),
        table_prefix=os.getenv("TABLE_PREFIX", "")
    )

    backend = os.getenv("METARECORD_BACKEND", "mysql").strip().lower()
    if backend not in ("mysql", "sqlite"):
        raise ValueError(f"Unsupported METARECORD_BACKEND: {backend!r}")

    _config_instance = AppConfig(
        mysql=mysql_config,
        sqlite=sqlite_config,
        meta=meta_config,
        backend=backend
    )

    return _config_instance


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() reloads it."""
    global _config_instance
    _config_instance = None


def create_client(config: Optional[AppConfig] = None):
    """
    Build the data-access client for the configured backend.

    Args:
        config: Configuration to use (defaults to get_config())

    Returns:
        MySQLClient or SQLiteClient, not yet connected
    """
    # Imported here so that config has no import-time dependency on drivers
    from metarecord.storage import MySQLClient, SQLiteClient

    config = config or get_config()
    if config.backend == "sqlite":
        return SQLiteClient(
            path=config.sqlite.path,
            table_prefix=config.meta.table_prefix
        )
    return MySQLClient(
        host=config.mysql.host,
        port=config.mysql.port,
        user=config.mysql.user,
        password=config.mysql.password,
        database=config.mysql.database,
        table_prefix=config.meta.table_prefix
    )
