# ==============================================
# metarecord
# ==============================================
#
# Schema-less "meta" key/value attributes for relational records.
#
# Package Structure:
#
# metarecord/
# ├── storage/       # MySQL / SQLite data-access clients, table schemas
# ├── persistence/   # MetaStore: meta tables, cache, pending writes
# ├── models/        # Record and MetaRecord host classes
# ├── config.py      # Configuration management
# ├── errors.py      # Exception types
# └── cli.py         # Command line entry point
#
# ==============================================

from metarecord.config import AppConfig, MetaConfig, get_config, create_client
from metarecord.errors import (
    MetaRecordError,
    DataAccessError,
    DuplicateKeyError,
    TableExistsError,
    RecordNotSavedError,
)
from metarecord.models import Record, MetaRecord
from metarecord.persistence import MetaStore

__version__ = "0.1.0"

__all__ = [
    "AppConfig",
    "MetaConfig",
    "get_config",
    "create_client",
    "MetaRecordError",
    "DataAccessError",
    "DuplicateKeyError",
    "TableExistsError",
    "RecordNotSavedError",
    "Record",
    "MetaRecord",
    "MetaStore",
]
