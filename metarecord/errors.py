# ==============================================
# Errors
# ==============================================
#
# PURPOSE:
#   Exception types raised by the storage clients and the
#   record layer. Driver-specific errors (pymysql, sqlite3)
#   are translated into these where callers need to react
#   to them (duplicate key, duplicate table). Everything
#   else the drivers raise propagates unchanged.
#
# HIERARCHY:
# ----------
#   MetaRecordError
#   ├── DataAccessError
#   │   ├── DuplicateKeyError   → unique constraint violated
#   │   └── TableExistsError    → CREATE TABLE on an existing table
#   └── RecordNotSavedError     → operation needs a primary key
#
# ==============================================


class MetaRecordError(Exception):
    """Base class for all errors raised by metarecord."""


class DataAccessError(MetaRecordError):
    """The data-access layer could not perform the requested operation."""


class DuplicateKeyError(DataAccessError):
    """An insert violated a unique constraint."""


class TableExistsError(DataAccessError):
    """A table could not be created because it already exists."""


class RecordNotSavedError(MetaRecordError):
    """The record has no primary key value yet."""
