# ==============================================
# MetaStore
# ==============================================
#
# PURPOSE:
#   Give every host record an open-ended set of named "meta"
#   attributes, stored as key/value rows in a side table
#   (<host_table>_meta) instead of columns on the host table.
#
# WHY THIS CLASS EXISTS:
#   Host tables have a fixed schema. Meta attributes let a record
#   carry extra fields without an ALTER TABLE. The side table is
#   created lazily the first time any record of that type writes
#   a meta attribute; until then every meta key reads as unset.
#
# PER-RECORD STATE (lives on the record, not here):
# -------------------------------------------------
#   - MetaCache          → last known values, filled by bulk load
#                          or by successful writes
#   - PendingWriteQueue  → writes waiting for the record to be saved
#
#   A meta row needs the host primary key, so writes on a record
#   that was never inserted are queued and flushed after save.
#
# CLASS: MetaStore
# ----------------
#   Stateless apart from the injected client and config.
#
#   Constructor:
#   ------------
#   - __init__(client, config: MetaConfig | None = None)
#
#   Methods:
#   --------
#   - resolve_meta_table_name(record) -> str
#   - ensure_meta_table(record, auto_create=False) -> bool
#   - load_all_meta_data(record) -> list[dict]
#   - get_meta_attribute(record, key) -> str | None
#   - set_meta_attribute(record, key, value) -> bool
#   - delete_meta_attribute(record, key) -> bool
#   - enqueue_meta_update(record, key, value) -> None
#   - on_record_persisted(record) -> dict[str, bool]
#   - cached(record, key) -> value | None
#   - read_meta(record, key) / write_meta(record, key, value)
#       Dispatch used by the record's generic attribute access.
#
# ==============================================

from typing import Any, Dict, Iterator, List, Optional, Protocol, Tuple

from metarecord.config import MetaConfig
from metarecord.errors import DuplicateKeyError, RecordNotSavedError, TableExistsError
from metarecord.persistence.naming import meta_table_name
from metarecord.persistence.serialization import MetaValue, encode_meta_value
from metarecord.storage.schema import meta_table_columns, meta_unique_index


class MetaCache:
    """Process-local view of a record's meta data."""

    def __init__(self):
        self.rows: List[Dict[str, Any]] = []
        self.values: Dict[str, Any] = {}
        self.loaded = False

    def load(self, rows: List[Dict[str, Any]]) -> None:
        """Replace the cache with the rows of a bulk load."""
        self.rows = list(rows)
        self.values = {row["meta_key"]: row["meta_value"] for row in self.rows}
        self.loaded = True

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.values[key] = value

    def discard(self, key: str) -> None:
        self.values.pop(key, None)
        self.rows = [row for row in self.rows if row.get("meta_key") != key]

    def keys(self) -> List[str]:
        return list(self.values)

    def clear(self) -> None:
        self.rows = []
        self.values = {}
        self.loaded = False

    def __contains__(self, key: str) -> bool:
        return key in self.values


class PendingWriteQueue:
    """
    Meta writes waiting for the host record to be saved.

    Re-enqueuing a key replaces its value but keeps the position
    of the first enqueue.
    """

    def __init__(self):
        self._items: Dict[str, Any] = {}

    def enqueue(self, key: str, value: Any) -> None:
        self._items[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self._items.get(key, default)

    def items(self) -> List[Tuple[str, Any]]:
        return list(self._items.items())

    def discard(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items = {}

    def __contains__(self, key: str) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._items))


class MetaCapable(Protocol):
    """What MetaStore needs from a host record."""
    meta_cache: MetaCache
    pending_meta: PendingWriteQueue

    def table_name(self) -> str: ...

    def primary_key_value(self) -> Any: ...

    def is_new_record(self) -> bool: ...


class MetaStore:
    """
    Get/set access to a record's meta attributes.

    The data-access client is injected; it must provide
    table_exists, create_table, select, select_one, insert,
    update and delete (see metarecord.storage.base.SQLClient).
    """

    def __init__(self, client, config: Optional[MetaConfig] = None):
        self.client = client
        self.config = config or MetaConfig()

    # ---- table management ----

    def resolve_meta_table_name(self, record: MetaCapable) -> str:
        """
        Meta table name for the record's host table. No I/O.

        A non-empty config.table_prefix wins over the client's prefix.
        """
        return meta_table_name(
            record.table_name(),
            table_prefix=self.config.table_prefix or getattr(self.client, "table_prefix", ""),
            suffix=self.config.meta_table_suffix
        )

    def ensure_meta_table(self, record: MetaCapable, auto_create: bool = False) -> bool:
        """
        Check that the meta table exists, creating it if asked to.

        Args:
            record: Any record of the host type
            auto_create: Create the table when it is missing

        Returns:
            True if the table exists when the call returns
        """
        table = self.resolve_meta_table_name(record)
        if self.client.table_exists(table):
            return True
        if not auto_create:
            return False
        return self._create_meta_table(table)

    def _create_meta_table(self, table: str) -> bool:
        try:
            self.client.create_table(
                table,
                meta_table_columns(),
                unique=meta_unique_index(table),
                if_not_exists=True
            )
        except TableExistsError:
            # Another process created it between our check and our CREATE
            print(f"Meta table {table} was created concurrently")
            return self.client.table_exists(table)
        print(f"Created meta table {table}")
        return True

    # ---- reads ----

    def load_all_meta_data(self, record: MetaCapable) -> List[Dict[str, Any]]:
        """
        Read every meta row of the record in one query and cache it.

        Returns:
            Full rows (id, record_id, meta_key, meta_value)
        """
        record_id = record.primary_key_value()
        if record_id is None or not self.ensure_meta_table(record):
            record.meta_cache.load([])
            return []

        rows = self.client.select(
            self.resolve_meta_table_name(record),
            {"record_id": record_id}
        )
        record.meta_cache.load(rows)
        return rows

    def get_meta_attribute(self, record: MetaCapable, key: str) -> Optional[str]:
        """
        Read one meta value straight from storage.

        Returns:
            The stored text, or None when the key (or the table) is absent
        """
        if not self.ensure_meta_table(record):
            return None
        record_id = record.primary_key_value()
        if record_id is None:
            return None

        row = self.client.select_one(
            self.resolve_meta_table_name(record),
            {"record_id": record_id, "meta_key": key},
            columns=["meta_value"]
        )
        return row["meta_value"] if row is not None else None

    def cached(self, record: MetaCapable, key: str) -> Any:
        """Cache-only read. No I/O."""
        return record.meta_cache.get(key)

    # ---- writes ----

    def set_meta_attribute(self, record: MetaCapable, key: str, value: MetaValue) -> bool:
        """
        Insert or update one meta value.

        Args:
            record: Saved record (must have a primary key)
            key: Meta key
            value: Value to store; non-scalars are stored as JSON text

        Returns:
            True if a row was written
        """
        _check_key(key)
        record_id = record.primary_key_value()
        if record_id is None:
            raise RecordNotSavedError(
                f"Cannot write meta '{key}' for an unsaved {record.table_name()} record"
            )

        text = encode_meta_value(value)
        self.ensure_meta_table(record, auto_create=True)
        table = self.resolve_meta_table_name(record)
        where = {"record_id": record_id, "meta_key": key}

        existing = self.client.select_one(table, where, columns=["id"])
        if existing is None:
            try:
                self.client.insert(table, {
                    "record_id": record_id,
                    "meta_key": key,
                    "meta_value": text
                })
                written = True
            except DuplicateKeyError:
                # Another writer inserted this key after our lookup
                written = self.client.update(table, {"meta_value": text}, where) > 0
        else:
            written = self.client.update(table, {"meta_value": text}, where) > 0

        if written:
            record.meta_cache.set(key, value)
        return written

    def delete_meta_attribute(self, record: MetaCapable, key: str) -> bool:
        """Remove one meta value. Returns True if a row was deleted."""
        _check_key(key)
        record.meta_cache.discard(key)
        record_id = record.primary_key_value()
        if record_id is None or not self.ensure_meta_table(record):
            return False
        deleted = self.client.delete(
            self.resolve_meta_table_name(record),
            {"record_id": record_id, "meta_key": key}
        )
        return deleted > 0

    def enqueue_meta_update(self, record: MetaCapable, key: str, value: MetaValue) -> None:
        _check_key(key)
        record.pending_meta.enqueue(key, value)

    def on_record_persisted(self, record: MetaCapable) -> Dict[str, bool]:
        """
        Flush the record's pending meta writes. Call after the host
        insert/update has been committed.

        Every queued key is attempted even if an earlier one fails.
        The queue is emptied in all cases.

        Returns:
            Map of meta key -> whether its write succeeded
        """
        results: Dict[str, bool] = {}
        pending = record.pending_meta.items()
        if not pending:
            return results

        try:
            for key, value in pending:
                try:
                    results[key] = self.set_meta_attribute(record, key, value)
                except Exception as e:
                    # Log error but continue with other keys
                    print(f"✗ Meta write failed for {key!r}: {str(e)[:100]}")
                    results[key] = False
                    continue
                if not results[key]:
                    print(f"✗ Meta write for {key!r} affected no rows")
        finally:
            record.pending_meta.clear()
        return results

    # ---- attribute dispatch ----

    def read_meta(self, record: MetaCapable, key: str) -> Any:
        """
        Value seen through the record's attribute access.

        Queued values win, then storage, then the bulk-loaded cache.
        """
        if key in record.pending_meta:
            return record.pending_meta.get(key)
        if record.is_new_record():
            return record.meta_cache.get(key)
        value = self.get_meta_attribute(record, key)
        if value is None:
            value = record.meta_cache.get(key)
        return value

    def write_meta(self, record: MetaCapable, key: str, value: MetaValue) -> Optional[bool]:
        """
        Write through the record's attribute access.

        Returns:
            The write result when written immediately, None when queued
        """
        if self.config.auto_save_meta_fields and not record.is_new_record():
            return self.set_meta_attribute(record, key, value)
        self.enqueue_meta_update(record, key, value)
        return None


def _check_key(key: str) -> None:
    if not isinstance(key, str) or not key:
        raise ValueError(f"meta key must be a non-empty string, got {key!r}")
