# ==============================================
# MetaRecord
# ==============================================
#
# PURPOSE:
#   A Record that carries meta attributes next to its columns.
#   Column names behave exactly as on Record; any other name is
#   a meta attribute stored in <table>_meta via MetaStore.
#
# ACCESS:
# -------
#   post.get_meta("color")            → str | None
#   post.set_meta("color", "red")     → bool (written) | None (queued)
#   post.meta["color"] = "red"        → same as set_meta
#   post.meta.color                   → same as get_meta
#   post.color = "red"                → same as set_meta
#   post.color                        → same as get_meta
#   post.get_attribute("color")       → column if known, else meta
#
#   Names starting with "_", class attributes and the record's own
#   state (client, meta_store, meta_cache, pending_meta,
#   last_meta_flush) are ordinary Python attributes.
#
# OPTIONS (class attributes, override MetaConfig when not None):
# --------------------------------------------------------------
#   - auto_load_meta_data   → bulk-load meta after find (default True)
#   - auto_save_meta_fields → write immediately on set for saved
#                             records instead of queueing (default False)
#
# LIFECYCLE:
# ----------
#   after_find()  → load_meta_data() when auto-load is on
#   after_save()  → flush the pending queue; per-key results are
#                   kept in `last_meta_flush`
#
# ==============================================

from dataclasses import replace
from typing import Any, Dict, List, Optional

from metarecord.config import MetaConfig
from metarecord.models.record import Record
from metarecord.persistence.meta_store import MetaCache, MetaStore, PendingWriteQueue
from metarecord.persistence.serialization import MetaValue


class MetaAttributes:
    """Attribute- and item-style view of one record's meta data."""

    __slots__ = ("_record",)

    def __init__(self, record: "MetaRecord"):
        object.__setattr__(self, "_record", record)

    def __getitem__(self, key: str) -> Any:
        return self._record.get_meta(key)

    def __setitem__(self, key: str, value: MetaValue) -> None:
        self._record.set_meta(key, value)

    def __delitem__(self, key: str) -> None:
        self._record.delete_meta(key)

    def __contains__(self, key: str) -> bool:
        return self._record.get_meta(key) is not None

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self[name]

    def __setattr__(self, name: str, value: MetaValue) -> None:
        self[name] = value

    def get(self, key: str, default: Any = None) -> Any:
        value = self._record.get_meta(key)
        return default if value is None else value

    def keys(self) -> List[str]:
        return self._record.meta_keys()


class MetaRecord(Record):
    auto_load_meta_data: Optional[bool] = None
    auto_save_meta_fields: Optional[bool] = None

    def __init__(self, client, meta_config: Optional[MetaConfig] = None, **attributes):
        config = replace(meta_config) if meta_config is not None else MetaConfig()
        if self.auto_load_meta_data is not None:
            config.auto_load_meta_data = self.auto_load_meta_data
        if self.auto_save_meta_fields is not None:
            config.auto_save_meta_fields = self.auto_save_meta_fields

        self.meta_store = MetaStore(client, config)
        self.meta_cache = MetaCache()
        self.pending_meta = PendingWriteQueue()
        self.last_meta_flush: Dict[str, bool] = {}
        super().__init__(client, **attributes)

    @property
    def meta(self) -> MetaAttributes:
        return MetaAttributes(self)

    # ---- generic attribute dispatch ----

    # Instance state that must never be treated as a meta key
    _INTERNAL_ATTRIBUTES = frozenset(
        ("client", "meta_store", "meta_cache", "pending_meta", "last_meta_flush")
    )

    def _is_meta_name(self, name: str) -> bool:
        return not (
            name.startswith("_")
            or name in self._INTERNAL_ATTRIBUTES
            or self.has_attribute(name)
            or hasattr(type(self), name)
        )

    def __getattr__(self, name: str) -> Any:
        if self._is_meta_name(name):
            return self.get_meta(name)
        return super().__getattr__(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if self._is_meta_name(name):
            self.set_meta(name, value)
        else:
            super().__setattr__(name, value)

    def get_attribute(self, name: str) -> Any:
        if self.has_attribute(name):
            return super().get_attribute(name)
        return self.get_meta(name)

    def set_attribute(self, name: str, value: Any) -> None:
        if self.has_attribute(name):
            super().set_attribute(name, value)
        else:
            self.set_meta(name, value)

    # ---- meta access ----

    def get_meta(self, key: str) -> Any:
        return self.meta_store.read_meta(self, key)

    def set_meta(self, key: str, value: MetaValue) -> Optional[bool]:
        return self.meta_store.write_meta(self, key, value)

    def delete_meta(self, key: str) -> bool:
        self.pending_meta.discard(key)
        return self.meta_store.delete_meta_attribute(self, key)

    def meta_table_name(self) -> str:
        return self.meta_store.resolve_meta_table_name(self)

    def load_meta_data(self) -> List[Dict[str, Any]]:
        return self.meta_store.load_all_meta_data(self)

    def meta_keys(self) -> List[str]:
        """Keys known locally: bulk-loaded, written, or queued."""
        keys = self.meta_cache.keys()
        keys.extend(k for k in self.pending_meta if k not in keys)
        return keys

    def flush_meta(self) -> Dict[str, bool]:
        """Write the pending queue now. The record must already be saved."""
        self.last_meta_flush = self.meta_store.on_record_persisted(self)
        return self.last_meta_flush

    def discard_pending_meta(self) -> None:
        self.pending_meta.clear()

    # ---- hooks ----

    def after_find(self) -> None:
        if self.meta_store.config.auto_load_meta_data:
            self.load_meta_data()
        super().after_find()

    def after_save(self, insert: bool, changed_attributes: Dict[str, Any]) -> None:
        self.flush_meta()
        super().after_save(insert, changed_attributes)
