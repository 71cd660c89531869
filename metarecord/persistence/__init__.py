# ==============================================
# PERSISTENCE (Meta attributes)
# ==============================================
#
# This package stores arbitrary key/value attributes for host
# records in a per-entity side table.
#
# Modules:
# --------
# - meta_store.py     → MetaStore, MetaCache, PendingWriteQueue
# - naming.py         → Table name templating and meta table names
# - serialization.py  → Value → text encoding for meta_value
#
# ==============================================

from .meta_store import MetaStore, MetaCache, PendingWriteQueue, MetaCapable
from .naming import resolve_table_name, meta_table_name
from .serialization import MetaValue, encode_meta_value, decode_json_value

__all__ = [
    "MetaStore",
    "MetaCache",
    "PendingWriteQueue",
    "MetaCapable",
    "resolve_table_name",
    "meta_table_name",
    "MetaValue",
    "encode_meta_value",
    "decode_json_value"
]
