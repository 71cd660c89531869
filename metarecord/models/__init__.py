# ==============================================
# MODELS (Host records)
# ==============================================
#
# Modules:
# --------
# - record.py       → Record: minimal active record over a data-access client
# - meta_record.py  → MetaRecord: Record + meta attributes
#
# ==============================================

from .record import Record
from .meta_record import MetaRecord, MetaAttributes

__all__ = [
    "Record",
    "MetaRecord",
    "MetaAttributes"
]
