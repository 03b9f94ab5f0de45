"""
Persistent state records for launch pools.
"""

from .records import CreatorRecord, FeePositionOwnerRecord, RecordStore, store_from_dict, store_to_dict

__all__ = [
    "CreatorRecord",
    "FeePositionOwnerRecord",
    "RecordStore",
    "store_from_dict",
    "store_to_dict",
]
