"""Record store implementations."""

from tasklink.persistence.json_store import JsonRecordStore
from tasklink.persistence.memory import MemoryRecordStore

__all__ = ["JsonRecordStore", "MemoryRecordStore"]
