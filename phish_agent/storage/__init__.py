"""Phish Agent - Storage package."""

from .kv import JSONFileStore, KeyValueStore, MemoryStore
from .results import ResultStore

__all__ = ["JSONFileStore", "KeyValueStore", "MemoryStore", "ResultStore"]
