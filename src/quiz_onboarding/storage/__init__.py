"""
Persistence for quiz progress.
"""

from .base import KeyValueStore, MemoryKeyValueStore
from .file import JsonFileStore
from .progress import ProgressStore, ProgressCheckpoint, INDEX_KEY, ANSWERS_KEY

__all__ = [
    "KeyValueStore",
    "MemoryKeyValueStore",
    "JsonFileStore",
    "ProgressStore",
    "ProgressCheckpoint",
    "INDEX_KEY",
    "ANSWERS_KEY",
]
