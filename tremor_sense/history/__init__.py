"""
Session history

This module contains the bounded store of past session records and its
persistence backends.
"""

from .store import SessionHistoryStore, JsonFilePersistence, MemoryPersistence

__all__ = ['SessionHistoryStore', 'JsonFilePersistence', 'MemoryPersistence']
