"""
Session history persistence

This module keeps the bounded list of condensed past sessions used for
multi-session trends. Storage is injected: the store loads once at
construction and saves after every append.
"""

import copy
import json
import logging
import os
from typing import Any, Dict, List, Sequence

from ..core.config import MAX_HISTORY_ENTRIES
from ..core.data_types import SessionHistoryEntry
from ..core.errors import InvalidInput

logger = logging.getLogger(__name__)


class MemoryPersistence:
    """Keeps history in memory only"""

    def __init__(self, entries: Sequence[Any] = ()):
        self.entries = copy.deepcopy(list(entries))

    def load(self) -> List[Any]:
        return copy.deepcopy(self.entries)

    def save(self, entries: List[Dict[str, Any]]):
        self.entries = copy.deepcopy(list(entries))


class JsonFilePersistence:
    """Stores history as a JSON list in a file"""

    def __init__(self, path: str):
        self.path = path

    def load(self) -> List[Any]:
        """
        Load history records; a missing or unreadable file is an empty history

        A file that is not a JSON list is renamed to <path>.corrupt so the
        next save does not overwrite it.
        """
        if not os.path.exists(self.path):
            logger.info(f"No session history at {self.path}")
            return []
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except OSError as e:
            logger.error(f"Failed to load session history: {e}")
            return []
        except ValueError as e:
            logger.error(f"Failed to load session history: {e}")
            self._move_aside()
            return []
        if not isinstance(data, list):
            logger.error(f"Session history in {self.path} is not a list, ignoring")
            self._move_aside()
            return []
        logger.info(f"Loaded session history: {self.path} ({len(data)} entries)")
        return data

    def save(self, entries: List[Dict[str, Any]]):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = self.path + ".tmp"
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(entries, f, indent=2)
        os.replace(tmp_path, self.path)
        logger.debug(f"Saved session history: {self.path}")

    def _move_aside(self):
        corrupt_path = self.path + ".corrupt"
        os.replace(self.path, corrupt_path)
        logger.warning(f"Unreadable session history moved to {corrupt_path}")


class SessionHistoryStore:
    """
    Bounded FIFO of past session records

    Holds at most max_entries records; appending beyond that evicts the
    oldest first. Entries are kept in chronological (append) order.
    """

    def __init__(self, persistence=None, max_entries: int = MAX_HISTORY_ENTRIES):
        if max_entries < 1:
            raise InvalidInput(f"max_entries must be at least 1, got {max_entries}")
        self.persistence = persistence if persistence is not None else MemoryPersistence()
        self.max_entries = max_entries
        self._entries: List[SessionHistoryEntry] = []

        for record in self.persistence.load():
            try:
                self._entries.append(SessionHistoryEntry.from_dict(record))
            except (InvalidInput, TypeError, AttributeError) as e:
                logger.warning(f"Skipping invalid history record: {e}")
        self._evict()

    def __len__(self) -> int:
        return len(self._entries)

    def entries(self) -> List[SessionHistoryEntry]:
        return list(self._entries)

    def append(self, entry: SessionHistoryEntry):
        """Add a session record, evict the oldest beyond capacity and persist"""
        updated = (self._entries + [entry])[-self.max_entries:]
        self.persistence.save([e.to_dict() for e in updated])
        self._entries = updated
        logger.info(f"Session history updated: {len(self._entries)}/{self.max_entries} entries")

    def recent_suffix(self, k: int) -> List[SessionHistoryEntry]:
        """The last k entries (fewer if not available), oldest first"""
        if k <= 0:
            return []
        return self._entries[-k:]

    def _evict(self):
        overflow = len(self._entries) - self.max_entries
        if overflow > 0:
            del self._entries[:overflow]
