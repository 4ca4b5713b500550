"""
Backend interface for classification records.

A backend holds fingerprint -> is_mutant records and the two counters
derived from them. StatsStore owns the locking; backends only promise that
insert() is all-or-nothing and that failures surface as
StorageUnavailableError.

Author: Kevin R. Roy
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple


class StatsBackend(ABC):
    """Abstract store of write-once classification records."""

    @abstractmethod
    def fetch(self, fingerprint: str) -> Optional[bool]:
        """Return the stored classification, or None if absent."""
        pass

    @abstractmethod
    def insert(self, fingerprint: str, is_mutant: bool) -> bool:
        """
        Record a classification if the fingerprint is absent.

        Returns:
            The value stored for the fingerprint after the call (an
            existing record always wins)
        """
        pass

    @abstractmethod
    def counts(self) -> Tuple[int, int]:
        """Return (mutant count, human count)."""
        pass

    @abstractmethod
    def clear(self):
        """Drop every record."""
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass

    def close(self):
        """Release resources."""
        pass


class MemoryStatsBackend(StatsBackend):
    """
    In-memory backend.

    Records live for the lifetime of the process.
    """

    def __init__(self):
        self._records: Dict[str, bool] = {}
        self._mutant = 0
        self._human = 0

    def fetch(self, fingerprint: str) -> Optional[bool]:
        return self._records.get(fingerprint)

    def insert(self, fingerprint: str, is_mutant: bool) -> bool:
        existing = self._records.get(fingerprint)
        if existing is not None:
            return existing

        self._records[fingerprint] = is_mutant
        if is_mutant:
            self._mutant += 1
        else:
            self._human += 1
        return is_mutant

    def counts(self) -> Tuple[int, int]:
        return self._mutant, self._human

    def clear(self):
        self._records.clear()
        self._mutant = 0
        self._human = 0

    def __len__(self) -> int:
        return len(self._records)
