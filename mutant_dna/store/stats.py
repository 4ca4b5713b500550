"""
Deduplicating statistics store.

Each fingerprint is classified at most once. The first caller for a
fingerprint computes the classification; concurrent callers for the same
fingerprint wait for that result instead of recomputing. Callers working on
different fingerprints only share the short commit section, never the scan.

Counts are read under the same lock that commits records, so a snapshot
never shows a count without its record.

Author: Kevin R. Roy
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from ..errors import StorageUnavailableError
from .base import MemoryStatsBackend, StatsBackend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatsSnapshot:
    """Point-in-time aggregate over all classification records."""
    count_mutant: int
    count_human: int
    ratio: float

    @classmethod
    def from_counts(cls, count_mutant: int, count_human: int) -> 'StatsSnapshot':
        """Build a snapshot, with ratio 0.0 when nothing has been recorded."""
        total = count_mutant + count_human
        ratio = count_mutant / total if total > 0 else 0.0
        return cls(count_mutant=count_mutant, count_human=count_human, ratio=ratio)

    @property
    def total(self) -> int:
        return self.count_mutant + self.count_human

    def to_dict(self) -> Dict[str, Any]:
        return {
            'count_mutant_dna': self.count_mutant,
            'count_human_dna': self.count_human,
            'ratio': self.ratio,
        }


class _Pending:
    """Result slot shared by every caller waiting on one fingerprint."""

    def __init__(self):
        self.done = threading.Event()
        self.value: Optional[bool] = None
        self.error: Optional[BaseException] = None


class StatsStore:
    """Write-once classification records plus derived counts."""

    def __init__(self, backend: Optional[StatsBackend] = None):
        self.backend = backend if backend is not None else MemoryStatsBackend()
        self._commit_lock = threading.Lock()
        self._inflight_lock = threading.Lock()
        self._inflight: Dict[str, _Pending] = {}

    def record_or_get(self, fingerprint: str, compute: Callable[[], bool]) -> bool:
        """
        Return the classification for a fingerprint, computing it at most once.

        Args:
            fingerprint: Dedup key of the grid
            compute: Called with no arguments to classify the grid when no
                record exists yet

        Returns:
            The stored classification

        Raises:
            StorageUnavailableError: If the backend cannot read or write.
                Nothing is recorded in that case.
        """
        with self._inflight_lock:
            pending = self._inflight.get(fingerprint)
            is_owner = pending is None
            if is_owner:
                pending = _Pending()
                self._inflight[fingerprint] = pending

        if not is_owner:
            pending.done.wait()
            if pending.error is not None:
                raise pending.error
            return pending.value

        try:
            pending.value = self._resolve(fingerprint, compute)
            return pending.value
        except BaseException as e:
            pending.error = e
            raise
        finally:
            with self._inflight_lock:
                del self._inflight[fingerprint]
            pending.done.set()

    def _resolve(self, fingerprint: str, compute: Callable[[], bool]) -> bool:
        try:
            stored = self.backend.fetch(fingerprint)
        except OSError as e:
            raise StorageUnavailableError(f"Lookup failed for {fingerprint[:12]}: {e}") from e

        if stored is not None:
            logger.debug(f"Record hit for {fingerprint[:12]}: mutant={stored}")
            return stored

        is_mutant = bool(compute())

        try:
            with self._commit_lock:
                stored = self.backend.insert(fingerprint, is_mutant)
        except OSError as e:
            raise StorageUnavailableError(f"Commit failed for {fingerprint[:12]}: {e}") from e

        logger.info(f"Recorded {fingerprint[:12]}: mutant={stored}")
        return stored

    def snapshot(self) -> StatsSnapshot:
        """Consistent (mutant, human, ratio) view of the current records."""
        with self._commit_lock:
            count_mutant, count_human = self.backend.counts()
        return StatsSnapshot.from_counts(count_mutant, count_human)

    def clear(self):
        """Drop every record."""
        with self._commit_lock:
            self.backend.clear()
        logger.info("Cleared all classification records")

    def close(self):
        self.backend.close()

    def __len__(self) -> int:
        with self._commit_lock:
            return len(self.backend)
