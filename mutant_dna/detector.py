"""
Detection orchestration for mutant_dna.

Flow for one submission:
1. Parse and validate the grid (rejections never reach the store)
2. Fingerprint the normalized grid
3. Look the fingerprint up in the StatsStore; classify only on a miss

Failures come back as ErrorKind values on DetectionResult. A failed result
never carries a classification.

Author: Kevin R. Roy
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union
import logging

from .config import DetectorConfig, parse_grid_input
from .core.classification import DnaOutcome, classify
from .core.fingerprint import fingerprint
from .core.grid import ErrorKind, GridError, parse_grid
from .errors import FingerprintError, StorageUnavailableError
from .io.output import SampleResult
from .io.sample_key import Sample
from .store import StatsSnapshot, StatsStore

logger = logging.getLogger(__name__)


@dataclass
class DetectionResult:
    """Outcome of one submission."""
    fingerprint: Optional[str] = None
    is_mutant: Optional[bool] = None
    error: Optional[GridError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def outcome(self) -> Optional[DnaOutcome]:
        if self.is_mutant is None:
            return None
        return DnaOutcome.from_flag(self.is_mutant)


class MutantDetector:
    """Classifies grids and keeps deduplicated statistics."""

    def __init__(
        self,
        store: Optional[StatsStore] = None,
        config: Optional[DetectorConfig] = None,
    ):
        self.config = config if config is not None else DetectorConfig()
        self.store = store if store is not None else self.config.build_store()

    def is_mutant(self, dna: Union[str, Sequence[str], None]) -> DetectionResult:
        """
        Classify one grid, reusing the stored verdict if it was seen before.

        Args:
            dna: Grid rows or a joined grid string

        Returns:
            DetectionResult with is_mutant set on success, error otherwise
        """
        try:
            rows = parse_grid_input(dna)
        except ValueError as e:
            return DetectionResult(error=GridError(ErrorKind.INVALID_SHAPE, str(e)))

        grid, error = parse_grid(rows, max_size=self.config.max_grid_size)
        if error is not None:
            logger.debug(f"Rejected grid: {error}")
            return DetectionResult(error=error)

        try:
            fp = fingerprint(grid, self.config.fingerprint_algorithm)
        except FingerprintError as e:
            logger.error(f"Fingerprint failed: {e}")
            return DetectionResult(error=GridError(ErrorKind.INTERNAL, str(e)))

        try:
            verdict = self.store.record_or_get(fp, lambda: classify(grid))
        except StorageUnavailableError as e:
            logger.error(f"Store unavailable for {fp[:12]}: {e}")
            return DetectionResult(
                fingerprint=fp,
                error=GridError(ErrorKind.STORAGE_UNAVAILABLE, str(e)),
            )
        except Exception as e:
            logger.error(f"Classification failed for {fp[:12]}: {e!r}")
            return DetectionResult(
                fingerprint=fp,
                error=GridError(ErrorKind.INTERNAL, f"Internal server error: {e}"),
            )

        return DetectionResult(fingerprint=fp, is_mutant=verdict)

    def stats(self) -> StatsSnapshot:
        """Current aggregate statistics."""
        return self.store.snapshot()

    def reset(self):
        """Drop every stored classification."""
        self.store.clear()

    def close(self):
        self.store.close()

    def process_batch(
        self,
        samples: List[Sample],
        threads: Optional[int] = None,
    ) -> List[SampleResult]:
        """
        Classify a batch of samples concurrently.

        Workers are threads so that they share one store; duplicate grids in
        the batch are classified once.

        Args:
            samples: Samples to classify
            threads: Worker count (default: config.threads)

        Returns:
            SampleResult list in the same order as samples
        """
        if threads is None:
            threads = self.config.threads

        logger.info(f"Processing batch of {len(samples)} samples with {threads} threads")

        results: List[Optional[SampleResult]] = [None] * len(samples)

        with ThreadPoolExecutor(max_workers=threads) as executor:
            future_to_index = {
                executor.submit(self.is_mutant, sample.dna): idx
                for idx, sample in enumerate(samples)
            }

            for future in as_completed(future_to_index):
                idx = future_to_index[future]
                sample = samples[idx]
                detection = future.result()

                if not detection.ok:
                    logger.warning(f"{sample.sample_id}: {detection.error}")

                results[idx] = SampleResult(
                    sample_id=sample.sample_id,
                    fingerprint=detection.fingerprint,
                    is_mutant=detection.is_mutant,
                    error=detection.error,
                    metadata=sample.metadata,
                )

        snapshot = self.stats()
        logger.info(
            f"Batch complete. Store: {snapshot.count_mutant} mutant, "
            f"{snapshot.count_human} human, ratio {snapshot.ratio:.4f}"
        )
        return results
