"""
mutant_dna - Mutant DNA grid detection with deduplicated statistics.

Author: Kevin R. Roy
"""

__version__ = "0.1.0"
__author__ = "Kevin R. Roy"

from .config import DetectorConfig, StoreBackendType
from .core.classification import DnaOutcome, classify
from .core.grid import ErrorKind, Grid, GridError
from .detector import DetectionResult, MutantDetector
from .store import StatsSnapshot, StatsStore

__all__ = [
    "DetectorConfig",
    "StoreBackendType",
    "Grid",
    "GridError",
    "ErrorKind",
    "DnaOutcome",
    "classify",
    "MutantDetector",
    "DetectionResult",
    "StatsStore",
    "StatsSnapshot",
    "__version__",
]
