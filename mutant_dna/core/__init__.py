"""
Core detection modules for mutant_dna.

Author: Kevin R. Roy
"""

from .classification import (
    MUTANT_RUN_THRESHOLD,
    DnaOutcome,
    classify,
)
from .fingerprint import (
    DEFAULT_ALGORITHM,
    fingerprint,
)
from .grid import (
    ErrorKind,
    Grid,
    GridError,
    parse_grid,
    validate_rows,
)
from .scanner import (
    MIN_RUN_LENGTH,
    Direction,
    Run,
    count_qualifying_runs,
    iter_qualifying_runs,
)

__all__ = [
    # Grid
    'Grid',
    'GridError',
    'ErrorKind',
    'parse_grid',
    'validate_rows',
    # Scanner
    'MIN_RUN_LENGTH',
    'Direction',
    'Run',
    'count_qualifying_runs',
    'iter_qualifying_runs',
    # Fingerprint
    'DEFAULT_ALGORITHM',
    'fingerprint',
    # Classification
    'MUTANT_RUN_THRESHOLD',
    'DnaOutcome',
    'classify',
]
