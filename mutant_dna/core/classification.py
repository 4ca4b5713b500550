"""
Mutant/human classification.

A grid is mutant when it holds at least two qualifying runs, in any
direction or combination of directions.

Author: Kevin R. Roy
"""

from enum import Enum

from .grid import Grid
from .scanner import count_qualifying_runs

MUTANT_RUN_THRESHOLD = 2


class DnaOutcome(Enum):
    """Classification categories."""
    MUTANT = 'mutant'
    HUMAN = 'human'

    @classmethod
    def from_flag(cls, is_mutant: bool) -> 'DnaOutcome':
        return cls.MUTANT if is_mutant else cls.HUMAN


def classify(grid: Grid) -> bool:
    """
    Decide whether a grid is mutant.

    The scan stops at the second qualifying run; only the threshold
    matters, not the exact total.

    Args:
        grid: Validated Grid

    Returns:
        True if mutant, False if human
    """
    runs = count_qualifying_runs(grid, early_exit_at=MUTANT_RUN_THRESHOLD)
    return runs >= MUTANT_RUN_THRESHOLD
