"""
Classification record stores for mutant_dna.

Author: Kevin R. Roy
"""

from .base import (
    MemoryStatsBackend,
    StatsBackend,
)
from .ledger import (
    LedgerStatsBackend,
)
from .stats import (
    StatsSnapshot,
    StatsStore,
)

__all__ = [
    'StatsBackend',
    'MemoryStatsBackend',
    'LedgerStatsBackend',
    'StatsStore',
    'StatsSnapshot',
]
