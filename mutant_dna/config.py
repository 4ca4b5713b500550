"""
Configuration classes and grid input parsing for mutant_dna.

Author: Kevin R. Roy
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union
import collections.abc
import re
import yaml

from .core.fingerprint import DEFAULT_ALGORITHM
from .store import LedgerStatsBackend, MemoryStatsBackend, StatsStore


# Rows in a joined grid string may be split by commas, semicolons or whitespace
ROW_SPLIT_PATTERN = re.compile(r'[\s,;]+')

DEFAULT_MAX_GRID_SIZE = 1000


def split_grid_string(s: str) -> List[str]:
    """Split a joined grid string into rows."""
    return [row for row in ROW_SPLIT_PATTERN.split(s.strip()) if row]


def load_grid_file(path: Path) -> List[str]:
    """
    Load a grid from a text file, one row per line.

    Blank lines and lines starting with '#' are ignored.
    """
    rows = []
    with open(path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            rows.extend(split_grid_string(line))
    return rows


def parse_grid_input(value: Union[str, Sequence[str], None]) -> Optional[List[str]]:
    """
    Parse grid input - a list of rows or a joined string.

    A list whose only element is itself a joined string is treated as that
    string, so ["ATGC,CAGT,TTAT,AGAC"] and ["ATGC", "CAGT", "TTAT", "AGAC"]
    produce the same rows. Rows are returned as given; letter and shape checks
    happen in parse_grid(). Nothing here reads files; see load_grid_file().

    Args:
        value: Rows or a joined grid string

    Returns:
        List of row strings, or None if value is None

    Raises:
        ValueError: If value is neither a string nor a sequence of rows

    Examples:
        >>> parse_grid_input("ATGC,CAGT,TTAT,AGAC")
        ['ATGC', 'CAGT', 'TTAT', 'AGAC']
        >>> parse_grid_input(["atgc", "cagt", "ttat", "agac"])
        ['atgc', 'cagt', 'ttat', 'agac']
    """
    if value is None:
        return None

    if isinstance(value, str):
        return split_grid_string(value)

    if not isinstance(value, collections.abc.Sequence):
        raise ValueError(
            f"Grid must be a list of rows or a joined string, got {type(value).__name__}"
        )

    rows = list(value)
    if len(rows) == 1 and isinstance(rows[0], str) and ROW_SPLIT_PATTERN.search(rows[0].strip()):
        return split_grid_string(rows[0])
    return rows


class StoreBackendType(Enum):
    """Supported record store backends."""
    MEMORY = "memory"
    LEDGER = "ledger"


@dataclass
class DetectorConfig:
    """Detector and store configuration."""
    store_backend: StoreBackendType = StoreBackendType.MEMORY
    ledger_path: Optional[Path] = None
    fingerprint_algorithm: str = DEFAULT_ALGORITHM
    max_grid_size: Optional[int] = DEFAULT_MAX_GRID_SIZE
    threads: int = 4
    fsync: bool = False

    def __post_init__(self):
        if isinstance(self.store_backend, str):
            self.store_backend = StoreBackendType(self.store_backend.lower())
        if self.ledger_path is not None:
            self.ledger_path = Path(self.ledger_path)
        if self.store_backend == StoreBackendType.LEDGER and self.ledger_path is None:
            raise ValueError("ledger_path is required for the ledger store backend")
        if self.threads < 1:
            raise ValueError(f"threads must be >= 1, got {self.threads}")
        if self.max_grid_size is not None and self.max_grid_size < 1:
            raise ValueError(f"max_grid_size must be >= 1, got {self.max_grid_size}")

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'DetectorConfig':
        """Create from dictionary, rejecting unknown keys."""
        known = {
            'store_backend', 'ledger_path', 'fingerprint_algorithm',
            'max_grid_size', 'threads', 'fsync',
        }
        unknown = set(d) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        return cls(**d)

    @classmethod
    def from_yaml(cls, path: Path) -> 'DetectorConfig':
        """Load configuration from YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Configuration file {path} must contain a mapping")

        # Relative ledger paths are resolved against the config file
        ledger_path = data.get('ledger_path')
        if ledger_path is not None and not Path(ledger_path).is_absolute():
            data['ledger_path'] = Path(path).parent / ledger_path

        return cls.from_dict(data)

    def build_store(self) -> StatsStore:
        """Construct the configured StatsStore."""
        if self.store_backend == StoreBackendType.LEDGER:
            backend = LedgerStatsBackend(self.ledger_path, fsync=self.fsync)
        else:
            backend = MemoryStatsBackend()
        return StatsStore(backend)
