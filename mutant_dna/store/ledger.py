"""
On-disk ledger backend.

Records are appended to a TSV file, one complete line per classification:

    fingerprint<TAB>is_mutant
    3f2a...<TAB>1

The file is read back with pandas when the backend opens. A line is only
added to the in-memory index after it has been written and flushed, so a
failed write leaves no record behind.

Author: Kevin R. Roy
"""

import logging
import os
from pathlib import Path
from typing import Dict, Optional, Tuple

import pandas as pd

from ..errors import StorageUnavailableError
from .base import StatsBackend

logger = logging.getLogger(__name__)

LEDGER_COLUMNS = ['fingerprint', 'is_mutant']


class LedgerStatsBackend(StatsBackend):
    """Append-only TSV ledger of classification records."""

    def __init__(self, path: Path, fsync: bool = False):
        self.path = Path(path)
        self.fsync = fsync
        self._records: Dict[str, bool] = {}
        self._mutant = 0
        self._human = 0
        self._handle = None
        self._torn = False

        self._load()
        self._open()

    def _load(self):
        """Rebuild the index from an existing ledger file."""
        if not self.path.exists() or self.path.stat().st_size == 0:
            return

        try:
            df = pd.read_csv(
                self.path,
                sep='\t',
                dtype=str,
                on_bad_lines='skip',
                engine='python',
            )
        except (OSError, pd.errors.ParserError) as e:
            raise StorageUnavailableError(f"Cannot read ledger {self.path}: {e}") from e

        if list(df.columns) != LEDGER_COLUMNS:
            raise StorageUnavailableError(
                f"Ledger {self.path} has columns {list(df.columns)}, expected {LEDGER_COLUMNS}"
            )

        skipped = 0
        for fp, flag in zip(df['fingerprint'], df['is_mutant']):
            if pd.isna(fp) or flag not in ('0', '1'):
                skipped += 1
                continue
            if fp in self._records:
                continue
            is_mutant = flag == '1'
            self._records[fp] = is_mutant
            if is_mutant:
                self._mutant += 1
            else:
                self._human += 1

        if skipped:
            logger.warning(f"Skipped {skipped} malformed ledger lines in {self.path}")
        logger.info(f"Loaded {len(self._records)} records from {self.path}")

    def _open(self):
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            is_new = not self.path.exists() or self.path.stat().st_size == 0
            torn = not is_new and not self._ends_with_newline()
            self._handle = open(self.path, 'a')
            if is_new:
                self._handle.write('\t'.join(LEDGER_COLUMNS) + '\n')
            elif torn:
                # Terminate a partial last line so it cannot merge with the next record
                self._handle.write('\n')
            self._handle.flush()
        except OSError as e:
            raise StorageUnavailableError(f"Cannot open ledger {self.path}: {e}") from e

    def _ends_with_newline(self) -> bool:
        with open(self.path, 'rb') as f:
            f.seek(-1, os.SEEK_END)
            return f.read(1) == b'\n'

    def _append(self, fingerprint: str, is_mutant: bool):
        if self._handle is None:
            raise StorageUnavailableError(f"Ledger {self.path} is closed")
        line = f"{fingerprint}\t{1 if is_mutant else 0}\n"
        if self._torn:
            line = "\n" + line
        try:
            self._handle.write(line)
            self._handle.flush()
            if self.fsync:
                os.fsync(self._handle.fileno())
        except OSError as e:
            self._torn = True
            raise StorageUnavailableError(f"Cannot write ledger {self.path}: {e}") from e
        self._torn = False

    def fetch(self, fingerprint: str) -> Optional[bool]:
        return self._records.get(fingerprint)

    def insert(self, fingerprint: str, is_mutant: bool) -> bool:
        existing = self._records.get(fingerprint)
        if existing is not None:
            return existing

        self._append(fingerprint, is_mutant)

        self._records[fingerprint] = is_mutant
        if is_mutant:
            self._mutant += 1
        else:
            self._human += 1
        return is_mutant

    def counts(self) -> Tuple[int, int]:
        return self._mutant, self._human

    def clear(self):
        """Truncate the ledger to its header."""
        try:
            if self._handle is not None:
                self._handle.close()
            with open(self.path, 'w') as f:
                f.write('\t'.join(LEDGER_COLUMNS) + '\n')
            self._handle = open(self.path, 'a')
        except OSError as e:
            self._handle = None
            raise StorageUnavailableError(f"Cannot clear ledger {self.path}: {e}") from e

        self._records.clear()
        self._mutant = 0
        self._human = 0
        logger.info(f"Cleared ledger {self.path}")

    def __len__(self) -> int:
        return len(self._records)

    def close(self):
        if self._handle is not None:
            self._handle.close()
            self._handle = None
