"""
Grid model and input validation.

A Grid is an N x N block of nucleotide letters. Rows are upper-cased once,
here, and every later stage works on the normalized form.

Validation reports problems as GridError values instead of raising.

Author: Kevin R. Roy
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Sequence, Tuple

VALID_BASES = frozenset('ATCG')


class ErrorKind(Enum):
    """Closed set of failure kinds a detection can end in."""
    INVALID_SHAPE = 'invalid_shape'
    INVALID_ALPHABET = 'invalid_alphabet'
    STORAGE_UNAVAILABLE = 'storage_unavailable'
    INTERNAL = 'internal'


@dataclass(frozen=True)
class GridError:
    """Why a grid (or a detection) was rejected."""
    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


@dataclass(frozen=True)
class Grid:
    """
    Normalized, validated square grid of nucleotide letters.

    Build grids with parse_grid(), which reports bad input as a GridError.
    Constructing one directly from bad rows raises ValueError.
    """
    rows: Tuple[str, ...]

    def __post_init__(self):
        error = validate_rows(self.rows)
        if error is not None:
            raise ValueError(f"Invalid grid ({error})")
        if any(row != row.upper() for row in self.rows):
            raise ValueError("Grid rows must be upper-case; use parse_grid() to normalize")

    @property
    def size(self) -> int:
        return len(self.rows)

    def cell(self, row: int, col: int) -> str:
        return self.rows[row][col]

    def __iter__(self) -> Iterator[str]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)


def validate_rows(
    rows: Optional[Sequence[str]],
    max_size: Optional[int] = None,
) -> Optional[GridError]:
    """
    Check that rows form a square grid over {A, T, C, G}.

    Letters are compared case-insensitively. Shape problems are reported
    before alphabet problems, so a grid that is both ragged and contains
    a bad letter comes back as INVALID_SHAPE.

    Args:
        rows: Candidate rows
        max_size: Optional upper bound on N

    Returns:
        None if the rows are valid, otherwise the first GridError found
    """
    if rows is None or isinstance(rows, str) or len(rows) == 0:
        return GridError(ErrorKind.INVALID_SHAPE, "DNA sequence cannot be null or empty")

    n = len(rows)
    for i, row in enumerate(rows):
        if not isinstance(row, str):
            return GridError(ErrorKind.INVALID_SHAPE, f"Row {i} is not a string")
        if len(row) != n:
            return GridError(
                ErrorKind.INVALID_SHAPE,
                f"DNA must be NxN matrix (row {i} has {len(row)} letters, expected {n})",
            )

    if max_size is not None and n > max_size:
        return GridError(
            ErrorKind.INVALID_SHAPE,
            f"DNA matrix of size {n} exceeds the maximum of {max_size}",
        )

    for i, row in enumerate(rows):
        bad = set(row.upper()) - VALID_BASES
        if bad:
            return GridError(
                ErrorKind.INVALID_ALPHABET,
                f"DNA must contain only A, T, C, G characters "
                f"(row {i} has {', '.join(sorted(bad))})",
            )

    return None


def parse_grid(
    rows: Optional[Sequence[str]],
    max_size: Optional[int] = None,
) -> Tuple[Optional[Grid], Optional[GridError]]:
    """
    Validate and normalize rows into a Grid.

    Returns:
        (grid, None) on success, (None, error) otherwise
    """
    error = validate_rows(rows, max_size=max_size)
    if error is not None:
        return None, error
    return Grid(rows=tuple(row.upper() for row in rows)), None
