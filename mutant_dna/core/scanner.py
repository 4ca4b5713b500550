"""
Qualifying-run scanner.

Walks every horizontal, vertical and diagonal line of a grid looking for
runs of four or more identical letters.

Scan order (fixed, so results and early exits are repeatable):
1. Horizontal: rows top to bottom, each left to right
2. Vertical: columns left to right, each top to bottom
3. Diagonal (down-right): starting cells in row-major order
4. Anti-diagonal (down-left): starting cells in row-major order

A maximal run counts once however long it is; scanning resumes at the cell
after it. Runs in different directions through the same cells each count.

Author: Kevin R. Roy
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Tuple

from .grid import Grid

MIN_RUN_LENGTH = 4


class Direction(Enum):
    """Scan directions as (row step, column step)."""
    HORIZONTAL = (0, 1)
    VERTICAL = (1, 0)
    DIAGONAL = (1, 1)
    ANTI_DIAGONAL = (1, -1)

    @property
    def step(self) -> Tuple[int, int]:
        return self.value


SCAN_ORDER = (
    Direction.HORIZONTAL,
    Direction.VERTICAL,
    Direction.DIAGONAL,
    Direction.ANTI_DIAGONAL,
)


@dataclass(frozen=True)
class Run:
    """A maximal run of identical letters along one direction."""
    direction: Direction
    row: int
    col: int
    letter: str
    length: int

    def __str__(self) -> str:
        return (f"{self.direction.name.lower()} run of {self.length} x {self.letter} "
                f"starting at row {self.row}, col {self.col}")


def _line_starts(n: int, direction: Direction) -> Iterator[Tuple[int, int]]:
    """Yield the starting cell of every line in a direction, row-major."""
    if direction is Direction.HORIZONTAL:
        for r in range(n):
            yield r, 0
    elif direction is Direction.VERTICAL:
        for c in range(n):
            yield 0, c
    else:
        # Top row first, then the remaining cells of the entry column
        for c in range(n):
            yield 0, c
        edge = 0 if direction is Direction.DIAGONAL else n - 1
        for r in range(1, n):
            yield r, edge


def _line_length(n: int, row: int, col: int, direction: Direction) -> int:
    """Number of cells on the line starting at (row, col)."""
    if direction is Direction.HORIZONTAL:
        return n - col
    if direction is Direction.VERTICAL:
        return n - row
    if direction is Direction.DIAGONAL:
        return n - max(row, col)
    return min(n - row, col + 1)


def _runs_along(grid: Grid, row: int, col: int, direction: Direction) -> Iterator[Run]:
    """Yield qualifying runs on one line, in order of their start cell."""
    dr, dc = direction.step
    n = grid.size

    run_row, run_col = row, col
    letter = grid.cell(row, col)
    length = 1
    r, c = row + dr, col + dc

    while 0 <= r < n and 0 <= c < n:
        current = grid.cell(r, c)
        if current == letter:
            length += 1
        else:
            if length >= MIN_RUN_LENGTH:
                yield Run(direction, run_row, run_col, letter, length)
            run_row, run_col = r, c
            letter = current
            length = 1
        r += dr
        c += dc

    if length >= MIN_RUN_LENGTH:
        yield Run(direction, run_row, run_col, letter, length)


def iter_qualifying_runs(grid: Grid) -> Iterator[Run]:
    """
    Lazily yield every qualifying run in scan order.

    Args:
        grid: Validated Grid

    Yields:
        Run objects
    """
    n = grid.size
    if n < MIN_RUN_LENGTH:
        return

    for direction in SCAN_ORDER:
        for row, col in _line_starts(n, direction):
            if _line_length(n, row, col, direction) < MIN_RUN_LENGTH:
                continue
            yield from _runs_along(grid, row, col, direction)


def count_qualifying_runs(grid: Grid, early_exit_at: int) -> int:
    """
    Count qualifying runs, stopping once the count reaches early_exit_at.

    The return value is therefore min(total runs, early_exit_at); the scan
    never looks past the run that reaches the threshold.

    Args:
        grid: Validated Grid
        early_exit_at: Count at which scanning stops (>= 1)

    Returns:
        Number of qualifying runs found before stopping
    """
    if early_exit_at < 1:
        raise ValueError(f"early_exit_at must be >= 1, got {early_exit_at}")

    count = 0
    for _ in iter_qualifying_runs(grid):
        count += 1
        if count >= early_exit_at:
            break
    return count
