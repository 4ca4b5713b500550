"""
Content fingerprints for grids.

The fingerprint is the dedup key of the stats store: two submissions of the
same normalized grid must map to the same key, whatever shape they arrived
in, and any change of letter or row order must change it.

Author: Kevin R. Roy
"""

import hashlib

from ..errors import FingerprintError
from .grid import Grid

DEFAULT_ALGORITHM = 'sha256'

# Collision resistance is what keeps distinct grids from sharing a record
CRYPTOGRAPHIC_ALGORITHMS = frozenset({
    'sha256', 'sha384', 'sha512', 'sha3_256', 'sha3_512', 'blake2b',
})

ROW_SEPARATOR = '\n'


def fingerprint(grid: Grid, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """
    Compute the hex digest identifying a grid.

    Rows are joined with a newline, which never occurs inside a validated
    row, so ["AT", "GC"] and ["ATG", "C"] hash different byte strings.

    Args:
        grid: Validated Grid
        algorithm: hashlib algorithm name (cryptographic ones only)

    Returns:
        Lowercase hex digest

    Raises:
        FingerprintError: If the algorithm is not allowed or unavailable
    """
    name = algorithm.lower()
    if name not in CRYPTOGRAPHIC_ALGORITHMS:
        raise FingerprintError(
            f"Unsupported fingerprint algorithm '{algorithm}'. "
            f"Choose one of: {', '.join(sorted(CRYPTOGRAPHIC_ALGORITHMS))}"
        )

    try:
        digest = hashlib.new(name)
    except ValueError as e:
        raise FingerprintError(f"Hash algorithm '{algorithm}' unavailable: {e}") from e

    digest.update(ROW_SEPARATOR.join(grid.rows).encode('utf-8'))
    return digest.hexdigest()
