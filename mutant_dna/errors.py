"""
Exceptions raised below the detector boundary.

MutantDetector turns these into ErrorKind values on DetectionResult, so
callers of the service never see them directly.

Author: Kevin R. Roy
"""


class MutantDnaError(Exception):
    """Base class for mutant_dna errors."""


class StorageUnavailableError(MutantDnaError):
    """The stats backend could not complete a read or write."""


class FingerprintError(MutantDnaError):
    """A fingerprint could not be computed for a grid."""
