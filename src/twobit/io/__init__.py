"""
Reading and writing of 2bit files.

The submodules each own one part of the on-disk layout:

- ``header``: the 16 byte file header and byte order detection.
- ``index``: the name -> offset table that follows the header.
- ``record``: per-sequence metadata (size, N-blocks, mask blocks) and packed bases.
- ``reader`` / ``writer``: the public ``TwoBitReader`` and ``TwoBitWriter``.
"""


# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class TwoBitError(Exception):
    """Base class for errors raised while parsing or writing 2bit files."""

class MalformedHeaderError(TwoBitError):
    """Raised when the signature is not recognised in either byte order."""

class UnsupportedVersionError(TwoBitError):
    """Raised when the header carries a version other than 0."""

class ReservedFieldError(TwoBitError):
    """Raised when a reserved word in the header or a record is not zero."""

class TruncatedInputError(TwoBitError, IOError):
    """Raised when the source ends before a structure could be read in full."""

class MalformedIndexError(TwoBitError):
    """Raised when the file index is inconsistent (e.g. a name appears twice)."""

class MalformedRecordError(TwoBitError):
    """Raised when a sequence record describes blocks that cannot exist."""

class UnknownSequenceError(TwoBitError, KeyError):
    """Raised when a sequence name is not in the file index."""
    def __str__(self): return f'Unknown sequence name: {self.args[0]!r}' if self.args else super().__str__()

class InvalidRangeError(TwoBitError, ValueError):
    """Raised when a requested range is empty after normalisation."""

class TwoBitWarning(Warning): pass
