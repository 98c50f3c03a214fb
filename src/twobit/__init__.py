"""
Reader and writer for the 2bit format: many named DNA sequences packed 4 bases per byte, with
random access by name and base range.

Examples:
    >>> import twobit
    >>> writer = twobit.TwoBitWriter()
    >>> writer.add('ex1', 'ACTgcctttnnnNantnaCgc')
    >>> tb = twobit.open(writer.tobytes())
    >>> tb.read_range('ex1', 5, 11)
    'ctttnn'
"""
from pathlib import Path
from typing import Union, BinaryIO

from twobit.core.alphabet import Alphabet, AlphabetError, UnsupportedBaseError, pack, unpack, packed_size
from twobit.core.interval import Blocks
from twobit.io import (TwoBitError, TwoBitWarning, MalformedHeaderError, UnsupportedVersionError, ReservedFieldError,
                       TruncatedInputError, MalformedIndexError, MalformedRecordError, UnknownSequenceError,
                       InvalidRangeError)
from twobit.io.header import Header, ByteOrder, SIGNATURE
from twobit.io.reader import TwoBitReader
from twobit.io.writer import TwoBitWriter
from twobit.io.fasta import read_fasta, write_fasta


def open(file: Union[str, Path, bytes, BinaryIO]) -> TwoBitReader:
    """
    Opens a 2bit file for reading.

    Args:
        file: File path, bytes-like object, or seekable binary handle.

    Returns:
        A ``TwoBitReader``.
    """
    return TwoBitReader.open(file)


def new_writer() -> TwoBitWriter:
    """Returns an empty ``TwoBitWriter``."""
    return TwoBitWriter()
