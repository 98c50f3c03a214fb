"""Random access reading of 2bit files."""
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Union, BinaryIO, Iterator, Optional, Mapping

from twobit.core.alphabet import Alphabet, packed_size
from twobit.core.interval import Blocks
from twobit.io import UnknownSequenceError, InvalidRangeError
from twobit.io.header import Header, HEADER_SIZE, parse_header
from twobit.io.index import parse_index
from twobit.io.record import SequenceRecord, parse_record
from twobit.io.source import ByteSource, open_source

_LOGGER = logging.getLogger(__name__)
_N: int = ord('N')
_LOWER: int = 0x20


# Functions ------------------------------------------------------------------------------------------------------------
def read_range(record: SequenceRecord, source: ByteSource, start: int = 0, end: Optional[int] = None) -> str:
    """
    Decodes bases ``[start, end)`` of a record, restoring N and soft-masked runs.

    ``start`` below 0 is treated as 0. ``end`` of None, ``<= 0`` or past the sequence means the end
    of the sequence. Only the packed bytes that hold the range are read.

    Args:
        record: A record parsed with its blocks.
        source: The file's bytes.
        start: First base (0-based, inclusive).
        end: Last base (exclusive).

    Returns:
        The bases as a str.

    Raises:
        InvalidRangeError: If the normalised range is empty.
        TruncatedInputError: If the packed bases are cut short.
    """
    size = record.dna_size
    start = max(int(start), 0)
    if end is None or end <= 0 or end > size: end = size
    if end <= start: raise InvalidRangeError(f"Invalid range: {start}-{end}")

    length = end - start
    n_bytes = packed_size(length)
    shift = 0
    if start > 0:
        shift = packed_size(start)
        # A start inside a byte means re-reading that byte and dropping its leading bases
        if start % 4 != 0:
            shift -= 1
            n_bytes += 1
    n_bytes = min(n_bytes, record.packed_size - shift)

    packed = source.read_exact(record.data_offset + shift, n_bytes, 'bases')
    out = Alphabet.DNA.symbols[Alphabet.DNA.unpack(packed, length, offset=start % 4)]

    for lo, hi in record.n_blocks.clip(start, end): out[lo:hi] = _N
    for lo, hi in record.mask_blocks.clip(start, end): out[lo:hi] |= _LOWER
    return out.tobytes().decode(Alphabet.ENCODING)


# Classes --------------------------------------------------------------------------------------------------------------
class TwoBitReader:
    """
    Reader for 2bit files.

    The header and index are parsed once on open. Every query re-reads the sequence record from
    the source, so the reader holds no per-sequence state.

    Examples:
        >>> with TwoBitReader.open("genome.2bit") as tb:
        ...     tb.read_range("chr1", 1000, 1010)
        'ACGTnnnnAC'
    """
    __slots__ = ('_source', '_header', '_index')

    def __init__(self, source: ByteSource):
        """
        Parses the header and index of ``source``.

        Raises:
            MalformedHeaderError: If the signature is not recognised.
            UnsupportedVersionError: If the version is not 0.
            ReservedFieldError: If the header's reserved word is not 0.
            TruncatedInputError: If the header or index is cut short.
            MalformedIndexError: If the index repeats a name.
        """
        self._source = source
        self._header: Header = parse_header(source.read_at(0, HEADER_SIZE))
        self._index, _ = parse_index(source, self._header.count, self._header.byte_order)
        _LOGGER.debug("Opened 2bit file with %d sequences (%s-endian)", self._header.count,
                      self._header.byte_order.name.lower())

    @classmethod
    def open(cls, file: Union[str, Path, bytes, BinaryIO]) -> 'TwoBitReader':
        """Opens a 2bit file from a path, bytes-like object or seekable binary handle."""
        source = open_source(file)
        try: return cls(source)
        except Exception:
            source.close()
            raise

    def __enter__(self): return self
    def __exit__(self, exc_type, exc_val, exc_tb): self.close()
    def __len__(self) -> int: return len(self._index)
    def __contains__(self, name: str) -> bool: return name in self._index
    def __iter__(self) -> Iterator[str]: return iter(self._index)
    def __repr__(self): return f"<TwoBitReader: {len(self)} sequences>"

    @property
    def header(self) -> Header: return self._header
    @property
    def index(self) -> Mapping[str, int]: return MappingProxyType(self._index)

    def close(self):
        """Closes the underlying source."""
        self._source.close()

    def count(self) -> int:
        """Number of sequences declared in the header."""
        return self._header.count

    def version(self) -> int:
        """Format version from the header."""
        return self._header.version

    def names(self) -> list[str]:
        """Sequence names in the order they appear in the file index."""
        return list(self._index)

    def record(self, name: str, with_blocks: bool = True) -> SequenceRecord:
        """
        Parses the record for ``name`` from the source.

        Raises:
            UnknownSequenceError: If ``name`` is not in the index.
        """
        if (offset := self._index.get(name)) is None: raise UnknownSequenceError(name)
        return parse_record(self._source, offset, self._header.byte_order, with_blocks)

    def length(self, name: str) -> int:
        """Number of bases in ``name``."""
        return self.record(name, with_blocks=False).dna_size

    def length_no_n(self, name: str) -> int:
        """Number of bases in ``name`` that are not N."""
        record = self.record(name)
        return record.dna_size - record.n_count

    def n_blocks(self, name: str) -> Blocks:
        """Runs of unknown bases in ``name``."""
        return self.record(name).n_blocks

    def mask_blocks(self, name: str) -> Blocks:
        """Runs of soft-masked bases in ``name``."""
        return self.record(name).mask_blocks

    def read(self, name: str) -> str:
        """Reads the whole of sequence ``name``. A zero-length sequence reads as an empty string."""
        record = self.record(name)
        if record.dna_size == 0: return ''
        return read_range(record, self._source, 0, None)

    def read_range(self, name: str, start: int = 0, end: Optional[int] = None) -> str:
        """
        Reads bases ``[start, end)`` of ``name``.

        Raises:
            UnknownSequenceError: If ``name`` is not in the index.
            InvalidRangeError: If the normalised range is empty.
        """
        return read_range(self.record(name), self._source, start, end)

    def items(self) -> Iterator[tuple[str, str]]:
        """Yields ``(name, sequence)`` for every sequence in index order."""
        for name in self._index: yield name, self.read(name)
