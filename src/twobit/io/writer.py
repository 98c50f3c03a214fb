"""Building and serialising 2bit files."""
import logging
from io import BytesIO
from pathlib import Path
from typing import Union, BinaryIO, Final, Iterator
from warnings import warn

from twobit.core.alphabet import as_bytes, pack
from twobit.core.interval import Blocks, N_SYMBOLS, LOWERCASE
from twobit.io import TwoBitError, TwoBitWarning
from twobit.io.header import HEADER_SIZE, serialize_header
from twobit.io.index import encode_name, index_size, serialize_index
from twobit.io.fasta import read_fasta
from twobit.io.record import SequenceRecord, record_size

_LOGGER = logging.getLogger(__name__)


# Classes --------------------------------------------------------------------------------------------------------------
class TwoBitWriter:
    """
    Collects sequences in memory and serialises them as a 2bit file.

    Sequences are written in the order they were first added.

    Examples:
        >>> tb = TwoBitWriter()
        >>> tb.add('ex1', 'ACTgcctttnnnNantnaCgc')
        >>> with open('out.2bit', 'wb') as f:
        ...     tb.write(f)
    """
    __slots__ = ('_records',)
    MAX_OFFSET: Final = 0xFFFFFFFF

    def __init__(self):
        self._records: dict[str, tuple[SequenceRecord, bytes]] = {}

    def __len__(self) -> int: return len(self._records)
    def __contains__(self, name: str) -> bool: return name in self._records
    def __iter__(self) -> Iterator[str]: return iter(self._records)
    def __repr__(self): return f"<TwoBitWriter: {len(self)} sequences>"

    def names(self) -> list[str]:
        """Names in the order they will be written."""
        return list(self._records)

    def record(self, name: str) -> SequenceRecord:
        """Returns the pending record for ``name``."""
        return self._records[name][0]

    def packed(self, name: str) -> bytes:
        """Returns the packed bases for ``name``."""
        return self._records[name][1]

    def add(self, name: str, seq: Union[str, bytes]):
        """
        Adds a sequence, replacing any earlier sequence with the same name.

        N-blocks and mask blocks are detected from the sequence before it is packed.

        Args:
            name: Sequence name (1-255 ASCII characters).
            seq: The bases; any of ``ACGTN`` in either case.

        Raises:
            UnsupportedBaseError: If ``seq`` holds any other symbol.
            ValueError: If the name cannot be stored in the index.
        """
        name = encode_name(name).decode('ascii')
        data = as_bytes(seq)
        packed = pack(data)
        record = SequenceRecord(len(data), Blocks.detect(data, N_SYMBOLS), Blocks.detect(data, LOWERCASE))
        if name in self._records: warn(f"Replacing sequence {name!r}", TwoBitWarning)
        self._records[name] = (record, packed)

    def add_fasta(self, file: Union[str, Path, BinaryIO]) -> int:
        """
        Adds every entry of a FASTA file.

        Returns:
            The number of entries added.
        """
        n = 0
        for name, seq in read_fasta(file):
            self.add(name, seq)
            n += 1
        return n

    def offsets(self) -> dict[str, int]:
        """
        Computes the file offset of every record.

        Raises:
            TwoBitError: If an offset does not fit in 32 bits.
        """
        offset = HEADER_SIZE + index_size(self._records)
        offsets = {}
        for name, (record, _) in self._records.items():
            if offset > self.MAX_OFFSET:
                raise TwoBitError(f"Record {name!r} would start at offset {offset}, past the 4 GiB limit")
            offsets[name] = offset
            offset += record_size(record.dna_size, record.n_blocks, record.mask_blocks)
        return offsets

    def write(self, file: Union[str, Path, BinaryIO]) -> int:
        """
        Writes the header, index and every record.

        Args:
            file: A path or a writable binary handle.

        Returns:
            The number of bytes written.
        """
        if isinstance(file, (str, Path)):
            with open(Path(file).expanduser(), 'wb') as handle: return self.write(handle)
        offsets = self.offsets()
        n = 0
        for chunk in (serialize_header(len(self._records)), serialize_index(offsets.items())):
            file.write(chunk)
            n += len(chunk)
        for record, packed in self._records.values():
            chunk = record.tobytes(packed)
            file.write(chunk)
            n += len(chunk)
        _LOGGER.debug("Wrote %d sequences (%d bytes)", len(self._records), n)
        return n

    serialize = write

    def tobytes(self) -> bytes:
        """Returns the serialised file."""
        buffer = BytesIO()
        self.write(buffer)
        return buffer.getvalue()
