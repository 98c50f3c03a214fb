"""Per-sequence records: base count, N-blocks, mask blocks and the packed bases that follow."""
from dataclasses import dataclass, field
from typing import Optional

from twobit.core.alphabet import packed_size
from twobit.core.interval import Blocks
from twobit.io import MalformedRecordError, ReservedFieldError
from twobit.io.header import ByteOrder
from twobit.io.source import ByteSource


# Classes --------------------------------------------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class SequenceRecord:
    """
    Metadata of one sequence.

    Attributes:
        dna_size: Total number of bases.
        n_blocks: Runs of unknown bases (N).
        mask_blocks: Runs of soft-masked (lowercase) bases.
        reserved: Must be 0.
        data_offset: Absolute offset of the packed bases, or None when only the size was read.
    """
    dna_size: int
    n_blocks: Blocks = field(default_factory=Blocks.empty)
    mask_blocks: Blocks = field(default_factory=Blocks.empty)
    reserved: int = 0
    data_offset: Optional[int] = None

    @property
    def packed_size(self) -> int: return packed_size(self.dna_size)
    @property
    def n_count(self) -> int: return self.n_blocks.total

    def tobytes(self, packed: bytes) -> bytes:
        """Serialises the record metadata followed by ``packed``."""
        return serialize_record(self.dna_size, self.n_blocks, self.mask_blocks, packed)


# Functions ------------------------------------------------------------------------------------------------------------
def _parse_blocks(source: ByteSource, offset: int, byte_order: ByteOrder, dna_size: int,
                  kind: str) -> tuple[Blocks, int]:
    count = int(byte_order.unpack(source.read_exact(offset, 4, f'{kind} block count'))[0])
    # Blocks are disjoint and non-empty, so there can never be more of them than bases
    if count > dna_size:
        raise MalformedRecordError(f"{kind} block count {count} exceeds sequence size {dna_size}")
    coords = byte_order.unpack(source.read_exact(offset + 4, 8 * count, f'{kind} blocks'))
    blocks = Blocks(coords[:count], coords[count:])
    if len(blocks) and blocks.ends.max() > dna_size:
        raise MalformedRecordError(f"{kind} block extends past the end of the sequence ({dna_size} bases)")
    if not blocks.is_disjoint: raise MalformedRecordError(f"{kind} blocks overlap")
    return blocks, offset + 4 + 8 * count


def parse_record(source: ByteSource, offset: int, byte_order: ByteOrder, with_blocks: bool = True) -> SequenceRecord:
    """
    Parses the record stored at ``offset``.

    Args:
        source: The file's bytes.
        offset: Record offset from the index.
        byte_order: Byte order detected from the header.
        with_blocks: When False only the base count is read and the block sets are left empty.

    Returns:
        The ``SequenceRecord``.

    Raises:
        TruncatedInputError: If the source ends inside the record.
        MalformedRecordError: If a block list is impossible for the sequence size.
        ReservedFieldError: If the reserved word is not 0.
    """
    dna_size = int(byte_order.unpack(source.read_exact(offset, 4, 'dnaSize'))[0])
    if not with_blocks: return SequenceRecord(dna_size)
    n_blocks, offset = _parse_blocks(source, offset + 4, byte_order, dna_size, 'N')
    mask_blocks, offset = _parse_blocks(source, offset, byte_order, dna_size, 'mask')
    reserved = int(byte_order.unpack(source.read_exact(offset, 4, 'reserved'))[0])
    if reserved != 0: raise ReservedFieldError(f"Record reserved field is {reserved}, expected 0")
    return SequenceRecord(dna_size, n_blocks, mask_blocks, reserved, offset + 4)


def record_size(dna_size: int, n_blocks: Blocks, mask_blocks: Blocks) -> int:
    """Number of bytes a record takes on disk, packed bases included."""
    return 16 + 8 * (len(n_blocks) + len(mask_blocks)) + packed_size(dna_size)


def serialize_record(dna_size: int, n_blocks: Blocks, mask_blocks: Blocks, packed: bytes) -> bytes:
    """Serialises a record, little-endian."""
    if len(packed) != packed_size(dna_size):
        raise ValueError(f"Expected {packed_size(dna_size)} packed bytes for {dna_size} bases, got {len(packed)}")
    pack, u32 = ByteOrder.LITTLE.pack, ByteOrder.LITTLE.u32
    return b''.join((
        pack(dna_size),
        pack(len(n_blocks)), n_blocks.starts.astype(u32).tobytes(), n_blocks.lengths.astype(u32).tobytes(),
        pack(len(mask_blocks)), mask_blocks.starts.astype(u32).tobytes(), mask_blocks.lengths.astype(u32).tobytes(),
        pack(0),
        bytes(packed)
    ))
