"""The name -> offset index that follows the 2bit header."""
from typing import Iterable, Final

from twobit.io import MalformedIndexError
from twobit.io.header import ByteOrder, HEADER_SIZE
from twobit.io.source import ByteSource


# Constants ------------------------------------------------------------------------------------------------------------
ENCODING: Final = 'ascii'
MAX_NAME_LENGTH: Final = 255


# Functions ------------------------------------------------------------------------------------------------------------
def encode_name(name: str) -> bytes:
    """
    Encodes a sequence name for the index.

    Raises:
        ValueError: If the name is empty, not ASCII or longer than 255 bytes.
    """
    raw = name.encode(ENCODING) if isinstance(name, str) else bytes(name)
    if not raw: raise ValueError("Sequence names cannot be empty")
    if not raw.isascii(): raise ValueError(f"Sequence name {name!r} is not ASCII")
    if len(raw) > MAX_NAME_LENGTH:
        raise ValueError(f"Sequence name {name!r} is longer than {MAX_NAME_LENGTH} bytes")
    return raw


def parse_index(source: ByteSource, count: int, byte_order: ByteOrder,
                offset: int = HEADER_SIZE) -> tuple[dict[str, int], int]:
    """
    Parses ``count`` index entries: a 1 byte name length, the name, and a 4 byte record offset.

    Args:
        source: The file's bytes.
        count: Number of entries (from the header).
        byte_order: Byte order detected from the header.
        offset: Position of the first entry.

    Returns:
        The name -> record offset mapping in on-disk order, and the offset just past the index.

    Raises:
        TruncatedInputError: If the source ends inside the index.
        MalformedIndexError: If a name is repeated or cannot be decoded.
    """
    index = {}
    for i in range(count):
        size = source.read_exact(offset, 1, 'file index')[0]
        raw = source.read_exact(offset + 1, size, 'file index')
        record_offset = int(byte_order.unpack(source.read_exact(offset + 1 + size, 4, 'file index'))[0])
        offset += size + 5
        try: name = raw.decode(ENCODING)
        except UnicodeDecodeError: raise MalformedIndexError(f"Index entry {i} has a non-ASCII name {raw!r}") from None
        if name in index: raise MalformedIndexError(f"Sequence name {name!r} appears more than once in the index")
        index[name] = record_offset
    return index, offset


def index_size(names: Iterable[str]) -> int:
    """Number of bytes the index takes for ``names``."""
    return sum(len(encode_name(name)) + 5 for name in names)


def serialize_index(entries: Iterable[tuple[str, int]]) -> bytes:
    """Serialises ``(name, offset)`` pairs, little-endian."""
    out = bytearray()
    for name, offset in entries:
        raw = encode_name(name)
        out.append(len(raw))
        out += raw
        out += ByteOrder.LITTLE.pack(offset)
    return bytes(out)
