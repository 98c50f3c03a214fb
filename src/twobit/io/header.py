"""The fixed 16 byte 2bit file header."""
from dataclasses import dataclass
from enum import Enum
from typing import Final

import numpy as np

from twobit.io import MalformedHeaderError, UnsupportedVersionError, ReservedFieldError, TruncatedInputError


# Constants ------------------------------------------------------------------------------------------------------------
SIGNATURE: Final = 0x1A412743
VERSION: Final = 0
HEADER_SIZE: Final = 16


# Classes --------------------------------------------------------------------------------------------------------------
class ByteOrder(Enum):
    """Byte order of the integers in a 2bit file; values are numpy byte-order prefixes."""
    BIG = '>'
    LITTLE = '<'

    @property
    def u32(self) -> np.dtype:
        """Unsigned 32 bit integer dtype in this byte order."""
        return np.dtype(f'{self.value}u4')

    def unpack(self, data: bytes) -> np.ndarray:
        """Interprets ``data`` as an array of unsigned 32 bit integers."""
        return np.frombuffer(data, dtype=self.u32)

    def pack(self, *values: int) -> bytes:
        """Serialises integers as unsigned 32 bit words."""
        return np.array(values, dtype=self.u32).tobytes()


@dataclass(frozen=True, slots=True)
class Header:
    """
    The 2bit header: signature, version, sequence count and a reserved word.

    Attributes:
        signature: Always ``SIGNATURE`` once read in the detected byte order.
        version: Format version, must be 0.
        count: Number of sequences in the file.
        reserved: Must be 0.
        byte_order: Byte order used for every integer in the file.
    """
    signature: int = SIGNATURE
    version: int = VERSION
    count: int = 0
    reserved: int = 0
    byte_order: ByteOrder = ByteOrder.LITTLE

    def tobytes(self) -> bytes:
        """Serialises the header. Files are always written little-endian."""
        return ByteOrder.LITTLE.pack(self.signature, self.version, self.count, self.reserved)


# Functions ------------------------------------------------------------------------------------------------------------
def parse_header(data: bytes) -> Header:
    """
    Parses the 16 byte header, detecting the byte order from the signature.

    Args:
        data: At least the first 16 bytes of the file.

    Returns:
        The parsed ``Header``.

    Raises:
        TruncatedInputError: If fewer than 16 bytes are given.
        MalformedHeaderError: If the signature does not match in either byte order.
        UnsupportedVersionError: If the version is not 0.
        ReservedFieldError: If the reserved word is not 0.
    """
    if len(data) < HEADER_SIZE:
        raise TruncatedInputError(f"Failed to read header: expected {HEADER_SIZE} bytes, got {len(data)}")
    data = data[:HEADER_SIZE]
    for byte_order in (ByteOrder.BIG, ByteOrder.LITTLE):
        signature, version, count, reserved = byte_order.unpack(data).tolist()
        if signature == SIGNATURE: break
    else:
        raise MalformedHeaderError(f"Invalid signature {data[:4].hex()}. Not a 2bit file?")
    if version != VERSION: raise UnsupportedVersionError(f"Unsupported version {version}")
    if reserved != 0: raise ReservedFieldError(f"Header reserved field is {reserved}, expected 0")
    return Header(signature, version, count, reserved, byte_order)


def serialize_header(count: int) -> bytes:
    """Returns the header of a file holding ``count`` sequences."""
    return Header(count=count).tobytes()
