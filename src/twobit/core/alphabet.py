"""
Module for the 2-bit nucleotide alphabet and the base packing used by 2bit files.
"""
from typing import Union, Final, ClassVar

import numpy as np

from twobit.lib.resources import jit


# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class AlphabetError(Exception):
    """Raised when an alphabet is invalid or an operation is incompatible with the alphabet."""


class UnsupportedBaseError(AlphabetError, ValueError):
    """Raised when a sequence contains a symbol that cannot be packed."""
    def __init__(self, symbol: str, position: int):
        super().__init__(f'Unsupported base {symbol!r} at position {position}')
        self.symbol = symbol
        self.position = position


# Classes --------------------------------------------------------------------------------------------------------------
class Alphabet:
    """
    A fixed-width alphabet of ASCII symbols where each symbol's code is its position.

    Lowercase symbols encode to the same code as their uppercase form, and aliases map
    extra symbols onto existing codes. Decoding always yields the uppercase symbol.

    Examples:
        >>> Alphabet.DNA.encode(b'ACGTn')
        array([2, 1, 3, 0, 0], dtype=uint8)
        >>> Alphabet.DNA.decode(np.array([2, 1, 3, 0], dtype=np.uint8))
        b'ACGT'
    """
    __slots__ = ('_data', '_lookup_table', '_decode_table')
    DTYPE: Final = np.uint8
    INVALID: Final = np.iinfo(DTYPE).max
    MAX_LEN: Final = INVALID + 1
    ENCODING: Final = 'ascii'

    DNA: ClassVar['Alphabet']

    def __init__(self, symbols: bytes, aliases: dict[bytes, bytes] = None):
        """
        Initializes an Alphabet.

        Args:
            symbols: The symbols in the alphabet as bytes, in code order.
            aliases: Optional mapping of extra characters to valid ones (e.g. {b'N': b'T'}).

        Raises:
            AlphabetError: If symbols are not ASCII, too long, contain duplicates, or an alias is invalid.
        """
        if not symbols.isascii(): raise AlphabetError('Alphabet symbols must be a valid ASCII string')
        if len(symbols) > self.MAX_LEN:
            raise AlphabetError(f'Alphabet size cannot exceed {self.MAX_LEN} symbols ({self.DTYPE})')
        if len(set(symbols.upper())) != len(symbols): raise AlphabetError('Alphabet contains duplicate symbols')

        self._data: np.ndarray = np.frombuffer(symbols.upper(), dtype=self.DTYPE)

        self._lookup_table = np.full(self.MAX_LEN, self.INVALID, dtype=self.DTYPE)
        indices = np.arange(len(symbols), dtype=self.DTYPE)
        self._lookup_table[np.frombuffer(symbols.upper(), dtype=self.DTYPE)] = indices
        self._lookup_table[np.frombuffer(symbols.lower(), dtype=self.DTYPE)] = indices

        if aliases:
            for src, dst in aliases.items():
                if len(src) != 1 or len(dst) != 1: raise AlphabetError("Aliases must be single bytes")
                dst_idx = self._lookup_table[ord(dst)]
                if dst_idx == self.INVALID: raise AlphabetError(f"Alias target {dst} not in alphabet")
                self._lookup_table[ord(src.upper())] = dst_idx
                self._lookup_table[ord(src.lower())] = dst_idx

        decode_map = np.zeros(self.MAX_LEN, dtype=self.DTYPE)
        decode_map[:len(self._data)] = self._data
        self._decode_table = decode_map.tobytes()
        self._lookup_table.flags.writeable = False
        self._data.flags.writeable = False

    def __len__(self): return len(self._data)
    def __repr__(self): return f"Alphabet({self._data.tobytes()!r})"

    @property
    def symbols(self) -> np.ndarray:
        """The canonical (uppercase) symbols as a read-only uint8 array, indexed by code."""
        return self._data

    @property
    def bits_per_symbol(self) -> int:
        """Returns the number of bits required to represent a symbol in this alphabet."""
        return max(1, (len(self._data) - 1).bit_length())

    @property
    def per_byte(self) -> int:
        """Number of symbols packed into one byte."""
        return 8 // self.bits_per_symbol


    def encode(self, text: Union[str, bytes, bytearray, memoryview]) -> np.ndarray:
        """
        Encodes text into an array of codes.

        Args:
            text: The sequence as ASCII bytes or str.

        Returns:
            A uint8 numpy array of codes, one per symbol.

        Raises:
            UnsupportedBaseError: On the first symbol that has no code.
        """
        data = as_bytes(text)
        encoded = self._lookup_table[np.frombuffer(data, dtype=self.DTYPE)]
        if len(bad := np.flatnonzero(encoded == self.INVALID)):
            position = int(bad[0])
            raise UnsupportedBaseError(chr(data[position]), position)
        return encoded

    def decode(self, encoded: np.ndarray) -> bytes:
        """Decodes an array of codes back to uppercase symbols."""
        if encoded.dtype != self.DTYPE:
            encoded = encoded.astype(self.DTYPE, copy=False)
        return encoded.tobytes().translate(self._decode_table)

    def pack(self, text: Union[str, bytes, bytearray, memoryview]) -> bytes:
        """
        Packs a sequence into bytes, most significant bits first.

        Unused slots in the final byte hold code 0.

        Raises:
            UnsupportedBaseError: If the sequence contains a symbol outside the alphabet.
        """
        encoded = self.encode(text)
        return _pack_seq_kernel(encoded, len(encoded), self.bits_per_symbol).tobytes()

    def unpack(self, packed: Union[bytes, np.ndarray], length: int, offset: int = 0) -> np.ndarray:
        """
        Unpacks codes from packed bytes.

        Args:
            packed: The packed bytes.
            length: Number of codes to return.
            offset: Number of leading codes in the first byte to skip.

        Returns:
            A uint8 numpy array of `length` codes.
        """
        if not isinstance(packed, np.ndarray): packed = np.frombuffer(packed, dtype=np.uint8)
        if offset < 0 or length < 0: raise ValueError(f"Negative offset or length ({offset}, {length})")
        if offset + length > len(packed) * self.per_byte:
            raise ValueError(f"Cannot unpack {length} symbols at offset {offset} from {len(packed)} bytes")
        return _unpack_seq_kernel(packed, offset, length, self.bits_per_symbol)


# Functions ------------------------------------------------------------------------------------------------------------
def as_bytes(text: Union[str, bytes, bytearray, memoryview]) -> bytes:
    """
    Coerces a sequence to ASCII bytes.

    Raises:
        UnsupportedBaseError: If a str contains non-ASCII characters.
    """
    if isinstance(text, str):
        try: return text.encode(Alphabet.ENCODING)
        except UnicodeEncodeError as e: raise UnsupportedBaseError(text[e.start], e.start) from None
    if isinstance(text, (bytes, bytearray, memoryview)): return bytes(text)
    raise TypeError(f"Expected str or bytes, got {type(text).__name__}")


def packed_size(length: int) -> int:
    """Size in bytes of `length` packed bases, 4 bases per byte."""
    return (length + 3) >> 2


def pack(seq: Union[str, bytes]) -> bytes:
    """
    Packs a DNA sequence into bytes, 4 bases per byte.

    Case and N are not preserved; N packs as T.

    Examples:
        >>> pack('ACGT')
        b'\\x9c'
    """
    return Alphabet.DNA.pack(seq)


def unpack(packed: bytes, length: int) -> str:
    """
    Unpacks `length` bases from packed bytes as an uppercase string.

    Examples:
        >>> unpack(pack('acgtn'), 5)
        'ACGTT'
    """
    return Alphabet.DNA.decode(Alphabet.DNA.unpack(packed, length)).decode(Alphabet.ENCODING)


# Initialize Standard Alphabets
Alphabet.DNA = Alphabet(b'TCAG', aliases={b'N': b'T'})


# Kernels --------------------------------------------------------------------------------------------------------------
@jit(nopython=True, cache=True, nogil=True)
def _pack_seq_kernel(data, length, bits):
    per_byte = 8 // bits
    n_bytes = (length + per_byte - 1) // per_byte
    out = np.zeros(n_bytes, dtype=np.uint8)
    for i in range(length):
        byte_idx = i // per_byte
        bit_offset = (per_byte - 1 - (i % per_byte)) * bits
        out[byte_idx] |= (data[i] << bit_offset)
    return out


@jit(nopython=True, cache=True, nogil=True)
def _unpack_seq_kernel(packed, offset, length, bits):
    out = np.empty(length, dtype=np.uint8)
    per_byte = 8 // bits
    mask = (1 << bits) - 1
    for i in range(length):
        j = i + offset
        byte_idx = j // per_byte
        bit_offset = (per_byte - 1 - (j % per_byte)) * bits
        out[i] = (packed[byte_idx] >> bit_offset) & mask
    return out
