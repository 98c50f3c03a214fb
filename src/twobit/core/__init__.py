"""
Core codec primitives: the 2-bit nucleotide alphabet and block (run) sets.
"""
from twobit.core.alphabet import (Alphabet, AlphabetError, UnsupportedBaseError, as_bytes, pack, unpack,
                                  packed_size)
from twobit.core.interval import Blocks, N_SYMBOLS, LOWERCASE
