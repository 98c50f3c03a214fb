"""Ordered (start, length) block sets and maximal-run detection over sequences."""
from typing import Union, Iterable, Callable, Final, Iterator

import numpy as np

from twobit.core.alphabet import as_bytes


# Constants ------------------------------------------------------------------------------------------------------------
N_SYMBOLS: Final = b'Nn'
LOWERCASE: Final = bytes(range(ord('a'), ord('z') + 1))


# Classes --------------------------------------------------------------------------------------------------------------
class Blocks:
    """
    Immutable set of half-open blocks stored as parallel ``starts`` / ``lengths`` arrays,
    always sorted by start.

    Iterating yields ``(start, length)`` tuples of Python ints.

    Examples:
        >>> blocks = Blocks.detect('ACnnGn', N_SYMBOLS)
        >>> list(blocks)
        [(2, 2), (5, 1)]
        >>> blocks.total
        3
    """
    __slots__ = ('_starts', '_lengths')
    DTYPE: Final = np.uint32

    def __init__(self, starts: Iterable[int] = None, lengths: Iterable[int] = None):
        """
        Initializes a block set.

        Args:
            starts: Block start positions (0-based).
            lengths: Block lengths, paired with ``starts`` by index.

        Raises:
            ValueError: If the arrays differ in size or hold negative values.
        """
        starts = np.asarray(starts if starts is not None else [], dtype=np.int64).ravel()
        lengths = np.asarray(lengths if lengths is not None else [], dtype=np.int64).ravel()
        if starts.shape != lengths.shape:
            raise ValueError(f"Got {len(starts)} starts but {len(lengths)} lengths")
        if np.any(starts < 0) or np.any(lengths < 0): raise ValueError("Block starts and lengths must be >= 0")
        order = np.argsort(starts, kind='stable')
        self._starts = starts[order].astype(self.DTYPE)
        self._lengths = lengths[order].astype(self.DTYPE)
        self._starts.flags.writeable = False
        self._lengths.flags.writeable = False

    @classmethod
    def empty(cls) -> 'Blocks':
        """Returns a block set with no blocks."""
        return cls()

    @classmethod
    def build(cls, pairs: Iterable[tuple[int, int]]) -> 'Blocks':
        """Creates a block set from ``(start, length)`` pairs."""
        pairs = list(pairs)
        if not pairs: return cls()
        starts, lengths = zip(*pairs)
        return cls(starts, lengths)

    @classmethod
    def from_mask(cls, mask: np.ndarray) -> 'Blocks':
        """
        Finds the maximal runs of True in a boolean array.

        Args:
            mask: 1-D boolean array.

        Returns:
            One block per run.
        """
        mask = np.asarray(mask, dtype=bool).ravel()
        if not len(mask): return cls()
        edges = np.diff(np.concatenate(([False], mask, [False])).astype(np.int8))
        starts = np.flatnonzero(edges == 1)
        ends = np.flatnonzero(edges == -1)
        return cls(starts, ends - starts)

    @classmethod
    def detect(cls, seq: Union[str, bytes], predicate: Union[bytes, Callable[[str], bool]]) -> 'Blocks':
        """
        Scans a sequence left to right and returns the maximal runs of symbols that match.

        Args:
            seq: The sequence as str or ASCII bytes.
            predicate: Either the member symbols as bytes, or a callable taking a one-character
                string and returning whether it belongs to a run.

        Returns:
            The runs as a ``Blocks``.

        Examples:
            >>> list(Blocks.detect('ACTgcNnA', str.islower))
            [(3, 2), (6, 1)]
        """
        data = np.frombuffer(as_bytes(seq), dtype=np.uint8)
        table = np.zeros(256, dtype=bool)
        if callable(predicate):
            for code in np.unique(data).tolist(): table[code] = bool(predicate(chr(code)))
        else:
            table[np.frombuffer(as_bytes(predicate), dtype=np.uint8)] = True
        return cls.from_mask(table[data])

    def __len__(self) -> int: return len(self._starts)
    def __repr__(self): return f"<Blocks: {list(self)}>"

    def __iter__(self) -> Iterator[tuple[int, int]]:
        return zip(self._starts.tolist(), self._lengths.tolist())

    def __getitem__(self, item: int) -> tuple[int, int]:
        return int(self._starts[item]), int(self._lengths[item])

    def __eq__(self, other):
        if not isinstance(other, Blocks): return NotImplemented
        return np.array_equal(self._starts, other._starts) and np.array_equal(self._lengths, other._lengths)

    def __hash__(self): return hash((self._starts.tobytes(), self._lengths.tobytes()))

    @property
    def starts(self) -> np.ndarray: return self._starts
    @property
    def lengths(self) -> np.ndarray: return self._lengths

    @property
    def ends(self) -> np.ndarray:
        """Exclusive end positions, widened to int64 so they cannot wrap."""
        return self._starts.astype(np.int64) + self._lengths

    @property
    def total(self) -> int:
        """Sum of all block lengths."""
        return int(self._lengths.sum(dtype=np.int64))

    @property
    def is_disjoint(self) -> bool:
        """True if no two non-empty blocks share a position."""
        keep = self._lengths > 0
        starts, ends = self._starts[keep].astype(np.int64), self.ends[keep]
        return not np.any(starts[1:] < ends[:-1])

    def query(self, start: int, end: int) -> np.ndarray:
        """
        Returns the indices of blocks overlapping the half-open range ``[start, end)``.

        A block that only touches the range (ends at ``start`` or begins at ``end``) does not overlap.
        """
        starts = self._starts.astype(np.int64)
        return np.flatnonzero((self.ends > start) & (starts < end) & (self._lengths > 0))

    def clip(self, start: int, end: int) -> list[tuple[int, int]]:
        """
        Clips the overlapping blocks to ``[start, end)`` and shifts them to local coordinates.

        Returns:
            ``(lo, hi)`` pairs with ``0 <= lo < hi <= end - start``.
        """
        idx = self.query(start, end)
        lo = np.maximum(self._starts[idx].astype(np.int64), start) - start
        hi = np.minimum(self.ends[idx], end) - start
        return list(zip(lo.tolist(), hi.tolist()))
