"""Positioned reads over files, handles and in-memory buffers."""
from io import IOBase
from pathlib import Path
from sys import stdin
from threading import Lock
from typing import Union, BinaryIO, Optional

from twobit.io import TruncatedInputError


# Classes --------------------------------------------------------------------------------------------------------------
class ByteSource:
    """
    Random access to the bytes of a 2bit file through ``read_at``.

    Seekable handles are accessed with a seek + read pair guarded by a per-source lock, so one
    source (and the reader on top of it) can be shared between threads. In-memory buffers are
    sliced directly.

    Examples:
        >>> source = ByteSource(b'0123456789')
        >>> source.read_at(3, 4)
        b'3456'
    """
    __slots__ = ('_handle', '_buffer', '_lock', '_close_on_exit')

    def __init__(self, data: Union[bytes, bytearray, memoryview, BinaryIO], close_on_exit: bool = False):
        """
        Args:
            data: A bytes-like object or a seekable binary handle.
            close_on_exit: Whether ``close`` should also close the handle.
        """
        self._handle: Optional[BinaryIO] = None
        self._buffer: Optional[memoryview] = None
        if isinstance(data, (bytes, bytearray, memoryview)): self._buffer = memoryview(data).cast('B')
        else: self._handle = data
        self._lock = Lock()
        self._close_on_exit = close_on_exit

    def __enter__(self): return self
    def __exit__(self, exc_type, exc_val, exc_tb): self.close()

    def read_at(self, offset: int, size: int) -> bytes:
        """
        Reads up to ``size`` bytes starting at absolute ``offset``.

        The result is only shorter than ``size`` when the source ends first.
        """
        if offset < 0 or size < 0: raise ValueError(f"Negative offset or size ({offset}, {size})")
        if self._buffer is not None: return bytes(self._buffer[offset:offset + size])
        with self._lock:
            self._handle.seek(offset)
            chunks, remaining = [], size
            while remaining > 0:
                chunk = self._handle.read(remaining)
                if not chunk: break
                chunks.append(chunk)
                remaining -= len(chunk)
        return b''.join(chunks)

    def read_exact(self, offset: int, size: int, what: str = 'data') -> bytes:
        """
        Reads exactly ``size`` bytes starting at ``offset``.

        Raises:
            TruncatedInputError: If the source ends first.
        """
        data = self.read_at(offset, size)
        if len(data) != size:
            raise TruncatedInputError(f"Failed to read {what}: expected {size} bytes at offset {offset}, got {len(data)}")
        return data

    def close(self):
        """Closes the underlying handle if this source opened it."""
        if self._close_on_exit and self._handle is not None: self._handle.close()
        if self._buffer is not None: self._buffer.release()


# Functions ------------------------------------------------------------------------------------------------------------
def open_source(file: Union[str, Path, bytes, bytearray, memoryview, BinaryIO]) -> ByteSource:
    """
    Resolves a path, buffer or handle into a ``ByteSource``.

    Paths are opened in binary mode and closed with the source. ``'-'`` reads stdin. Handles that
    cannot seek are read into memory once.

    Args:
        file: File path, ``'-'``, bytes-like object or binary handle.

    Returns:
        A ``ByteSource`` over the file's bytes.
    """
    if isinstance(file, (bytes, bytearray, memoryview)): return ByteSource(file)
    if isinstance(file, IOBase) or hasattr(file, 'read'):
        try: seekable = file.seekable()
        except AttributeError: seekable = hasattr(file, 'seek')
        if seekable: return ByteSource(file)
        return ByteSource(file.read())
    if isinstance(file, str) and file == '-': return ByteSource(stdin.buffer.read())
    return ByteSource(open(Path(file).expanduser(), mode='rb'), close_on_exit=True)
