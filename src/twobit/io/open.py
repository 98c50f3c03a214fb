"""Opening of text-format sequence files (FASTA), with transparent compression."""
from io import IOBase
from typing import Union, BinaryIO, Optional
from pathlib import Path
from sys import stdout, stdin
from importlib import import_module


# Classes --------------------------------------------------------------------------------------------------------------
class Xopen:
    """
    Opens text-format inputs and outputs (FASTA), handling compression transparently.

    Compression is sniffed from the magic bytes when reading and taken from the file extension
    when writing.

    Examples:
        >>> with Xopen("genome.fa.gz", "rb") as f:
        ...     content = f.read()
    """
    _MAGIC = {
        b'\x1f\x8b': 'gzip',
        b'\x42\x5a': 'bz2',
        b'\xfd7zXZ\x00': 'lzma',
    }
    _EXT_TO_PKG = {'gz': 'gzip', 'bz2': 'bz2', 'xz': 'lzma'}
    _MIN_N_BYTES = max(len(i) for i in _MAGIC.keys())
    _OPEN_FUNCS = {}

    def __init__(self, file: Union[str, Path, BinaryIO], mode: str = 'rb'):
        """
        Args:
            file: File path (str or Path), ``'-'`` for stdin/stdout, or an existing binary handle.
            mode: File opening mode ('rb' or 'wb').
        """
        self.file = file
        self.mode = mode
        self._handle: Optional[BinaryIO] = None
        self._raw: Optional[BinaryIO] = None
        self._close_on_exit = False

    def __enter__(self) -> BinaryIO:
        self._handle = self._open()
        return self._handle

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._close_on_exit and self._handle: self._handle.close()
        if self._raw is not None and self._raw is not self._handle: self._raw.close()

    def _get_opener(self, pkg_name: str):
        if pkg_name not in self._OPEN_FUNCS: self._OPEN_FUNCS[pkg_name] = import_module(pkg_name).open
        return self._OPEN_FUNCS[pkg_name]

    def _open(self) -> BinaryIO:
        writing = 'w' in self.mode or 'a' in self.mode
        if isinstance(self.file, IOBase) or hasattr(self.file, 'read' if not writing else 'write'):
            raw_stream, should_close = self.file, False
        elif isinstance(self.file, str) and self.file == '-':
            return stdout.buffer if writing else stdin.buffer
        else:
            path = Path(self.file).expanduser()
            if writing:
                self._close_on_exit = True
                if pkg := self._EXT_TO_PKG.get(path.suffix.lower().lstrip('.')):
                    return self._get_opener(pkg)(path, mode=self.mode)
                return open(path, mode=self.mode)
            raw_stream, should_close = open(path, mode='rb'), True
            self._raw = raw_stream

        if writing: return raw_stream

        # Only seekable streams can be sniffed without consuming them
        try: seekable = raw_stream.seekable()
        except AttributeError: seekable = False
        self._close_on_exit = should_close
        if not seekable: return raw_stream
        start = raw_stream.read(self._MIN_N_BYTES)
        raw_stream.seek(0)
        for magic, pkg in self._MAGIC.items():
            if start.startswith(magic):
                self._close_on_exit = True
                return self._get_opener(pkg)(raw_stream, mode='rb')
        return raw_stream
