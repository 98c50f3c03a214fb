"""Conversion between FASTA and 2bit."""
from pathlib import Path
from typing import Union, BinaryIO, Generator, Iterable
from warnings import warn

from twobit.io import TwoBitWarning
from twobit.io.open import Xopen

_CHUNK_SIZE = 65536
_WHITESPACE = b' \t\r\n\v\f'


# Functions ------------------------------------------------------------------------------------------------------------
def _read_entries(handle: BinaryIO) -> Generator[tuple[bytes, list[bytes]], None, None]:
    """Yields ``(header, sequence chunks)`` for each '>' entry; chunks still hold newlines."""
    buf = b""
    header = None
    seq_parts = []

    while True:
        chunk = handle.read(_CHUNK_SIZE)
        if not chunk:
            if header is not None:
                if buf: seq_parts.append(buf)
                yield header, seq_parts
            elif buf.startswith(b'>'):  # final header line without a newline
                yield buf[1:].rstrip(), []
            break

        buf += chunk
        pos = 0

        while True:
            gt_pos = buf.find(b'>', pos)

            if gt_pos == -1:
                if header is not None: seq_parts.append(buf[pos:])
                buf = b""
                break

            if header is not None:
                seq_parts.append(buf[pos:gt_pos])
                yield header, seq_parts
                seq_parts = []
                header = None

            nl_pos = buf.find(b'\n', gt_pos)
            if nl_pos == -1:
                buf = buf[gt_pos:]
                break

            header = buf[gt_pos + 1:nl_pos].rstrip()
            pos = nl_pos + 1


def read_fasta(file: Union[str, Path, BinaryIO]) -> Generator[tuple[str, bytes], None, None]:
    """
    Reads FASTA entries, gzip/bzip2/xz compressed or not.

    The name is the first whitespace-delimited token of the header line. Entries with an empty
    name are skipped with a ``TwoBitWarning``.

    Args:
        file: File path, ``'-'`` for stdin, or a binary handle.

    Yields:
        ``(name, sequence)`` with all whitespace removed from the sequence.

    Examples:
        >>> from io import BytesIO
        >>> list(read_fasta(BytesIO(b'>ex1 test\\nACGT\\nnn\\n')))
        [('ex1', b'ACGTnn')]
    """
    with Xopen(file, 'rb') as handle:
        for header, seq_parts in _read_entries(handle):
            name = header.split(None, 1)[0].decode('ascii') if header.strip() else ''
            if not name:
                warn("Skipping FASTA entry with an empty name", TwoBitWarning)
                continue
            yield name, b''.join(seq_parts).translate(None, delete=_WHITESPACE)


def write_fasta(items: Iterable[tuple[str, str]], file: Union[str, Path, BinaryIO], width: int = 60) -> int:
    """
    Writes ``(name, sequence)`` pairs as FASTA.

    Args:
        items: Pairs to write, e.g. ``TwoBitReader.items()``.
        file: File path (compressed by extension), ``'-'`` for stdout, or a binary handle.
        width: Line width for sequence wrapping (0 for no wrapping).

    Returns:
        The number of entries written.
    """
    n = 0
    with Xopen(file, 'wb') as handle:
        for name, seq in items:
            handle.write(b'>' + name.encode('ascii') + b'\n')
            data = seq.encode('ascii') if isinstance(seq, str) else bytes(seq)
            if width > 0:
                for i in range(0, len(data), width): handle.write(data[i:i + width] + b'\n')
            else:
                handle.write(data + b'\n')
            n += 1
    return n
