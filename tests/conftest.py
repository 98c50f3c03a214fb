import numpy as np
import pytest

from twobit import TwoBitWriter, TwoBitReader

SEED_NAME = 'ex1'
SEED_SEQ = 'ACTgcctttnnnNantnaCgc'
SEED_PACKED = b'\x93\x50\x00\x20\x27\x40'


def build_2bit(entries: list[tuple[str, int, list, list, bytes]], order: str = '<', signature: int = 0x1A412743,
               version: int = 0, reserved: int = 0, record_reserved: int = 0) -> bytes:
    """
    Builds a 2bit file by hand, independently of TwoBitWriter.

    entries: (name, dna_size, n_blocks, mask_blocks, packed) tuples, blocks as (start, length) lists.
    """
    u32 = np.dtype(f'{order}u4')
    def words(*values): return np.array(values, dtype=u32).tobytes()

    header = words(signature, version, len(entries), reserved)
    index_len = sum(1 + len(name) + 4 for name, *_ in entries)
    offset = 16 + index_len
    index, records = b'', b''
    for name, size, n_blocks, m_blocks, packed in entries:
        index += bytes([len(name)]) + name.encode() + words(offset)
        record = words(size)
        for blocks in (n_blocks, m_blocks):
            record += words(len(blocks)) + words(*[s for s, _ in blocks]) + words(*[l for _, l in blocks])
        record += words(record_reserved) + packed
        records += record
        offset += len(record)
    return header + index + records


@pytest.fixture
def seed_writer() -> TwoBitWriter:
    writer = TwoBitWriter()
    writer.add(SEED_NAME, SEED_SEQ)
    return writer


@pytest.fixture
def seed_bytes() -> bytes:
    return build_2bit([(SEED_NAME, 21, [(9, 4), (14, 1), (16, 1)], [(3, 9), (13, 5), (19, 2)], SEED_PACKED)])


@pytest.fixture
def seed_reader(seed_bytes) -> TwoBitReader:
    return TwoBitReader.open(seed_bytes)
