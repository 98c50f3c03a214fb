import gzip
from io import BytesIO

import pytest
import twobit
from twobit import TwoBitWriter, TwoBitWarning, read_fasta, write_fasta

from conftest import SEED_NAME, SEED_SEQ

FASTA = b'>ex1 an example\nACTgcctttn\nnnNantnaCg\nc\n>chrM\r\nttgg cca\r\n>empty\n'


class TestReadFasta:
    def test_entries(self):
        assert list(read_fasta(BytesIO(FASTA))) == [
            ('ex1', SEED_SEQ.encode()), ('chrM', b'ttggcca'), ('empty', b'')
        ]

    def test_gzip_path(self, tmp_path):
        path = tmp_path / 'seqs.fa.gz'
        path.write_bytes(gzip.compress(FASTA))
        assert [name for name, _ in read_fasta(path)] == ['ex1', 'chrM', 'empty']

    def test_gzip_handle(self):
        assert dict(read_fasta(BytesIO(gzip.compress(FASTA))))['ex1'] == SEED_SEQ.encode()

    def test_large_entry_spans_chunks(self):
        seq = b'ACGT' * 50000
        data = b'>big\n' + b'\n'.join(seq[i:i + 80] for i in range(0, len(seq), 80)) + b'\n>next\nA\n'
        assert list(read_fasta(BytesIO(data))) == [('big', seq), ('next', b'A')]

    def test_empty_name_skipped(self):
        with pytest.warns(TwoBitWarning, match="empty name"):
            entries = list(read_fasta(BytesIO(b'>\nACGT\n>ok\nGG\n')))
        assert entries == [('ok', b'GG')]

    @pytest.mark.parametrize('data, expected', [
        (b'>a\nACGT\n>b', [('a', b'ACGT'), ('b', b'')]),
        (b'>a', [('a', b'')]),
        (b'>a desc\r', [('a', b'')]),
    ])
    def test_last_header_without_newline(self, data, expected):
        assert list(read_fasta(BytesIO(data))) == expected

    def test_no_entries(self):
        assert list(read_fasta(BytesIO(b''))) == []


class TestAddFasta:
    def test_add(self, seed_writer):
        writer = TwoBitWriter()
        assert writer.add_fasta(BytesIO(FASTA)) == 3
        assert writer.names() == ['ex1', 'chrM', 'empty']
        assert writer.packed(SEED_NAME) == seed_writer.packed(SEED_NAME)
        assert twobit.open(writer.tobytes()).read('chrM') == 'ttggcca'

    def test_final_header_without_newline(self):
        writer = TwoBitWriter()
        assert writer.add_fasta(BytesIO(b'>a\nACGT\n>b')) == 2
        assert writer.names() == ['a', 'b']
        assert writer.record('b').dna_size == 0


class TestWriteFasta:
    def test_wrapping(self):
        buffer = BytesIO()
        assert write_fasta([('a', 'ACGTACG'), ('b', 'TT')], buffer, width=3) == 2
        assert buffer.getvalue() == b'>a\nACG\nTAC\nG\n>b\nTT\n'

    def test_no_wrapping(self):
        buffer = BytesIO()
        write_fasta([(SEED_NAME, SEED_SEQ)], buffer, width=0)
        assert buffer.getvalue() == f'>{SEED_NAME}\n{SEED_SEQ}\n'.encode()

    def test_round_trip_through_2bit(self, seed_reader, tmp_path):
        path = tmp_path / 'out.fa.gz'
        write_fasta(seed_reader.items(), path)
        assert gzip.decompress(path.read_bytes()) == f'>{SEED_NAME}\n{SEED_SEQ}\n'.encode()
        assert list(read_fasta(path)) == [(SEED_NAME, SEED_SEQ.encode())]

    def test_file_named_stdout_is_a_path(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        write_fasta([('a', 'ACGT')], 'stdout')
        assert (tmp_path / 'stdout').read_bytes() == b'>a\nACGT\n'
