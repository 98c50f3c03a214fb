import pytest
from twobit.io import TruncatedInputError, MalformedIndexError
from twobit.io.header import ByteOrder
from twobit.io.index import parse_index, serialize_index, index_size, encode_name
from twobit.io.source import ByteSource

_PREFIX = b'\x00' * 16


class TestParseIndex:
    def test_entries_in_file_order(self):
        data = _PREFIX + serialize_index([('chr2', 100), ('chr1', 200)])
        index, end = parse_index(ByteSource(data), 2, ByteOrder.LITTLE)
        assert list(index.items()) == [('chr2', 100), ('chr1', 200)]
        assert end == len(data)

    def test_big_endian_offsets(self):
        data = _PREFIX + b'\x02ab' + bytes.fromhex('00000102')
        index, _ = parse_index(ByteSource(data), 1, ByteOrder.BIG)
        assert index == {'ab': 258}

    def test_truncated(self):
        data = _PREFIX + serialize_index([('chr1', 100)])
        with pytest.raises(TruncatedInputError, match="file index"):
            parse_index(ByteSource(data[:-2]), 1, ByteOrder.LITTLE)

    def test_count_larger_than_index(self):
        data = _PREFIX + serialize_index([('chr1', 100)])
        with pytest.raises(TruncatedInputError):
            parse_index(ByteSource(data), 2, ByteOrder.LITTLE)

    def test_duplicate_name(self):
        data = _PREFIX + serialize_index([('chr1', 100), ('chr1', 200)])
        with pytest.raises(MalformedIndexError, match="more than once"):
            parse_index(ByteSource(data), 2, ByteOrder.LITTLE)


class TestSerializeIndex:
    def test_layout(self):
        assert serialize_index([('ex1', 24)]) == b'\x03ex1' + bytes.fromhex('18000000')

    def test_size(self):
        assert index_size(['ex1', 'chrM']) == len(serialize_index([('ex1', 0), ('chrM', 0)])) == 17

    @pytest.mark.parametrize('name', ['', 'x' * 256, 'chrÄ'])
    def test_invalid_names(self, name):
        with pytest.raises(ValueError):
            encode_name(name)

    def test_max_length_name(self):
        assert len(encode_name('x' * 255)) == 255
