import numpy as np
import pytest
from twobit.core.interval import Blocks, N_SYMBOLS, LOWERCASE

from conftest import SEED_SEQ


class TestBlocksInit:
    def test_sorted_by_start(self):
        blocks = Blocks([16, 9, 14], [1, 4, 1])
        assert list(blocks) == [(9, 4), (14, 1), (16, 1)]
        assert blocks.starts.dtype == np.uint32

    def test_build(self):
        assert Blocks.build([(5, 2), (1, 1)]) == Blocks([1, 5], [1, 2])
        assert len(Blocks.build([])) == 0

    def test_mismatched_lengths(self):
        with pytest.raises(ValueError, match="starts but"):
            Blocks([1, 2], [1])

    def test_negative(self):
        with pytest.raises(ValueError, match=">= 0"):
            Blocks([-1], [2])

    def test_immutable(self):
        blocks = Blocks([1], [2])
        with pytest.raises(ValueError):
            blocks.starts[0] = 5

    def test_total_and_ends(self):
        blocks = Blocks([9, 14, 16], [4, 1, 1])
        assert blocks.total == 6
        np.testing.assert_array_equal(blocks.ends, [13, 15, 17])

    def test_ends_do_not_wrap(self):
        blocks = Blocks([0xFFFFFFF0], [0x20])
        assert blocks.ends[0] == 0x100000010

    def test_getitem(self):
        assert Blocks([3, 1], [1, 1])[0] == (1, 1)


class TestDetect:
    def test_seed_n_blocks(self):
        assert list(Blocks.detect(SEED_SEQ, N_SYMBOLS)) == [(9, 4), (14, 1), (16, 1)]

    def test_seed_mask_blocks(self):
        assert list(Blocks.detect(SEED_SEQ, LOWERCASE)) == [(3, 9), (13, 5), (19, 2)]

    def test_callable_predicate(self):
        assert Blocks.detect(SEED_SEQ, str.islower) == Blocks.detect(SEED_SEQ, LOWERCASE)
        assert list(Blocks.detect('NNaNN', lambda c: c in 'Nn')) == [(0, 2), (3, 2)]

    def test_run_open_at_end(self):
        assert list(Blocks.detect('ACGNNN', N_SYMBOLS)) == [(3, 3)]

    def test_whole_sequence(self):
        assert list(Blocks.detect('nnnn', N_SYMBOLS)) == [(0, 4)]

    def test_no_runs(self):
        assert len(Blocks.detect('ACGT', N_SYMBOLS)) == 0
        assert len(Blocks.detect('', N_SYMBOLS)) == 0

    def test_from_mask(self):
        mask = np.array([True, False, True, True, False, True])
        assert list(Blocks.from_mask(mask)) == [(0, 1), (2, 2), (5, 1)]


class TestQuery:
    @pytest.fixture
    def blocks(self):
        return Blocks([9, 14, 16], [4, 1, 1])

    def test_overlapping(self, blocks):
        np.testing.assert_array_equal(blocks.query(10, 15), [0, 1])

    def test_touching_is_not_overlap(self, blocks):
        assert len(blocks.query(13, 14)) == 0  # block 0 ends at 13, block 1 starts at 14
        assert len(blocks.query(0, 9)) == 0

    def test_clip_local_coordinates(self, blocks):
        assert blocks.clip(5, 11) == [(4, 6)]
        assert blocks.clip(10, 17) == [(0, 3), (4, 5), (6, 7)]

    def test_zero_length_blocks_ignored(self):
        assert Blocks([2], [0]).clip(0, 10) == []

    def test_disjoint(self, blocks):
        assert blocks.is_disjoint
        assert Blocks([0, 4], [4, 4]).is_disjoint
        assert Blocks([0, 2], [4, 0]).is_disjoint  # an empty block covers no position
        assert not Blocks([0, 2], [4, 4]).is_disjoint
        assert not Blocks([5, 5], [1, 1]).is_disjoint
