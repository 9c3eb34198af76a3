from __future__ import annotations

import numpy as np
import pytest

from repclust import InvalidArgumentError, WeightMatrix, find_period_weights


class TestFindPeriodWeights:
    def test_no_incomplete_period(self):
        assert find_period_weights(4, 4, 10, False) == (1.0, None)
        assert find_period_weights(4, 4, 10, True) == (1.0, None)

    def test_drop_incomplete_period(self):
        complete, incomplete = find_period_weights(4, 2, 3, True)
        assert complete == pytest.approx((4 * 2 + 2) / (4 * 2))
        assert complete == pytest.approx(1.25)
        assert incomplete is None

    def test_keep_incomplete_period(self):
        assert find_period_weights(4, 2, 3, False) == (1.0, 1.0)

    def test_drop_only_period(self):
        with pytest.raises(InvalidArgumentError, match='no complete periods'):
            find_period_weights(4, 2, 1, True)

    def test_keep_only_period(self):
        assert find_period_weights(4, 2, 1, False) == (1.0, 1.0)


class TestWeightMatrix:
    def test_assign_and_read(self):
        wm = WeightMatrix(3, 2)
        wm.assign(1, 2, 1.5)
        wm.assign(3, 1, 1.0)
        assert wm.shape == (3, 2)
        assert wm.nnz == 2
        assert wm[1, 2] == 1.5
        assert wm[2, 1] == 0.0
        np.testing.assert_array_equal(wm.to_dense(), [[0.0, 1.5], [0.0, 0.0], [1.0, 0.0]])

    def test_one_entry_per_row(self):
        wm = WeightMatrix(2, 2)
        wm.assign(1, 1, 1.0)
        with pytest.raises(ValueError, match='already assigned'):
            wm.assign(1, 2, 1.0)

    def test_reassign_same_column_overwrites(self):
        wm = WeightMatrix(2, 2)
        wm.assign(1, 1, 1.0)
        wm.assign(1, 1, 2.0)
        assert wm[1, 1] == 2.0
        assert wm.nnz == 1

    @pytest.mark.parametrize(('period', 'rp'), [(0, 1), (3, 1), (1, 0), (1, 3)])
    def test_out_of_range(self, period, rp):
        with pytest.raises(IndexError):
            WeightMatrix(2, 2).assign(period, rp, 1.0)

    def test_negative_weight(self):
        with pytest.raises(ValueError, match='non-negative'):
            WeightMatrix(2, 2).assign(1, 1, -1.0)

    def test_frames(self):
        wm = WeightMatrix(3, 2)
        wm.assign(3, 1, 0.5)
        wm.assign(1, 1, 1.0)
        wm.assign(2, 2, 1.0)
        weights = wm.to_frame()
        assert weights['period'].to_list() == [1, 2, 3]
        assert weights['rep_period'].to_list() == [1, 2, 1]
        assert weights['weight'].to_list() == [1.0, 1.0, 0.5]
        totals = wm.rep_period_weights()
        assert totals['rep_period'].to_list() == [1, 2]
        assert totals['weight'].to_list() == [1.5, 1.0]
        assert wm.assignments() == {1: 1, 2: 2, 3: 1}

    def test_sparse_and_dense_roundtrip(self):
        wm = WeightMatrix(3, 2)
        wm.assign(1, 2, 1.25)
        wm.assign(2, 1, 1.25)
        sparse = wm.to_sparse()
        assert sparse.shape == (3, 2)
        assert sparse.nnz == 2
        restored = WeightMatrix.from_dense(wm.to_dense())
        assert restored.assignments() == wm.assignments()

    def test_from_dense_rejects_two_entries_per_row(self):
        with pytest.raises(ValueError, match='already assigned'):
            WeightMatrix.from_dense(np.array([[1.0, 1.0]]))
