"""
Tests for Dense, SymDense and TriDense.
"""

import numpy as np
import pytest

from vecmat import Dense, IndexOutOfRange, ShapeError, SymDense, TriDense, Vector


M = np.arange(1.0, 13.0).reshape(3, 4)


class TestDense:

    def test_dims_and_at(self):
        m = Dense(3, 4, M.copy())
        assert m.dims() == (3, 4)
        assert m.at(2, 1) == 10.0

    def test_flat_data(self):
        m = Dense(2, 2, [1, 2, 3, 4])
        np.testing.assert_array_equal(m.to_array(), [[1.0, 2.0], [3.0, 4.0]])

    def test_shares_numpy_storage(self):
        data = np.zeros(4)
        m = Dense(2, 2, data)
        m.set(1, 0, 5.0)
        assert data[2] == 5.0

    @pytest.mark.parametrize("r, c", [(0, 2), (2, 0), (-1, 1)])
    def test_bad_dims(self, r, c):
        with pytest.raises(ShapeError):
            Dense(r, c)

    def test_data_size_mismatch(self):
        with pytest.raises(ShapeError):
            Dense(2, 2, [1.0, 2.0, 3.0])

    @pytest.mark.parametrize("i, j", [(-1, 0), (3, 0), (0, 4), (0, -1)])
    def test_at_out_of_range(self, i, j):
        with pytest.raises(IndexOutOfRange):
            Dense(3, 4, M.copy()).at(i, j)

    def test_row_and_col(self):
        m = Dense(3, 4, M.copy())
        np.testing.assert_array_equal(m.row(None, 1), M[1])
        np.testing.assert_array_equal(m.col(None, 2), M[:, 2])
        buf = np.empty(4)
        assert m.row(buf, 0) is buf

    def test_col_view_is_strided(self):
        m = Dense(3, 4, M.copy())
        col = m.col_view(1)
        assert isinstance(col, Vector)
        assert col.raw_vector().inc == 4
        np.testing.assert_array_equal(col.to_array(), M[:, 1])

        col.set_vec(2, -1.0)
        assert m.at(2, 1) == -1.0

    def test_row_view(self):
        m = Dense(3, 4, M.copy())
        row = m.row_view(2)
        assert row.raw_vector().inc == 1
        np.testing.assert_array_equal(row.to_array(), M[2])
        row.scale_vec(2.0, row)
        np.testing.assert_array_equal(m.to_array()[2], 2.0 * M[2])

    def test_view_out_of_range(self):
        with pytest.raises(IndexOutOfRange):
            Dense(3, 4, M.copy()).col_view(4)
        with pytest.raises(IndexOutOfRange):
            Dense(3, 4, M.copy()).row_view(3)

    def test_transpose(self):
        t = Dense(3, 4, M.copy()).T
        assert t.dims() == (4, 3)
        assert t.at(3, 0) == M[0, 3]


class TestSymDense:

    def test_mirrors_upper_triangle(self):
        s = SymDense(2, [1.0, 2.0, 99.0, 3.0])
        assert s.at(1, 0) == 2.0
        assert s.at(0, 1) == 2.0

    def test_set_sym(self):
        s = SymDense(3)
        s.set_sym(2, 0, 4.0)
        assert s.at(0, 2) == 4.0
        assert s.at(2, 0) == 4.0

    def test_out_of_range(self):
        with pytest.raises(IndexOutOfRange):
            SymDense(2).at(2, 0)

    def test_bad_order(self):
        with pytest.raises(ShapeError):
            SymDense(0)


class TestTriDense:

    def test_upper_reads_zero_below(self):
        t = TriDense(2, True, [1.0, 2.0, 3.0, 4.0])
        assert t.at(0, 1) == 2.0
        assert t.at(1, 0) == 0.0

    def test_lower_reads_zero_above(self):
        t = TriDense(2, False, [1.0, 2.0, 3.0, 4.0])
        assert t.at(1, 0) == 3.0
        assert t.at(0, 1) == 0.0

    def test_set_tri_outside_triangle(self):
        t = TriDense(2, True)
        with pytest.raises(IndexOutOfRange):
            t.set_tri(1, 0, 1.0)
        t.set_tri(0, 1, 1.0)
        assert t.at(0, 1) == 1.0

    def test_unit_diagonal_reads_one(self):
        t = TriDense(2, True, [5.0, 2.0, 3.0, 7.0], unit=True)
        assert t.is_unit()
        assert t.at(0, 0) == 1.0
        assert t.at(1, 1) == 1.0
        assert t.at(0, 1) == 2.0
        assert t.at(1, 0) == 0.0

    def test_unit_diagonal_not_settable(self):
        t = TriDense(2, False, unit=True)
        with pytest.raises(IndexOutOfRange):
            t.set_tri(1, 1, 4.0)
        t.set_tri(1, 0, 4.0)
        assert t.at(1, 0) == 4.0

    def test_unit_product_ignores_stored_diagonal(self):
        t = TriDense(2, True, [5.0, 2.0, 3.0, 7.0], unit=True)
        v = Vector()
        v.mul_vec(t, Vector(2, [1.0, 1.0]))
        np.testing.assert_array_equal(v.to_array(), [3.0, 1.0])
