"""
Dense matrix types.

Row-major float64 storage in a flat numpy array.

    Dense       general r x c matrix     (RawMatrixer, Vectorer)
    SymDense    symmetric n x n matrix   (RawSymmetricer)
    TriDense    triangular n x n matrix  (RawTriangular)

Dense.row_view / Dense.col_view return Vectors sharing the matrix storage;
a column view has an increment equal to the row stride.
"""

from typing import Optional, Tuple

import numpy as np

from vecmat import blas64
from vecmat.blas64 import Diag, Uplo
from vecmat.core.matrix import Matrix, RawMatrixer, RawSymmetricer, RawTriangular, Vectorer
from vecmat.core.vector import ArrayLike, Vector
from vecmat.core.workspace import allocate
from vecmat.errors import IndexOutOfRange, ShapeError


def _backing(name: str, size: int, data: Optional[ArrayLike]) -> np.ndarray:
    if data is None:
        return allocate(size)
    buf = np.asarray(data, dtype=np.float64)
    if buf.ndim == 2:
        buf = buf.ravel()
    if buf.ndim != 1 or buf.size != size:
        raise ShapeError(name, expected=(size,), got=(buf.size,))
    if not buf.flags.c_contiguous:
        buf = np.ascontiguousarray(buf)
    return buf


class Dense(Matrix, RawMatrixer, Vectorer):
    """
    General dense matrix.

    Args:
        r, c: Dimensions, both > 0.
        data: r*c values in row-major order (or an r x c array). A
            contiguous float64 array is used without copying. None
            allocates zeros.
    """

    def __init__(self, r: int, c: int, data: Optional[ArrayLike] = None):
        if r <= 0 or c <= 0:
            raise ShapeError("Dense", expected=(1, 1), got=(r, c))
        self._mat = blas64.General(rows=r, cols=c, stride=c, data=_backing("Dense", r * c, data))

    def dims(self) -> Tuple[int, int]:
        return self._mat.rows, self._mat.cols

    def _check(self, operation: str, i: int, j: int) -> None:
        if not 0 <= i < self._mat.rows:
            raise IndexOutOfRange(operation, i, self._mat.rows)
        if not 0 <= j < self._mat.cols:
            raise IndexOutOfRange(operation, j, self._mat.cols)

    def at(self, i: int, j: int) -> float:
        self._check("Dense.at", i, j)
        return float(self._mat.data[i * self._mat.stride + j])

    def set(self, i: int, j: int, value: float) -> None:
        self._check("Dense.set", i, j)
        self._mat.data[i * self._mat.stride + j] = value

    def raw_matrix(self) -> blas64.General:
        return self._mat

    def row(self, dst: Optional[np.ndarray], i: int) -> np.ndarray:
        self._check("Dense.row", i, 0)
        c, s = self._mat.cols, self._mat.stride
        if dst is None:
            dst = np.empty(c)
        dst[:c] = self._mat.data[i * s : i * s + c]
        return dst

    def col(self, dst: Optional[np.ndarray], j: int) -> np.ndarray:
        self._check("Dense.col", 0, j)
        r, s = self._mat.rows, self._mat.stride
        if dst is None:
            dst = np.empty(r)
        dst[:r] = self._mat.data[j : (r - 1) * s + j + 1 : s]
        return dst

    def row_view(self, i: int) -> Vector:
        """Row i as a Vector sharing storage."""
        self._check("Dense.row_view", i, 0)
        c, s = self._mat.cols, self._mat.stride
        return Vector._wrap(c, 1, self._mat.data[i * s : i * s + c])

    def col_view(self, j: int) -> Vector:
        """Column j as a strided Vector sharing storage."""
        self._check("Dense.col_view", 0, j)
        r, s = self._mat.rows, self._mat.stride
        return Vector._wrap(r, s, self._mat.data[j : (r - 1) * s + j + 1])

    def to_array(self) -> np.ndarray:
        """r x c copy of the matrix."""
        return np.array(blas64.as_matrix(self._mat.rows, self._mat.cols, self._mat.stride, self._mat.data))


class SymDense(Matrix, RawSymmetricer):
    """
    Symmetric matrix. The upper triangle is authoritative.

    Args:
        n: Order, > 0.
        data: n*n values in row-major order; only the upper triangle is read.
    """

    def __init__(self, n: int, data: Optional[ArrayLike] = None):
        if n <= 0:
            raise ShapeError("SymDense", expected=(1,), got=(n,))
        self._mat = blas64.Symmetric(n=n, stride=n, data=_backing("SymDense", n * n, data), uplo=Uplo.UPPER)

    def dims(self) -> Tuple[int, int]:
        return self._mat.n, self._mat.n

    def at(self, i: int, j: int) -> float:
        n = self._mat.n
        if not 0 <= i < n:
            raise IndexOutOfRange("SymDense.at", i, n)
        if not 0 <= j < n:
            raise IndexOutOfRange("SymDense.at", j, n)
        if i > j:
            i, j = j, i
        return float(self._mat.data[i * self._mat.stride + j])

    def set_sym(self, i: int, j: int, value: float) -> None:
        """Set (i, j) and (j, i)."""
        n = self._mat.n
        if not 0 <= i < n:
            raise IndexOutOfRange("SymDense.set_sym", i, n)
        if not 0 <= j < n:
            raise IndexOutOfRange("SymDense.set_sym", j, n)
        s = self._mat.stride
        self._mat.data[i * s + j] = value
        self._mat.data[j * s + i] = value

    def raw_symmetric(self) -> blas64.Symmetric:
        return self._mat


class TriDense(Matrix, RawTriangular):
    """
    Triangular matrix.

    Args:
        n: Order, > 0.
        upper: Upper (True) or lower (False) triangular.
        data: n*n values in row-major order; entries outside the triangle
            are ignored and read as 0.
        unit: The diagonal is implicitly all ones and is not read from data.
    """

    def __init__(
        self,
        n: int,
        upper: bool = True,
        data: Optional[ArrayLike] = None,
        unit: bool = False,
    ):
        if n <= 0:
            raise ShapeError("TriDense", expected=(1,), got=(n,))
        self._mat = blas64.Triangular(
            n=n,
            stride=n,
            data=_backing("TriDense", n * n, data),
            uplo=Uplo.UPPER if upper else Uplo.LOWER,
            diag=Diag.UNIT if unit else Diag.NON_UNIT,
        )

    def dims(self) -> Tuple[int, int]:
        return self._mat.n, self._mat.n

    def is_upper(self) -> bool:
        return self._mat.uplo == Uplo.UPPER

    def is_unit(self) -> bool:
        return self._mat.diag == Diag.UNIT

    def at(self, i: int, j: int) -> float:
        n = self._mat.n
        if not 0 <= i < n:
            raise IndexOutOfRange("TriDense.at", i, n)
        if not 0 <= j < n:
            raise IndexOutOfRange("TriDense.at", j, n)
        if (self.is_upper() and i > j) or (not self.is_upper() and i < j):
            return 0.0
        if i == j and self.is_unit():
            return 1.0
        return float(self._mat.data[i * self._mat.stride + j])

    def set_tri(self, i: int, j: int, value: float) -> None:
        """Set (i, j), which must lie inside the stored triangle (off the diagonal when unit)."""
        n = self._mat.n
        if not 0 <= i < n or not 0 <= j < n:
            raise IndexOutOfRange("TriDense.set_tri", (i, j), n)
        if (self.is_upper() and i > j) or (not self.is_upper() and i < j):
            raise IndexOutOfRange("TriDense.set_tri", (i, j), n)
        if i == j and self.is_unit():
            raise IndexOutOfRange("TriDense.set_tri", (i, j), n)
        self._mat.data[i * self._mat.stride + j] = value

    def raw_triangular(self) -> blas64.Triangular:
        return self._mat
