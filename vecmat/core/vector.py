"""
Vector
======

Dense float64 column vector over a strided buffer.

State:
    n     logical length
    mat   blas64.Strided(inc, data), element i at data[i * inc]

A vector with inc == 0 (and therefore n == 0) is a placeholder: it has no
shape yet and sizes itself on the first operation that writes into it.
A shaped vector never resizes; a mismatched result length raises ShapeError.
reset() turns any vector back into a placeholder.

Every arithmetic method writes into the receiver, which may be the same
object as one or both operands.

Usage:
    from vecmat import Vector, Dense

    a = Vector(3, [1, 2, 3])
    b = Vector(3, [4, 5, 6])

    v = Vector()
    v.add_scaled_vec(a, 2, b)   # [9, 12, 15]

    m = Dense(2, 3, [1, 0, 0, 0, 1, 0])
    w = Vector()
    w.mul_vec(m, a)             # [1, 2]
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence, Tuple, Union

import numpy as np

from vecmat import blas64
from vecmat.blas64 import Strided, Trans
from vecmat.core.matrix import (
    Matrix,
    MulPath,
    RawMatrixer,
    RawSymmetricer,
    RawTriangular,
    resolve_mul_path,
    untranspose,
)
from vecmat.core.workspace import allocate, get_workspace_pool
from vecmat.errors import IndexOutOfRange, ShapeError


logger = logging.getLogger(__name__)

ArrayLike = Union[Sequence[float], np.ndarray]


class Vector(Matrix):
    """
    Column vector of float64.

    Args:
        n: Length. 0 creates a placeholder.
        data: Backing values, must hold exactly n elements. A contiguous
            float64 numpy array is used as-is (storage is shared with the
            caller); anything else is converted. None allocates zeros.

    Raises:
        ShapeError: n is negative, data is not 1-D, or len(data) != n.
    """

    def __init__(self, n: int = 0, data: Optional[ArrayLike] = None):
        if n < 0:
            raise ShapeError("Vector", expected=(0,), got=(n,))

        if data is None:
            buf = allocate(n)
        else:
            buf = np.asarray(data, dtype=np.float64)
            if buf.ndim != 1:
                raise ShapeError("Vector", expected=(n,), got=buf.shape)
            if buf.size != n:
                raise ShapeError("Vector", expected=(n,), got=(buf.size,))
            if not buf.flags.c_contiguous:
                buf = np.ascontiguousarray(buf)

        self._n = n
        self._mat = Strided(1 if n > 0 else 0, buf)

    @classmethod
    def _wrap(cls, n: int, inc: int, data: np.ndarray) -> "Vector":
        """Vector over existing strided storage, no copy."""
        v = cls.__new__(cls)
        v._n = n
        v._mat = Strided(inc, data)
        return v

    # ─────────────────────────────────────────────────────────────────
    # Shape and element access
    # ─────────────────────────────────────────────────────────────────

    def dims(self) -> Tuple[int, int]:
        """(n, 1), or (0, 0) for a placeholder."""
        if self._is_zero():
            return 0, 0
        return self._n, 1

    def __len__(self) -> int:
        return self._n

    def at(self, i: int, j: int) -> float:
        if j != 0:
            raise IndexOutOfRange("Vector.at", (i, j), 1)
        return self.at_vec(i)

    def at_vec(self, i: int) -> float:
        """Element i."""
        if i < 0 or i >= self._n:
            raise IndexOutOfRange("Vector.at_vec", i, self._n)
        return float(self._mat.data[i * self._mat.inc])

    def set_vec(self, i: int, value: float) -> None:
        """Set element i."""
        if i < 0 or i >= self._n:
            raise IndexOutOfRange("Vector.set_vec", i, self._n)
        self._mat.data[i * self._mat.inc] = value

    def raw_vector(self) -> Strided:
        """The underlying strided buffer (shared, not copied)."""
        return self._mat

    def to_array(self) -> np.ndarray:
        """Contiguous copy of the logical elements."""
        return np.array(self._elems())

    def _elems(self) -> np.ndarray:
        return blas64.elements(self._n, self._mat)

    def _is_zero(self) -> bool:
        # inc and n are only ever zeroed together, see reset().
        return self._mat.inc == 0

    def _shares_storage(self, x) -> bool:
        """True if x (a vector or raw-storage matrix) may overlap the receiver's buffer."""
        if self._is_zero():
            return False
        if isinstance(x, Vector):
            other = x._mat.data
        elif isinstance(x, RawMatrixer):
            other = x.raw_matrix().data
        elif isinstance(x, RawSymmetricer):
            other = x.raw_symmetric().data
        elif isinstance(x, RawTriangular):
            other = x.raw_triangular().data
        else:
            return False
        return bool(np.may_share_memory(self._mat.data, other))

    def __repr__(self) -> str:
        if self._is_zero():
            return "Vector()"
        return f"Vector({self._n}, {self._elems().tolist()})"

    # ─────────────────────────────────────────────────────────────────
    # Lifecycle and views
    # ─────────────────────────────────────────────────────────────────

    def reset(self) -> None:
        """
        Turn the receiver into a placeholder so it can take the result of an
        operation with a different length.
        """
        self._mat = Strided(0, self._mat.data[:0])
        self._n = 0

    def _reuse_as(self, r: int, operation: str = "Vector") -> None:
        """Size a placeholder to r elements, or check a shaped vector has r."""
        if self._is_zero():
            if r == 0:
                return
            self._mat = Strided(1, allocate(r))
            self._n = r
            return
        if r != self._n:
            raise ShapeError(operation, expected=(self._n,), got=(r,))

    def view_vec(self, i: int, n: int) -> "Vector":
        """
        Sub-vector of n elements starting at element i.

        The view shares storage with the receiver: writes through either are
        visible in both.

        Raises:
            IndexOutOfRange: i < 0, n <= 0 or i + n > len(self).
        """
        if i < 0 or n <= 0 or i + n > self._n:
            raise IndexOutOfRange("Vector.view_vec", (i, n), self._n)
        inc = self._mat.inc
        return Vector._wrap(n, inc, self._mat.data[i * inc : (i + n - 1) * inc + 1])

    def clone_vec(self, a: "Vector") -> None:
        """Make the receiver an independent copy of a, whatever its prior shape."""
        if self is a:
            return
        n = len(a)
        if n == 0:
            self.reset()
            return
        self._mat = Strided(1, allocate(n))
        self._n = n
        blas64.copy(n, a._mat, self._mat)

    def copy_vec(self, a: "Vector") -> int:
        """
        Copy the overlapping prefix of a into the receiver.

        Like slice assignment without resizing: copies min(len(self), len(a))
        elements and never raises on a length mismatch.

        Returns:
            Number of elements copied.
        """
        n = min(self._n, len(a))
        if self is a:
            return n
        if self._shares_storage(a):
            # Overlapping views: numpy buffers the source.
            np.copyto(self._elems()[:n], a._elems()[:n])
        else:
            blas64.copy(n, a._mat, self._mat)
        return n

    # ─────────────────────────────────────────────────────────────────
    # Element-wise arithmetic
    # ─────────────────────────────────────────────────────────────────

    def scale_vec(self, alpha: float, a: "Vector") -> None:
        """v = alpha * a"""
        n = len(a)
        if self is not a:
            self._reuse_as(n, "Vector.scale_vec")
            if self._shares_storage(a):
                np.multiply(a._elems(), alpha, out=self._elems())
                return
            blas64.copy(n, a._mat, self._mat)
        if alpha != 1:
            blas64.scal(n, alpha, self._mat)

    def add_scaled_vec(self, a: "Vector", alpha: float, b: "Vector") -> None:
        """v = a + alpha * b"""
        if alpha == 1:
            self.add_vec(a, b)
            return
        if alpha == -1:
            self.sub_vec(a, b)
            return

        ar, br = len(a), len(b)
        if ar != br:
            raise ShapeError("Vector.add_scaled_vec", expected=(ar,), got=(br,))

        self._reuse_as(ar, "Vector.add_scaled_vec")

        if alpha == 0:
            self.copy_vec(a)
            return

        if ((self is not a and self._shares_storage(a))
                or (self is not b and self._shares_storage(b))):
            # A separate view over an operand's storage: the BLAS passes
            # below would overwrite elements before they are read.
            np.add(a._elems(), np.multiply(b._elems(), alpha), out=self._elems())
            return

        if self is a and self is b:
            # v + alpha*v
            blas64.scal(ar, alpha + 1, self._mat)
        elif self is a:
            blas64.axpy(ar, alpha, b._mat, self._mat)
        elif self is b:
            # b is the receiver: scale it before a is added in.
            if self._mat.inc == 1 and a._mat.inc == 1:
                v = self._elems()
                v *= alpha
                v += a._elems()
                return
            blas64.scal(ar, alpha, self._mat)
            blas64.axpy(ar, 1, a._mat, self._mat)
        else:
            if self._mat.inc == 1 and a._mat.inc == 1 and b._mat.inc == 1:
                blas64.axpy_unitary_to(self._elems(), alpha, b._elems(), a._elems())
                return
            blas64.copy(ar, a._mat, self._mat)
            blas64.axpy(ar, alpha, b._mat, self._mat)

    def _elementwise(self, operation: str, ufunc, a: "Vector", b: "Vector") -> None:
        ar, br = len(a), len(b)
        if ar != br:
            raise ShapeError(operation, expected=(ar,), got=(br,))

        self._reuse_as(ar, operation)

        # ufuncs buffer overlapping inputs, so element i of a and b is read
        # before element i of the receiver is written.
        ufunc(a._elems(), b._elems(), out=self._elems())

    def add_vec(self, a: "Vector", b: "Vector") -> None:
        """v = a + b"""
        self._elementwise("Vector.add_vec", np.add, a, b)

    def sub_vec(self, a: "Vector", b: "Vector") -> None:
        """v = a - b"""
        self._elementwise("Vector.sub_vec", np.subtract, a, b)

    def mul_elem_vec(self, a: "Vector", b: "Vector") -> None:
        """v[i] = a[i] * b[i]"""
        self._elementwise("Vector.mul_elem_vec", np.multiply, a, b)

    def div_elem_vec(self, a: "Vector", b: "Vector") -> None:
        """v[i] = a[i] / b[i], with IEEE results for division by zero."""
        with np.errstate(divide='ignore', invalid='ignore'):
            self._elementwise("Vector.div_elem_vec", np.divide, a, b)

    # ─────────────────────────────────────────────────────────────────
    # Matrix-vector product
    # ─────────────────────────────────────────────────────────────────

    def mul_vec(self, a: Matrix, b: "Vector") -> None:
        """
        v = a * b

        The algorithm is chosen from what the untransposed a exposes, see
        resolve_mul_path(). A length-1 Vector used as a is a 1x1 operand and
        scales every element of b.

        Raises:
            ShapeError: columns of a != len(b), or the receiver is shaped
                and its length differs from the rows of a.
        """
        r, c = a.dims()
        br = len(b)
        inner, trans = untranspose(a)

        if isinstance(inner, Vector) and len(inner) == 1:
            r = br
        elif c != br:
            raise ShapeError("Vector.mul_vec", expected=(c,), got=(br,))

        self._reuse_as(r, "Vector.mul_vec")
        if r == 0:
            return
        if c == 0:
            self._elems()[...] = 0.0
            return

        path = resolve_mul_path(inner)
        logger.debug("mul_vec: %s path, %dx%d, trans=%s", path.value, r, c, trans)

        if (self is inner or self is b
                or self._shares_storage(inner) or self._shares_storage(b)):
            with self._isolated_workspace(r) as w:
                w._mul_vec(path, inner, trans, b)
            return

        self._mul_vec(path, inner, trans, b)

    @contextmanager
    def _isolated_workspace(self, n: int) -> Iterator["Vector"]:
        """
        Scratch receiver for an aliased product.

        The result is copied into self only if the block completes; the
        scratch is returned to the pool on every exit.
        """
        pool = get_workspace_pool()
        w = pool.borrow(n)
        try:
            yield w
            self.copy_vec(w)
        finally:
            pool.release(w)

    def _mul_vec(self, path: MulPath, a: Matrix, trans: bool, b: "Vector") -> None:
        # Receiver is shaped and shares no storage with a or b.
        t = Trans.TRANS if trans else Trans.NO_TRANS

        if path == MulPath.VECTOR:
            if len(a) == 1:
                # {1,1} x {1,n}
                np.multiply(b._elems(), a.at_vec(0), out=self._elems())
            elif len(b) == 1:
                # {n,1} x {1,1}
                np.multiply(a._elems(), b.at_vec(0), out=self._elems())
            else:
                # {1,n} x {n,1}
                self.set_vec(0, blas64.dot(len(a), a._mat, b._mat))

        elif path == MulPath.SYMMETRIC:
            blas64.symv(1, a.raw_symmetric(), b._mat, 0, self._mat)

        elif path == MulPath.TRIANGULAR:
            self.copy_vec(b)
            blas64.trmv(t, a.raw_triangular(), self._mat)

        elif path == MulPath.DENSE:
            blas64.gemv(t, 1, a.raw_matrix(), b._mat, 0, self._mat)

        elif path == MulPath.VECTORER:
            ar, ac = a.dims()
            out = self._elems()
            if trans:
                col = np.empty(ar)
                for j in range(ac):
                    out[j] = blas64.dot(ar, Strided(1, a.col(col, j)), b._mat)
            else:
                row = np.empty(ac)
                for i in range(ar):
                    out[i] = blas64.dot(ac, Strided(1, a.row(row, i)), b._mat)

        else:
            ar, ac = a.dims()
            out = self._elems()
            bv = b._elems()
            if trans:
                col = np.empty(ar)
                for j in range(ac):
                    for i in range(ar):
                        col[i] = a.at(i, j)
                    out[j] = np.dot(col, bv)
            else:
                row = np.empty(ac)
                for i in range(ar):
                    for j in range(ac):
                        row[j] = a.at(i, j)
                    out[i] = np.dot(row, bv)
