"""
Strided float64 buffers and BLAS kernels.

Thin layer over scipy.linalg.blas. Every kernel works directly on a flat,
C-contiguous float64 array plus an increment, the layout vecmat vectors and
matrices are stored in:

    Strided      logical element i at data[i * inc]
    General      row-major, element (i, j) at data[i * stride + j]
    Symmetric    only the `uplo` triangle is referenced
    Triangular   only the `uplo` triangle is referenced, optional unit diagonal

Level 1 (copy, scal, axpy, dot) passes the increments straight to BLAS.
Level 2 (gemv, symv, trmv) hands BLAS a column-major copy of the matrix and writes the
result back through the strided output.

All kernels overwrite their output argument and assume the caller already
validated shapes. A length of zero or less is a no-op.
"""

from dataclasses import dataclass
from enum import Enum

import numpy as np
from scipy.linalg import blas as fblas


class Uplo(str, Enum):
    """Which triangle of a symmetric or triangular matrix is stored."""
    UPPER = "upper"
    LOWER = "lower"


class Diag(str, Enum):
    """Whether a triangular matrix has an implicit unit diagonal."""
    NON_UNIT = "non_unit"
    UNIT = "unit"


class Trans(str, Enum):
    """Transpose flag for level 2 kernels."""
    NO_TRANS = "no_trans"
    TRANS = "trans"


@dataclass
class Strided:
    """Strided view over a flat float64 array."""
    inc: int
    data: np.ndarray


@dataclass
class General:
    """Row-major dense matrix storage."""
    rows: int
    cols: int
    stride: int
    data: np.ndarray


@dataclass
class Symmetric:
    """Symmetric matrix storage."""
    n: int
    stride: int
    data: np.ndarray
    uplo: Uplo = Uplo.UPPER


@dataclass
class Triangular:
    """Triangular matrix storage."""
    n: int
    stride: int
    data: np.ndarray
    uplo: Uplo = Uplo.UPPER
    diag: Diag = Diag.NON_UNIT


# ─────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────

def elements(n: int, x: Strided) -> np.ndarray:
    """Numpy view of the first n logical elements of x (shares memory)."""
    if n <= 0:
        return x.data[:0]
    return x.data[: (n - 1) * x.inc + 1 : x.inc]


def as_matrix(rows: int, cols: int, stride: int, data: np.ndarray) -> np.ndarray:
    """Read-only 2-D view of row-major storage with the given row stride."""
    if stride == cols:
        return data[: rows * cols].reshape(rows, cols)
    itemsize = data.itemsize
    return np.lib.stride_tricks.as_strided(
        data,
        shape=(rows, cols),
        strides=(stride * itemsize, itemsize),
        writeable=False,
    )


def _write_back(dst: np.ndarray, result: np.ndarray) -> None:
    # f2py works in place on contiguous float64 input; copy only if it did not.
    if result is not dst:
        dst[...] = result


# ─────────────────────────────────────────────────────────────────────
# Level 1
# ─────────────────────────────────────────────────────────────────────

def copy(n: int, x: Strided, y: Strided) -> None:
    """y <- x"""
    if n <= 0:
        return
    out = fblas.dcopy(x.data, y.data, n=n, incx=x.inc, incy=y.inc)
    _write_back(y.data, out)


def scal(n: int, alpha: float, x: Strided) -> None:
    """x <- alpha * x"""
    if n <= 0:
        return
    out = fblas.dscal(alpha, x.data, n=n, incx=x.inc)
    _write_back(x.data, out)


def axpy(n: int, alpha: float, x: Strided, y: Strided) -> None:
    """y <- alpha * x + y"""
    if n <= 0:
        return
    out = fblas.daxpy(x.data, y.data, n=n, a=alpha, incx=x.inc, incy=y.inc)
    _write_back(y.data, out)


def dot(n: int, x: Strided, y: Strided) -> float:
    """Return sum_i x[i] * y[i]."""
    if n <= 0:
        return 0.0
    return float(fblas.ddot(x.data, y.data, n=n, incx=x.inc, incy=y.inc))


def axpy_unitary_to(dst: np.ndarray, alpha: float, x: np.ndarray, y: np.ndarray) -> None:
    """dst <- alpha * x + y for unit-stride arrays of equal length."""
    # y is read before dst is written, so dst may share storage with x or y.
    np.add(y, np.multiply(x, alpha), out=dst)


# ─────────────────────────────────────────────────────────────────────
# Level 2
# ─────────────────────────────────────────────────────────────────────

def gemv(trans: Trans, alpha: float, a: General, x: Strided, beta: float, y: Strided) -> None:
    """
    y <- alpha * op(A) * x + beta * y, op(A) = A or A^T.
    """
    if trans == Trans.TRANS:
        nx, ny = a.rows, a.cols
    else:
        nx, ny = a.cols, a.rows
    if ny <= 0:
        return

    yv = elements(ny, y)
    if nx <= 0:
        if beta == 0:
            yv[...] = 0.0
        else:
            yv *= beta
        return

    amat = np.asfortranarray(as_matrix(a.rows, a.cols, a.stride, a.data))
    xv = np.ascontiguousarray(elements(nx, x))

    if beta == 0:
        result = fblas.dgemv(alpha, amat, xv, trans=int(trans == Trans.TRANS))
    else:
        result = fblas.dgemv(
            alpha, amat, xv, beta=beta, y=np.array(yv),
            trans=int(trans == Trans.TRANS),
        )
    yv[...] = result


def symv(alpha: float, a: Symmetric, x: Strided, beta: float, y: Strided) -> None:
    """y <- alpha * A * x + beta * y for symmetric A."""
    if a.n <= 0:
        return

    amat = np.asfortranarray(as_matrix(a.n, a.n, a.stride, a.data))
    xv = np.ascontiguousarray(elements(a.n, x))
    yv = elements(a.n, y)
    lower = int(a.uplo == Uplo.LOWER)

    if beta == 0:
        result = fblas.dsymv(alpha, amat, xv, lower=lower)
    else:
        result = fblas.dsymv(alpha, amat, xv, beta=beta, y=np.array(yv), lower=lower)
    yv[...] = result


def trmv(trans: Trans, a: Triangular, x: Strided) -> None:
    """x <- op(A) * x for triangular A."""
    if a.n <= 0:
        return

    amat = np.asfortranarray(as_matrix(a.n, a.n, a.stride, a.data))
    xv = elements(a.n, x)
    options = {
        'lower': int(a.uplo == Uplo.LOWER),
        'trans': int(trans == Trans.TRANS),
    }
    if a.diag == Diag.UNIT:
        options['diag'] = 1
    result = fblas.dtrmv(amat, np.array(xv), **options)
    xv[...] = result
