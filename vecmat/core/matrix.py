"""
Matrix interface and capabilities.

A Matrix only has to report its dimensions and read single elements. Concrete
types may additionally expose structural capabilities that let
Vector.mul_vec pick a faster kernel:

    RawSymmetricer   symmetric storage      -> symv
    RawTriangular    triangular storage     -> trmv
    RawMatrixer      dense row-major buffer -> gemv
    Vectorer         row/column streaming   -> dot per output element

resolve_mul_path() encodes the precedence between them.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from vecmat import blas64


class Matrix(ABC):
    """Minimal matrix interface: dimensions and element access."""

    @abstractmethod
    def dims(self) -> Tuple[int, int]:
        """Return (rows, cols)."""
        pass

    @abstractmethod
    def at(self, i: int, j: int) -> float:
        """Return element (i, j)."""
        pass

    @property
    def T(self) -> "Matrix":
        """Implicit transpose; no data is copied."""
        return Transpose(self)


class Untransposer(ABC):
    """A matrix that wraps another as its transpose."""

    @abstractmethod
    def untranspose(self) -> Matrix:
        pass


class RawMatrixer(ABC):
    """Exposes a dense row-major buffer."""

    @abstractmethod
    def raw_matrix(self) -> blas64.General:
        pass


class RawSymmetricer(ABC):
    """Exposes symmetric storage."""

    @abstractmethod
    def raw_symmetric(self) -> blas64.Symmetric:
        pass


class RawTriangular(ABC):
    """Exposes triangular storage."""

    @abstractmethod
    def raw_triangular(self) -> blas64.Triangular:
        pass


class Vectorer(ABC):
    """Can copy a full row or column into a caller-provided buffer."""

    @abstractmethod
    def row(self, dst: Optional[np.ndarray], i: int) -> np.ndarray:
        """Fill dst with row i and return it. dst=None allocates."""
        pass

    @abstractmethod
    def col(self, dst: Optional[np.ndarray], j: int) -> np.ndarray:
        """Fill dst with column j and return it. dst=None allocates."""
        pass


class Transpose(Matrix, Untransposer):
    """Read-only transposed view of a matrix."""

    def __init__(self, matrix: Matrix):
        self.matrix = matrix

    def dims(self) -> Tuple[int, int]:
        r, c = self.matrix.dims()
        return c, r

    def at(self, i: int, j: int) -> float:
        return self.matrix.at(j, i)

    @property
    def T(self) -> Matrix:
        return self.matrix

    def untranspose(self) -> Matrix:
        return self.matrix

    def __repr__(self) -> str:
        return f"Transpose({self.matrix!r})"


def untranspose(a: Matrix) -> Tuple[Matrix, bool]:
    """
    Strip an implicit transpose.

    Returns:
        (matrix, transposed): the wrapped matrix and True if a was a
        transpose view, otherwise (a, False).
    """
    if isinstance(a, Untransposer):
        return a.untranspose(), True
    return a, False


class MulPath(str, Enum):
    """Matrix-vector product algorithms, cheapest first."""
    VECTOR = "vector"          # vector acting as 1x1, nx1 or 1xn operand
    SYMMETRIC = "symmetric"    # symv
    TRIANGULAR = "triangular"  # copy + trmv
    DENSE = "dense"            # gemv
    VECTORER = "vectorer"      # stream rows/cols, dot each
    GENERIC = "generic"        # element-wise at(i, j)


def resolve_mul_path(a: Matrix) -> MulPath:
    """
    Pick the matrix-vector algorithm for an untransposed operand.

    Structured storage beats a dense kernel, which beats row streaming,
    which beats per-element access.
    """
    # Imported here: vector.py depends on this module.
    from vecmat.core.vector import Vector

    if isinstance(a, Vector):
        return MulPath.VECTOR
    if isinstance(a, RawSymmetricer):
        return MulPath.SYMMETRIC
    if isinstance(a, RawTriangular):
        return MulPath.TRIANGULAR
    if isinstance(a, RawMatrixer):
        return MulPath.DENSE
    if isinstance(a, Vectorer):
        return MulPath.VECTORER
    return MulPath.GENERIC
