"""
vecmat: strided float64 vectors and matrix-vector products.

Public API:
    from vecmat import Vector, Dense, SymDense, TriDense

    v = Vector()
    v.mul_vec(Dense(2, 2, [1, 2, 3, 4]), Vector(2, [1, 1]))

Layers:
    vecmat.core        Vector, matrix types, capability dispatch, workspace pool
    vecmat.blas64      Strided buffers and BLAS kernels (scipy.linalg.blas)

Also:
    vecmat.config      YAML configuration (workspace pool)
    vecmat.errors      ShapeError, IndexOutOfRange, AllocationError
"""

from vecmat.errors import MatrixError, ShapeError, IndexOutOfRange, AllocationError
from vecmat.core import (
    Matrix,
    Transpose,
    MulPath,
    resolve_mul_path,
    untranspose,
    Vector,
    Dense,
    SymDense,
    TriDense,
    WorkspacePool,
    get_workspace_pool,
)

__all__ = [
    "Vector",
    "Dense",
    "SymDense",
    "TriDense",
    "Matrix",
    "Transpose",
    "MulPath",
    "resolve_mul_path",
    "untranspose",
    "WorkspacePool",
    "get_workspace_pool",
    "MatrixError",
    "ShapeError",
    "IndexOutOfRange",
    "AllocationError",
]
