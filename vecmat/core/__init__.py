"""
vecmat Core
===========

Structure:
    matrix.py     - Matrix interface, capability interfaces, Transpose, dispatch precedence
    vector.py     - Vector: views, element-wise arithmetic, matrix-vector product
    dense.py      - Dense, SymDense, TriDense
    workspace.py  - WorkspacePool for alias-breaking scratch vectors
"""

from vecmat.core.matrix import (
    Matrix,
    Untransposer,
    RawMatrixer,
    RawSymmetricer,
    RawTriangular,
    Vectorer,
    Transpose,
    untranspose,
    MulPath,
    resolve_mul_path,
)
from vecmat.core.vector import Vector
from vecmat.core.dense import Dense, SymDense, TriDense
from vecmat.core.workspace import WorkspacePool, get_workspace_pool, set_workspace_pool

__all__ = [
    # Interfaces
    'Matrix',
    'Untransposer',
    'RawMatrixer',
    'RawSymmetricer',
    'RawTriangular',
    'Vectorer',
    'Transpose',
    'untranspose',
    'MulPath',
    'resolve_mul_path',
    # Types
    'Vector',
    'Dense',
    'SymDense',
    'TriDense',
    # Workspace
    'WorkspacePool',
    'get_workspace_pool',
    'set_workspace_pool',
]
