"""
Matrix and vector errors.

All failures raised by vecmat are synchronous and fatal to the current call.
Validation happens before any write, so a receiver is never left partially
updated when one of these is raised.

    MatrixError       Base class
    ShapeError        Operand dimensions are incompatible
    IndexOutOfRange   Element or view bounds fall outside the operand
    AllocationError   Backing storage could not be obtained
"""

from typing import Optional, Tuple


class MatrixError(Exception):
    """Base class for vecmat errors."""


class ShapeError(MatrixError, ValueError):
    """Raised when operand lengths or dimensions are incompatible."""

    def __init__(
        self,
        operation: str,
        expected: Optional[Tuple[int, ...]] = None,
        got: Optional[Tuple[int, ...]] = None,
    ):
        self.operation = operation
        self.expected = expected
        self.got = got

        message = f"{operation}: dimension mismatch"
        if expected is not None and got is not None:
            message += f" (expected {expected}, got {got})"

        super().__init__(message)


class IndexOutOfRange(MatrixError, IndexError):
    """Raised when an index or view range falls outside the operand."""

    def __init__(self, operation: str, index, bound: int):
        self.operation = operation
        self.index = index
        self.bound = bound
        super().__init__(f"{operation}: index {index} out of range for length {bound}")


class AllocationError(MatrixError, MemoryError):
    """Raised when backing storage cannot be allocated."""

    def __init__(self, n: int, reason: str = ""):
        self.n = n
        message = f"cannot allocate buffer of {n} elements"
        if reason:
            message += f": {reason}"
        super().__init__(message)
