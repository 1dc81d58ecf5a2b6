"""
Workspace Pool
==============

Lends scratch vectors used to break aliasing, e.g. when the receiver of a
matrix-vector product is also one of its operands.

Buffers are grouped by power-of-two capacity: a request for n elements is
served from the bucket (n - 1).bit_length(), whose buffers hold
1 << bucket elements, the smallest power of two >= n. A borrowed vector
belongs to the borrower until it is released; its contents are
unspecified unless clear=True is requested.

Usage:
    from vecmat.core.workspace import get_workspace_pool

    pool = get_workspace_pool()
    with pool.borrowed(n) as scratch:
        ...
"""

import logging
import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional

import numpy as np

from vecmat.config import WorkspaceConfig, get_config
from vecmat.errors import AllocationError

if TYPE_CHECKING:
    from vecmat.core.vector import Vector


logger = logging.getLogger(__name__)


def allocate(n: int) -> np.ndarray:
    """Zero-filled float64 buffer of n elements."""
    try:
        return np.zeros(n, dtype=np.float64)
    except (MemoryError, ValueError) as e:
        raise AllocationError(n, str(e)) from e


class WorkspacePool:
    """
    Thread-safe pool of float64 scratch buffers.

    Args:
        max_per_bucket: Free buffers kept per capacity class. Extra
            releases are dropped.
        enabled: If False, every borrow allocates and every release drops.
    """

    def __init__(self, max_per_bucket: int = 16, enabled: bool = True):
        self.max_per_bucket = max_per_bucket
        self.enabled = enabled
        self._free: Dict[int, List[np.ndarray]] = {}
        self._lent: Dict[int, np.ndarray] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: WorkspaceConfig) -> "WorkspacePool":
        return cls(max_per_bucket=config.max_per_bucket, enabled=config.enabled)

    def borrow(self, n: int, clear: bool = False) -> "Vector":
        """
        Borrow a vector of length n.

        Args:
            n: Required length. n <= 0 returns a placeholder vector.
            clear: Zero the contents before returning.

        Returns:
            Vector of length n backed by a buffer of capacity >= n.
        """
        # Imported here: vector.py depends on this module.
        from vecmat.core.vector import Vector

        if n <= 0:
            return Vector()

        bucket = (n - 1).bit_length()
        buf = None
        with self._lock:
            free = self._free.get(bucket)
            if self.enabled and free:
                buf = free.pop()
        if buf is None:
            buf = allocate(1 << bucket)
            logger.debug("workspace miss: allocated %d elements for n=%d", buf.size, n)
        elif clear:
            buf[:n] = 0.0

        with self._lock:
            self._lent[id(buf)] = buf

        return Vector(n, buf[:n])

    def release(self, v: "Vector") -> None:
        """Return a borrowed vector's buffer to the pool."""
        data = v.raw_vector().data
        root = data.base if data.base is not None else data

        with self._lock:
            buf = self._lent.pop(id(root), None)
            if buf is None:
                logger.debug("workspace release of foreign buffer ignored")
                return
            if not self.enabled:
                return
            free = self._free.setdefault(buf.size.bit_length() - 1, [])
            if len(free) < self.max_per_bucket:
                free.append(buf)

    @contextmanager
    def borrowed(self, n: int, clear: bool = False) -> Iterator["Vector"]:
        """Borrow a vector for the duration of a with-block."""
        v = self.borrow(n, clear=clear)
        try:
            yield v
        finally:
            self.release(v)

    def free_count(self, bucket: Optional[int] = None) -> int:
        """Number of idle buffers, in one bucket or overall."""
        with self._lock:
            if bucket is not None:
                return len(self._free.get(bucket, []))
            return sum(len(b) for b in self._free.values())

    def lent_count(self) -> int:
        """Number of buffers currently borrowed."""
        with self._lock:
            return len(self._lent)

    def clear(self) -> None:
        """Drop all idle buffers."""
        with self._lock:
            self._free.clear()


_pool: Optional[WorkspacePool] = None
_pool_lock = threading.Lock()


def get_workspace_pool() -> WorkspacePool:
    """Get or create the process workspace pool."""
    global _pool
    pool = _pool
    if pool is None:
        with _pool_lock:
            if _pool is None:
                _pool = WorkspacePool.from_config(get_config().workspace)
            pool = _pool
    return pool


def set_workspace_pool(pool: Optional[WorkspacePool]) -> None:
    """Replace the process workspace pool. None rebuilds it from config on next use."""
    global _pool
    with _pool_lock:
        _pool = pool
