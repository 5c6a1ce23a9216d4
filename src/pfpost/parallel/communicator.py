"""
Communicators
=============

Collective reductions used to combine per-rank partial results.

Algorithms receive a :class:`Communicator` explicitly instead of reaching
for a global MPI world. Every rank of a group must issue the same sequence
of ``sum`` / ``min`` calls; a missing call blocks the whole group.
"""

import numpy as np
from typing import Union

try:
    from mpi4py import MPI
    HAS_MPI = True
except ImportError:
    HAS_MPI = False

Reducible = Union[float, np.ndarray]


class Communicator:
    """
    Reduction service over a fixed group of workers.

    Values are reduced as float64. Scalars come back as Python floats,
    arrays as new arrays of the same shape.
    """

    rank: int = 0
    size: int = 1

    def sum(self, value: Reducible) -> Reducible:
        """Element-wise sum over all ranks, result visible on every rank."""
        raise NotImplementedError

    def min(self, value: Reducible) -> Reducible:
        """Element-wise minimum over all ranks, result visible on every rank."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(rank={self.rank}, size={self.size})"


class SerialCommunicator(Communicator):
    """Group made of the calling process only."""

    rank = 0
    size = 1

    def sum(self, value: Reducible) -> Reducible:
        return _as_result(value)

    def min(self, value: Reducible) -> Reducible:
        return _as_result(value)


class MPICommunicator(Communicator):
    """
    Reductions over an ``mpi4py`` communicator.

    Args:
        comm: mpi4py communicator (default ``MPI.COMM_WORLD``)
    """

    def __init__(self, comm=None):
        if not HAS_MPI:
            raise ImportError("mpi4py is required for MPICommunicator")

        self.comm = comm if comm is not None else MPI.COMM_WORLD
        self.rank = self.comm.Get_rank()
        self.size = self.comm.Get_size()

    def sum(self, value: Reducible) -> Reducible:
        return self._allreduce(value, MPI.SUM)

    def min(self, value: Reducible) -> Reducible:
        return self._allreduce(value, MPI.MIN)

    def _allreduce(self, value: Reducible, op) -> Reducible:
        send = np.ascontiguousarray(value, dtype=np.float64)
        shape = send.shape
        send = send.reshape(-1)
        recv = np.empty_like(send)
        self.comm.Allreduce(send, recv, op=op)
        return float(recv[0]) if shape == () else recv.reshape(shape)


def _as_result(value: Reducible) -> Reducible:
    arr = np.array(value, dtype=np.float64)
    return float(arr) if arr.ndim == 0 else arr


def get_world_communicator() -> Communicator:
    """``MPICommunicator`` over ``MPI.COMM_WORLD``."""
    return MPICommunicator()
