"""
Parallel Module
===============

Reduction services and distributed solution vectors.
"""

from .communicator import (
    Communicator,
    SerialCommunicator,
    MPICommunicator,
    get_world_communicator,
    HAS_MPI,
)
from .distributed_vector import DistributedVector, GhostedVector

__all__ = [
    "Communicator",
    "SerialCommunicator",
    "MPICommunicator",
    "get_world_communicator",
    "HAS_MPI",
    "DistributedVector",
    "GhostedVector",
]
