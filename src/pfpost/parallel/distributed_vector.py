"""
Distributed Vectors
===================

Solution vectors split by DoF ownership, and their ghost-extended copies.
"""

import numpy as np

from .communicator import Communicator


class DistributedVector:
    """
    Vector whose entries are partitioned across ranks.

    Each rank stores the entries it owns. Owned index sets of all ranks are
    disjoint and together cover ``0 .. size-1``.

    Attributes:
        size: global length
        owned_indices: sorted global indices stored on this rank
        local_values: values at ``owned_indices``
        communicator: group the vector is distributed over
    """

    def __init__(self, size: int, owned_indices: np.ndarray,
                 communicator: Communicator):
        self.size = int(size)
        self.owned_indices = np.unique(np.asarray(owned_indices, dtype=np.int64))
        self.local_values = np.zeros(len(self.owned_indices))
        self.communicator = communicator

        if len(self.owned_indices) and (self.owned_indices[0] < 0 or
                                        self.owned_indices[-1] >= self.size):
            raise ValueError("owned_indices outside [0, size)")

    @classmethod
    def from_global(cls, values: np.ndarray, owned_indices: np.ndarray,
                    communicator: Communicator) -> 'DistributedVector':
        """
        Build the local part of a vector from a replicated global array.

        Args:
            values: shape (size,), the full vector (same on every rank)
            owned_indices: indices owned by this rank
            communicator: group of the vector
        """
        values = np.asarray(values, dtype=np.float64)
        vec = cls(len(values), owned_indices, communicator)
        vec.local_values[:] = values[vec.owned_indices]
        return vec

    def _positions(self, indices: np.ndarray) -> np.ndarray:
        idx = np.asarray(indices, dtype=np.int64)
        pos = np.searchsorted(self.owned_indices, idx)
        pos = np.minimum(pos, max(len(self.owned_indices) - 1, 0))
        if (len(self.owned_indices) == 0 or
                np.any(self.owned_indices[pos] != idx)):
            raise IndexError("index not owned by this rank")
        return pos

    def __getitem__(self, index: int) -> float:
        return float(self.local_values[self._positions(index)])

    def __setitem__(self, index: int, value: float) -> None:
        self.local_values[self._positions(index)] = value

    def relevant_copy(self, relevant_indices: np.ndarray) -> 'GhostedVector':
        """
        Ghost-extended copy readable at ``relevant_indices``.

        Collective: every rank of the communicator must call it. Each rank
        scatters its owned entries into a zero vector of global length and
        the vectors are summed, which reproduces every entry exactly since
        ownership is disjoint.

        Args:
            relevant_indices: owned and ghost indices needed on this rank

        Returns:
            GhostedVector owned by the caller
        """
        buffer = np.zeros(self.size)
        buffer[self.owned_indices] = self.local_values
        full = self.communicator.sum(buffer)

        relevant = np.union1d(np.asarray(relevant_indices, dtype=np.int64),
                              self.owned_indices)
        return GhostedVector(relevant, full[relevant])

    def __len__(self) -> int:
        return self.size

    def __repr__(self) -> str:
        return (f"DistributedVector(size={self.size}, "
                f"n_owned={len(self.owned_indices)})")


class GhostedVector:
    """
    Read-only vector holding a rank's owned and ghost entries.

    Attributes:
        indices: sorted global indices available
        values: values at ``indices``
    """

    def __init__(self, indices: np.ndarray, values: np.ndarray):
        self.indices = np.asarray(indices, dtype=np.int64)
        self.values = np.asarray(values, dtype=np.float64)

    def gather(self, indices: np.ndarray) -> np.ndarray:
        """
        Values at arbitrary-shaped global ``indices``.

        Raises:
            IndexError: if an index is neither owned nor ghost on this rank
        """
        idx = np.asarray(indices, dtype=np.int64)
        if len(self.indices) == 0:
            if idx.size:
                raise IndexError("vector has no relevant entries on this rank")
            return np.zeros(idx.shape)
        pos = np.minimum(np.searchsorted(self.indices, idx), len(self.indices) - 1)
        if np.any(self.indices[pos] != idx):
            missing = idx[self.indices[pos] != idx]
            raise IndexError(f"indices {missing[:5].tolist()} are not relevant on this rank")
        return self.values[pos]

    def __getitem__(self, index: int) -> float:
        return float(self.gather(index))

    def __contains__(self, index: int) -> bool:
        pos = np.searchsorted(self.indices, index)
        return bool(pos < len(self.indices) and self.indices[pos] == index)
