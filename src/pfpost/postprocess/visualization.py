"""
Visualization
=============

Plotting functions for partitions, COD profiles and load curves.
"""

import numpy as np
from typing import Optional, Sequence, TYPE_CHECKING

try:
    import matplotlib.pyplot as plt
    from matplotlib.tri import Triangulation
    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False

if TYPE_CHECKING:
    from ..mesh.triangle_mesh import TriangleMesh
    from .load_history import LoadHistory


def plot_partition(mesh: 'TriangleMesh',
                   cell_owners: np.ndarray,
                   ax: Optional['plt.Axes'] = None,
                   cmap: str = 'tab10',
                   show_edges: bool = True,
                   **kwargs) -> 'plt.Axes':
    """
    Plot cells colored by owning rank.

    Args:
        mesh: TriangleMesh instance
        cell_owners: shape (n_elements,), owner rank per cell
        ax: matplotlib axes (created if None)
        cmap: colormap name
        show_edges: whether to draw cell edges
        **kwargs: passed to tripcolor

    Returns:
        ax: matplotlib axes
    """
    if not HAS_MATPLOTLIB:
        raise ImportError("matplotlib is required for visualization")

    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 8))

    tri = Triangulation(mesh.nodes[:, 0], mesh.nodes[:, 1], mesh.elements)
    ax.tripcolor(tri, facecolors=np.asarray(cell_owners, dtype=float),
                 cmap=cmap, **kwargs)
    if show_edges:
        ax.triplot(tri, 'k-', lw=0.3)

    ax.set_aspect('equal')
    ax.set_xlabel('x')
    ax.set_ylabel('y')

    return ax


def plot_cod_profile(lines: Sequence[float],
                     cod: np.ndarray,
                     ax: Optional['plt.Axes'] = None,
                     direction: int = 0,
                     **kwargs) -> 'plt.Axes':
    """
    Plot crack opening against transect line position.

    Args:
        lines: line coordinates passed to CrackOpeningProfileSampler
        cod: COD values, shape (len(lines),)
        ax: matplotlib axes
        direction: axis the lines run along (labels only)
        **kwargs: passed to plot

    Returns:
        ax: matplotlib axes
    """
    if not HAS_MATPLOTLIB:
        raise ImportError("matplotlib is required for visualization")

    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 6))

    ax.plot(lines, cod, 'b-o', ms=3, **kwargs)
    ax.set_xlabel('xy'[1 - direction])
    ax.set_ylabel('COD')
    ax.grid(True, alpha=0.3)

    return ax


def plot_load_displacement(history: 'LoadHistory',
                           component: int = 1,
                           ax: Optional['plt.Axes'] = None,
                           **kwargs) -> 'plt.Axes':
    """
    Plot a boundary load component against the load factor.

    Args:
        history: LoadHistory instance
        component: boundary load component to plot
        ax: matplotlib axes
        **kwargs: passed to plot

    Returns:
        ax: matplotlib axes
    """
    if not HAS_MATPLOTLIB:
        raise ImportError("matplotlib is required for visualization")

    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 6))

    arrays = history.get_arrays()
    if len(history) > 0:
        ax.plot(arrays['load'], arrays['boundary_load'][:, component],
                'b-o', ms=3, **kwargs)
    ax.set_xlabel('Load factor')
    ax.set_ylabel(f'Boundary load F_{component}')
    ax.grid(True, alpha=0.3)

    return ax
