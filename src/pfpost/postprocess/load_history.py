"""
Load History
============

Track postprocessed quantities over load steps.
"""

import numpy as np
from typing import List, Dict, Optional
from dataclasses import dataclass, field


@dataclass
class LoadRecord:
    """Postprocessed quantities at a single load step."""
    step: int
    load_factor: float
    boundary_load: np.ndarray
    cod: np.ndarray = field(default_factory=lambda: np.zeros(0))
    point_values: np.ndarray = field(default_factory=lambda: np.zeros(0))


class LoadHistory:
    """
    Per-step record of boundary loads, COD profiles and point values.

    Values are expected to be the reduced (rank-independent) results, so
    every rank holds the same history; writing files is left to one rank.
    """

    def __init__(self):
        self.records: List[LoadRecord] = []

    def add_record(self, step: int, load_factor: float,
                   boundary_load: np.ndarray,
                   cod: Optional[np.ndarray] = None,
                   point_values: Optional[np.ndarray] = None) -> None:
        """
        Add a new record.

        Args:
            step: load step index
            load_factor: current load factor or prescribed displacement
            boundary_load: shape (dim,), from BoundaryLoadIntegrator
            cod: shape (n_lines,), from CrackOpeningProfileSampler
            point_values: shape (n_points,), from NearestVertexSampler

        Raises:
            ValueError: if a quantity changes size between records
        """
        record = LoadRecord(
            step=step,
            load_factor=load_factor,
            boundary_load=np.array(boundary_load, dtype=np.float64),
            cod=np.zeros(0) if cod is None else np.array(cod, dtype=np.float64),
            point_values=(np.zeros(0) if point_values is None
                          else np.array(point_values, dtype=np.float64)),
        )
        if self.records:
            first = self.records[0]
            for name in ['boundary_load', 'cod', 'point_values']:
                size, expected = len(getattr(record, name)), len(getattr(first, name))
                if size != expected:
                    raise ValueError(
                        f"{name} has size {size}, earlier records have {expected}")
        self.records.append(record)

    def get_arrays(self) -> Dict[str, np.ndarray]:
        """
        Get recorded quantities as numpy arrays.

        Returns:
            Dictionary with keys: 'step', 'load', 'boundary_load'
            (n_steps, dim), 'cod' (n_steps, n_lines), 'point_values'
            (n_steps, n_points)
        """
        if len(self.records) == 0:
            return {key: np.array([]) for key in
                    ['step', 'load', 'boundary_load', 'cod', 'point_values']}

        return {
            'step': np.array([r.step for r in self.records]),
            'load': np.array([r.load_factor for r in self.records]),
            'boundary_load': np.vstack([r.boundary_load for r in self.records]),
            'cod': np.vstack([r.cod for r in self.records]),
            'point_values': np.vstack([r.point_values for r in self.records]),
        }

    def find_peak_load(self, component: int = 1) -> Optional[Dict]:
        """
        Step with the largest absolute boundary load component.

        This typically marks crack initiation in a displacement-driven test.

        Returns:
            Dictionary with peak info or None if there are no records
        """
        if len(self.records) == 0:
            return None

        arrays = self.get_arrays()
        force = arrays['boundary_load'][:, component]
        peak_idx = int(np.argmax(np.abs(force)))
        return {
            'step': int(arrays['step'][peak_idx]),
            'load_factor': arrays['load'][peak_idx],
            'force': force[peak_idx],
        }

    def to_csv(self, filename: str) -> None:
        """
        Export records to a CSV file.

        Columns: step, load_factor, F_0..F_{dim-1}, cod_0.., value_0..

        Args:
            filename: output filename
        """
        if len(self.records) == 0:
            raise ValueError("LoadHistory has no records to export")

        arrays = self.get_arrays()
        n_load = arrays['boundary_load'].shape[1]
        n_cod = arrays['cod'].shape[1]
        n_val = arrays['point_values'].shape[1]

        header = (['step', 'load_factor'] +
                  [f'F_{i}' for i in range(n_load)] +
                  [f'cod_{k}' for k in range(n_cod)] +
                  [f'value_{p}' for p in range(n_val)])

        with open(filename, 'w') as f:
            f.write(','.join(header) + '\n')
            for i in range(len(self.records)):
                row = np.concatenate([arrays['boundary_load'][i], arrays['cod'][i],
                                      arrays['point_values'][i]])
                f.write(f"{arrays['step'][i]},{arrays['load'][i]:.10e}")
                for v in row:
                    f.write(f",{v:.10e}")
                f.write('\n')

    def __len__(self) -> int:
        return len(self.records)
