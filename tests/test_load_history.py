"""
Tests for Load History and Plotting
===================================
"""

import numpy as np
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from pfpost.mesh.mesh_generators import create_square_mesh
from pfpost.mesh.partition import partition_cells
from pfpost.postprocess.load_history import LoadHistory


@pytest.fixture
def history():
    h = LoadHistory()
    for step, (load, force) in enumerate([(0.0, 0.0), (0.1, 2.0), (0.2, 3.5), (0.3, -1.0)]):
        h.add_record(step, load, [0.1 * force, force],
                     cod=[0.0, 0.01 * step], point_values=[load])
    return h


class TestLoadHistory:
    """Tests for LoadHistory."""

    def test_arrays(self, history):
        arrays = history.get_arrays()

        assert len(history) == 4
        assert np.array_equal(arrays['step'], [0, 1, 2, 3])
        assert arrays['boundary_load'].shape == (4, 2)
        assert arrays['cod'].shape == (4, 2)
        assert arrays['point_values'].shape == (4, 1)

    def test_empty(self):
        h = LoadHistory()
        assert len(h) == 0
        assert h.find_peak_load() is None
        assert h.get_arrays()['load'].size == 0

    def test_peak_load(self, history):
        peak = history.find_peak_load()
        assert peak['step'] == 2
        assert np.isclose(peak['load_factor'], 0.2)
        assert np.isclose(peak['force'], 3.5)

        assert history.find_peak_load(component=0)['step'] == 2

    def test_record_copies_input(self):
        h = LoadHistory()
        load = np.array([1.0, 2.0])
        h.add_record(0, 0.0, load)
        load[0] = 5.0
        assert h.records[0].boundary_load[0] == 1.0

    def test_dimension_mismatch(self, history):
        with pytest.raises(ValueError):
            history.add_record(4, 0.4, [1.0, 2.0, 3.0])

    @pytest.mark.parametrize("kwargs, name", [
        ({'cod': [0.0]}, 'cod'),
        ({'cod': [0.0, 0.1], 'point_values': [0.1, 0.2]}, 'point_values'),
    ])
    def test_profile_size_mismatch(self, history, kwargs, name):
        """COD lines and sampled points keep their count across steps."""
        with pytest.raises(ValueError, match=name):
            history.add_record(4, 0.4, [0.0, 1.0], **kwargs)
        assert len(history) == 4
        assert history.get_arrays()['cod'].shape == (4, 2)

    def test_to_csv(self, history, tmp_path):
        filename = tmp_path / 'history.csv'
        history.to_csv(str(filename))

        lines = filename.read_text().strip().split('\n')
        assert lines[0] == 'step,load_factor,F_0,F_1,cod_0,cod_1,value_0'
        assert len(lines) == 5

        data = np.loadtxt(str(filename), delimiter=',', skiprows=1)
        assert np.allclose(data[:, 3], [0.0, 2.0, 3.5, -1.0])

    def test_to_csv_empty(self, tmp_path):
        with pytest.raises(ValueError):
            LoadHistory().to_csv(str(tmp_path / 'empty.csv'))


class TestPlotting:
    """Smoke tests for plotting functions (no visual validation)."""

    @pytest.fixture(autouse=True)
    def backend(self):
        matplotlib = pytest.importorskip("matplotlib")
        matplotlib.use('Agg')
        import matplotlib.pyplot as plt
        yield
        plt.close('all')

    def test_plot_partition(self, tmp_path):
        from pfpost.postprocess.visualization import plot_partition

        mesh = create_square_mesh(1.0, 4)
        ax = plot_partition(mesh, partition_cells(mesh, 3, method='rcb'))
        ax.figure.savefig(str(tmp_path / 'partition.png'))
        assert (tmp_path / 'partition.png').exists()

    def test_plot_cod_profile(self):
        from pfpost.postprocess.visualization import plot_cod_profile

        ax = plot_cod_profile([0.0, 0.5, 1.0], np.array([0.0, 0.2, 0.0]))
        assert ax.get_xlabel() == 'y'
        assert ax.get_ylabel() == 'COD'

    def test_plot_load_displacement(self, history):
        from pfpost.postprocess.visualization import plot_load_displacement

        ax = plot_load_displacement(history)
        assert len(ax.lines) == 1
        assert ax.get_ylabel() == 'Boundary load F_1'
