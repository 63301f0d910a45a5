"""
Shared fixtures for the h5vdb tests: HDF5 block files and an accessor double.
"""

import h5py as h5
import numpy as np
import pytest


class DictAccessor:
    """Records setValueOn() calls, keyed by grid coordinate."""

    def __init__(self):
        self.voxels = {}

    def setValueOn(self, ijk, value):
        self.voxels[tuple(ijk)] = value


class FakeGrid:
    """Stand-in for an openvdb FloatGrid in tests that do not need the bindings."""

    def __init__(self):
        self.name = ""
        self.transform = None
        self.accessor = DictAccessor()

    def getAccessor(self):
        return self.accessor


def write_block(group, name, data, origin, delta=(1.0, 1.0, 1.0), iorigin=(0, 0, 0)):
    ds = group.create_dataset(name, data=data)
    ds.attrs["origin"] = np.asarray(origin, dtype=np.float64)
    ds.attrs["delta"] = np.asarray(delta, dtype=np.float64)
    ds.attrs["iorigin"] = np.asarray(iorigin, dtype=np.int32)
    return ds


@pytest.fixture
def accessor():
    return DictAccessor()


@pytest.fixture
def fake_sink(monkeypatch):
    """Route sink grid creation and transform through FakeGrid."""
    from h5vdb import sink

    created = []

    def create_grid():
        grid = FakeGrid()
        created.append(grid)
        return grid

    def set_transform(grid, scale, translate):
        grid.transform = (tuple(scale), tuple(translate))

    monkeypatch.setattr(sink, "create_grid", create_grid)
    monkeypatch.setattr(sink, "set_transform", set_transform)
    return created


@pytest.fixture
def blocks_file(tmp_path):
    """
    Two lattice-consistent 2x2x2 blocks side by side along x plus one block
    with a different spacing, inside a 'level_0' group.
    """
    path = tmp_path / "blocks.h5"
    with h5.File(path, "w") as f:
        level = f.create_group("level_0")
        level.attrs["time"] = 0.5
        write_block(level, "block_0", np.full((2, 2, 2), 1.0, dtype=np.float32), origin=(0.0, 0.0, 0.0), iorigin=(0, 0, 0))
        write_block(level, "block_1", np.full((2, 2, 2), 3.0, dtype=np.float32), origin=(2.0, 0.0, 0.0), iorigin=(2, 0, 0))
        write_block(level, "block_2", np.arange(8, dtype=np.float64).reshape(2, 2, 2), origin=(0.0, 0.0, 0.0), delta=(0.5, 0.5, 0.5))
    return path
