"""
Unit tests for voxel placement and the value transform.

"""

import numpy as np
import pytest

from h5vdb.blocks import Block
from h5vdb.errors import ConsistencyViolationError
from h5vdb.placement import grid_extent, placement_offset, scatter, transform_values, voxel_coordinates


# ──────────────────────────────────────────────────────────────
# Offset calculator
# ──────────────────────────────────────────────────────────────

def test_offset_positive():
    """Block two voxels along x sits at offset (2, 0, 0)."""
    b = Block.from_array("b", np.zeros((2, 2, 2)), origin=(2.0, 0.0, 0.0), delta=(1.0, 1.0, 1.0))
    assert placement_offset(b, (0.0, 0.0, 0.0)) == (2, 0, 0)


def test_offset_scaled_by_delta():
    """Offset is counted in voxels, not world units."""
    b = Block.from_array("b", np.zeros((1, 1, 1)), origin=(1.0, 1.5, 2.0), delta=(0.5, 0.5, 0.5))
    assert placement_offset(b, (0.0, 0.5, -1.0)) == (2, 2, 6)


def test_offset_negative_rejected():
    """A block before the collection origin raises, never clamps."""
    b = Block.from_array("neg", np.zeros((2, 2, 2)), origin=(-1.0, 0.0, 0.0), delta=(1.0, 1.0, 1.0))
    with pytest.raises(ConsistencyViolationError, match="neg"):
        placement_offset(b, (0.0, 0.0, 0.0))


# ──────────────────────────────────────────────────────────────
# Value transform
# ──────────────────────────────────────────────────────────────

def test_normalize():
    """[1, 3, 5] normalizes to [0, 0.5, 1]."""
    out = transform_values(np.array([1.0, 3.0, 5.0]), normalize=True)
    np.testing.assert_allclose(out, [0.0, 0.5, 1.0])


def test_normalize_with_offset():
    """Offset is added after normalization."""
    out = transform_values(np.array([1.0, 3.0, 5.0]), normalize=True, offset=0.1)
    np.testing.assert_allclose(out, [0.1, 0.6, 1.1])


def test_normalize_degenerate():
    """A constant block cannot be normalized."""
    with pytest.raises(ConsistencyViolationError):
        transform_values(np.array([4.0, 4.0, 4.0]), normalize=True)


def test_additive_offset_only():
    """Without normalization the offset is added as-is."""
    out = transform_values(np.array([4.0, 4.0, -1.0]), offset=2.0)
    np.testing.assert_allclose(out, [6.0, 6.0, 1.0])


def test_normalize_integer_input():
    """Integer values are promoted to float before the remap."""
    out = transform_values(np.array([1, 3, 5]), normalize=True)
    assert out.dtype == np.float64
    np.testing.assert_allclose(out, [0.0, 0.5, 1.0])


def test_offset_integer_input():
    out = transform_values(np.array([1, 3, 5]), offset=0.5)
    np.testing.assert_allclose(out, [1.5, 3.5, 5.5])


@pytest.mark.parametrize("bad", [np.nan, np.inf, -np.inf])
def test_normalize_non_finite(bad):
    """A NaN or Inf in the block is reported instead of spreading."""
    with pytest.raises(ConsistencyViolationError, match="rho"):
        transform_values(np.array([1.0, bad, 5.0]), normalize=True, name="rho")


def test_no_transform():
    """Neither option leaves values untouched."""
    values = np.array([1.0, 2.0])
    np.testing.assert_array_equal(transform_values(values.copy()), values)


# ──────────────────────────────────────────────────────────────
# Scatter
# ──────────────────────────────────────────────────────────────

def test_scatter_swaps_first_and_third_axis(accessor):
    """Native (1, 0, 0) lands on grid (0, 0, 1)."""
    values = np.array([10.0, 20.0]).reshape(2, 1, 1)
    assert scatter(values, (0, 0, 0), accessor) == 2
    assert accessor.voxels == {(0, 0, 0): 10.0, (0, 0, 1): 20.0}


def test_scatter_applies_offset(accessor):
    """Offset components are added to grid axes 0, 1, 2 in order."""
    values = np.arange(6, dtype=float).reshape(1, 2, 3)
    scatter(values, (3, 4, 5), accessor)
    assert accessor.voxels[(3, 4, 5)] == 0.0
    assert accessor.voxels[(5, 4, 5)] == 2.0
    assert accessor.voxels[(3, 5, 5)] == 3.0
    assert accessor.voxels[(5, 5, 5)] == 5.0


def test_voxel_coordinates_non_negative():
    """Every coordinate of a placed block is >= the offset."""
    coords = voxel_coordinates((3, 2, 4), (1, 0, 2))
    assert coords.shape == (24, 3)
    assert coords.min(axis=0).tolist() == [1, 0, 2]
    assert coords.max(axis=0).tolist() == [4, 1, 4]


def test_grid_extent():
    """Extent reports grid-axis bounds after the axis swap."""
    b = Block.from_array("b", np.zeros((3, 2, 4)), origin=(0.0, 0.0, 0.0), delta=(1.0, 1.0, 1.0))
    assert grid_extent(b, (1, 0, 2)) == ((1, 0, 2), (4, 1, 4))


def test_scatter_writes_every_voxel(accessor):
    """Each native voxel lands once, at the coordinate voxel_coordinates() gives."""
    values = np.arange(4 * 5 * 6, dtype=float).reshape(4, 5, 6)
    assert scatter(values, (1, 2, 3), accessor) == values.size
    assert len(accessor.voxels) == values.size

    coords = voxel_coordinates(values.shape, (1, 2, 3))
    for ijk, v in zip(coords.tolist(), values.ravel().tolist()):
        assert accessor.voxels[tuple(ijk)] == v
