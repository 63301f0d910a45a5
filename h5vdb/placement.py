# -*- coding: utf-8 -*-

"""

Voxel placement and value transform
===================================

A block with origin ``o`` inside a collection anchored at ``c`` starts at the
integer voxel offset

    offset[a] = round((o[a] - c[a]) / delta[a])

Native block index (x, y, z) is written to grid coordinate

    (z + offset[0], y + offset[1], x + offset[2])

The source data is stored x-outer/z-inner while the grid's fastest varying
axis is the first one, hence the swap of the first and third native axes.

"""

from __future__ import annotations

import logging
from typing import Tuple

import numpy as np

from .blocks import Block, IVec3, Vec3
from .errors import ConsistencyViolationError

logger = logging.getLogger("h5vdb")


def placement_offset(block: Block, canonical_origin: Vec3) -> IVec3:
    """
    Integer voxel offset of ``block`` relative to its collection origin.

    Raises:
        ConsistencyViolationError if the offset is negative along any axis.
    """
    steps = (np.asarray(block.origin, dtype=float) - np.asarray(canonical_origin, dtype=float)) / np.asarray(block.delta, dtype=float)
    offset = tuple(int(v) for v in np.rint(steps))

    if any(v < 0 for v in offset):
        raise ConsistencyViolationError(
            f"Block '{block.name}' (origin {block.origin}) lies before collection origin "
            f"{tuple(canonical_origin)}: computed voxel offset {offset}"
        )

    return offset


def transform_values(values: np.ndarray, normalize: bool = False, offset: float = 0.0, name: str = "") -> np.ndarray:
    """
    Apply the per-block value transform and return the result.

    float64 input is modified in place; any other numeric input is first
    converted to a new float64 array.

    normalize=True remaps to ``(v - min) / (max - min) + offset`` using this
    block's own range. Otherwise a non-zero ``offset`` is added uniformly.

    Raises:
        ConsistencyViolationError when normalizing a block with max == min
        or with a non-finite value.
    """
    values = np.asarray(values, dtype=np.float64)

    if normalize:
        vmin = float(np.min(values))
        vmax = float(np.max(values))
        if not (np.isfinite(vmin) and np.isfinite(vmax)):
            raise ConsistencyViolationError(
                f"Block '{name}': cannot normalize, value range [{vmin}, {vmax}] is not finite"
            )
        if vmax == vmin:
            raise ConsistencyViolationError(
                f"Block '{name}': cannot normalize, all values are equal to {vmin}"
            )
        values -= vmin
        values /= vmax - vmin
        if offset != 0.0:
            values += offset
        logger.debug("Block '%s': normalized range [%g, %g]", name, vmin, vmax)
    elif offset != 0.0:
        values += offset

    return values


def voxel_coordinates(dims: IVec3, offset: IVec3) -> np.ndarray:
    """
    Grid coordinates for every native voxel, in native row-major order.

    Returns:
        (N, 3) int64 array; row ``i`` is where flat element ``i`` lands.
    """
    x, y, z = np.meshgrid(
        np.arange(dims[0]), np.arange(dims[1]), np.arange(dims[2]), indexing="ij"
    )
    coords = np.column_stack([z.ravel() + offset[0], y.ravel() + offset[1], x.ravel() + offset[2]])
    return coords.astype(np.int64)


def scatter(values: np.ndarray, offset: IVec3, accessor) -> int:
    """
    Write a block's values into a grid through ``accessor.setValueOn``.

    One Python-level call per voxel: cost grows linearly with the voxel count
    and dominates conversion time for large blocks.

    Args:
        values: array shaped like the block dims
        offset: placement offset from placement_offset()
        accessor: grid accessor (openvdb FloatGrid accessor)

    Returns:
        number of voxels written.
    """
    coords = voxel_coordinates(values.shape, offset)
    flat = values.ravel()

    for (i, j, k), v in zip(coords.tolist(), flat.tolist()):
        accessor.setValueOn((i, j, k), v)

    return len(flat)


def grid_extent(block: Block, offset: IVec3) -> Tuple[IVec3, IVec3]:
    """Inclusive min/max grid coordinates covered by a placed block."""
    lo = (offset[0], offset[1], offset[2])
    hi = (
        offset[0] + block.dims[2] - 1,
        offset[1] + block.dims[1] - 1,
        offset[2] + block.dims[0] - 1,
    )
    return lo, hi
