# -*- coding: utf-8 -*-

"""

Grid assembly: one OpenVDB FloatGrid per collection.

"""

from __future__ import annotations

import logging
from typing import List, Sequence

from . import sink
from .grouping import Collection
from .placement import grid_extent, placement_offset, scatter, transform_values

logger = logging.getLogger("h5vdb")

# Characters the grid consumer cannot parse in a grid name
_NAME_REPLACE = str.maketrans({" ": "_", ":": "_", "=": "_"})


def sanitize_grid_name(name: str) -> str:
    """Replace spaces, colons and equals signs with underscores."""
    return name.translate(_NAME_REPLACE)


def assemble_collection(coll: Collection, normalize: bool = False, offset: float = 0.0):
    """
    Build and populate the grid for a single collection.

    Each member is read, transformed, placed and released before the next.
    """
    grid = sink.create_grid()
    sink.set_transform(grid, scale=coll.delta, translate=coll.canonical_origin)
    sink.set_name(grid, sanitize_grid_name(coll.name))

    accessor = grid.getAccessor()
    total = 0

    for block in coll.blocks:
        ijk = placement_offset(block, coll.canonical_origin)

        values = block.read()
        values = transform_values(values, normalize=normalize, offset=offset, name=block.name)

        written = scatter(values, ijk, accessor)
        total += written
        del values

        lo, hi = grid_extent(block, ijk)
        logger.debug("Block '%s': %d voxels placed at %s..%s", block.name, written, lo, hi)

    logger.info("Grid '%s': %d block(s), %d voxel(s)", grid.name, len(coll.blocks), total)
    return grid


def assemble(collections: Sequence[Collection], normalize: bool = False, offset: float = 0.0) -> List:
    """
    Populate one grid per collection.

    Args:
        collections: output of grouping.group()
        normalize: per-block normalization to [0, 1] (+ offset)
        offset: additive value offset

    Returns:
        list of grids, in collection order.
    """
    return [assemble_collection(coll, normalize=normalize, offset=offset) for coll in collections]
