# -*- coding: utf-8 -*-

"""

h5vdb: HDF5 block datasets → OpenVDB grids
==========================================

──────────────────────────────────────────────────────────────────────────────
Description
──────────────────────────────────────────────────────────────────────────────
h5vdb reads 3D float datasets from an HDF5 file, merges the blocks that sit
on a common lattice and writes one sparse OpenVDB grid per merged group.

──────────────────────────────────────────────────────────────────────────────
WHY THIS EXISTS
──────────────────────────────────────────────────────────────────────────────
- Block-structured simulation output stores one dataset per block, each with
  its own origin, spacing and integer lattice origin.
- Rendering and simulation tools that speak VDB want a handful of grids with
  a proper index-to-world transform instead.

"""

from .errors import (
    H5VdbError,
    InputShapeError,
    AttributeShapeError,
    ConsistencyViolationError,
    SinkError,
    DatasetNotFoundError,
)

from .blocks import Block
from .grouping import Collection, group, is_consistent
from .placement import placement_offset, transform_values, scatter
from .assembler import assemble, sanitize_grid_name

from .converter import (
    H5VdbConverter,
    parse_dataset_names,
    parse_offset,
)

__version__ = "1.0.0"
