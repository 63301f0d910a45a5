# -*- coding: utf-8 -*-

"""

OpenVDB output boundary.

The bindings are loaded once per process by ``openvdb_module()``; importing
the module registers the grid types, and there is nothing to tear down.

"""

from __future__ import annotations

import functools
import logging
import os
import time
from typing import List, Sequence

from .errors import SinkError

logger = logging.getLogger("h5vdb")


@functools.lru_cache(maxsize=None)
def openvdb_module():
    """Return the OpenVDB bindings, importing them on first use."""
    import openvdb

    logger.debug("OpenVDB bindings loaded (library version %s)", getattr(openvdb, "LIBRARY_VERSION", "unknown"))
    return openvdb


def create_grid():
    """New empty FloatGrid with background 0."""
    return openvdb_module().FloatGrid()


def set_transform(grid, scale: Sequence[float], translate: Sequence[float]) -> None:
    """
    Attach a linear transform: diagonal ``scale``, translation ``translate``.

    OpenVDB matrices act on row vectors, so the translation is the last row.
    """
    matrix = [
        [float(scale[0]), 0.0, 0.0, 0.0],
        [0.0, float(scale[1]), 0.0, 0.0],
        [0.0, 0.0, float(scale[2]), 0.0],
        [float(translate[0]), float(translate[1]), float(translate[2]), 1.0],
    ]
    grid.transform = openvdb_module().createLinearTransform(matrix)


def set_name(grid, name: str) -> None:
    grid.name = name


def write_all(path: str, grids: List) -> None:
    """
    Write every grid into one .vdb file.

    Raises:
        SinkError wrapping any failure of the underlying writer.
    """
    t0 = time.time()
    logger.info("Writing %d grid(s) to %s...", len(grids), path)

    out_dir = os.path.dirname(os.path.abspath(path))
    if not os.path.isdir(out_dir):
        raise SinkError(f"Output directory does not exist: {out_dir}")

    try:
        openvdb_module().write(path, grids=list(grids))
    except Exception as e:
        raise SinkError(f"Failed to write '{path}': {e}") from e

    logger.info("DONE: Saved '%s' in %.2fs", path, time.time() - t0)
