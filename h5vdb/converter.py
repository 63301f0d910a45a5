#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""

──────────────────────────────────────────────────────────────────────────────
Description
──────────────────────────────────────────────────────────────────────────────
This module converts 3D float datasets stored in an HDF5 file into OpenVDB
FloatGrids that Houdini, Blender and other VDB-aware tools can read.

──────────────────────────────────────────────────────────────────────────────
WHY THIS EXISTS
──────────────────────────────────────────────────────────────────────────────
- Simulation codes often dump a volume as many blocks, each one a dataset with
  its own origin/delta/iorigin attributes.
- A renderer wants one grid per field, not one per block. Blocks that share a
  lattice are therefore merged into a single sparse grid.

──────────────────────────────────────────────────────────────────────────────
IT SUPPORTS:
──────────────────────────────────────────────────────────────────────────────
 - Automatic grouping of lattice-consistent blocks (one grid per group)
 - Per-block normalization to [0, 1] and additive value offset
 - Dataset selection (--dataset) and dry-run grouping report (--dry-run)
 - Inspection of the HDF5 hierarchy when no output is requested

"""


from __future__ import annotations

import argparse
import logging
import math
import time
from typing import List, Optional

import h5py as h5

from .assembler import assemble, sanitize_grid_name
from .blocks import Block
from .grouping import Collection, group
from .reader import list_datasets, open_dataset
from .sink import write_all

__version__ = "1.0.0"


def setup_logging(verbose: bool) -> None:
    """
    Configure global logging.

    Args:
        verbose: If True, set DEBUG level, otherwise INFO.
    """

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(message)s",
        datefmt="%H:%M:%S",
    )

    # Reduce noise from libraries (adjustable)
    logging.getLogger("h5py").setLevel(logging.WARNING)


logger = logging.getLogger("h5vdb")


def parse_dataset_names(arg: Optional[str]) -> Optional[List[str]]:
    """
    Parse a comma-separated list of dataset paths.

    Leading '/' is dropped so names match Block.name. Returns None for an
    empty argument.
    """

    if arg is None:
        return None

    names = [n.strip().lstrip("/") for n in arg.split(",") if n.strip() != ""]

    return names if names else None


def parse_offset(arg: str) -> float:
    """
    Parse the --offset value.

    Raises:
        argparse.ArgumentTypeError for non-numeric or non-finite input.
    """

    try:
        value = float(arg)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Offset must be a number (got '{arg}').")

    if not math.isfinite(value):
        raise argparse.ArgumentTypeError("Offset must be finite.")

    return value


def format_grouping(collections: List[Collection]) -> List[str]:
    """One line per collection followed by one indented line per member."""
    lines = []
    for idx, coll in enumerate(collections):
        lines.append(
            f"grid #{idx} '{sanitize_grid_name(coll.name)}': origin={coll.canonical_origin} "
            f"delta={coll.delta} blocks={len(coll.blocks)}"
        )
        for block in coll.blocks:
            lines.append(f"    {block.name}  dims={block.dims}  origin={block.origin}")
    return lines


class H5VdbConverter:
    """
    Convert the float datasets of one HDF5 file into a single .vdb file.

    Steps: open blocks -> group -> assemble grids -> write. Any error aborts
    the whole run; nothing is written unless every block succeeded.
    """

    def __init__(
        self,
        input_file: str,
        output_file: Optional[str] = None,
        datasets: Optional[List[str]] = None,
        normalize: bool = False,
        offset: float = 0.0,
        dry_run: bool = False,
    ):
        self.input_file = input_file
        self.output_file = output_file

        # None = every dataset in the file
        self.requested_datasets = datasets

        self.normalize = normalize
        self.offset = offset
        self.dry_run = dry_run

    def open_blocks(self, f) -> List[Block]:
        """Describe every requested dataset of an open file as a Block."""
        names = self.requested_datasets if self.requested_datasets is not None else list_datasets(f)
        if not names:
            logger.warning("No datasets found in '%s'", self.input_file)

        blocks = [open_dataset(f, name) for name in names]
        logger.info("Opened %d block(s) from '%s'", len(blocks), self.input_file)
        return blocks

    def plan(self) -> List[Collection]:
        """Group the input blocks without reading any voxel data."""
        with h5.File(self.input_file, "r") as f:
            return group(self.open_blocks(f))

    def run(self) -> List[Collection]:
        """
        Group, assemble and write (or only report, in dry-run mode).

        Returns:
            the collections that were (or would have been) written.
        """
        t0 = time.time()

        try:
            with h5.File(self.input_file, "r") as f:
                collections = group(self.open_blocks(f))

                if self.dry_run:
                    logger.info("[dry-run] Would write %d grid(s) to '%s'", len(collections), self.output_file)
                    for line in format_grouping(collections):
                        print(line)
                    return collections

                if self.output_file is None:
                    raise ValueError("No output file given")

                grids = assemble(collections, normalize=self.normalize, offset=self.offset)

            write_all(self.output_file, grids)
        except Exception as e:
            logger.error("Conversion of '%s' failed: %s", self.input_file, e)
            raise

        logger.info("Converted %d grid(s) in %.2fs", len(collections), time.time() - t0)
        return collections
