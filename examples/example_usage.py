#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""

─────────────────────────────────────────────────────────────
Example Usage of h5vdb
─────────────────────────────────────────────────────────────

This script writes a small block-structured HDF5 file and runs
it through h5vdb:

1. Listing the datasets and their spatial attributes
2. Grouping the blocks into collections (dry-run)
3. Writing the merged grids to a .vdb file

Set WRITE_VDB = False to stop after the grouping report (the
OpenVDB bindings are only needed for the final step).

─────────────────────────────────────────────────────────────

"""

import h5py as h5
import numpy as np

from h5vdb.converter import H5VdbConverter, format_grouping, setup_logging
from h5vdb.reader import list_datasets, open_dataset

# ──────────────────────────────────────────────────────────────
# Configuration
# ──────────────────────────────────────────────────────────────

INPUT_FILE = "example_blocks.h5"

OUTPUT_FILE = "example_blocks.vdb"

BLOCK_DIMS = (8, 8, 8)

DELTA = (0.125, 0.125, 0.125)

WRITE_VDB = True


# ──────────────────────────────────────────────────────────────
# Helper Functions
# ──────────────────────────────────────────────────────────────


def write_example_file(path: str):

    # 2x1x1 blocks on a shared lattice plus one refined block
    rng = np.random.default_rng(0)
    with h5.File(path, "w") as f:
        coarse = f.create_group("coarse")
        for i in range(2):
            ds = coarse.create_dataset(f"block_{i}", data=rng.random(BLOCK_DIMS, dtype=np.float32))
            ds.attrs["origin"] = np.array([i * BLOCK_DIMS[0] * DELTA[0], 0.0, 0.0])
            ds.attrs["delta"] = np.array(DELTA)
            ds.attrs["iorigin"] = np.array([i * BLOCK_DIMS[0], 0, 0], dtype=np.int32)

        fine = f.create_group("fine")
        ds = fine.create_dataset("block_0", data=rng.random(BLOCK_DIMS, dtype=np.float32))
        ds.attrs["origin"] = np.array([0.5, 0.5, 0.5])
        ds.attrs["delta"] = np.array(DELTA) / 2
        ds.attrs["iorigin"] = np.array([8, 8, 8], dtype=np.int32)


# ──────────────────────────────────────────────────────────────
# Main Example Workflow
# ──────────────────────────────────────────────────────────────

def main():

    setup_logging(verbose=False)
    write_example_file(INPUT_FILE)

    print("=== h5vdb Example Usage ===\n")

    with h5.File(INPUT_FILE, "r") as f:
        for name in list_datasets(f):
            block = open_dataset(f, name)
            print(f"{block.name}: dims={block.dims} origin={block.origin} delta={block.delta}")

    converter = H5VdbConverter(input_file=INPUT_FILE, output_file=OUTPUT_FILE, normalize=True)

    print("\nGrouping:")
    for line in format_grouping(converter.plan()):
        print(line)

    if WRITE_VDB:
        converter.run()
        print(f"\nWrote {OUTPUT_FILE}")


# ──────────────────────────────────────────────────────────────
# Entry Point
# ──────────────────────────────────────────────────────────────

if __name__ == "__main__":
    main()
