#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""

──────────────────────────────────────────────────────────────────────────────
CLI QUICK START (copy–paste, then tweak)
──────────────────────────────────────────────────────────────────────────────
Convert every float dataset of a file, normalizing each block:

    python3 -m h5vdb.cli \
        --input ./run/plotfile_0042.h5 \
        --writevdb density_0042.vdb \
        --normalize --offset 0.1 \
        --verbose

Exploration mode :

    # Print groups, datasets and attributes of the file
    python3 -m h5vdb.cli --input ./run/plotfile_0042.h5

    # Print description and values of selected datasets
    python3 -m h5vdb.cli --input ./run/plotfile_0042.h5 --dataset level_0/block_3/density

    # Dry-run: show which blocks would be merged into which grid
    python3 -m h5vdb.cli --input ./run/plotfile_0042.h5 --writevdb out.vdb --dry-run

Required args:

    --input            HDF5 file to read.

Optional args:

    --dataset          Comma-separated dataset paths (repeatable). Without
                       --writevdb the datasets are printed; with it only these
                       datasets are converted.
    --writevdb         Output .vdb path.
    --normalize        Remap each block to [0, 1] (plus --offset).
    --offset           Value added to every voxel (default 0).
    --dry-run          Group and report, do not write.
    --verbose          Debug logging.

"""


import argparse
import logging
import os

import h5py as h5

from .converter import H5VdbConverter, parse_dataset_names, parse_offset, setup_logging
from .inspection import print_content, print_dataset_content

logger = logging.getLogger("h5vdb")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Convert HDF5 block datasets into OpenVDB grids")

    parser.add_argument("--input", type=str, required=True, help="Input HDF5 file (REQUIRED)")
    parser.add_argument(
        "--dataset",
        type=parse_dataset_names,
        action="append",
        default=None,
        help="Dataset path(s), comma-separated; may be repeated. Optional.",
    )
    parser.add_argument("--writevdb", type=str, default=None, help="Write the selected datasets into this OpenVDB file.")

    # Value transform
    parser.add_argument("--normalize", action="store_true", help="Normalize each block to [0, 1] before writing.")
    parser.add_argument("--offset", type=parse_offset, default=0.0, help="Value offset added to every voxel (default: 0).")

    # Utility flags
    parser.add_argument("--dry-run", action="store_true", help="Print the grouping without writing files.")
    parser.add_argument("--verbose", action="store_true", help="Verbose logging.")

    return parser


def main(argv=None) -> None:

    """
    Parse CLI args and run inspection or conversion.
    """

    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging early
    setup_logging(args.verbose)

    if args.writevdb is None and (args.normalize or args.offset != 0.0 or args.dry_run):
        parser.error("--normalize, --offset and --dry-run require --writevdb.")

    # Flatten repeated --dataset arguments
    datasets = None
    if args.dataset:
        datasets = [name for chunk in args.dataset if chunk for name in chunk] or None

    input_file = os.path.abspath(args.input)

    if not os.path.isfile(input_file):
        logger.error("Input file not found: %s", input_file)
        raise FileNotFoundError(f"Input file not found: {input_file}")

    try:
        if args.writevdb is None:
            with h5.File(input_file, "r") as f:
                if datasets is None:
                    print_content(f)
                else:
                    for name in datasets:
                        print_dataset_content(f, name)
            return

        H5VdbConverter(
            input_file=input_file,
            output_file=args.writevdb,
            datasets=datasets,
            normalize=args.normalize,
            offset=args.offset,
            dry_run=args.dry_run,
        ).run()
    except Exception as e:
        logger.exception("FATAL: %s", e)
        raise


if __name__ == "__main__":
    main()
