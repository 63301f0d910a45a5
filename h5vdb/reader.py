# -*- coding: utf-8 -*-

"""

HDF5 input boundary (h5py).

Each dataset to convert carries three attributes:

    origin   3 floats
    delta    3 floats
    iorigin  3 ints

"""

from __future__ import annotations

import logging
from typing import List

import h5py as h5
import numpy as np

from .blocks import Block, validate_layout
from .errors import AttributeShapeError, DatasetNotFoundError, InputShapeError

logger = logging.getLogger("h5vdb")


def read_attribute(dataset, name: str, dtype, length: int) -> np.ndarray:
    """
    Read a fixed-length numeric attribute.

    Args:
        dataset: h5py object carrying the attribute
        name: attribute name
        dtype: element type of the returned array
        length: expected number of elements

    Returns:
        1D numpy array of ``length`` elements of ``dtype``.

    Raises:
        AttributeShapeError if the attribute is missing or has another size.
    """
    if name not in dataset.attrs:
        raise AttributeShapeError(dataset.name, name, length, -1)

    arr = np.atleast_1d(np.asarray(dataset.attrs[name])).ravel()
    if arr.size != length:
        raise AttributeShapeError(dataset.name, name, length, arr.size)

    if np.issubdtype(np.dtype(dtype), np.integer) and arr.dtype.kind == "f":
        if not np.all(arr == np.rint(arr)):
            raise InputShapeError(f"Attribute '{name}' of dataset '{dataset.name}' must hold integers (got {arr.tolist()})")

    try:
        return arr.astype(dtype)
    except (TypeError, ValueError) as e:
        raise InputShapeError(f"Attribute '{name}' of dataset '{dataset.name}' is not numeric: {e}") from e


def list_datasets(container) -> List[str]:
    """All dataset paths below ``container``, without the leading '/'."""
    names: List[str] = []

    def visit(name, obj):
        if isinstance(obj, h5.Dataset):
            names.append(name)

    container.visititems(visit)
    return names


def open_dataset(container, name: str) -> Block:
    """
    Describe one dataset as a Block.

    The voxel buffer is read only when Block.read() is called, so the file
    must stay open until the block has been assembled.
    """
    if name not in container:
        raise DatasetNotFoundError(f"Dataset not found: {name}")

    ds = container[name]
    if not isinstance(ds, h5.Dataset):
        raise InputShapeError(f"'{name}' is not a dataset")

    block_name = ds.name.lstrip("/")
    dims = validate_layout(block_name, ds.dtype, ds.shape)

    origin = read_attribute(ds, "origin", np.float64, 3)
    delta = read_attribute(ds, "delta", np.float64, 3)
    iorigin = read_attribute(ds, "iorigin", np.int64, 3)

    logger.debug("Dataset '%s': dims=%s origin=%s delta=%s iorigin=%s", block_name, dims, origin, delta, iorigin)

    return Block(
        name=block_name,
        origin=tuple(float(v) for v in origin),
        delta=tuple(float(v) for v in delta),
        iorigin=tuple(int(v) for v in iorigin),
        dims=dims,
        loader=lambda: ds[()],
    )
