# -*- coding: utf-8 -*-

"""

Human-readable listing of an HDF5 file: groups, datasets, attributes and,
for a single dataset, its values.

"""

from __future__ import annotations

import h5py as h5
import numpy as np

from .errors import DatasetNotFoundError

SPACING = "\t"

_CLASS_NAMES = [
    "NO_CLASS", "INTEGER", "FLOAT", "TIME", "STRING", "BITFIELD",
    "OPAQUE", "COMPOUND", "REFERENCE", "ENUM", "VLEN", "ARRAY",
]
TYPE_CLASSES = {getattr(h5.h5t, n): f"H5T_{n}" for n in _CLASS_NAMES if hasattr(h5.h5t, n)}


def translate_class(type_id) -> str:
    return TYPE_CLASSES.get(type_id.get_class(), "unknown")


def format_value(value) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, str):
        return value

    arr = np.asarray(value)
    if arr.dtype.kind in "iufb":
        return "  ".join(str(v) for v in arr.ravel())
    if arr.dtype.kind in "SUO" and arr.size == 1:
        return format_value(arr.ravel()[0])
    return "(print not implemented)"


def print_attributes(obj, prefix: str) -> None:
    for name in obj.attrs:
        attr_id = obj.attrs.get_id(name)
        print(
            f"{prefix}{name} ({translate_class(attr_id.get_type())}, {attr_id.get_storage_size()})  =  "
            f"{format_value(obj.attrs[name])}"
        )


def print_dataset(ds, prefix: str = "") -> None:
    print(f"{prefix}type: {translate_class(ds.id.get_type())}")
    print(f"{prefix}attrs: {len(ds.attrs)}")
    print_attributes(ds, prefix + SPACING)
    print(f"{prefix}npoints: {ds.size}")
    print(f"{prefix}dims: {ds.ndim}")

    maxshape = ds.maxshape or ds.shape
    for a, dim in enumerate(ds.shape):
        maxdim = "unlimited" if maxshape[a] is None else maxshape[a]
        print(f"{prefix}{SPACING}dim #{a}:")
        print(f"{prefix}{SPACING}{SPACING}dim={dim}   maxdim={maxdim}")
        print(f"{prefix}{SPACING}{SPACING}start=0   end={max(dim - 1, 0)}")
        print(f"{prefix}{SPACING}{SPACING}start_valid=0   end_valid={max(dim - 1, 0)}")


def print_content(group, prefix: str = "") -> None:
    """Recursively print every group and dataset below ``group``."""
    for name, obj in group.items():
        if isinstance(obj, h5.Group):
            print(f"{prefix}{name}  ->  group")
            print_attributes(obj, prefix + SPACING)
            print_content(obj, prefix + SPACING)
        elif isinstance(obj, h5.Dataset):
            print(f"{prefix}{name}  ->  dataset")
            print_dataset(obj, prefix + SPACING)
        else:
            print(f"{prefix}{name}  ->  {type(obj).__name__}")


def print_dataset_content(container, name: str) -> None:
    """Describe one dataset, then print all of its values."""
    if name not in container:
        raise DatasetNotFoundError(f"Dataset not found: {name}")

    ds = container[name]
    print_dataset(ds)
    print()
    print(format_value(ds[()]))
