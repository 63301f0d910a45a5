# -*- coding: utf-8 -*-

"""

Block descriptor
================

A block is one rectangular, regularly spaced 3-D dataset together with its
spatial metadata:

    origin   world-space position of voxel (0, 0, 0)
    delta    spacing along each axis (strictly positive)
    iorigin  origin on the global integer lattice (consistency hint only)
    dims     voxel extent along each axis

The voxel buffer is not held by the descriptor. It is pulled through
``Block.read()`` when the assembler needs it and dropped right after the
block has been scattered into its grid.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence, Tuple

import numpy as np

from .errors import InputShapeError


Vec3 = Tuple[float, float, float]
IVec3 = Tuple[int, int, int]


def validate_layout(name: str, dtype, shape: Sequence[int]) -> IVec3:
    """
    Check element type, rank and voxel count of a dataset.

    Args:
        name: dataset name, used in error messages
        dtype: numpy dtype of the stored elements
        shape: dataset shape

    Returns:
        dims as a tuple of 3 ints.

    Raises:
        InputShapeError if the dataset cannot be converted to a float grid.
    """

    if not np.issubdtype(np.dtype(dtype), np.floating):
        raise InputShapeError(f"Dataset '{name}': only floating point datasets can be converted (got {np.dtype(dtype)})")

    if len(shape) != 3:
        raise InputShapeError(f"Dataset '{name}': only 3D datasets can be converted (got rank {len(shape)})")

    dims = tuple(int(n) for n in shape)
    if int(np.prod(dims)) == 0:
        raise InputShapeError(f"Dataset '{name}': empty dataset cannot be used (dims={dims})")

    return dims


@dataclass(frozen=True)
class Block:
    name: str
    origin: Vec3
    delta: Vec3
    iorigin: IVec3
    dims: IVec3
    loader: Optional[Callable[[], np.ndarray]] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        for label, vec in (("origin", self.origin), ("delta", self.delta), ("iorigin", self.iorigin), ("dims", self.dims)):
            if len(vec) != 3:
                raise InputShapeError(f"Block '{self.name}': {label} must have 3 components (got {len(vec)})")
        if any(not np.isfinite(d) or d <= 0.0 for d in self.delta):
            raise InputShapeError(f"Block '{self.name}': delta must be strictly positive (got {self.delta})")
        if any(n <= 0 for n in self.dims):
            raise InputShapeError(f"Block '{self.name}': dims must be positive (got {self.dims})")

    @property
    def size(self) -> int:
        return self.dims[0] * self.dims[1] * self.dims[2]

    def read(self) -> np.ndarray:
        """
        Load the voxel buffer into a new float64 array shaped ``dims``.

        Raises:
            InputShapeError if the buffer does not hold exactly prod(dims) values.
        """
        if self.loader is None:
            raise InputShapeError(f"Block '{self.name}' has no data source")

        raw = np.asarray(self.loader())
        if raw.size != self.size:
            raise InputShapeError(
                f"Block '{self.name}': data holds {raw.size} elements, "
                f"while the computed size is {self.size} elements"
            )

        return np.array(raw, dtype=np.float64).reshape(self.dims)

    @classmethod
    def from_array(
        cls,
        name: str,
        values,
        origin: Sequence[float],
        delta: Sequence[float],
        iorigin: Optional[Sequence[int]] = None,
    ) -> "Block":
        """
        Build a block around an in-memory array (rank 3, floating point).
        """
        values = np.asarray(values)
        dims = validate_layout(name, values.dtype, values.shape)
        if iorigin is None:
            iorigin = (0, 0, 0)
        return cls(
            name=name,
            origin=tuple(float(v) for v in origin),
            delta=tuple(float(v) for v in delta),
            iorigin=tuple(int(v) for v in iorigin),
            dims=dims,
            loader=lambda: values,
        )
