# -*- coding: utf-8 -*-

"""

Exception types raised by h5vdb.

Every failure aborts the whole run; there is no partial output.

"""


class H5VdbError(Exception):
    """Base class for all h5vdb errors."""


class InputShapeError(H5VdbError):
    """
    A dataset cannot be used as a block: wrong element type, wrong rank,
    zero voxels, buffer size mismatch or unusable spatial metadata.
    """


class AttributeShapeError(InputShapeError):
    """A spatial attribute is missing or does not have the expected length."""

    def __init__(self, dataset: str, attribute: str, expected: int, actual: int):
        self.dataset = dataset
        self.attribute = attribute
        self.expected = expected
        self.actual = actual
        if actual < 0:
            msg = f"Dataset '{dataset}' has no attribute '{attribute}'"
        else:
            msg = f"Attribute '{attribute}' of dataset '{dataset}' has {actual} element(s), expected {expected}"
        super().__init__(msg)


class ConsistencyViolationError(H5VdbError):
    """
    Placement or value transform would produce invalid output: a negative
    voxel offset inside a collection, or normalization of a constant block.
    """


class SinkError(H5VdbError):
    """Writing the output grid file failed."""


class DatasetNotFoundError(H5VdbError):
    """A requested dataset path does not exist in the input file."""
