# -*- coding: utf-8 -*-

"""

Grouping of blocks into collections
===================================

Blocks that share a spacing and whose origins sit on a common integer lattice
can be written into the same grid. ``group()`` partitions the input with a
single greedy pass:

    for each block, in input order:
        admit it into the FIRST open collection it is consistent with
        otherwise open a new collection for it

The result depends on input order. A block is never moved once admitted and
two collections are never merged later, even if their envelopes would allow
it. For a fixed order the partition is deterministic.

"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Tuple

import numpy as np

from .blocks import Block, Vec3
from .errors import InputShapeError

logger = logging.getLogger("h5vdb")

# Relative tolerance on spacing equality
DELTA_RTOL = 1e-6

# Absolute tolerance, in voxels, on the origin difference being integral
LATTICE_ATOL = 1e-4


def lattice_steps(origin_a: Vec3, origin_b: Vec3, delta: Vec3) -> np.ndarray:
    """Origin difference ``a - b`` expressed in voxels (not rounded)."""
    return (np.asarray(origin_a, dtype=float) - np.asarray(origin_b, dtype=float)) / np.asarray(delta, dtype=float)


def is_consistent(block: Block, origin: Vec3, delta: Vec3) -> bool:
    """
    True if ``block`` lies on the lattice defined by ``origin`` and ``delta``.

    Requires equal spacing (within DELTA_RTOL) and an origin difference that is
    an integer number of voxels (within LATTICE_ATOL) along every axis.
    """
    if not np.allclose(block.delta, delta, rtol=DELTA_RTOL, atol=0.0):
        return False

    steps = lattice_steps(block.origin, origin, delta)
    return bool(np.all(np.abs(steps - np.rint(steps)) <= LATTICE_ATOL))


class Collection:
    """
    A group of lattice-consistent blocks destined for one output grid.

    ``canonical_origin`` is the component-wise minimum of member origins and
    anchors the grid transform. ``name`` comes from the first block admitted.
    """

    def __init__(self, first: Block):
        self.name = first.name
        self.delta: Vec3 = first.delta
        self.canonical_origin: Vec3 = first.origin
        self.blocks: List[Block] = [first]

    @property
    def members(self) -> List[str]:
        return [b.name for b in self.blocks]

    def accepts(self, block: Block) -> bool:
        return is_consistent(block, self.canonical_origin, self.delta)

    def admit(self, block: Block) -> None:
        """
        Add a consistent block and grow the envelope.

        The canonical origin only ever moves towards smaller coordinates.
        """
        steps = np.rint(lattice_steps(block.origin, self.blocks[0].origin, self.delta)).astype(int)
        hint = np.subtract(block.iorigin, self.blocks[0].iorigin)
        if not np.array_equal(steps, hint):
            logger.debug(
                "Block '%s': iorigin offset %s disagrees with origin offset %s relative to '%s'",
                block.name, tuple(hint), tuple(steps), self.blocks[0].name,
            )

        self.canonical_origin = tuple(float(v) for v in np.minimum(self.canonical_origin, block.origin))
        self.blocks.append(block)

    def _key(self) -> Tuple:
        return (self.name, self.delta, self.canonical_origin, tuple(self.members))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Collection):
            return NotImplemented
        return self._key() == other._key()

    def __repr__(self) -> str:
        return (
            f"Collection(name={self.name!r}, origin={self.canonical_origin}, "
            f"delta={self.delta}, members={self.members})"
        )


def group(blocks: Iterable[Block]) -> List[Collection]:
    """
    Partition ``blocks`` into collections with an ordered first-match scan.

    Args:
        blocks: blocks in arrival order; names must be unique.

    Returns:
        collections in creation order.

    Raises:
        InputShapeError on duplicate block names.
    """

    collections: List[Collection] = []
    seen: Dict[str, Block] = {}

    for block in blocks:
        if block.name in seen:
            raise InputShapeError(f"Block name '{block.name}' appears more than once")
        seen[block.name] = block

        for coll in collections:
            if coll.accepts(block):
                coll.admit(block)
                logger.debug("Block '%s' joins collection '%s'", block.name, coll.name)
                break
        else:
            collections.append(Collection(block))
            logger.debug("Block '%s' opens a new collection", block.name)

    logger.info("Grouped %d block(s) into %d collection(s)", len(seen), len(collections))
    return collections
