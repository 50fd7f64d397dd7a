"""
Shape Catalog
=============

The seven tetromino kinds: cell layout, joint graph and color of each.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Tuple


Cell = Tuple[int, int]
JointPair = Tuple[int, int]


class ShapeKind(IntEnum):
    I = 0
    O = 1
    T = 2
    J = 3
    L = 4
    S = 5
    Z = 6


@dataclass(frozen=True)
class ShapeLayout:
    """
    Cell layout of one tetromino kind.

    ``coords`` are (x, y) cell offsets with x growing to the right and
    y counting rows downward from the spawn row. ``joints`` are index
    pairs into ``coords`` naming the blocks that get jointed together.
    """
    kind: ShapeKind
    coords: Tuple[Cell, Cell, Cell, Cell]
    joints: Tuple[JointPair, ...]
    color: Tuple[int, int, int]

    @property
    def block_count(self) -> int:
        return len(self.coords)

    def world_offset(self, i: int, j: int) -> Tuple[float, float]:
        """Offset from block i to block j in world space (y up)."""
        xi, yi = self.coords[i]
        xj, yj = self.coords[j]
        return (float(xj - xi), float(yi - yj))


_CHAIN: Tuple[JointPair, ...] = ((0, 1), (1, 2), (2, 3))

_LAYOUTS: Dict[ShapeKind, ShapeLayout] = {
    ShapeKind.I: ShapeLayout(
        ShapeKind.I, ((1, 0), (1, 1), (1, 2), (1, 3)), _CHAIN, (0, 244, 243)
    ),
    ShapeKind.O: ShapeLayout(
        ShapeKind.O, ((0, 0), (1, 0), (1, 1), (0, 1)),
        ((0, 1), (1, 2), (2, 3), (3, 0)), (238, 243, 0)
    ),
    ShapeKind.T: ShapeLayout(
        ShapeKind.T, ((0, 0), (1, 0), (2, 0), (1, 1)),
        ((0, 1), (1, 2), (1, 3)), (177, 0, 254)
    ),
    ShapeKind.J: ShapeLayout(
        ShapeKind.J, ((1, 0), (1, 1), (1, 2), (0, 2)), _CHAIN, (27, 0, 250)
    ),
    ShapeKind.L: ShapeLayout(
        ShapeKind.L, ((1, 0), (1, 1), (1, 2), (2, 2)), _CHAIN, (252, 157, 0)
    ),
    ShapeKind.S: ShapeLayout(
        ShapeKind.S, ((0, 1), (1, 1), (1, 0), (2, 0)), _CHAIN, (0, 247, 0)
    ),
    ShapeKind.Z: ShapeLayout(
        ShapeKind.Z, ((0, 0), (1, 0), (1, 1), (2, 1)), _CHAIN, (255, 0, 0)
    ),
}


def layout(kind: ShapeKind) -> ShapeLayout:
    """Get the layout of a shape kind."""
    return _LAYOUTS[ShapeKind(kind)]


def all_layouts() -> Tuple[ShapeLayout, ...]:
    """All layouts in ShapeKind order."""
    return tuple(_LAYOUTS[kind] for kind in ShapeKind)


def joint_anchors(
    shape: ShapeLayout,
    i: int,
    j: int
) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    """
    Local anchors for the joint between blocks i and j.

    The offset from i to j is split evenly: body i anchors half-way towards
    j and body j anchors half-way back, so both anchors coincide on the
    shared edge while the piece is undisturbed.

    Returns:
        (anchor_on_i, anchor_on_j)
    """
    dx, dy = shape.world_offset(i, j)
    return (dx / 2.0, dy / 2.0), (-dx / 2.0, -dy / 2.0)


def color_of(kind: ShapeKind) -> Tuple[int, int, int]:
    """RGB color for blocks of this kind."""
    return layout(kind).color


def random_kind(rng: random.Random) -> ShapeKind:
    """Draw a kind uniformly over all seven shapes."""
    return ShapeKind(rng.randrange(len(ShapeKind)))
