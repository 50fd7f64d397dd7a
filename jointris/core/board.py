"""
Board Geometry
==============

Maps (lane, row) grid cells to world coordinates and back.

World units are block sizes with y pointing up. The board is centered on
x = 0 and the floor surface sits at ``-n_rows / 2``.
"""

from __future__ import annotations

import math
from typing import Optional, Tuple

from jointris.core.config_loader import GameConfig, get_config


class BoardGeometry:
    """Pure geometry helpers for a pit of ``n_lanes`` x ``n_rows`` cells."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._n_lanes = config.board.n_lanes
        self._n_rows = config.board.n_rows
        self._wall_height = config.board.wall_height
        self._wall_thickness = config.board.wall_thickness

    @property
    def n_lanes(self) -> int:
        return self._n_lanes

    @property
    def n_rows(self) -> int:
        return self._n_rows

    @property
    def wall_height(self) -> float:
        return self._wall_height

    @property
    def wall_thickness(self) -> float:
        return self._wall_thickness

    @property
    def floor_y(self) -> float:
        """Y coordinate of the floor surface."""
        return -self._n_rows * 0.5

    @property
    def left_wall_x(self) -> float:
        """X coordinate of the inner face of the left wall."""
        return -self._n_lanes * 0.5

    @property
    def right_wall_x(self) -> float:
        """X coordinate of the inner face of the right wall."""
        return self._n_lanes * 0.5

    @property
    def top_y(self) -> float:
        """Y coordinate of the top of the highest row."""
        return self.floor_y + self._n_rows

    @property
    def center_lane(self) -> int:
        """Leftmost lane of a spawning piece's bounding box."""
        return self._n_lanes // 2 - 1

    @property
    def top_row(self) -> int:
        return self._n_rows - 1

    def cell_center(self, lane: int, row: int) -> Tuple[float, float]:
        """World position of the center of a grid cell."""
        x = self.left_wall_x + lane + 0.5
        y = self.floor_y + row + 0.5
        return (x, y)

    def spawn_cell(self, dx: int, dy: int) -> Tuple[int, int]:
        """
        Grid cell for a shape cell offset at spawn time.

        Pieces spawn centered horizontally with their first layout row in
        the top board row; layout y offsets count downward.
        """
        return (self.center_lane + dx, self.top_row - dy)

    def row_index(self, y: float) -> int:
        """Discretized row of a block whose center is at height y."""
        return int(math.floor(y - self.floor_y))

    def row_in_range(self, row: int) -> bool:
        return 0 <= row < self._n_rows


class FixedViewport:
    """
    Viewport with a constant lower bound.

    Used headless and in tests; a renderer may supply any object with a
    ``bottom_y`` attribute instead.
    """

    def __init__(self, bottom_y: float):
        self.bottom_y = bottom_y

    @classmethod
    def for_board(
        cls,
        board: BoardGeometry,
        config: Optional[GameConfig] = None
    ) -> "FixedViewport":
        """Viewport showing ``visible_below_floor`` blocks under the floor."""
        if config is None:
            config = get_config()
        return cls(board.floor_y - config.viewport.visible_below_floor)

    def __repr__(self) -> str:
        return f"FixedViewport(bottom_y={self.bottom_y})"
