"""
Health Bar Presenter
====================

Smooths the health value and maps it to a horizontal bar.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from jointris.core.board import BoardGeometry


HEALTHY_COLOR = (0, 220, 90)
CRITICAL_COLOR = (230, 40, 40)


@dataclass
class HealthBarGeometry:
    """Bar placement in world units."""
    left_x: float
    center_x: float
    y: float
    width: float
    full_width: float
    height: float
    color: Tuple[int, int, int]
    displayed: float


class HealthBarPresenter:
    """
    Exponentially smoothed health bar, left-anchored above the board.

    Purely observational: reads health, never changes game state.
    """

    def __init__(self, board: BoardGeometry, smoothing: float = 0.1, initial: float = 1.0):
        self._board = board
        self._smoothing = smoothing
        self._displayed = initial

    @property
    def displayed(self) -> float:
        return self._displayed

    def reset(self, value: float = 1.0) -> None:
        self._displayed = value

    def update(self, health: float) -> HealthBarGeometry:
        """Move the displayed value towards health and return the bar."""
        self._displayed += (health - self._displayed) * self._smoothing
        return self.geometry()

    def geometry(self) -> HealthBarGeometry:
        board = self._board
        full_width = float(board.n_lanes)
        fraction = min(1.0, max(0.0, self._displayed))
        width = full_width * fraction
        left_x = board.left_wall_x
        return HealthBarGeometry(
            left_x=left_x,
            center_x=left_x + width / 2.0,
            y=board.top_y + 1.0,
            width=width,
            full_width=full_width,
            height=0.4,
            color=_lerp_color(CRITICAL_COLOR, HEALTHY_COLOR, fraction),
            displayed=self._displayed
        )


def _lerp_color(
    a: Tuple[int, int, int],
    b: Tuple[int, int, int],
    t: float
) -> Tuple[int, int, int]:
    return tuple(int(round(ca + (cb - ca) * t)) for ca, cb in zip(a, b))
