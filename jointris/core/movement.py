"""
Movement Controller
===================

Translates the four control inputs into a lateral force and a torque,
applied identically to every block of the active piece.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from jointris.core.context import GameContext


@dataclass(frozen=True)
class ControlState:
    """Held state of the four controls for one tick."""
    left: bool = False
    right: bool = False
    rotate_ccw: bool = False
    rotate_cw: bool = False

    @property
    def lateral(self) -> int:
        """-1 for left, +1 for right, 0 for neither or both."""
        return int(self.right) - int(self.left)

    @property
    def spin(self) -> int:
        """+1 for counter-clockwise, -1 for clockwise, 0 otherwise."""
        return int(self.rotate_ccw) - int(self.rotate_cw)


class MovementController:
    """
    Pushes and twists the active piece.

    The force goes to every block rather than one so the loosely jointed
    cluster keeps its shape while still flexing under physics. Rotation is
    a torque, not a discrete 90 degree turn.
    """

    def __init__(self, movement_force: float, torque: float):
        self._movement_force = movement_force
        self._torque = torque

    def apply(self, ctx: GameContext, controls: ControlState) -> Tuple[int, int]:
        """
        Apply this tick's controls to the active piece.

        Returns:
            (lateral, spin) actually applied; (0, 0) without an active piece.
        """
        piece = ctx.active_piece
        if piece is None:
            return (0, 0)

        lateral = controls.lateral
        spin = controls.spin

        if lateral != 0:
            force = (lateral * self._movement_force, 0.0)
            for uid in piece.blocks:
                ctx.physics.apply_force(uid, force)

        if spin != 0:
            torque = spin * self._torque
            for uid in piece.blocks:
                ctx.physics.apply_torque(uid, torque)

        return (lateral, spin)
