"""
Settle Detector
===============

Hands a piece over from "falling" to "placed" once all of its blocks rest.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from jointris.core.context import GameContext
from jointris.core.loss_tracker import LossTracker, compute_health
from jointris.core.row_clearing import RowClearer, RowClearResult
from jointris.core.shapes import ShapeKind
from jointris.core.spawner import PieceSpawner


@dataclass
class SettleEvent:
    """Record of a piece settling."""
    kind: ShapeKind
    blocks: Tuple[int, ...]
    clear: RowClearResult
    spawned: bool

    def __repr__(self) -> str:
        return (
            f"SettleEvent({self.kind.name}, rows={list(self.clear.rows)}, "
            f"spawned={self.spawned})"
        )


class SettleDetector:
    """
    Polls the rest signal of every active-piece block each tick.

    Only when all of them rest is the piece settled: its joints are
    removed, full rows are cleared and, while health remains, the next
    piece spawns. A block that no longer exists counts as not resting.
    """

    def __init__(
        self,
        spawner: PieceSpawner,
        clearer: RowClearer,
        loss_tracker: LossTracker
    ):
        self._spawner = spawner
        self._clearer = clearer
        self._loss_tracker = loss_tracker

    def is_settled(self, ctx: GameContext) -> bool:
        piece = ctx.active_piece
        if piece is None:
            return False
        return all(ctx.physics.is_resting(uid) for uid in piece.blocks)

    def update(self, ctx: GameContext) -> Optional[SettleEvent]:
        """
        Settle the active piece if every block rests.

        Returns:
            SettleEvent if the piece settled this tick, else None.
        """
        if not self.is_settled(ctx):
            return None

        piece = ctx.active_piece
        for joint_uid in piece.joints:
            ctx.physics.remove_joint(joint_uid)
        ctx.active_piece = None
        ctx.log(f"settled {piece.kind.name} piece")

        clear = self._clearer.clear_full_rows(ctx)

        spawned = False
        if compute_health(ctx.stats) > 0.0:
            self._spawner.spawn(ctx)
            spawned = True
        else:
            # Piece-less board; the grace timer restarts it
            self._loss_tracker.declare_game_over(ctx)

        return SettleEvent(
            kind=piece.kind,
            blocks=piece.blocks,
            clear=clear,
            spawned=spawned
        )
