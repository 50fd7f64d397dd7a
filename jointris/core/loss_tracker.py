"""
Loss / Health Tracker
=====================

Removes blocks that fall below the visible area, keeps loss statistics,
derives health, and restarts the board after a game-over grace period.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from jointris.core.config_loader import HealthConfig
from jointris.core.context import GameContext, GameStats
from jointris.core.spawner import PieceSpawner


def raw_health(stats: GameStats) -> float:
    """
    Health before clamping.

    1.0 while nothing has been lost, 0.0 once the game is over or blocks
    were lost before any row cleared, otherwise ``1 - lost / cleared``,
    which can drop below zero when losses outpace clears.
    """
    if stats.is_game_over:
        return 0.0
    if stats.lost_blocks == 0:
        return 1.0
    if stats.cleared_blocks == 0:
        return 0.0
    return 1.0 - stats.lost_blocks / stats.cleared_blocks


def compute_health(stats: GameStats) -> float:
    """Health clamped to [0, 1]."""
    return min(1.0, max(0.0, raw_health(stats)))


@dataclass
class LossResult:
    """Outcome of one loss tracking update."""
    lost_uids: Tuple[int, ...] = ()
    active_piece_lost: bool = False
    restarted: bool = False


class LossTracker:
    """
    Watches the bottom of the viewport.

    Losing a placed block only costs health. Losing a block of the active
    piece ends the game: the piece is given up, and once the grace period
    has passed the whole board is cleared and a fresh piece spawns.
    """

    def __init__(self, config: HealthConfig, spawner: PieceSpawner):
        self._margin = config.loss_margin
        self._grace_time = config.game_over_grace_time
        self._spawner = spawner
        # Tick on which the current game over was declared
        self._game_over_tick: Optional[int] = None

    @property
    def grace_time(self) -> float:
        return self._grace_time

    def boundary(self, ctx: GameContext) -> float:
        """Blocks whose center drops below this height are lost."""
        return ctx.viewport.bottom_y - self._margin

    def update(self, ctx: GameContext, dt: float) -> LossResult:
        """
        Remove fallen blocks and advance the game-over timer.

        Args:
            ctx: Game context.
            dt: Elapsed time since the previous update.
        """
        boundary = self.boundary(ctx)
        lost: List[int] = []
        for uid in ctx.physics.block_uids:
            position = ctx.physics.get_position(uid)
            if position is not None and position[1] < boundary:
                lost.append(uid)

        piece = ctx.active_piece
        active_lost = piece is not None and any(uid in piece for uid in lost)

        for uid in lost:
            ctx.physics.remove_block(uid)
        ctx.stats.lost_blocks += len(lost)
        if lost:
            ctx.log(f"lost {len(lost)} block(s) below y={boundary:.2f}")

        result = LossResult(lost_uids=tuple(lost), active_piece_lost=active_lost)

        if active_lost:
            self.declare_game_over(ctx)

        # The grace timer starts counting on the tick after game over
        if ctx.stats.is_game_over and ctx.ticks != self._game_over_tick:
            ctx.stats.time_since_loss += dt
            if ctx.stats.time_since_loss > self._grace_time:
                self.restart(ctx)
                result.restarted = True

        return result

    def declare_game_over(self, ctx: GameContext) -> None:
        """Start the grace timer and give up the active piece."""
        if ctx.stats.is_game_over:
            return
        ctx.stats.time_since_loss = 0.0
        self._game_over_tick = ctx.ticks

        piece = ctx.active_piece
        if piece is not None:
            for joint_uid in piece.joints:
                ctx.physics.remove_joint(joint_uid)
            ctx.active_piece = None
        ctx.log("game over")

    def restart(self, ctx: GameContext) -> None:
        """Clear the board, reset every counter and spawn a fresh piece."""
        ctx.physics.clear()
        ctx.stats.reset()
        ctx.active_piece = None
        ctx.log("restart")
        self._spawner.spawn(ctx)
