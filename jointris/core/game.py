"""
Core Game
=========

Main game orchestrator: owns the game context and runs every component
once per tick in a fixed order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from jointris.core.board import BoardGeometry, FixedViewport
from jointris.core.config_loader import GameConfig, get_config
from jointris.core.context import ActivePiece, GameContext, GameStats
from jointris.core.health_bar import HealthBarGeometry, HealthBarPresenter
from jointris.core.loss_tracker import LossResult, LossTracker, compute_health, raw_health
from jointris.core.movement import ControlState, MovementController
from jointris.core.physics_world import PhysicsWorld
from jointris.core.rng import ShapeQueue
from jointris.core.row_clearing import RowClearer
from jointris.core.settle import SettleDetector, SettleEvent
from jointris.core.spawner import PieceSpawner


@dataclass
class TickResult:
    """Result of a single game tick."""
    applied: Tuple[int, int]          # (lateral, spin) pushed onto the piece
    settle: Optional[SettleEvent]
    loss: LossResult
    health: float
    health_bar: HealthBarGeometry

    @property
    def cleared_rows(self) -> Tuple[int, ...]:
        return self.settle.clear.rows if self.settle is not None else ()

    @property
    def restarted(self) -> bool:
        return self.loss.restarted


class CoreGame:
    """
    Main game simulation class.

    Orchestrates:
    - Physics world
    - Piece spawning
    - Player movement
    - Settle detection and row clearing
    - Loss tracking, health and auto-restart
    - Health bar smoothing

    One tick = one physics step plus one pass of game logic. With
    ``logic_order: physics_first`` the logic reads the state produced by
    this tick's step; with ``logic_first`` it reads the previous tick's.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        physics: Optional[PhysicsWorld] = None,
        viewport: Optional[object] = None,
        debug: bool = False
    ):
        """
        Initialize game.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for the shape sequence.
            physics: Physics world. A pymunk PhysicsWorld is built if None.
            viewport: Object with a ``bottom_y`` attribute. A fixed
                viewport below the floor is used if None.
            debug: If True, prints [DEBUG] lines for game events.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed

        board = BoardGeometry(config)
        if physics is None:
            physics = PhysicsWorld(config, board)
        if viewport is None:
            viewport = FixedViewport.for_board(board, config)

        self._ctx = GameContext(
            config=config,
            board=board,
            physics=physics,
            viewport=viewport,
            debug=debug
        )

        # Initialize components
        self._queue = ShapeQueue(seed)
        self._spawner = PieceSpawner(self._queue)
        self._movement = MovementController(
            config.controls.movement_force,
            config.controls.torque
        )
        self._clearer = RowClearer()
        self._loss_tracker = LossTracker(config.health, self._spawner)
        self._settle = SettleDetector(self._spawner, self._clearer, self._loss_tracker)
        self._health_bar = HealthBarPresenter(board, config.health.bar_smoothing)

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def context(self) -> GameContext:
        return self._ctx

    @property
    def physics(self) -> PhysicsWorld:
        return self._ctx.physics

    @property
    def board(self) -> BoardGeometry:
        return self._ctx.board

    @property
    def stats(self) -> GameStats:
        return self._ctx.stats

    @property
    def active_piece(self) -> Optional[ActivePiece]:
        return self._ctx.active_piece

    @property
    def spawner(self) -> PieceSpawner:
        return self._spawner

    @property
    def loss_tracker(self) -> LossTracker:
        return self._loss_tracker

    @property
    def health(self) -> float:
        """Current health in [0, 1]."""
        return compute_health(self._ctx.stats)

    @property
    def raw_health(self) -> float:
        """Health before clamping."""
        return raw_health(self._ctx.stats)

    @property
    def is_over(self) -> bool:
        """True while the game-over grace period runs."""
        return self._ctx.stats.is_game_over

    @property
    def viewport(self) -> object:
        return self._ctx.viewport

    @viewport.setter
    def viewport(self, value: object) -> None:
        self._ctx.viewport = value

    def reset(self, seed: Optional[int] = None) -> ActivePiece:
        """
        Reset game to initial state and spawn the first piece.

        Args:
            seed: New random seed. Keeps the current sequence if None.

        Returns:
            The first active piece.
        """
        if seed is not None:
            self._seed = seed

        self._ctx.physics.clear()
        self._ctx.stats.reset()
        self._ctx.active_piece = None
        self._ctx.ticks = 0
        self._queue.reset(seed)
        self._health_bar.reset()

        return self._spawner.spawn(self._ctx)

    def tick(
        self,
        controls: Optional[ControlState] = None,
        dt: Optional[float] = None
    ) -> TickResult:
        """
        Advance the game by one tick.

        Args:
            controls: Held controls for this tick. Idle if None.
            dt: Tick duration. Uses config default if None.

        Returns:
            TickResult with the events of this tick.
        """
        if controls is None:
            controls = ControlState()
        if dt is None:
            dt = self._config.physics.dt

        ctx = self._ctx
        # Forces only act during the step that follows them
        applied = self._movement.apply(ctx, controls)

        if self._config.physics_first:
            ctx.physics.step(dt)
            settle = self._settle.update(ctx)
            loss = self._loss_tracker.update(ctx, dt)
        else:
            settle = self._settle.update(ctx)
            loss = self._loss_tracker.update(ctx, dt)
            ctx.physics.step(dt)

        health = compute_health(ctx.stats)
        bar = self._health_bar.update(health)
        ctx.ticks += 1

        return TickResult(
            applied=applied,
            settle=settle,
            loss=loss,
            health=health,
            health_bar=bar
        )

    def get_info(self) -> Dict[str, Any]:
        """Get statistics as a plain dict."""
        stats = self._ctx.stats
        return {
            "generated_blocks": stats.generated_blocks,
            "cleared_blocks": stats.cleared_blocks,
            "lost_blocks": stats.lost_blocks,
            "time_since_loss": stats.time_since_loss,
            "health": self.health,
            "raw_health": self.raw_health,
            "game_over": self.is_over,
            "ticks": self._ctx.ticks,
            "block_count": self._ctx.physics.block_count,
        }

    def get_render_data(self) -> Dict[str, Any]:
        """
        Get data needed for rendering.

        Returns:
            Dict with block geometry and colors, board info and the health bar.
        """
        piece = self._ctx.active_piece
        blocks_data = []
        for block in self._ctx.physics.blocks.values():
            blocks_data.append({
                "uid": block.uid,
                "kind": int(block.kind),
                "x": block.position[0],
                "y": block.position[1],
                "angle": block.angle,
                "color": block.color,
                "vertices": block.world_vertices(),
                "active": piece is not None and block.uid in piece,
            })

        board = self._ctx.board
        return {
            "n_lanes": board.n_lanes,
            "n_rows": board.n_rows,
            "floor_y": board.floor_y,
            "left_wall_x": board.left_wall_x,
            "right_wall_x": board.right_wall_x,
            "wall_height": board.wall_height,
            "wall_thickness": board.wall_thickness,
            "blocks": blocks_data,
            "health_bar": self._health_bar.geometry(),
            "next_kind": int(self._queue.next_kind),
            **self.get_info(),
        }
