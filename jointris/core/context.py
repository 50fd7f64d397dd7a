"""
Game Context
============

The single state object shared by every game-logic component: board,
physics, viewport, running statistics and the active piece.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, TYPE_CHECKING

from jointris.core.board import BoardGeometry
from jointris.core.config_loader import GameConfig
from jointris.core.shapes import ShapeKind

if TYPE_CHECKING:
    from jointris.core.physics_world import PhysicsWorld


@dataclass
class GameStats:
    """Running counters, reset in full on restart."""
    generated_blocks: int = 0
    cleared_blocks: int = 0
    lost_blocks: int = 0
    time_since_loss: Optional[float] = None  # None while the game is live

    @property
    def is_game_over(self) -> bool:
        return self.time_since_loss is not None

    def reset(self) -> None:
        self.generated_blocks = 0
        self.cleared_blocks = 0
        self.lost_blocks = 0
        self.time_since_loss = None


@dataclass
class ActivePiece:
    """The piece currently under player control."""
    kind: ShapeKind
    blocks: Tuple[int, ...]
    joints: List[int] = field(default_factory=list)

    def __contains__(self, uid: int) -> bool:
        return uid in self.blocks


@dataclass
class GameContext:
    """
    Owned game state, passed explicitly to every component.

    ``physics`` is anything honouring the PhysicsWorld handle contract and
    ``viewport`` anything with a ``bottom_y`` attribute.
    """
    config: GameConfig
    board: BoardGeometry
    physics: "PhysicsWorld"
    viewport: object
    stats: GameStats = field(default_factory=GameStats)
    active_piece: Optional[ActivePiece] = None
    ticks: int = 0
    debug: bool = False

    def log(self, message: str) -> None:
        """Print a debug line when debug output is enabled."""
        if self.debug:
            print(f"[DEBUG] tick {self.ticks}: {message}")
