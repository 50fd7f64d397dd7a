"""
Jointris Core - game logic layered on a pymunk simulation.

Main exports:
- CoreGame: Tick scheduler owning the game context and every component
- GameConfig: Configuration loaded from game_config.yaml
- ShapeKind / layout: The seven tetromino layouts and joint graphs
- ControlState: Held controls for one tick
- PhysicsWorld: pymunk adapter addressed through block and joint handles
"""

from jointris.core.config_loader import GameConfig, load_config, get_config
from jointris.core.shapes import ShapeKind, ShapeLayout, layout, joint_anchors
from jointris.core.board import BoardGeometry, FixedViewport
from jointris.core.context import ActivePiece, GameContext, GameStats
from jointris.core.physics_world import PhysicsWorld
from jointris.core.movement import ControlState
from jointris.core.loss_tracker import compute_health
from jointris.core.game import CoreGame, TickResult

__all__ = [
    "GameConfig",
    "load_config",
    "get_config",
    "ShapeKind",
    "ShapeLayout",
    "layout",
    "joint_anchors",
    "BoardGeometry",
    "FixedViewport",
    "ActivePiece",
    "GameContext",
    "GameStats",
    "PhysicsWorld",
    "ControlState",
    "compute_health",
    "CoreGame",
    "TickResult",
]
