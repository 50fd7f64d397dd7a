"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import yaml


LOGIC_ORDERS = ("physics_first", "logic_first")


@dataclass(frozen=True)
class BoardConfig:
    """Pit dimensions, in blocks."""
    n_lanes: int            # Blocks per row; a full row clears
    n_rows: int             # Playable rows above the floor
    wall_height: float      # Side wall height (0 = no walls)
    wall_thickness: float


@dataclass(frozen=True)
class PhysicsConfig:
    """Physics simulation parameters."""
    gravity_x: float
    gravity_y: float
    damping: float
    dt: float
    substeps: int
    block_mass: float
    linear_damping: float
    friction: float
    elasticity: float
    rest_speed_threshold: float
    rest_angular_threshold: float
    rest_consecutive_ticks: int
    logic_order: str

    @property
    def gravity(self) -> Tuple[float, float]:
        return (self.gravity_x, self.gravity_y)


@dataclass(frozen=True)
class ControlsConfig:
    """Player force magnitudes."""
    movement_force: float
    torque: float


@dataclass(frozen=True)
class HealthConfig:
    """Loss tracking and health bar parameters."""
    loss_margin: float
    game_over_grace_time: float
    bar_smoothing: float


@dataclass(frozen=True)
class ViewportConfig:
    """Headless viewport settings."""
    visible_below_floor: float


@dataclass(frozen=True)
class RenderConfig:
    """Presentation settings used by the pygame renderer."""
    block_px_size: int
    background: Tuple[int, int, int]
    floor_color: Tuple[int, int, int]
    wall_color: Tuple[int, int, int]


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    board: BoardConfig
    physics: PhysicsConfig
    controls: ControlsConfig
    health: HealthConfig
    viewport: ViewportConfig
    render: RenderConfig

    @property
    def physics_first(self) -> bool:
        """True if game logic reads state after this tick's physics step."""
        return self.physics.logic_order == "physics_first"


def _parse_color(color_data) -> Tuple[int, int, int]:
    """Parse RGB color from YAML."""
    if len(color_data) != 3:
        raise ValueError(f"Color must have 3 values [R, G, B], got {color_data}")
    return (int(color_data[0]), int(color_data[1]), int(color_data[2]))


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    board = config.board
    if board.n_lanes <= 0 or board.n_rows <= 0:
        raise ValueError(
            f"Board needs positive n_lanes and n_rows, got {board.n_lanes}x{board.n_rows}"
        )
    # Pieces spawn two lanes left of center and are up to three cells wide
    if board.n_lanes < 4:
        raise ValueError(f"n_lanes must be at least 4, got {board.n_lanes}")
    if board.n_rows < 4:
        raise ValueError(f"n_rows must be at least 4, got {board.n_rows}")
    if board.wall_height < 0:
        raise ValueError(f"wall_height must be >= 0, got {board.wall_height}")

    physics = config.physics
    if physics.dt <= 0:
        raise ValueError(f"dt must be positive, got {physics.dt}")
    if physics.substeps < 1:
        raise ValueError(f"substeps must be >= 1, got {physics.substeps}")
    if physics.block_mass <= 0:
        raise ValueError(f"block_mass must be positive, got {physics.block_mass}")
    if physics.rest_consecutive_ticks < 1:
        raise ValueError(
            f"rest_consecutive_ticks must be >= 1, got {physics.rest_consecutive_ticks}"
        )
    if physics.logic_order not in LOGIC_ORDERS:
        raise ValueError(
            f"logic_order must be one of {LOGIC_ORDERS}, got '{physics.logic_order}'"
        )

    health = config.health
    if health.loss_margin < 0:
        raise ValueError(f"loss_margin must be >= 0, got {health.loss_margin}")
    if health.game_over_grace_time < 0:
        raise ValueError(
            f"game_over_grace_time must be >= 0, got {health.game_over_grace_time}"
        )
    if not 0.0 < health.bar_smoothing <= 1.0:
        raise ValueError(f"bar_smoothing must be in (0, 1], got {health.bar_smoothing}")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    board_data = raw["board"]
    board = BoardConfig(
        n_lanes=int(board_data["n_lanes"]),
        n_rows=int(board_data["n_rows"]),
        wall_height=float(board_data.get("wall_height", 0.0)),
        wall_thickness=float(board_data.get("wall_thickness", 1.0))
    )

    physics_data = raw["physics"]
    physics = PhysicsConfig(
        gravity_x=float(physics_data.get("gravity_x", 0.0)),
        gravity_y=float(physics_data["gravity_y"]),
        damping=float(physics_data.get("damping", 1.0)),
        dt=float(physics_data["dt"]),
        substeps=int(physics_data.get("substeps", 1)),
        block_mass=float(physics_data.get("block_mass", 1.0)),
        linear_damping=float(physics_data.get("linear_damping", 3.0)),
        friction=float(physics_data.get("friction", 0.7)),
        elasticity=float(physics_data.get("elasticity", 0.0)),
        rest_speed_threshold=float(physics_data["rest_speed_threshold"]),
        rest_angular_threshold=float(physics_data["rest_angular_threshold"]),
        rest_consecutive_ticks=int(physics_data["rest_consecutive_ticks"]),
        logic_order=str(physics_data.get("logic_order", "physics_first"))
    )

    controls_data = raw["controls"]
    controls = ControlsConfig(
        movement_force=float(controls_data["movement_force"]),
        torque=float(controls_data["torque"])
    )

    health_data = raw["health"]
    health = HealthConfig(
        loss_margin=float(health_data.get("loss_margin", 0.5)),
        game_over_grace_time=float(health_data.get("game_over_grace_time", 3.0)),
        bar_smoothing=float(health_data.get("bar_smoothing", 0.1))
    )

    # Optional sections
    viewport_data = raw.get("viewport", {})
    viewport = ViewportConfig(
        visible_below_floor=float(viewport_data.get("visible_below_floor", 2.0))
    )

    render_data = raw.get("render", {})
    render = RenderConfig(
        block_px_size=int(render_data.get("block_px_size", 30)),
        background=_parse_color(render_data.get("background", [0, 0, 0])),
        floor_color=_parse_color(render_data.get("floor_color", [128, 128, 128])),
        wall_color=_parse_color(render_data.get("wall_color", [90, 90, 90]))
    )

    config = GameConfig(
        board=board,
        physics=physics,
        controls=controls,
        health=health,
        viewport=viewport,
        render=render
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
