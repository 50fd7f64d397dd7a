"""
Shared fixtures: a scripted physics world honouring the PhysicsWorld
handle contract, with positions and rest flags set directly by tests.
"""

from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

import pytest

from jointris.core.board import BoardGeometry, FixedViewport
from jointris.core.config_loader import GameConfig, load_config
from jointris.core.context import GameContext
from jointris.core.shapes import ShapeKind, color_of


@dataclass
class ScriptedBlock:
    uid: int
    kind: ShapeKind
    x: float
    y: float
    resting: bool = False
    angle: float = 0.0

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @property
    def color(self):
        return color_of(self.kind)

    def world_vertices(self):
        return [
            (self.x - 0.5, self.y - 0.5), (self.x + 0.5, self.y - 0.5),
            (self.x + 0.5, self.y + 0.5), (self.x - 0.5, self.y + 0.5),
        ]


class ScriptedPhysics:
    """In-memory stand-in for PhysicsWorld. Nothing moves unless a test moves it."""

    def __init__(self):
        self.blocks: Dict[int, ScriptedBlock] = {}
        self.joints: Dict[int, Tuple[int, int, tuple, tuple]] = {}
        self.forces: List[Tuple[int, Tuple[float, float]]] = []
        self.torques: List[Tuple[int, float]] = []
        self.calls: List[str] = []
        self._next_uid = 0
        self._next_joint_uid = 0

    # --- contract -------------------------------------------------------

    @property
    def block_uids(self) -> List[int]:
        return list(self.blocks.keys())

    @property
    def block_count(self) -> int:
        return len(self.blocks)

    @property
    def joint_uids(self) -> List[int]:
        return list(self.joints.keys())

    @property
    def joint_count(self) -> int:
        return len(self.joints)

    def spawn_block(self, kind, x, y):
        block = ScriptedBlock(self._next_uid, kind, x, y)
        self._next_uid += 1
        self.blocks[block.uid] = block
        return block

    def add_joint(self, uid_a, uid_b, anchor_a, anchor_b):
        if uid_a not in self.blocks or uid_b not in self.blocks:
            return None
        joint_uid = self._next_joint_uid
        self._next_joint_uid += 1
        self.joints[joint_uid] = (uid_a, uid_b, tuple(anchor_a), tuple(anchor_b))
        return joint_uid

    def remove_joint(self, joint_uid) -> bool:
        self.calls.append("remove_joint")
        return self.joints.pop(joint_uid, None) is not None

    def remove_block(self, uid):
        block = self.blocks.pop(uid, None)
        if block is None:
            return None
        for joint_uid, (a, b, _, _) in list(self.joints.items()):
            if a == uid or b == uid:
                del self.joints[joint_uid]
        return block

    def get_position(self, uid) -> Optional[Tuple[float, float]]:
        block = self.blocks.get(uid)
        return block.position if block is not None else None

    def is_resting(self, uid) -> bool:
        block = self.blocks.get(uid)
        return block is not None and block.resting

    def resting_uids(self) -> List[int]:
        return [uid for uid, b in self.blocks.items() if b.resting]

    def apply_force(self, uid, force):
        if uid in self.blocks:
            self.forces.append((uid, tuple(force)))

    def apply_torque(self, uid, torque):
        if uid in self.blocks:
            self.torques.append((uid, torque))

    def step(self, dt=None):
        self.calls.append("step")

    def clear(self):
        self.joints.clear()
        self.blocks.clear()

    # --- test helpers ---------------------------------------------------

    def place(self, uid, x, y, resting=True):
        block = self.blocks[uid]
        block.x = x
        block.y = y
        block.resting = resting

    def add_block(self, x, y, resting=True, kind=ShapeKind.I) -> int:
        block = self.spawn_block(kind, x, y)
        block.resting = resting
        return block.uid


def with_board(config: GameConfig, **board_overrides) -> GameConfig:
    """Copy of config with some board fields replaced."""
    return replace(config, board=replace(config.board, **board_overrides))


def with_physics(config: GameConfig, **physics_overrides) -> GameConfig:
    return replace(config, physics=replace(config.physics, **physics_overrides))


def make_context(config: GameConfig, physics=None) -> GameContext:
    board = BoardGeometry(config)
    if physics is None:
        physics = ScriptedPhysics()
    return GameContext(
        config=config,
        board=board,
        physics=physics,
        viewport=FixedViewport.for_board(board, config)
    )


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def small_config(config):
    """Four lanes, eight rows."""
    return with_board(config, n_lanes=4, n_rows=8)


@pytest.fixture
def scripted_physics():
    return ScriptedPhysics()
