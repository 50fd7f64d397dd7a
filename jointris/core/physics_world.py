"""
Physics World
=============

Manages the pymunk Space, the static floor and walls, block bodies and the
joints that hold a falling piece together.

Game logic only talks to blocks and joints through integer handles. Every
query or mutation on a handle that is no longer alive is a no-op that
reports "absent" (``None`` / ``False``) instead of raising.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import pymunk

from jointris.core.board import BoardGeometry
from jointris.core.config_loader import GameConfig, get_config
from jointris.core.shapes import ShapeKind, color_of

# Block collider half extents (blocks are 1 x 1 world units)
BLOCK_HALF_EXTENT = 0.5


@dataclass
class BlockBody:
    """
    Represents a block instance in the physics world.

    Wraps the pymunk Body and box shape with game-specific metadata.
    """
    uid: int
    kind: ShapeKind
    body: pymunk.Body
    shape: pymunk.Poly
    rest_ticks: int = 0

    @property
    def color(self) -> Tuple[int, int, int]:
        return color_of(self.kind)

    @property
    def position(self) -> Tuple[float, float]:
        return self.body.position.x, self.body.position.y

    @property
    def velocity(self) -> Tuple[float, float]:
        return self.body.velocity.x, self.body.velocity.y

    @property
    def angle(self) -> float:
        return self.body.angle

    @property
    def angular_velocity(self) -> float:
        return self.body.angular_velocity

    @property
    def is_sleeping(self) -> bool:
        return self.body.is_sleeping

    @property
    def speed(self) -> float:
        """Linear speed magnitude."""
        vx, vy = self.velocity
        return math.sqrt(vx*vx + vy*vy)

    def world_vertices(self) -> List[Tuple[float, float]]:
        """Corners of the block in world coordinates (for rendering)."""
        return [
            (v.x, v.y) for v in
            (self.body.local_to_world(p) for p in self.shape.get_vertices())
        ]


@dataclass
class JointLink:
    """A pivot joint between two blocks."""
    uid: int
    block_a: int
    block_b: int
    constraint: pymunk.PivotJoint


def _damped_velocity_func(linear_damping: float):
    """Build a velocity function adding per-body linear damping."""
    def update_velocity(body: pymunk.Body, gravity, damping: float, dt: float) -> None:
        pymunk.Body.update_velocity(
            body, gravity, damping * math.exp(-linear_damping * dt), dt
        )
    return update_velocity


class PhysicsWorld:
    """
    Manages the pymunk physics simulation.

    Handles:
    - Space creation and configuration
    - Static floor and wall boxes
    - Block body creation and removal
    - Joint creation and removal
    - Force and torque application
    - Rest detection (speed under threshold for consecutive ticks)
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        board: Optional[BoardGeometry] = None
    ):
        """
        Initialize physics world.

        Args:
            config: Game configuration. Uses default if None.
            board: Board geometry. Built from config if None.
        """
        if config is None:
            config = get_config()
        if board is None:
            board = BoardGeometry(config)

        self._config = config
        self._board = board
        physics = config.physics

        # Create space with gravity
        self._space = pymunk.Space()
        self._space.gravity = physics.gravity
        self._space.damping = physics.damping

        # Sleeping wakes up again when forces are applied or neighbours move
        self._space.sleep_time_threshold = physics.rest_consecutive_ticks * physics.dt
        self._space.idle_speed_threshold = physics.rest_speed_threshold

        self._velocity_func = _damped_velocity_func(physics.linear_damping)

        # Track blocks and joints by handle
        self._blocks: Dict[int, BlockBody] = {}
        self._joints: Dict[int, JointLink] = {}
        self._next_uid = 0
        self._next_joint_uid = 0

        # Create floor and walls
        self._static_bodies: List[pymunk.Body] = []
        self._static_shapes: List[pymunk.Poly] = []
        self._create_static_geometry()

    def _add_static_box(
        self,
        center: Tuple[float, float],
        size: Tuple[float, float]
    ) -> None:
        """Create a static body at center with a box collider."""
        body = pymunk.Body(body_type=pymunk.Body.STATIC)
        body.position = center
        shape = pymunk.Poly.create_box(body, size)
        shape.friction = self._config.physics.friction
        shape.elasticity = self._config.physics.elasticity
        self._space.add(body, shape)
        self._static_bodies.append(body)
        self._static_shapes.append(shape)

    def _create_static_geometry(self) -> None:
        """Create the floor slab and, if configured, the side walls."""
        board = self._board
        thickness = board.wall_thickness

        # Floor: one block thick, spanning the lanes
        self._add_static_box(
            (0.0, board.floor_y - 0.5),
            (float(board.n_lanes), 1.0)
        )

        if board.wall_height <= 0:
            return

        # Walls run from the floor slab bottom up to wall_height
        height = board.wall_height + 1.0
        center_y = board.floor_y - 1.0 + height / 2.0
        self._add_static_box(
            (board.left_wall_x - thickness / 2.0, center_y),
            (thickness, height)
        )
        self._add_static_box(
            (board.right_wall_x + thickness / 2.0, center_y),
            (thickness, height)
        )

    @property
    def space(self) -> pymunk.Space:
        """The pymunk Space instance."""
        return self._space

    @property
    def board(self) -> BoardGeometry:
        return self._board

    @property
    def blocks(self) -> Dict[int, BlockBody]:
        """Dictionary of all block bodies by UID."""
        return self._blocks

    @property
    def block_uids(self) -> List[int]:
        return list(self._blocks.keys())

    @property
    def block_count(self) -> int:
        """Number of blocks currently in world."""
        return len(self._blocks)

    @property
    def joint_uids(self) -> List[int]:
        return list(self._joints.keys())

    @property
    def joint_count(self) -> int:
        return len(self._joints)

    def spawn_block(self, kind: ShapeKind, x: float, y: float) -> BlockBody:
        """
        Spawn a dynamic block centered at (x, y).

        Args:
            kind: Shape kind the block belongs to (used for color).
            x: X coordinate.
            y: Y coordinate.

        Returns:
            The created BlockBody.
        """
        physics = self._config.physics
        size = (BLOCK_HALF_EXTENT * 2, BLOCK_HALF_EXTENT * 2)

        body = pymunk.Body(physics.block_mass, pymunk.moment_for_box(physics.block_mass, size))
        body.position = (x, y)
        body.velocity_func = self._velocity_func

        shape = pymunk.Poly.create_box(body, size)
        shape.friction = physics.friction
        shape.elasticity = physics.elasticity

        uid = self._next_uid
        self._next_uid += 1

        block = BlockBody(uid=uid, kind=kind, body=body, shape=shape)
        self._space.add(body, shape)
        self._blocks[uid] = block
        return block

    def add_joint(
        self,
        uid_a: int,
        uid_b: int,
        anchor_a: Tuple[float, float],
        anchor_b: Tuple[float, float]
    ) -> Optional[int]:
        """
        Join two blocks with a pivot joint at the given local anchors.

        Returns:
            The joint UID, or None if either block is gone.
        """
        block_a = self._blocks.get(uid_a)
        block_b = self._blocks.get(uid_b)
        if block_a is None or block_b is None:
            return None

        constraint = pymunk.PivotJoint(block_a.body, block_b.body, anchor_a, anchor_b)
        joint_uid = self._next_joint_uid
        self._next_joint_uid += 1

        self._space.add(constraint)
        self._joints[joint_uid] = JointLink(joint_uid, uid_a, uid_b, constraint)
        return joint_uid

    def remove_joint(self, joint_uid: int) -> bool:
        """Remove a joint. Returns False if it was already gone."""
        link = self._joints.pop(joint_uid, None)
        if link is None:
            return False
        self._space.remove(link.constraint)
        return True

    def remove_block(self, uid: int) -> Optional[BlockBody]:
        """
        Remove a block and every joint attached to it.

        Args:
            uid: Unique ID of block to remove.

        Returns:
            The removed BlockBody, or None if not found.
        """
        block = self._blocks.pop(uid, None)
        if block is None:
            return None

        attached = [
            link.uid for link in self._joints.values()
            if link.block_a == uid or link.block_b == uid
        ]
        for joint_uid in attached:
            self.remove_joint(joint_uid)

        self._space.remove(block.body, block.shape)
        return block

    def get_block(self, uid: int) -> Optional[BlockBody]:
        """Get a block by UID."""
        return self._blocks.get(uid)

    def get_position(self, uid: int) -> Optional[Tuple[float, float]]:
        block = self._blocks.get(uid)
        if block is None:
            return None
        return block.position

    def is_resting(self, uid: int) -> bool:
        """True if the block has been still long enough. Unknown UIDs are not resting."""
        block = self._blocks.get(uid)
        if block is None:
            return False
        if block.rest_ticks >= self._config.physics.rest_consecutive_ticks:
            return True
        return block.is_sleeping

    def resting_uids(self) -> List[int]:
        """UIDs of every block currently resting."""
        return [uid for uid in self._blocks if self.is_resting(uid)]

    def apply_force(self, uid: int, force: Tuple[float, float]) -> None:
        """Apply a force at the block's center for the next step."""
        block = self._blocks.get(uid)
        if block is not None:
            block.body.apply_force_at_local_point(force)

    def apply_torque(self, uid: int, torque: float) -> None:
        """Apply a torque to the block for the next step."""
        block = self._blocks.get(uid)
        if block is not None:
            block.body.torque += torque

    def step(self, dt: Optional[float] = None) -> None:
        """
        Advance physics simulation by one timestep and update rest counters.

        Args:
            dt: Timestep duration. Uses config default if None.
        """
        if dt is None:
            dt = self._config.physics.dt

        substeps = self._config.physics.substeps
        sub_dt = dt / substeps

        # pymunk zeroes force and torque after every step; keep the
        # player input acting for the whole tick
        pending = [
            (block.body, block.body.force, block.body.torque)
            for block in self._blocks.values()
            if block.body.force != (0, 0) or block.body.torque != 0
        ]

        for i in range(substeps):
            if i > 0:
                for body, force, torque in pending:
                    body.force = force
                    body.torque = torque
            self._space.step(sub_dt)

        self._update_rest_counters()

    def _update_rest_counters(self) -> None:
        vel_threshold = self._config.physics.rest_speed_threshold
        ang_threshold = self._config.physics.rest_angular_threshold

        for block in self._blocks.values():
            if block.speed <= vel_threshold and abs(block.angular_velocity) <= ang_threshold:
                block.rest_ticks += 1
            else:
                block.rest_ticks = 0

    def clear(self) -> None:
        """Remove all blocks and joints from the world."""
        for joint_uid in list(self._joints.keys()):
            self.remove_joint(joint_uid)
        for uid in list(self._blocks.keys()):
            self.remove_block(uid)
