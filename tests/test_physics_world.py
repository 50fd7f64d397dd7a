"""
Tests for the pymunk physics adapter.
"""

import pytest

from jointris.core.physics_world import PhysicsWorld
from jointris.core.shapes import ShapeKind, color_of

from conftest import with_board, with_physics


@pytest.fixture
def physics(config):
    return PhysicsWorld(config)


class TestStaticGeometry:
    """Test floor and wall bodies."""

    def test_floor_and_walls(self, physics):
        """Floor and two walls are static shapes."""
        assert len(physics.space.shapes) == 3

    def test_floor_only_without_walls(self, config):
        """Zero wall height creates only the floor."""
        physics = PhysicsWorld(with_board(config, wall_height=0.0))
        assert len(physics.space.shapes) == 1

    def test_block_lands_on_floor(self, physics):
        """A dropped block comes to rest on the floor."""
        board = physics.board
        block = physics.spawn_block(ShapeKind.O, 0.5, board.floor_y + 3.0)
        for _ in range(300):
            physics.step()
        x, y = block.position
        assert y == pytest.approx(board.floor_y + 0.5, abs=0.15)


class TestBlocks:
    """Test block lifecycle."""

    def test_spawn_block(self, physics):
        """Spawned block sits at the requested position."""
        block = physics.spawn_block(ShapeKind.T, 1.5, 2.5)
        assert block.position == (1.5, 2.5)
        assert block.color == color_of(ShapeKind.T)
        assert physics.block_count == 1
        assert len(block.world_vertices()) == 4

    def test_uids_are_unique_after_clear(self, physics):
        """Clearing the world never reuses handles."""
        first = physics.spawn_block(ShapeKind.I, 0, 0).uid
        physics.clear()
        second = physics.spawn_block(ShapeKind.I, 0, 0).uid
        assert second != first

    def test_remove_block(self, physics):
        """Removed block leaves the space."""
        block = physics.spawn_block(ShapeKind.I, 0, 0)
        assert physics.remove_block(block.uid) is block
        assert physics.block_count == 0
        assert block.body not in physics.space.bodies

    def test_damping_slows_block(self, config):
        """Linear damping caps the fall speed."""
        physics = PhysicsWorld(config)
        block = physics.spawn_block(ShapeKind.I, 0.5, 5.0)
        for _ in range(120):
            physics.step()
        # Terminal speed with linear damping c is about g / c
        terminal = abs(config.physics.gravity_y) / config.physics.linear_damping
        assert block.speed < terminal * 1.2


class TestJoints:
    """Test joint lifecycle."""

    def test_add_and_remove_joint(self, physics):
        """Joints can be added and removed once."""
        a = physics.spawn_block(ShapeKind.I, 0.5, 0.5).uid
        b = physics.spawn_block(ShapeKind.I, 0.5, -0.5).uid
        joint = physics.add_joint(a, b, (0.0, -0.5), (0.0, 0.5))

        assert joint is not None
        assert physics.joint_count == 1
        assert len(physics.space.constraints) == 1

        assert physics.remove_joint(joint)
        assert physics.joint_count == 0
        assert len(physics.space.constraints) == 0
        assert not physics.remove_joint(joint)

    def test_removing_block_removes_its_joints(self, physics):
        """Removing a block removes every attached joint."""
        a = physics.spawn_block(ShapeKind.I, 0.5, 0.5).uid
        b = physics.spawn_block(ShapeKind.I, 0.5, -0.5).uid
        c = physics.spawn_block(ShapeKind.I, 0.5, -1.5).uid
        physics.add_joint(a, b, (0.0, -0.5), (0.0, 0.5))
        keep = physics.add_joint(b, c, (0.0, -0.5), (0.0, 0.5))

        physics.remove_block(a)

        assert physics.joint_uids == [keep]
        assert len(physics.space.constraints) == 1

    def test_joint_to_missing_block(self, physics):
        """Joining a missing block returns None."""
        a = physics.spawn_block(ShapeKind.I, 0, 0).uid
        assert physics.add_joint(a, 999, (0, 0), (0, 0)) is None
        assert physics.joint_count == 0


class TestMissingHandles:
    """Stale handles never raise."""

    def test_queries(self, physics):
        """Queries on unknown handles report absent."""
        assert physics.get_position(42) is None
        assert physics.get_block(42) is None
        assert not physics.is_resting(42)
        assert physics.remove_block(42) is None

    def test_mutations(self, physics):
        """Mutations on unknown handles are no-ops."""
        physics.apply_force(42, (1.0, 0.0))
        physics.apply_torque(42, 1.0)
        physics.step()

    def test_removed_block_handle(self, physics):
        """A removed handle behaves like an unknown one."""
        uid = physics.spawn_block(ShapeKind.Z, 0, 0).uid
        physics.remove_block(uid)
        assert physics.get_position(uid) is None
        assert not physics.is_resting(uid)
        physics.apply_force(uid, (1.0, 0.0))


class TestForces:
    """Test force and torque application."""

    def test_torque_spins_block(self, physics):
        """Positive torque spins counter-clockwise."""
        block = physics.spawn_block(ShapeKind.O, 0.5, 5.0)
        physics.apply_torque(block.uid, 20.0)
        physics.step()
        assert block.angular_velocity > 0

    def test_force_is_consumed_by_step(self, physics):
        """A force only acts for one step."""
        block = physics.spawn_block(ShapeKind.O, 0.5, 5.0)
        physics.apply_force(block.uid, (10.0, 0.0))
        physics.step()
        vx_after_push = block.velocity[0]
        physics.step()
        assert vx_after_push > 0
        # No further acceleration without a new force
        assert block.velocity[0] <= vx_after_push

    def test_input_acts_across_substeps(self, config):
        """Push and twist deliver the same impulse whatever the substep count."""
        results = []
        for substeps in (1, 4):
            physics = PhysicsWorld(with_physics(config, substeps=substeps))
            block = physics.spawn_block(ShapeKind.O, 0.5, 5.0)
            physics.apply_force(block.uid, (10.0, 0.0))
            physics.apply_torque(block.uid, 20.0)
            physics.step()
            results.append((block.velocity[0], block.angular_velocity))

        (vx_single, w_single), (vx_multi, w_multi) = results
        assert vx_multi == pytest.approx(vx_single, rel=0.05)
        assert w_multi == pytest.approx(w_single, rel=0.05)
