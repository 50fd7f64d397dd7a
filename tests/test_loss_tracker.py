"""
Tests for loss tracking, health and auto-restart.
"""

import pytest

from jointris.core.context import GameStats
from jointris.core.loss_tracker import LossTracker, compute_health, raw_health
from jointris.core.shapes import ShapeKind
from jointris.core.spawner import PieceSpawner

from conftest import ScriptedPhysics, make_context


@pytest.fixture
def ctx(config):
    return make_context(config, ScriptedPhysics())


@pytest.fixture
def tracker(config):
    return LossTracker(config.health, PieceSpawner())


class TestHealth:
    """Test the health formula."""

    def test_nothing_lost(self):
        """Full health while no block has been lost."""
        assert compute_health(GameStats()) == 1.0
        assert compute_health(GameStats(cleared_blocks=8)) == 1.0

    def test_lost_before_any_clear(self):
        """Any loss before the first clear empties health."""
        assert compute_health(GameStats(lost_blocks=1)) == 0.0

    def test_ratio(self):
        """Health is one minus lost over cleared."""
        assert compute_health(GameStats(cleared_blocks=8, lost_blocks=2)) == pytest.approx(0.75)

    def test_game_over_is_zero(self):
        """A running grace timer means zero health."""
        stats = GameStats(cleared_blocks=100, time_since_loss=0.0)
        assert compute_health(stats) == 0.0

    def test_clamped_when_losses_outpace_clears(self):
        """Raw health can go negative, clamped health cannot."""
        stats = GameStats(cleared_blocks=4, lost_blocks=10)
        assert raw_health(stats) == pytest.approx(-1.5)
        assert compute_health(stats) == 0.0


class TestLossBoundary:
    """Test removal of blocks below the viewport."""

    def test_block_at_viewport_bottom_is_kept(self, ctx, tracker):
        """A block exactly at the viewport bottom is inside the margin."""
        uid = ctx.physics.add_block(0.0, ctx.viewport.bottom_y)
        result = tracker.update(ctx, 0.0)
        assert result.lost_uids == ()
        assert uid in ctx.physics.blocks
        assert ctx.stats.lost_blocks == 0

    def test_block_one_below_is_removed(self, ctx, tracker):
        """A block past the margin is removed and counted."""
        uid = ctx.physics.add_block(0.0, ctx.viewport.bottom_y - 1.0)
        result = tracker.update(ctx, 0.0)
        assert result.lost_uids == (uid,)
        assert uid not in ctx.physics.blocks
        assert ctx.stats.lost_blocks == 1

    def test_boundary_uses_margin(self, ctx, tracker, config):
        """Boundary sits loss_margin below the viewport bottom."""
        assert tracker.boundary(ctx) == ctx.viewport.bottom_y - config.health.loss_margin

    def test_placed_block_loss_is_not_game_over(self, ctx, tracker):
        """Losing a placed block only costs health."""
        PieceSpawner().spawn(ctx, kind=ShapeKind.O)
        ctx.physics.add_block(0.0, ctx.viewport.bottom_y - 5.0)

        result = tracker.update(ctx, 0.0)

        assert not result.active_piece_lost
        assert not ctx.stats.is_game_over
        assert ctx.active_piece is not None
        assert compute_health(ctx.stats) == 0.0


class TestGameOver:
    """Test game over and the grace period restart."""

    @pytest.fixture
    def lost_ctx(self, ctx, tracker):
        piece = PieceSpawner().spawn(ctx, kind=ShapeKind.S)
        ctx.physics.place(piece.blocks[0], 0.0, ctx.viewport.bottom_y - 3.0, resting=False)
        return ctx

    def test_losing_active_piece_ends_game(self, lost_ctx, tracker):
        """Losing an active block starts the timer and drops the piece."""
        piece = lost_ctx.active_piece
        result = tracker.update(lost_ctx, 0.1)

        assert result.active_piece_lost
        assert lost_ctx.stats.is_game_over
        assert lost_ctx.stats.time_since_loss == 0.0
        assert lost_ctx.active_piece is None
        assert lost_ctx.stats.lost_blocks == 1
        # Remaining blocks stay, joints of the lost piece are gone
        assert lost_ctx.physics.block_count == 3
        assert lost_ctx.physics.joint_count == 0
        assert all(j not in lost_ctx.physics.joints for j in piece.joints)

    def test_restart_after_grace_period(self, lost_ctx, tracker, config):
        """Board restarts once the timer exceeds the grace time."""
        tracker.update(lost_ctx, 0.0)
        lost_ctx.physics.add_block(0.0, 0.0)

        grace = config.health.game_over_grace_time
        lost_ctx.ticks += 1
        tracker.update(lost_ctx, grace)
        assert lost_ctx.stats.is_game_over
        assert lost_ctx.stats.time_since_loss == pytest.approx(grace)

        lost_ctx.ticks += 1
        result = tracker.update(lost_ctx, 0.01)

        assert result.restarted
        stats = lost_ctx.stats
        assert not stats.is_game_over
        assert stats.lost_blocks == 0
        assert stats.cleared_blocks == 0
        assert stats.generated_blocks == 4
        assert lost_ctx.physics.block_count == 4
        assert set(lost_ctx.physics.blocks) == set(lost_ctx.active_piece.blocks)

    def test_timer_waits_for_next_tick_after_declare(self, ctx, tracker):
        """Game over declared earlier in the same tick does not advance the timer."""
        tracker.declare_game_over(ctx)

        tracker.update(ctx, 1.0)
        assert ctx.stats.time_since_loss == 0.0

        ctx.ticks += 1
        tracker.update(ctx, 1.0)
        assert ctx.stats.time_since_loss == 1.0

    def test_declare_game_over_is_idempotent(self, ctx, tracker):
        """A second declaration keeps the running timer."""
        tracker.declare_game_over(ctx)
        ctx.stats.time_since_loss = 1.5
        tracker.declare_game_over(ctx)
        assert ctx.stats.time_since_loss == 1.5
