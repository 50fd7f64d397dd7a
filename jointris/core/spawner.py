"""
Piece Spawner
=============

Turns a shape kind into four jointed blocks at the top of the board.
"""

from __future__ import annotations

from typing import List, Optional

from jointris.core.context import ActivePiece, GameContext
from jointris.core.rng import ShapeQueue
from jointris.core.shapes import ShapeKind, joint_anchors, layout


class PieceSpawner:
    """
    Creates the active piece.

    Callers must only spawn once the previous piece has been retired;
    the new piece replaces ``ctx.active_piece`` unconditionally.
    """

    def __init__(self, queue: Optional[ShapeQueue] = None):
        self._queue = queue if queue is not None else ShapeQueue()

    @property
    def queue(self) -> ShapeQueue:
        return self._queue

    def spawn(self, ctx: GameContext, kind: Optional[ShapeKind] = None) -> ActivePiece:
        """
        Spawn a new piece centered at the top of the board.

        Args:
            ctx: Game context.
            kind: Force a specific kind. Drawn from the queue if None.

        Returns:
            The new active piece.
        """
        if kind is None:
            kind = self._queue.advance()
        shape = layout(kind)
        board = ctx.board

        blocks: List[int] = []
        for dx, dy in shape.coords:
            lane, row = board.spawn_cell(dx, dy)
            x, y = board.cell_center(lane, row)
            block = ctx.physics.spawn_block(kind, x, y)
            blocks.append(block.uid)

        joints: List[int] = []
        for i, j in shape.joints:
            anchor_a, anchor_b = joint_anchors(shape, i, j)
            joint_uid = ctx.physics.add_joint(blocks[i], blocks[j], anchor_a, anchor_b)
            if joint_uid is not None:
                joints.append(joint_uid)

        piece = ActivePiece(kind=kind, blocks=tuple(blocks), joints=joints)
        ctx.active_piece = piece
        ctx.stats.generated_blocks += len(blocks)
        ctx.log(f"spawned {kind.name} piece, blocks={piece.blocks}")
        return piece
