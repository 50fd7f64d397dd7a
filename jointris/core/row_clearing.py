"""
Row Clearing
============

Buckets resting blocks into board rows and removes every full row.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from jointris.core.context import GameContext


@dataclass
class RowClearResult:
    """Outcome of one row clearing pass."""
    rows: Tuple[int, ...]
    removed_uids: Tuple[int, ...]

    @property
    def cleared_blocks(self) -> int:
        return len(self.removed_uids)

    @staticmethod
    def empty() -> "RowClearResult":
        return RowClearResult((), ())


class RowClearer:
    """
    Clears rows whose resting-block count equals the lane count.

    Only blocks the physics world reports as resting are counted, so a
    block falling through a row never completes it. Rows are judged
    independently in a single pass; blocks above a cleared row are not
    shifted and fall under gravity instead.
    """

    def row_counts(self, ctx: GameContext) -> np.ndarray:
        """Resting-block count for each in-range row."""
        _, rows = self._resting_rows(ctx)
        return np.bincount(rows, minlength=ctx.board.n_rows)

    def _resting_rows(self, ctx: GameContext) -> Tuple[List[int], np.ndarray]:
        """UIDs of resting blocks inside the board and their row indices."""
        physics = ctx.physics
        board = ctx.board

        uids: List[int] = []
        heights: List[float] = []
        for uid in physics.resting_uids():
            position = physics.get_position(uid)
            if position is None:
                continue
            uids.append(uid)
            heights.append(position[1])

        if not uids:
            return [], np.zeros(0, dtype=np.int64)

        rows = np.floor(np.asarray(heights, dtype=np.float64) - board.floor_y).astype(np.int64)
        in_range = (rows >= 0) & (rows < board.n_rows)
        kept = [uid for uid, ok in zip(uids, in_range) if ok]
        return kept, rows[in_range]

    def clear_full_rows(self, ctx: GameContext) -> RowClearResult:
        """
        Remove every block in each full row.

        Removal happens after the whole scan so every row is judged on the
        same snapshot. ``cleared_blocks`` grows by ``n_lanes`` per row.
        """
        n_lanes = ctx.board.n_lanes
        uids, rows = self._resting_rows(ctx)
        if not uids:
            return RowClearResult.empty()

        counts = np.bincount(rows, minlength=ctx.board.n_rows)
        full_rows = np.flatnonzero(counts == n_lanes)
        if full_rows.size == 0:
            return RowClearResult.empty()

        doomed_mask = np.isin(rows, full_rows)
        doomed = [uid for uid, hit in zip(uids, doomed_mask) if hit]

        for uid in doomed:
            ctx.physics.remove_block(uid)
        ctx.stats.cleared_blocks += n_lanes * len(full_rows)

        result = RowClearResult(
            rows=tuple(int(r) for r in full_rows),
            removed_uids=tuple(doomed)
        )
        ctx.log(f"cleared rows {list(result.rows)} ({result.cleared_blocks} blocks)")
        return result
