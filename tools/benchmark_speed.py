"""
Performance Benchmark
=====================

Runs the game headless with random held controls and measures tick
throughput alongside the gameplay counters it produced.

Usage:
    python -m tools.benchmark_speed [--ticks N] [--seed S] [--hold H]
"""

from __future__ import annotations

import argparse
import sys
import time
from typing import Optional

import numpy as np

from jointris.core.config_loader import load_config
from jointris.core.game import CoreGame
from jointris.core.movement import ControlState


def benchmark_headless(
    num_ticks: int = 5000,
    seed: int = 42,
    hold_ticks: int = 20,
    config_path: Optional[str] = None
) -> dict:
    """
    Benchmark headless game ticks.

    Args:
        num_ticks: Number of ticks to run.
        seed: Seed for both the shape sequence and the random controls.
        hold_ticks: Ticks each random control combination is held for.
        config_path: Optional path to a game config.

    Returns:
        Dict with timing results and game counters.
    """
    config = load_config(config_path)
    game = CoreGame(config=config, seed=seed)
    game.reset(seed=seed)
    rng = np.random.default_rng(seed)

    settles = 0
    restarts = 0
    rows_cleared = 0
    controls = ControlState()

    start = time.perf_counter()
    for tick in range(num_ticks):
        if tick % hold_ticks == 0:
            left, right, ccw, cw = (bool(b) for b in rng.random(4) < 0.25)
            controls = ControlState(left, right, ccw, cw)

        result = game.tick(controls)
        if result.settle is not None:
            settles += 1
            rows_cleared += len(result.settle.clear.rows)
        if result.restarted:
            restarts += 1
    elapsed = time.perf_counter() - start

    return {
        "num_ticks": num_ticks,
        "elapsed_seconds": elapsed,
        "ticks_per_second": num_ticks / elapsed,
        "ms_per_tick": (elapsed * 1000) / num_ticks,
        "sim_seconds": num_ticks * config.physics.dt,
        "settles": settles,
        "rows_cleared": rows_cleared,
        "restarts": restarts,
        **game.get_info(),
    }


def print_results(results: dict) -> None:
    """Print benchmark results in a readable format."""
    print("=" * 50)
    print("HEADLESS BENCHMARK")
    print("=" * 50)
    print(f"Ticks:           {results['num_ticks']}")
    print(f"Elapsed:         {results['elapsed_seconds']:.2f}s")
    print(f"Ticks/second:    {results['ticks_per_second']:.1f}")
    print(f"ms/tick:         {results['ms_per_tick']:.3f}")
    print(f"Sim time:        {results['sim_seconds']:.1f}s")
    print(f"Pieces settled:  {results['settles']}")
    print(f"Rows cleared:    {results['rows_cleared']}")
    print(f"Restarts:        {results['restarts']}")
    print(f"Final health:    {results['health']:.2f}")
    print("=" * 50)


def main():
    parser = argparse.ArgumentParser(description="Benchmark headless Jointris ticks")
    parser.add_argument("--ticks", type=int, default=5000, help="Ticks to simulate")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--hold", type=int, default=20, help="Ticks per random control choice")
    parser.add_argument("--config", type=str, default=None, help="Path to game_config.yaml")

    args = parser.parse_args()

    results = benchmark_headless(
        num_ticks=args.ticks,
        seed=args.seed,
        hold_ticks=max(1, args.hold),
        config_path=args.config
    )
    print_results(results)
    return 0


if __name__ == "__main__":
    sys.exit(main())
