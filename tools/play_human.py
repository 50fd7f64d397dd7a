"""
Human Play Mode
===============

Play Jointris interactively with keyboard control and real-time physics.

Controls:
    - Left / Right: Push the piece sideways
    - A / D: Twist the piece counter-clockwise / clockwise
    - ESC: Quit

The board restarts on its own a few seconds after a piece falls off.

Usage:
    python -m tools.play_human [--seed SEED] [--fps FPS] [--debug]
"""

from __future__ import annotations

import argparse
import sys
import time
from typing import Optional

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from jointris.core.config_loader import load_config, GameConfig
from jointris.core.game import CoreGame
from jointris.core.movement import ControlState


class HumanPlayer:
    """
    Human-playable Jointris with a fixed-timestep physics loop.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        target_fps: int = 60,
        debug: bool = False
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required. Install: pip install pygame")

        if config is None:
            config = load_config()

        self._config = config
        self._target_fps = target_fps

        # Initialize pygame
        pygame.init()

        # Renderer doubles as the viewport the loss tracker watches
        from jointris.core.render_pygame import PygameRenderer
        self._renderer = PygameRenderer(config)
        self._screen = pygame.display.set_mode(self._renderer.size)
        pygame.display.set_caption("Jointris")
        self._clock = pygame.time.Clock()

        self._game = CoreGame(config=config, seed=seed, viewport=self._renderer, debug=debug)
        self._game.reset(seed=seed)

        self._running = True
        self._was_over = False

        # Fixed physics timestep driven by wall-clock accumulation
        self._physics_dt = config.physics.dt
        self._physics_accumulator = 0.0
        self._last_time = time.time()

    def run(self) -> int:
        """Run the game loop. Returns blocks cleared in the last game."""
        print("=== Jointris ===")
        print("Left/Right to push, A/D to twist, ESC to quit")
        print()

        while self._running:
            self._handle_events()
            self._update_physics(self._read_controls())
            self._render()
            self._clock.tick(self._target_fps)

        pygame.quit()
        return self._game.stats.cleared_blocks

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self._running = False

    def _read_controls(self) -> ControlState:
        keys = pygame.key.get_pressed()
        return ControlState(
            left=bool(keys[pygame.K_LEFT]),
            right=bool(keys[pygame.K_RIGHT]),
            rotate_ccw=bool(keys[pygame.K_a]),
            rotate_cw=bool(keys[pygame.K_d])
        )

    def _update_physics(self, controls: ControlState) -> None:
        """Run as many fixed ticks as wall-clock time allows."""
        current_time = time.time()
        frame_dt = current_time - self._last_time
        self._last_time = current_time

        # Limit to prevent spiral
        self._physics_accumulator = min(self._physics_accumulator + frame_dt, 0.2)

        while self._physics_accumulator >= self._physics_dt:
            self._physics_accumulator -= self._physics_dt
            result = self._game.tick(controls, self._physics_dt)

            if result.cleared_rows:
                stats = self._game.stats
                print(f"  Cleared rows {list(result.cleared_rows)} (Total: {stats.cleared_blocks})")
            if result.loss.lost_uids:
                print(f"  Lost {len(result.loss.lost_uids)} block(s), health {result.health:.2f}")
            if self._game.is_over and not self._was_over:
                print(f"\nGAME OVER - Cleared: {self._game.stats.cleared_blocks}")
            if result.restarted:
                print("\n=== Game Restarted ===\n")
            self._was_over = self._game.is_over

    def _render(self) -> None:
        """Render the game."""
        self._renderer.render_to(self._screen, self._game.get_render_data())
        pygame.display.flip()


def main():
    parser = argparse.ArgumentParser(description="Play Jointris interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")
    parser.add_argument("--config", type=str, default=None, help="Path to game_config.yaml")
    parser.add_argument("--debug", action="store_true", help="Print game events")

    args = parser.parse_args()

    try:
        config = load_config(args.config)
        player = HumanPlayer(
            config=config,
            seed=args.seed,
            target_fps=args.fps,
            debug=args.debug
        )
        cleared = player.run()
        print(f"\nBlocks cleared: {cleared}")
        return 0
    except ImportError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
