"""
Pygame Renderer
===============

Draws the pit, the blocks and the health bar with pygame. Supports both
display mode (human play) and headless RGB output.

The renderer also acts as the game's viewport: ``bottom_y`` is the world
height at the bottom edge of the window.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

import numpy as np

from jointris.core.config_loader import GameConfig, get_config
from jointris.core.shapes import ShapeKind, layout


class PygameRenderer:
    """
    Renderer using pygame.

    Supports:
    - Rotated block polygons in their shape colors
    - Floor, walls and health bar
    - Stats text and next piece preview
    - RGB array output
    """

    # Blocks of headroom above the board for the health bar
    TOP_MARGIN_BLOCKS = 3.0

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        window_width: Optional[int] = None,
        window_height: Optional[int] = None
    ):
        """
        Initialize renderer.

        Args:
            config: Game configuration.
            window_width: Window width in pixels. Fits the board if None.
            window_height: Window height in pixels. Fits the board if None.
        """
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame is required for PygameRenderer")

        if config is None:
            config = get_config()

        self._config = config
        self._scale = float(config.render.block_px_size)

        board = config.board
        if window_width is None:
            window_width = int((board.n_lanes + 2 * board.wall_thickness + 8) * self._scale)
        if window_height is None:
            window_height = int((board.n_rows + self.TOP_MARGIN_BLOCKS + 3) * self._scale)
        self._width = window_width
        self._height = window_height

        # Board is centered on x = 0; the top margin sits above the last row
        self._top_world_y = board.n_rows * 0.5 + self.TOP_MARGIN_BLOCKS

        if not pygame.get_init():
            pygame.init()
        pygame.font.init()
        self._font = pygame.font.Font(None, 24)
        self._font_large = pygame.font.Font(None, 48)

        self._surface = pygame.Surface((window_width, window_height))

    @property
    def size(self) -> Tuple[int, int]:
        return (self._width, self._height)

    @property
    def bottom_y(self) -> float:
        """World height at the bottom edge of the window."""
        return self._top_world_y - self._height / self._scale

    def world_to_screen(self, x: float, y: float) -> Tuple[int, int]:
        """Convert world coordinates to screen pixels (Y is flipped)."""
        sx = self._width / 2.0 + x * self._scale
        sy = (self._top_world_y - y) * self._scale
        return int(round(sx)), int(round(sy))

    def _rect(self, left: float, top: float, width: float, height: float) -> "pygame.Rect":
        x0, y0 = self.world_to_screen(left, top)
        return pygame.Rect(x0, y0, int(width * self._scale), int(height * self._scale))

    def render(self, render_data: Dict[str, Any]) -> "pygame.Surface":
        """Render the complete scene to the internal surface."""
        surface = self._surface
        surface.fill(self._config.render.background)

        self._draw_board(surface, render_data)
        self._draw_blocks(surface, render_data["blocks"])
        self._draw_health_bar(surface, render_data["health_bar"])
        self._draw_stats(surface, render_data)

        if render_data["game_over"]:
            self._draw_game_over(surface, render_data)

        return surface

    def render_to(self, screen: "pygame.Surface", render_data: Dict[str, Any]) -> None:
        """Render and blit onto a display surface."""
        screen.blit(self.render(render_data), (0, 0))

    def render_rgb(self, render_data: Dict[str, Any]) -> np.ndarray:
        """Render to an (H, W, 3) uint8 array."""
        surface = self.render(render_data)
        return np.transpose(pygame.surfarray.array3d(surface), (1, 0, 2)).astype(np.uint8)

    def _draw_board(self, surface: "pygame.Surface", data: Dict[str, Any]) -> None:
        render = self._config.render
        floor_y = data["floor_y"]
        left = data["left_wall_x"]
        right = data["right_wall_x"]

        pygame.draw.rect(
            surface, render.floor_color,
            self._rect(left, floor_y, right - left, 1.0)
        )

        wall_height = data["wall_height"]
        if wall_height > 0:
            thickness = data["wall_thickness"]
            top = floor_y + wall_height
            pygame.draw.rect(
                surface, render.wall_color,
                self._rect(left - thickness, top, thickness, wall_height + 1.0)
            )
            pygame.draw.rect(
                surface, render.wall_color,
                self._rect(right, top, thickness, wall_height + 1.0)
            )

    def _draw_blocks(self, surface: "pygame.Surface", blocks: List[Dict[str, Any]]) -> None:
        for block in blocks:
            points = [self.world_to_screen(x, y) for x, y in block["vertices"]]
            pygame.draw.polygon(surface, block["color"], points)
            outline = (255, 255, 255) if block["active"] else (30, 30, 30)
            pygame.draw.polygon(surface, outline, points, 1)

    def _draw_health_bar(self, surface: "pygame.Surface", bar) -> None:
        top = bar.y + bar.height / 2.0
        pygame.draw.rect(
            surface, (60, 60, 60),
            self._rect(bar.left_x, top, bar.full_width, bar.height)
        )
        if bar.width > 0:
            pygame.draw.rect(
                surface, bar.color,
                self._rect(bar.left_x, top, bar.width, bar.height)
            )

    def _draw_stats(self, surface: "pygame.Surface", data: Dict[str, Any]) -> None:
        lines = [
            f"Cleared: {data['cleared_blocks']}",
            f"Lost: {data['lost_blocks']}",
            f"Health: {data['health']:.2f}",
            "Next:",
        ]
        for i, line in enumerate(lines):
            text = self._font.render(line, True, (220, 220, 220))
            surface.blit(text, (10, 10 + i * 22))

        self._draw_preview(surface, ShapeKind(data["next_kind"]), (20, 10 + len(lines) * 22))

    def _draw_preview(
        self,
        surface: "pygame.Surface",
        kind: ShapeKind,
        origin: Tuple[int, int]
    ) -> None:
        shape = layout(kind)
        cell = max(6, int(self._scale / 2))
        for x, y in shape.coords:
            rect = pygame.Rect(origin[0] + x * cell, origin[1] + y * cell, cell, cell)
            pygame.draw.rect(surface, shape.color, rect)
            pygame.draw.rect(surface, (30, 30, 30), rect, 1)

    def _draw_game_over(self, surface: "pygame.Surface", data: Dict[str, Any]) -> None:
        overlay = pygame.Surface((self._width, self._height), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 150))
        surface.blit(overlay, (0, 0))

        text = self._font_large.render("GAME OVER", True, (255, 80, 80))
        surface.blit(text, text.get_rect(center=(self._width // 2, self._height // 2 - 20)))

        elapsed = data["time_since_loss"] or 0.0
        remaining = max(0.0, self._config.health.game_over_grace_time - elapsed)
        sub = self._font.render(f"Restarting in {remaining:.1f}s", True, (220, 220, 220))
        surface.blit(sub, sub.get_rect(center=(self._width // 2, self._height // 2 + 20)))
