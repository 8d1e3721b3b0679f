# Paints a GameSession onto a raster surface. Never mutates the session.
from __future__ import annotations

import numpy as np

from config import RunConfig
from game_logic import GameSession
from raster import FontSpec, RasterSurface, to_rgba8


GRACE_MESSAGE = "Grace Period: No Collision with Obstacles"


def make_apple_sprite(size: int = 32) -> np.ndarray:
    """Shiny red apple as an RGBA array: body disc, small highlight, stem."""
    yy, xx = np.mgrid[0:size, 0:size].astype(np.float32) + 0.5
    c = size / 2
    sprite = np.zeros((size, size, 4), dtype=np.uint8)

    body = (xx - c) ** 2 + (yy - c - size * 0.06) ** 2 <= (size * 0.42) ** 2
    sprite[body] = to_rgba8("#d62828")

    shine = (xx - c * 0.7) ** 2 + (yy - c * 0.75) ** 2 <= (size * 0.1) ** 2
    sprite[body & shine] = to_rgba8("#ffb3b3")

    stem = (np.abs(xx - c) <= size * 0.04) & (yy <= size * 0.2)
    sprite[stem] = to_rgba8("#5a3a1a")
    return sprite


class Renderer:
    """Draws background, snake, food, obstacles, and the grace banner, in that order."""
    BACKGROUND = "#ffffff"
    SNAKE_COLOR = "#28a745"
    OVERLAY_COLOR = "#00000080"
    FOOD_SCALE = 1.5

    def __init__(self, surface: RasterSurface, config: RunConfig, food_image: np.ndarray | None = None) -> None:
        self.surface = surface
        self.config = config
        self.food_image = food_image if food_image is not None else make_apple_sprite()
        self.banner_font = FontSpec(family="DejaVu Sans", size=20)
        self.frames = 0

    def draw(self, session: GameSession) -> None:
        surface = self.surface
        g = self.config.grid_unit
        block = g - 2

        surface.clear(self.BACKGROUND)

        for x, y in session.snake:
            surface.fill_rect(x, y, block, block, self.SNAKE_COLOR)

        if session.food is not None:
            size = g * self.FOOD_SCALE
            offset = (size - g) / 2
            fx, fy = session.food
            surface.draw_image(self.food_image, fx - offset, fy - offset, size, size)

        for x, y in session.obstacles:
            surface.fill_rect(x, y, block, block, session.obstacle_color)

        if session.grace:
            surface.draw_text(
                GRACE_MESSAGE,
                self.config.canvas_width / 2,
                self.config.canvas_height - 30,
                self.banner_font,
                self.OVERLAY_COLOR,
                anchor="center",
            )
        self.frames += 1
