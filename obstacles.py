# Obstacle generation: rasterize a name as text, then sample lit pixels onto the grid.
from __future__ import annotations

import logging
import random

from matplotlib import font_manager
import numpy as np

from config import Cell, RunConfig
from raster import DEFAULT_FONT_FAMILY, ArraySurface, FontSpec


logger = logging.getLogger(__name__)

FONT_CHOICES = (
    "Arial",
    "Verdana",
    "Helvetica",
    "Courier New",
    "Georgia",
    "Times New Roman",
    "Impact",
    "Comic Sans MS",
    "Lucida Console",
    "Tahoma",
)


def installed_font_families() -> set[str]:
    return {entry.name for entry in font_manager.fontManager.ttflist}


def pick_font_family(rng: random.Random, choices: tuple[str, ...] = FONT_CHOICES) -> str:
    """Random family from choices that matplotlib can actually load; DejaVu Sans otherwise."""
    installed = installed_font_families()
    usable = [family for family in choices if family in installed]
    if not usable:
        return DEFAULT_FONT_FAMILY
    return rng.choice(usable)


def random_color(rng: random.Random) -> str:
    return "#" + "".join(rng.choice("0123456789ABCDEF") for _ in range(6))


def rasterize_text(text: str, config: RunConfig, font: FontSpec | None = None) -> np.ndarray:
    """
    Render text glyph by glyph at a fixed advance and return the alpha channel.

    Each character is placed at start_x + i * advance instead of using natural
    kerning, so letters stay separated once snapped to the grid.
    """
    if font is None:
        font = FontSpec(size=config.font_size)
    surface = ArraySurface(config.canvas_width, config.canvas_height)
    start_x = config.canvas_width / 4
    start_y = config.canvas_height / 2
    advance = config.glyph_advance

    for idx, char in enumerate(text):
        surface.draw_text(char, start_x + idx * advance, start_y, font, color="#000000")
    return surface.alpha()


def sample_obstacles(
    alpha: np.ndarray,
    grid_unit: int,
    passway_density: float,
    rng: np.random.Generator,
    threshold: int = 128,
) -> frozenset[Cell]:
    """Snap lit pixels to grid cells, skipping each pixel with probability passway_density."""
    if not (0.0 <= passway_density <= 1.0):
        raise ValueError("passway_density must be between 0 and 1")

    # np.nonzero walks row-major, so draws line up with a y-outer/x-inner scan.
    ys, xs = np.nonzero(alpha > threshold)
    if xs.size == 0:
        return frozenset()

    keep = rng.random(xs.size) >= passway_density
    grid_x = (xs[keep] // grid_unit) * grid_unit
    grid_y = (ys[keep] // grid_unit) * grid_unit
    return frozenset(zip(grid_x.tolist(), grid_y.tolist()))


def generate_obstacles(
    text: str,
    config: RunConfig,
    rng: random.Random,
    font: FontSpec | None = None,
) -> frozenset[Cell]:
    """Full pipeline for one run; a new font and new passways are drawn every call."""
    if font is None:
        font = FontSpec(family=pick_font_family(rng), size=config.font_size)
    alpha = rasterize_text(text, config, font)
    pixel_rng = np.random.default_rng(rng.getrandbits(64))
    cells = sample_obstacles(alpha, config.grid_unit, config.passway_density, pixel_rng, config.alpha_threshold)
    logger.debug("Generated %d obstacle cells for %r in %s", len(cells), text, font.family)
    return cells
