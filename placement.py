# Retrying random placement for the snake's spawn and for food.
from __future__ import annotations

from collections.abc import Collection, Iterable
from dataclasses import dataclass
import logging
import random

from config import Cell, RunConfig


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpawnResult:
    body: list[Cell]                        # head first
    fell_back: bool = False


def random_cell(config: RunConfig, rng: random.Random) -> Cell:
    g = config.grid_unit
    return rng.randrange(config.columns) * g, rng.randrange(config.rows) * g


def center_cell(config: RunConfig) -> Cell:
    g = config.grid_unit
    return (config.canvas_width // 2 // g) * g, (config.canvas_height // 2 // g) * g


def snake_body(head: Cell, config: RunConfig) -> list[Cell]:
    """Head plus trailing cells to its left (the snake spawns heading +x), wrapped on the torus."""
    g = config.grid_unit
    head_x, head_y = head
    return [((head_x - i * g) % config.canvas_width, head_y) for i in range(config.initial_length)]


def spawn_snake(obstacles: Collection[Cell], config: RunConfig, rng: random.Random) -> SpawnResult:
    """Try random spawns clear of obstacles; after the retry bound, fall back to the centre."""
    for _ in range(config.placement_attempts):
        body = snake_body(random_cell(config, rng), config)
        if not any(cell in obstacles for cell in body):
            return SpawnResult(body)

    logger.warning(
        "No obstacle-free spawn after %d attempts; using canvas centre.",
        config.placement_attempts,
    )
    return SpawnResult(snake_body(center_cell(config), config), fell_back=True)


def place_food(
    obstacles: Collection[Cell],
    snake: Iterable[Cell],
    config: RunConfig,
    rng: random.Random,
) -> Cell | None:
    """Random free cell, or None when the retry bound runs out (never a colliding cell)."""
    occupied = set(snake)
    for _ in range(config.placement_attempts):
        cell = random_cell(config, rng)
        if cell not in occupied and cell not in obstacles:
            return cell
    logger.info("Food left unplaced after %d attempts.", config.placement_attempts)
    return None
