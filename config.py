# Run configuration shared by the generator, game logic, and GUI.
from __future__ import annotations

from dataclasses import dataclass


Cell = tuple[int, int]

# Bounds used when validating user-supplied settings.
MIN_GRID_UNIT = 4
MAX_GRID_UNIT = 80
MIN_TICK_MS = 10
MAX_TICK_MS = 2000
MIN_INITIAL_LENGTH = 3


@dataclass
class RunConfig:
    """Constants for one session; only the tick interval changes while playing."""
    grid_unit: int = 20
    canvas_width: int = 800
    canvas_height: int = 600
    initial_tick_ms: int = 150
    min_tick_ms: int = 50                   # speed ramp floor
    tick_step_ms: int = 10
    speed_ramp_divisor: int = 5             # ramp every N points
    grace_period_ms: int = 3000
    passway_density: float = 0.2            # share of letter pixels skipped
    font_size: int = 200
    letter_spacing: int = 50
    glyph_advance_ratio: float = 0.6        # advance = ratio * font_size + spacing
    alpha_threshold: int = 128
    placement_attempts: int = 100
    initial_length: int = 3
    carry_speed_across_resets: bool = True
    seed: int | None = None

    @property
    def columns(self) -> int:
        return self.canvas_width // self.grid_unit

    @property
    def rows(self) -> int:
        return self.canvas_height // self.grid_unit

    @property
    def glyph_advance(self) -> float:
        return self.glyph_advance_ratio * self.font_size + self.letter_spacing


def _check_range(value: float, low: float, high: float, label: str) -> None:
    if not (low <= value <= high):
        raise ValueError(f"{label} must be between {low} and {high}.")


def validate_config(config: RunConfig) -> RunConfig:
    """Raise ValueError with a readable message for inconsistent settings."""
    _check_range(config.grid_unit, MIN_GRID_UNIT, MAX_GRID_UNIT, "Grid unit")
    for label, side in (("Canvas width", config.canvas_width), ("Canvas height", config.canvas_height)):
        if side <= 0 or side % config.grid_unit != 0:
            raise ValueError(f"{label} must be a positive multiple of the grid unit ({config.grid_unit}).")
    _check_range(config.initial_tick_ms, MIN_TICK_MS, MAX_TICK_MS, "Initial tick interval")
    _check_range(config.min_tick_ms, MIN_TICK_MS, config.initial_tick_ms, "Tick interval floor")
    if config.tick_step_ms < 0:
        raise ValueError("Tick step must be >= 0.")
    if config.speed_ramp_divisor <= 0:
        raise ValueError("Speed ramp divisor must be > 0.")
    if config.grace_period_ms < 0:
        raise ValueError("Grace period must be >= 0.")
    _check_range(config.passway_density, 0.0, 1.0, "Passway density")
    _check_range(config.alpha_threshold, 0, 255, "Alpha threshold")
    if config.font_size <= 0:
        raise ValueError("Font size must be > 0.")
    if config.placement_attempts <= 0:
        raise ValueError("Placement attempts must be > 0.")
    _check_range(config.initial_length, MIN_INITIAL_LENGTH, config.columns, "Initial length")
    return config
