# Offline preview of the obstacle layout a name produces, via matplotlib.
from __future__ import annotations

import argparse
import os
import random

# Keep matplotlib cache local for environments without writable home config.
LOCAL_MPLCONFIG = os.path.join(os.path.dirname(os.path.abspath(__file__)), ".mplconfig")
os.makedirs(LOCAL_MPLCONFIG, exist_ok=True)
os.environ.setdefault("MPLCONFIGDIR", LOCAL_MPLCONFIG)

import matplotlib
import numpy as np

from config import Cell, RunConfig, validate_config
from game_logic import InvalidNameError, validate_name
from obstacles import pick_font_family, rasterize_text, sample_obstacles
from placement import spawn_snake
from raster import FontSpec


def occupancy_grid(cells: frozenset[Cell], config: RunConfig) -> np.ndarray:
    """rows x columns array: 1 where an obstacle sits."""
    grid = np.zeros((config.rows, config.columns), dtype=np.uint8)
    g = config.grid_unit
    for x, y in cells:
        grid[y // g, x // g] = 1
    return grid


def build_preview(name: str, config: RunConfig, font_family: str | None = None) -> dict:
    rng = random.Random(config.seed)
    family = font_family or pick_font_family(rng)
    font = FontSpec(family=family, size=config.font_size)
    alpha = rasterize_text(name, config, font)
    pixel_rng = np.random.default_rng(rng.getrandbits(64))
    cells = sample_obstacles(alpha, config.grid_unit, config.passway_density, pixel_rng, config.alpha_threshold)
    spawn = spawn_snake(cells, config, rng)
    return {
        "font": family,
        "alpha": alpha,
        "cells": cells,
        "grid": occupancy_grid(cells, config),
        "spawn": spawn,
    }


def plot_preview(preview: dict, config: RunConfig, name: str, out_path: str = "") -> None:
    if out_path:
        matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    fig, (ax_raster, ax_grid) = plt.subplots(1, 2, figsize=(13, 5))
    ax_raster.set_title(f"Rasterized '{name}' ({preview['font']})")
    ax_raster.imshow(preview["alpha"] > config.alpha_threshold, cmap="Greys", interpolation="nearest")
    ax_raster.set_axis_off()

    ax_grid.set_title(f"Obstacle cells: {len(preview['cells'])} (passways {config.passway_density:.0%})")
    ax_grid.imshow(preview["grid"], cmap="Greys", interpolation="nearest")
    g = config.grid_unit
    xs = [x // g for x, _ in preview["spawn"].body]
    ys = [y // g for _, y in preview["spawn"].body]
    ax_grid.plot(xs, ys, "s", color="#28a745", markersize=6, label="spawn")
    ax_grid.legend(loc="upper right")
    fig.tight_layout()

    if out_path:
        fig.savefig(out_path, dpi=120)
        plt.close(fig)
        print(f"Saved preview to {out_path}")
    else:
        plt.show()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    defaults = RunConfig()
    parser = argparse.ArgumentParser(description="Preview the obstacle layout generated from a name")
    parser.add_argument("name", type=str)
    parser.add_argument("--passway-density", type=float, default=defaults.passway_density)
    parser.add_argument("--grid-unit", type=int, default=defaults.grid_unit)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--font", type=str, default="", help="Font family (random installed choice if omitted).")
    parser.add_argument("--out", type=str, default="", help="Write a PNG instead of opening a window.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    try:
        name = validate_name(args.name)
    except InvalidNameError as exc:
        raise SystemExit(str(exc))
    try:
        config = validate_config(
            RunConfig(grid_unit=args.grid_unit, passway_density=args.passway_density, seed=args.seed)
        )
    except ValueError as exc:
        raise SystemExit(f"Invalid setting: {exc}")

    preview = build_preview(name, config, args.font or None)
    spawn = preview["spawn"]
    print(f"Font: {preview['font']}")
    print(f"Obstacle cells: {len(preview['cells'])}")
    print(f"Spawn head: {spawn.body[0]}{' (centre fallback)' if spawn.fell_back else ''}")
    plot_preview(preview, config, name, args.out)


if __name__ == "__main__":
    main()
