# Tkinter player GUI: name prompt, game canvas, score line.
from __future__ import annotations

import argparse
import logging
import tkinter as tk
from tkinter import messagebox

from matplotlib import colors as mcolors
import numpy as np

from config import RunConfig, validate_config
from game_logic import SnakeGame
from raster import FontSpec
from renderer import Renderer
from scheduler import TkScheduler
from score_store import DEFAULT_SCORES_PATH, HighScoreStore, JsonHighScoreStore, MemoryHighScoreStore
from session import SessionController


class TkCanvasSurface:
    """RasterSurface over a tk.Canvas. Write-only: Tk cannot read pixels back."""
    def __init__(self, canvas: tk.Canvas, width: int, height: int) -> None:
        self.canvas = canvas
        self.width = width
        self.height = height
        self._images: dict[tuple[int, int, int], tk.PhotoImage] = {}

    @staticmethod
    def _tk_color(color: str) -> tuple[str, str]:
        """Tk has no alpha; translucent colours become a 50% stipple."""
        rgba = mcolors.to_rgba(color)
        stipple = "gray50" if rgba[3] < 1.0 else ""
        return mcolors.to_hex(rgba, keep_alpha=False), stipple

    def clear(self, color: str | None = None) -> None:
        self.canvas.delete("all")
        if color is not None:
            self.fill_rect(0, 0, self.width, self.height, color)

    def fill_rect(self, x: float, y: float, w: float, h: float, color: str) -> None:
        fill, stipple = self._tk_color(color)
        self.canvas.create_rectangle(x, y, x + w, y + h, fill=fill, outline="", stipple=stipple)

    def draw_text(self, text: str, x: float, y: float, font: FontSpec, color: str, anchor: str = "left") -> None:
        fill, stipple = self._tk_color(color)
        weight = "bold" if font.bold else "normal"
        self.canvas.create_text(
            x,
            y,
            text=text,
            fill=fill,
            stipple=stipple,
            anchor="center" if anchor == "center" else "w",
            font=(font.family, -font.size, weight),  # negative size = pixels
        )

    def _photo(self, image: np.ndarray, w: int, h: int) -> tk.PhotoImage:
        key = (id(image), w, h)
        photo = self._images.get(key)
        if photo is not None:
            return photo
        rows = (np.arange(h) * image.shape[0] // h).clip(0, image.shape[0] - 1)
        cols = (np.arange(w) * image.shape[1] // w).clip(0, image.shape[1] - 1)
        scaled = image[rows][:, cols]
        photo = tk.PhotoImage(width=w, height=h)
        # Only opaque pixels are written; the rest stay transparent.
        for py in range(h):
            for px in range(w):
                r, g, b, a = scaled[py, px]
                if a >= 128:
                    photo.put(f"#{r:02x}{g:02x}{b:02x}", (px, py))
        self._images[key] = photo
        return photo

    def draw_image(self, image: np.ndarray, x: float, y: float, w: float, h: float) -> None:
        photo = self._photo(image, max(1, int(round(w))), max(1, int(round(h))))
        self.canvas.create_image(x, y, image=photo, anchor="nw")

    def alpha(self) -> np.ndarray:
        raise NotImplementedError("tk.Canvas cannot be read back; rasterize on an ArraySurface")


class MessageboxNotifier:
    """Score label plus blocking Tk dialogs."""
    def __init__(self, score_var: tk.StringVar) -> None:
        self.score_var = score_var

    def show_score(self, text: str) -> None:
        self.score_var.set(text)

    def invalid_name(self, message: str) -> None:
        messagebox.showerror("Invalid Name", message)

    def warn(self, message: str) -> None:
        messagebox.showwarning("Snake", message)

    def game_over(self, score: int) -> None:
        messagebox.showinfo("Game Over", f"Game Over! Your final score was: {score}")


class SnakeApp:
    """Tkinter presentation layer for the name-obstacle snake game."""
    BG = "#101418"
    TEXT_PRIMARY = "#e6eef7"
    TEXT_MUTED = "#95a4b8"
    ACCENT = "#42c4ff"

    KEY_BINDINGS = {
        "<Up>": "up",
        "<Down>": "down",
        "<Left>": "left",
        "<Right>": "right",
        "w": "up",
        "s": "down",
        "a": "left",
        "d": "right",
    }

    def __init__(self, root: tk.Tk, config: RunConfig, store: HighScoreStore) -> None:
        self.root = root
        self.root.title("Name Snake")
        self.root.configure(bg=self.BG)
        self.config = config

        self.game = SnakeGame(config, store=store)
        self.score_var = tk.StringVar(value=self.game.score_line())

        self._build_layout()
        self.surface = TkCanvasSurface(self.canvas, config.canvas_width, config.canvas_height)
        self.controller = SessionController(
            self.game,
            TkScheduler(self.root),
            MessageboxNotifier(self.score_var),
            Renderer(self.surface, config),
        )
        self.root.protocol("WM_DELETE_WINDOW", self.close)

    def _build_layout(self) -> None:
        """Name prompt on top, score line, then the (initially hidden) board."""
        self.name_frame = tk.Frame(self.root, bg=self.BG)
        self.name_frame.pack(padx=16, pady=(16, 8))

        tk.Label(
            self.name_frame,
            text="Enter a name to build the maze from",
            fg=self.TEXT_PRIMARY,
            bg=self.BG,
            font=("Helvetica", 14, "bold"),
        ).pack(anchor="w", pady=(0, 6))

        row = tk.Frame(self.name_frame, bg=self.BG)
        row.pack(fill="x")
        self.name_var = tk.StringVar()
        self.name_entry = tk.Entry(row, textvariable=self.name_var, width=28, font=("Helvetica", 12))
        self.name_entry.pack(side="left", padx=(0, 8))
        self.name_entry.bind("<Return>", lambda _e: self.start_game())
        self.name_entry.focus_set()

        self.start_btn = tk.Button(
            row,
            text="Start",
            command=self.start_game,
            fg="#09141f",
            bg=self.ACCENT,
            activebackground="#74d8ff",
            bd=0,
            relief="flat",
            font=("Helvetica", 11, "bold"),
            padx=12,
            pady=6,
            cursor="hand2",
        )
        self.start_btn.pack(side="left")

        tk.Label(
            self.root,
            textvariable=self.score_var,
            fg=self.TEXT_PRIMARY,
            bg=self.BG,
            font=("Helvetica", 12),
        ).pack(pady=(0, 8))

        self.canvas = tk.Canvas(
            self.root,
            width=self.config.canvas_width,
            height=self.config.canvas_height,
            bg="#ffffff",
            highlightthickness=0,
            bd=0,
        )

        tk.Label(
            self.root,
            text="Move: Arrow keys / WASD",
            fg=self.TEXT_MUTED,
            bg=self.BG,
            font=("Helvetica", 10),
        ).pack(side="bottom", pady=(0, 10))

    def _bind_keys(self) -> None:
        for key, direction in self.KEY_BINDINGS.items():
            self.root.bind(key, lambda _e, d=direction: self.controller.change_direction(d))

    def start_game(self) -> None:
        """Validate the name, then swap the prompt for the board and start ticking."""
        if not self.controller.submit_name(self.name_var.get()):
            return
        self.start_btn.configure(state="disabled")
        self.name_entry.configure(state="disabled")
        self.name_frame.pack_forget()
        self.canvas.pack(padx=16, pady=(0, 16))
        self._bind_keys()
        self.root.focus_set()

    def close(self) -> None:
        self.controller.stop()
        self.root.destroy()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    defaults = RunConfig()
    parser = argparse.ArgumentParser(description="Snake through the letters of a name")
    parser.add_argument("--grid-unit", type=int, default=defaults.grid_unit)
    parser.add_argument("--width", type=int, default=defaults.canvas_width)
    parser.add_argument("--height", type=int, default=defaults.canvas_height)
    parser.add_argument("--passway-density", type=float, default=defaults.passway_density)
    parser.add_argument("--grace-ms", type=int, default=defaults.grace_period_ms)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--reset-speed",
        action="store_true",
        help="Restart each run at the initial tick interval instead of keeping the ramped speed.",
    )
    parser.add_argument(
        "--scores-file",
        type=str,
        default=DEFAULT_SCORES_PATH,
        help='JSON file holding the high score; "" keeps it in memory only.',
    )
    parser.add_argument("--log-level", type=str, default="WARNING")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> RunConfig:
    return validate_config(
        RunConfig(
            grid_unit=args.grid_unit,
            canvas_width=args.width,
            canvas_height=args.height,
            passway_density=args.passway_density,
            grace_period_ms=args.grace_ms,
            carry_speed_across_resets=not args.reset_speed,
            seed=args.seed,
        )
    )


def run_player_gui(argv: list[str] | None = None) -> None:
    """Launch the name-snake player interface."""
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s: %(message)s")
    try:
        config = build_config(args)
    except ValueError as exc:
        raise SystemExit(f"Invalid setting: {exc}")
    store = JsonHighScoreStore(args.scores_file) if args.scores_file else MemoryHighScoreStore()

    root = tk.Tk()
    SnakeApp(root, config, store)
    root.mainloop()


if __name__ == "__main__":
    run_player_gui()
