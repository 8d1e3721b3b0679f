# Minimal 2D raster surface used by the text rasterizer and the renderer.
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from matplotlib import colors as mcolors
from matplotlib import rc_context
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
import numpy as np


# Agg works in points; pick a DPI and convert pixel font sizes on the way in.
RENDER_DPI = 100
DEFAULT_FONT_FAMILY = "DejaVu Sans"


@dataclass(frozen=True)
class FontSpec:
    family: str = DEFAULT_FONT_FAMILY
    size: int = 200                         # pixel height, like a CSS "200px" font
    bold: bool = False

    @property
    def points(self) -> float:
        return self.size * 72.0 / RENDER_DPI


class RasterSurface(Protocol):
    """Drawing capabilities needed by the game: rects, glyphs, images, alpha readback."""
    width: int
    height: int

    def clear(self, color: str | None = None) -> None: ...

    def fill_rect(self, x: float, y: float, w: float, h: float, color: str) -> None: ...

    def draw_text(self, text: str, x: float, y: float, font: FontSpec, color: str, anchor: str = "left") -> None: ...

    def draw_image(self, image: np.ndarray, x: float, y: float, w: float, h: float) -> None: ...

    def alpha(self) -> np.ndarray: ...


def to_rgba8(color: str) -> np.ndarray:
    """Parse any matplotlib colour spec ('#28a745', '#00000080', 'white') to uint8 RGBA."""
    return np.round(np.asarray(mcolors.to_rgba(color)) * 255).astype(np.uint8)


def _fit(buffer: np.ndarray, width: int, height: int) -> np.ndarray:
    # Figure sizes are float inches, so Agg can come back one pixel short or long.
    out = np.zeros((height, width, 4), dtype=np.uint8)
    h = min(height, buffer.shape[0])
    w = min(width, buffer.shape[1])
    out[:h, :w] = buffer[:h, :w]
    return out


def render_text_layer(
    width: int,
    height: int,
    text: str,
    x: float,
    y: float,
    font: FontSpec,
    color: str = "#000000",
    anchor: str = "left",
    antialiased: bool = False,
) -> np.ndarray:
    """Render one string on a transparent RGBA layer; (x, y) is the left/centre anchor in pixels."""
    fig = Figure(figsize=(width / RENDER_DPI, height / RENDER_DPI), dpi=RENDER_DPI)
    fig.patch.set_alpha(0.0)
    canvas = FigureCanvasAgg(fig)
    with rc_context({"text.antialiased": antialiased}):
        fig.text(
            x / width,
            1.0 - y / height,
            text,
            fontsize=font.points,
            family=font.family,
            fontweight="bold" if font.bold else "normal",
            color=color,
            ha="center" if anchor == "center" else "left",
            va="center",
        )
        canvas.draw()
    return _fit(np.asarray(canvas.buffer_rgba()), width, height)


class ArraySurface:
    """Headless RGBA pixel buffer; text goes through matplotlib's Agg renderer."""
    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width, 4), dtype=np.uint8)

    def clear(self, color: str | None = None) -> None:
        if color is None:
            self.pixels[:] = 0
        else:
            self.pixels[:] = to_rgba8(color)

    def _clip(self, x: float, y: float, w: float, h: float) -> tuple[int, int, int, int]:
        x0 = max(0, int(round(x)))
        y0 = max(0, int(round(y)))
        x1 = min(self.width, int(round(x + w)))
        y1 = min(self.height, int(round(y + h)))
        return x0, y0, x1, y1

    def _composite(self, region: tuple[int, int, int, int], layer: np.ndarray) -> None:
        """Source-over blend of an RGBA layer onto the given region."""
        x0, y0, x1, y1 = region
        if x1 <= x0 or y1 <= y0:
            return
        dst = self.pixels[y0:y1, x0:x1].astype(np.float32) / 255.0
        src = layer.astype(np.float32) / 255.0
        src_a = src[..., 3:4]
        dst_a = dst[..., 3:4]
        out_a = src_a + dst_a * (1.0 - src_a)
        safe_a = np.where(out_a > 0, out_a, 1.0)
        out_rgb = (src[..., :3] * src_a + dst[..., :3] * dst_a * (1.0 - src_a)) / safe_a
        out = np.concatenate([out_rgb, out_a], axis=-1)
        self.pixels[y0:y1, x0:x1] = np.round(out * 255).astype(np.uint8)

    def fill_rect(self, x: float, y: float, w: float, h: float, color: str) -> None:
        x0, y0, x1, y1 = self._clip(x, y, w, h)
        if x1 <= x0 or y1 <= y0:
            return
        layer = np.broadcast_to(to_rgba8(color), (y1 - y0, x1 - x0, 4))
        self._composite((x0, y0, x1, y1), layer)

    def draw_text(self, text: str, x: float, y: float, font: FontSpec, color: str, anchor: str = "left") -> None:
        if not text.strip():
            return
        layer = render_text_layer(self.width, self.height, text, x, y, font, color, anchor)
        self._composite((0, 0, self.width, self.height), layer)

    def draw_image(self, image: np.ndarray, x: float, y: float, w: float, h: float) -> None:
        """Nearest-neighbour scale an RGBA image into the target box."""
        box_w = max(1, int(round(w)))
        box_h = max(1, int(round(h)))
        rows = (np.arange(box_h) * image.shape[0] // box_h).clip(0, image.shape[0] - 1)
        cols = (np.arange(box_w) * image.shape[1] // box_w).clip(0, image.shape[1] - 1)
        scaled = image[rows][:, cols]

        left = int(round(x))
        top = int(round(y))
        x0, y0, x1, y1 = self._clip(left, top, box_w, box_h)
        if x1 <= x0 or y1 <= y0:
            return
        self._composite((x0, y0, x1, y1), scaled[y0 - top : y1 - top, x0 - left : x1 - left])

    def alpha(self) -> np.ndarray:
        return self.pixels[..., 3].copy()
