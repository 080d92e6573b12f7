"""Pillow-backed drawing surface with a world -> device transform.

All drawing calls take world coordinates; the canvas converts them through
its viewport. Rectangles are snapped to whole pixels with ``pixel_box`` so
that two canvases sharing a viewport fill exactly the same pixels.
"""

import io
import logging
import math
from functools import lru_cache

from PIL import Image, ImageDraw, ImageFont

from newsgraph.models import Rect, Viewport

logger = logging.getLogger(__name__)

Color = str | tuple[int, int, int] | tuple[int, int, int, int]


@lru_cache(maxsize=64)
def load_font(pixel_size: int) -> ImageFont.FreeTypeFont:
    """Default Pillow font at a given pixel size (cached)."""
    return ImageFont.load_default(size=max(1, pixel_size))


def pixel_box(viewport: Viewport, rect: Rect) -> tuple[int, int, int, int] | None:
    """Device-pixel box ``(left, top, right, bottom)`` covered by ``rect``.

    ``right``/``bottom`` are exclusive. Returns None if the rectangle
    covers no whole pixel.
    """
    x0, y0 = viewport.to_screen(rect.x, rect.y)
    x1, y1 = viewport.to_screen(rect.right, rect.bottom)
    left, top, right, bottom = round(x0), round(y0), round(x1), round(y1)
    if right <= left or bottom <= top:
        return None
    return (left, top, right, bottom)


class Canvas:
    """
    A raster surface sized to the viewport.

    With ``blend=True`` translucent fills are alpha-blended onto the
    background (visible frame). With ``blend=False`` every fill overwrites
    pixels exactly, which the pick buffer relies on.
    """

    def __init__(
        self,
        viewport: Viewport,
        background: Color = "white",
        blend: bool = True,
    ) -> None:
        self.viewport = viewport
        self.image = Image.new("RGB", (viewport.width, viewport.height), background)
        self._draw = ImageDraw.Draw(self.image, "RGBA" if blend else None)
        self._font_size = 1.0
        self._font = load_font(round(viewport.zoom))

    @property
    def zoom(self) -> float:
        return self.viewport.zoom

    @property
    def font_size(self) -> float:
        return self._font_size

    def set_font(self, size: float) -> None:
        """Select the label font; ``size`` is in world units."""
        self._font_size = size
        self._font = load_font(round(size * self.viewport.zoom))

    def measure_text(self, text: str) -> float:
        """Width of ``text`` in world units with the current font."""
        return self._font.getlength(text) / self.viewport.zoom

    def fill_rect(self, rect: Rect, fill: Color) -> None:
        box = pixel_box(self.viewport, rect)
        if box is None:
            return
        left, top, right, bottom = box
        self._draw.rectangle((left, top, right - 1, bottom - 1), fill=fill)

    def fill_text(self, text: str, x: float, y: float, fill: Color) -> None:
        """Draw ``text`` centred on world point (x, y)."""
        self._draw.text(self.viewport.to_screen(x, y), text, font=self._font, fill=fill, anchor="mm")

    def draw_line(self, x0: float, y0: float, x1: float, y1: float, fill: Color, width: int = 1) -> None:
        start = self.viewport.to_screen(x0, y0)
        end = self.viewport.to_screen(x1, y1)
        self._draw.line((start, end), fill=fill, width=width)

    def draw_image(self, image: Image.Image, rect: Rect) -> None:
        """Scale ``image`` into ``rect``."""
        box = pixel_box(self.viewport, rect)
        if box is None:
            return
        left, top, right, bottom = box
        scaled = image.convert("RGBA").resize((right - left, bottom - top))
        self.image.paste(scaled, (left, top), scaled)

    def get_pixel(self, px: float, py: float) -> tuple[int, int, int] | None:
        """Color at device pixel (px, py), None outside the surface."""
        x, y = math.floor(px), math.floor(py)
        if not (0 <= x < self.viewport.width and 0 <= y < self.viewport.height):
            return None
        return self.image.getpixel((x, y))

    def to_png(self) -> bytes:
        buffer = io.BytesIO()
        self.image.save(buffer, format="PNG")
        return buffer.getvalue()
