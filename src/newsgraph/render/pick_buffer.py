"""Color-keyed pick buffer for pointer hit-testing.

Every node gets a unique flat RGB color from a monotonic counter. Each
frame, the footprint the node renderer produced for a node is filled with
that color into an offscreen canvas; a click is resolved by reading one
pixel and reverse-mapping its color. Black is reserved for "no node".
"""

import logging

from newsgraph.models import Rect, Viewport
from newsgraph.render.canvas import Canvas

logger = logging.getLogger(__name__)

BACKGROUND = (0, 0, 0)
MAX_KEYS = 0xFFFFFF


def index_to_color(index: int) -> tuple[int, int, int]:
    """Map a counter value to a flat RGB color."""
    return ((index >> 16) & 0xFF, (index >> 8) & 0xFF, index & 0xFF)


def color_to_index(color: tuple[int, ...]) -> int:
    r, g, b = color[:3]
    return (r << 16) | (g << 8) | b


class PickBuffer:
    """Offscreen hit-test surface, rebuilt every frame."""

    def __init__(self) -> None:
        self._colors: dict[str, tuple[int, int, int]] = {}
        self._counter = 0
        self._frame: dict[int, str] = {}
        self._canvas: Canvas | None = None

    def color_for(self, key: str) -> tuple[int, int, int]:
        """Stable pick color of a node key, assigned on first use."""
        color = self._colors.get(key)
        if color is None:
            if self._counter >= MAX_KEYS:
                raise RuntimeError(f"Pick buffer exhausted after {MAX_KEYS} keys")
            self._counter += 1
            color = index_to_color(self._counter)
            self._colors[key] = color
        return color

    def begin_frame(self, viewport: Viewport) -> None:
        """Start a fresh frame: clear the surface and the color table."""
        self._canvas = Canvas(viewport, background=BACKGROUND, blend=False)
        self._frame = {}

    def paint(self, key: str, footprint: Rect) -> None:
        """Fill a node's footprint with its key color."""
        if self._canvas is None:
            raise RuntimeError("paint() called before begin_frame()")
        color = self.color_for(key)
        self._canvas.fill_rect(footprint, color)
        self._frame[color_to_index(color)] = key

    def resolve(self, px: float, py: float) -> str | None:
        """Node key under device pixel (px, py) in the current frame."""
        if self._canvas is None:
            return None
        color = self._canvas.get_pixel(px, py)
        if color is None or color == BACKGROUND:
            return None
        return self._frame.get(color_to_index(color))

    @property
    def viewport(self) -> Viewport | None:
        return self._canvas.viewport if self._canvas else None

    @property
    def keys_in_frame(self) -> int:
        return len(self._frame)
