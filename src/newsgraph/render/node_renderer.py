"""Node glyph drawing.

Tags and articles are drawn as a label on a translucent white background;
submitters as a fixed-size avatar square. ``draw`` returns the footprint it
painted, which is the exact area the pick buffer fills for that node.
"""

import logging

from newsgraph.config import settings
from newsgraph.models import Node, NodeKind, Rect
from newsgraph.render.avatars import AvatarCache
from newsgraph.render.canvas import Canvas, Color

logger = logging.getLogger(__name__)


class NodeRenderer:
    """Draws one node per call, keyed by its kind."""

    def __init__(
        self,
        avatars: AvatarCache | None = None,
        font_size: float | None = None,
        padding_ratio: float | None = None,
        avatar_size: float | None = None,
        label_background: Color | None = None,
        tag_color: Color | None = None,
        article_color: Color | None = None,
    ) -> None:
        self.avatars = avatars
        self.font_size = font_size or settings.label_font_size
        self.padding_ratio = padding_ratio if padding_ratio is not None else settings.label_padding_ratio
        self.avatar_size = avatar_size or settings.avatar_size
        self.label_background = label_background or settings.label_background
        self.tag_color = tag_color or settings.tag_label_color
        self.article_color = article_color or settings.article_label_color

    def draw(self, canvas: Canvas, node: Node, x: float, y: float) -> Rect:
        """Draw ``node`` centred on world point (x, y) and return its footprint."""
        if node.kind is NodeKind.TAG:
            return self._draw_label(canvas, node.label or "", x, y, self.tag_color)
        if node.kind is NodeKind.ARTICLE:
            return self._draw_label(canvas, node.label or "", x, y, self.article_color)
        if node.kind is NodeKind.SUBMITTER:
            return self._draw_avatar(canvas, node, x, y)
        raise ValueError(f"Unhandled node kind: {node.kind!r}")

    def label_footprint(self, canvas: Canvas, label: str, x: float, y: float) -> Rect:
        """Background rectangle of a label: text size plus padding, centred.

        Sets the canvas font as a side effect.
        """
        font_size = self.font_size / canvas.zoom
        canvas.set_font(font_size)
        padding = font_size * self.padding_ratio
        width = canvas.measure_text(label) + padding
        height = font_size + padding
        return Rect.centered(x, y, width, height)

    def _draw_label(self, canvas: Canvas, label: str, x: float, y: float, color: Color) -> Rect:
        footprint = self.label_footprint(canvas, label, x, y)
        canvas.fill_rect(footprint, self.label_background)
        canvas.fill_text(label, x, y, color)
        return footprint

    def _draw_avatar(self, canvas: Canvas, node: Node, x: float, y: float) -> Rect:
        footprint = Rect.centered(x, y, self.avatar_size, self.avatar_size)
        image = self.avatars.get(node.avatar_url) if self.avatars else None
        if image is not None:
            canvas.draw_image(image, footprint)
        return footprint
