"""One render pass: links, node glyphs, and the matching pick buffer."""

import logging
from dataclasses import dataclass, field

from newsgraph.config import settings
from newsgraph.graph.layout import Layout
from newsgraph.models import Graph, Rect, Viewport
from newsgraph.render.canvas import Canvas, Color
from newsgraph.render.node_renderer import NodeRenderer
from newsgraph.render.pick_buffer import PickBuffer

logger = logging.getLogger(__name__)


@dataclass
class Frame:
    """Result of rendering one graph version."""

    graph_version: int
    viewport: Viewport
    canvas: Canvas
    footprints: dict[str, Rect] = field(default_factory=dict)

    def to_png(self) -> bytes:
        return self.canvas.to_png()


class FrameRenderer:
    """Renders a graph value and rebuilds the pick buffer in the same pass."""

    def __init__(
        self,
        node_renderer: NodeRenderer,
        pick_buffer: PickBuffer,
        link_color: Color | None = None,
        background: Color | None = None,
    ) -> None:
        self.node_renderer = node_renderer
        self.pick_buffer = pick_buffer
        self.link_color = link_color or settings.link_color
        self.background = background or settings.background_color

    def render(self, graph: Graph, layout: Layout, viewport: Viewport) -> Frame:
        canvas = Canvas(viewport, background=self.background)
        self.pick_buffer.begin_frame(viewport)
        frame = Frame(graph_version=graph.version, viewport=viewport, canvas=canvas)

        for link in graph.links:
            start = layout.position(link.source)
            end = layout.position(link.target)
            if start is None or end is None:
                continue
            canvas.draw_line(*start, *end, fill=self.link_color)

        # Pick buffer paints in the same order so overlaps resolve to the top glyph
        for key, node in graph.nodes.items():
            position = layout.position(key)
            if position is None:
                continue
            footprint = self.node_renderer.draw(canvas, node, *position)
            frame.footprints[key] = footprint
            self.pick_buffer.paint(key, footprint)

        logger.debug(
            f"Rendered graph v{graph.version}: {len(frame.footprints)} nodes, "
            f"{len(graph.links)} links at zoom {viewport.zoom:.2f}"
        )
        return frame
