"""Rendering: canvas, node glyphs, frames and the pick buffer."""

from newsgraph.render.avatars import AvatarCache
from newsgraph.render.canvas import Canvas, pixel_box
from newsgraph.render.frame import Frame, FrameRenderer
from newsgraph.render.node_renderer import NodeRenderer
from newsgraph.render.pick_buffer import PickBuffer

__all__ = [
    "AvatarCache",
    "Canvas",
    "Frame",
    "FrameRenderer",
    "NodeRenderer",
    "PickBuffer",
    "pixel_box",
]
