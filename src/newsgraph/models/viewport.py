"""Viewport - maps world coordinates to device pixels."""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class Viewport:
    """
    Visible window onto the world plane.

    ``zoom`` is the number of device pixels per world unit; the world point
    (center_x, center_y) is drawn at the middle of the surface.
    """

    width: int
    height: int
    zoom: float = 1.0
    center_x: float = 0.0
    center_y: float = 0.0

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Viewport must have a positive size, got {self.width}x{self.height}")
        if self.zoom <= 0:
            raise ValueError(f"Zoom must be positive, got {self.zoom}")

    def to_screen(self, x: float, y: float) -> tuple[float, float]:
        """World coordinates -> device pixels."""
        return (
            (x - self.center_x) * self.zoom + self.width / 2,
            (y - self.center_y) * self.zoom + self.height / 2,
        )

    def to_world(self, px: float, py: float) -> tuple[float, float]:
        """Device pixels -> world coordinates."""
        return (
            (px - self.width / 2) / self.zoom + self.center_x,
            (py - self.height / 2) / self.zoom + self.center_y,
        )

    def with_changes(self, **changes) -> "Viewport":
        return replace(self, **changes)
