"""Incremental node placement.

Stands in for a force simulation: nodes are placed once, when they first
appear, and keep their position afterwards. A new node with an already
placed neighbour orbits that neighbour on a golden-angle spiral; a node with
no placed neighbour goes on a spiral around the origin.
"""

import logging
import math
import random
from collections import defaultdict

from newsgraph.config import settings
from newsgraph.models import Graph

logger = logging.getLogger(__name__)

GOLDEN_ANGLE = 2.4  # radians, approximation


class Layout:
    """Positions of node keys in world units."""

    def __init__(self, spacing: float | None = None, seed: int | None = None) -> None:
        self.spacing = spacing or settings.layout_spacing
        self._rng = random.Random(settings.layout_seed if seed is None else seed)
        self._positions: dict[str, tuple[float, float]] = {}
        self._orbit_counts: dict[str, int] = defaultdict(int)
        self._roots = 0

    def __contains__(self, key: str) -> bool:
        return key in self._positions

    def __len__(self) -> int:
        return len(self._positions)

    def position(self, key: str) -> tuple[float, float] | None:
        return self._positions.get(key)

    def positions(self) -> dict[str, tuple[float, float]]:
        return dict(self._positions)

    def place(self, graph: Graph) -> list[str]:
        """Assign positions to every node of ``graph`` that has none yet.

        Returns:
            Keys placed by this call
        """
        adj: dict[str, list[str]] = defaultdict(list)
        for link in graph.links:
            adj[link.source].append(link.target)
            adj[link.target].append(link.source)

        # Nodes with many connections first so they become anchors
        pending = [key for key in graph.nodes if key not in self._positions]
        pending.sort(key=lambda k: len(adj[k]), reverse=True)

        placed: list[str] = []
        while pending:
            progressed = False
            for key in list(pending):
                anchor = next((n for n in adj[key] if n in self._positions), None)
                if anchor is None:
                    continue
                self._positions[key] = self._orbit(anchor)
                pending.remove(key)
                placed.append(key)
                progressed = True

            if not progressed:
                # Nothing reachable from placed nodes: seed a new root
                key = pending.pop(0)
                self._positions[key] = self._root()
                placed.append(key)

        if placed:
            logger.debug(f"Placed {len(placed)} new nodes ({len(self._positions)} total)")
        return placed

    def _orbit(self, anchor: str) -> tuple[float, float]:
        self._orbit_counts[anchor] += 1
        i = self._orbit_counts[anchor]
        ax, ay = self._positions[anchor]
        angle = i * GOLDEN_ANGLE
        radius = self.spacing + math.sqrt(i) * self.spacing * 0.5
        radius += (self._rng.random() - 0.5) * self.spacing * 0.25
        return (ax + math.cos(angle) * radius, ay + math.sin(angle) * radius)

    def _root(self) -> tuple[float, float]:
        i = self._roots
        self._roots += 1
        if i == 0:
            return (0.0, 0.0)
        angle = i * GOLDEN_ANGLE
        radius = math.sqrt(i) * self.spacing * 4
        return (math.cos(angle) * radius, math.sin(angle) * radius)
