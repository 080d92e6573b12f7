"""Live graph state - the single owner of the current graph value."""

import logging
from collections.abc import Callable

from newsgraph.graph.layout import Layout
from newsgraph.graph.merger import merge
from newsgraph.models import Fragment, Graph

logger = logging.getLogger(__name__)

MergeListener = Callable[[Graph, Graph], None]


class GraphState:
    """
    Holds the current graph and its layout.

    ``apply`` is the only way the graph changes. It runs without awaiting,
    so on the event loop a merge is one atomic step between frames.
    """

    def __init__(self, layout: Layout | None = None) -> None:
        self.graph = Graph()
        self.layout = layout or Layout()
        self._listeners: list[MergeListener] = []

    def subscribe(self, listener: MergeListener) -> None:
        """Call ``listener(before, after)`` after every applied merge."""
        self._listeners.append(listener)

    def apply(self, fragment: Fragment) -> Graph:
        """Merge a fragment into the live graph.

        Empty fragments leave the graph (and its version) untouched.
        """
        if fragment.is_empty():
            return self.graph

        before = self.graph
        after = merge(before, fragment)
        self.layout.place(after)
        self.graph = after

        logger.info(
            f"Graph v{after.version}: {len(after.nodes)} nodes, {len(after.links)} links "
            f"(+{len(after.nodes) - len(before.nodes)} nodes)"
        )
        for listener in self._listeners:
            listener(before, after)
        return after
