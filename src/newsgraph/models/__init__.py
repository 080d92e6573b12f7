"""newsgraph data models."""

from newsgraph.models.graph import (
    Fragment,
    Graph,
    Link,
    Node,
    NodeKind,
    Rect,
    node_key,
    parse_datetime,
)
from newsgraph.models.viewport import Viewport

__all__ = [
    "Fragment",
    "Graph",
    "Link",
    "Node",
    "NodeKind",
    "Rect",
    "Viewport",
    "node_key",
    "parse_datetime",
]
