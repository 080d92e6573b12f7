"""Graph value types - nodes, links, fragments and the versioned graph."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


class NodeKind(str, Enum):
    """Kind of a node. Values match the upstream type names."""

    ARTICLE = "Article"
    SUBMITTER = "User"
    TAG = "Tag"


def node_key(kind: NodeKind, natural_id: str) -> str:
    """Build the namespaced identity key for a node.

    Keys are ``"<kind>:<natural_id>"`` so that a tag named ``alice`` and a
    user named ``alice`` stay two different nodes.
    """
    return f"{kind.value}:{natural_id}"


def parse_datetime(value: Any) -> datetime | None:
    """Parse datetime from various formats (string, Neo4j DateTime, or native datetime)."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    # Neo4j DateTime object - convert to Python datetime
    if hasattr(value, "to_native"):
        return value.to_native()
    return datetime.fromisoformat(str(value))


@dataclass(frozen=True)
class Node:
    """
    A logical node in the visualized graph.

    Examples: an article titled "Why Go?", the user "alice", the tag "go"
    """

    natural_id: str  # article id, username or tag name
    kind: NodeKind

    title: str | None = None  # articles only
    url: str | None = None  # articles only
    avatar_url: str | None = None  # submitters only
    created: datetime | None = None  # articles only

    @property
    def key(self) -> str:
        return node_key(self.kind, self.natural_id)

    @property
    def label(self) -> str | None:
        """Text drawn for the node, None for submitters."""
        if self.kind is NodeKind.TAG:
            return self.natural_id
        if self.kind is NodeKind.ARTICLE:
            return self.title or self.natural_id
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON responses."""
        return {
            "id": self.key,
            "naturalId": self.natural_id,
            "kind": self.kind.value,
            "label": self.label,
            "url": self.url,
            "avatarUrl": self.avatar_url,
            "created": self.created.isoformat() if self.created else None,
        }


@dataclass(frozen=True)
class Link:
    """Undirected-for-rendering edge between two node keys."""

    source: str
    target: str

    def to_dict(self) -> dict:
        return {"source": self.source, "target": self.target}


@dataclass(frozen=True)
class Fragment:
    """A freshly normalized batch of nodes and links waiting to be merged."""

    nodes: tuple[Node, ...] = ()
    links: tuple[Link, ...] = ()

    @classmethod
    def empty(cls) -> "Fragment":
        return cls()

    def is_empty(self) -> bool:
        return not self.nodes and not self.links


@dataclass(frozen=True)
class Graph:
    """
    Immutable, versioned graph state.

    A new value is produced by every merge; the render loop holds on to one
    value per frame, so it can never see a half-applied merge.
    """

    nodes: Mapping[str, Node] = field(default_factory=lambda: MappingProxyType({}))
    links: tuple[Link, ...] = ()
    version: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.nodes, MappingProxyType):
            object.__setattr__(self, "nodes", MappingProxyType(dict(self.nodes)))

    def get(self, key: str) -> Node | None:
        return self.nodes.get(key)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON responses."""
        return {
            "version": self.version,
            "nodes": [node.to_dict() for node in self.nodes.values()],
            "links": [link.to_dict() for link in self.links],
        }


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in world units, (x, y) is the top-left corner."""

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def centered(cls, cx: float, cy: float, width: float, height: float) -> "Rect":
        return cls(cx - width / 2, cy - height / 2, width, height)

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def contains(self, x: float, y: float) -> bool:
        return self.x <= x <= self.right and self.y <= y <= self.bottom
