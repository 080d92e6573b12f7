"""Interactive session - wires state, rendering and interaction together."""

import logging

from newsgraph.config import settings
from newsgraph.graph.layout import Layout
from newsgraph.graph.merger import new_keys
from newsgraph.graph.normalizer import normalize
from newsgraph.interaction import Action, ExpansionController, InteractionController
from newsgraph.models import Fragment, Graph, NodeKind, Viewport
from newsgraph.render import AvatarCache, Frame, FrameRenderer, NodeRenderer, PickBuffer
from newsgraph.state import GraphState
from newsgraph.storage.neo4j_client import Neo4jClient, QueryFailure

logger = logging.getLogger(__name__)


def default_viewport() -> Viewport:
    return Viewport(
        width=settings.viewport_width,
        height=settings.viewport_height,
        zoom=settings.viewport_zoom,
    )


class GraphSession:
    """
    Everything one viewer interacts with.

    Lifecycle:
    1. ``load_initial`` runs InitialQuery and merges its result
    2. ``render`` draws a frame and rebuilds the pick buffer
    3. ``click`` resolves against the last rendered frame and may start an
       expansion, which merges into the same state when it completes
    """

    def __init__(
        self,
        db: Neo4jClient,
        avatars: AvatarCache | None = None,
        layout: Layout | None = None,
        viewport: Viewport | None = None,
    ) -> None:
        self.db = db
        self.state = GraphState(layout)
        self.avatars = avatars or AvatarCache()
        self.pick_buffer = PickBuffer()
        self.renderer = FrameRenderer(NodeRenderer(self.avatars), self.pick_buffer)
        self.expansion = ExpansionController(db, self.state)
        self.interaction = InteractionController(self.state, self.pick_buffer, self.expansion)
        self.viewport = viewport or default_viewport()
        self.last_frame: Frame | None = None

        self.state.subscribe(self._prefetch_avatars)

    @property
    def graph(self) -> Graph:
        return self.state.graph

    async def load_initial(self) -> Fragment:
        """Run InitialQuery and merge its result."""
        try:
            response = await self.db.recent_articles(limit=settings.initial_article_limit)
        except QueryFailure as e:
            logger.warning(f"Initial query failed, starting with an empty graph: {e}")
            return Fragment.empty()

        fragment = normalize(response)
        self.state.apply(fragment)
        logger.info(f"Initial load: {len(fragment.nodes)} nodes, {len(fragment.links)} links")
        return fragment

    def set_viewport(self, **changes) -> Viewport:
        self.viewport = self.viewport.with_changes(**changes)
        return self.viewport

    def render(self) -> Frame:
        self.last_frame = self.renderer.render(self.graph, self.state.layout, self.viewport)
        return self.last_frame

    def click(self, px: float, py: float) -> Action:
        """Resolve a click against the last rendered frame and dispatch it."""
        return self.interaction.click(px, py)

    async def close(self) -> None:
        try:
            await self.expansion.drain()
        finally:
            await self.avatars.close()

    def _prefetch_avatars(self, before: Graph, after: Graph) -> None:
        added = (after.nodes[key] for key in new_keys(before, after))
        urls = [node.avatar_url for node in added if node.kind is NodeKind.SUBMITTER]
        if urls:
            self.avatars.prefetch(urls)
