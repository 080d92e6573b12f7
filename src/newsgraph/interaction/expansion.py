"""Tag expansion - scoped follow-up queries merged into the live graph.

Identical requests are not coalesced: two clicks on the same tag before the
first answer arrives run two queries and merge twice. Node insertion is
idempotent, so only the link list grows twice.
"""

import asyncio
import logging

from newsgraph.config import settings
from newsgraph.graph.normalizer import normalize
from newsgraph.models import Fragment
from newsgraph.state import GraphState
from newsgraph.storage.neo4j_client import Neo4jClient, QueryFailure

logger = logging.getLogger(__name__)


class ExpansionController:
    """Issues ExpansionQuery(tag) and merges each answer on completion."""

    def __init__(
        self,
        db: Neo4jClient,
        state: GraphState,
        limit: int | None = None,
    ) -> None:
        self.db = db
        self.state = state
        self.limit = limit or settings.expansion_article_limit
        self._pending: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Number of expansions still in flight."""
        return len(self._pending)

    async def expand(self, tag_name: str) -> Fragment:
        """
        Query articles for ``tag_name``, normalize and merge them.

        Returns:
            The merged fragment; empty if the query failed or found nothing
        """
        logger.info(f"Expanding tag '{tag_name}'")
        try:
            response = await self.db.articles_by_tag(tag_name, limit=self.limit)
        except QueryFailure as e:
            logger.warning(f"Expansion of tag '{tag_name}' failed, graph unchanged: {e}")
            return Fragment.empty()

        # No await between normalize and apply: the merge is atomic on the loop
        fragment = normalize(response)
        self.state.apply(fragment)
        logger.info(
            f"Tag '{tag_name}' expanded: {len(fragment.nodes)} nodes, {len(fragment.links)} links"
        )
        return fragment

    def request(self, tag_name: str) -> asyncio.Task:
        """Start an expansion in the background and return its task."""
        task = asyncio.create_task(self.expand(tag_name))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> list[Fragment]:
        """Wait for every in-flight expansion.

        A failed expansion is logged and counts as an empty fragment.
        """
        if not self._pending:
            return []
        results = await asyncio.gather(*self._pending, return_exceptions=True)
        fragments = []
        for result in results:
            if isinstance(result, BaseException):
                logger.warning(f"Expansion failed, graph unchanged: {result!r}")
                fragments.append(Fragment.empty())
            else:
                fragments.append(result)
        return fragments
