"""Neo4j client for the article/submitter/tag graph.

Exposes the two fixed read queries the visualization needs (most recent
articles, most recent articles for a tag) shaped as nested article records,
plus the write helpers used to seed a development database.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from neo4j import AsyncDriver, AsyncGraphDatabase, AsyncSession
from neo4j.exceptions import DriverError, Neo4jError, ServiceUnavailable

from newsgraph.config import settings
from newsgraph.storage.schema import get_all_schema_queries

logger = logging.getLogger(__name__)


class QueryFailure(Exception):
    """The query service could not answer (network, driver or server error)."""


# Projects one article row into the nested record shape the normalizer reads
ARTICLE_PROJECTION = """
OPTIONAL MATCH (u:User)-[:SUBMITTED]->(a)
OPTIONAL MATCH (a)-[:HAS_TAG]->(t:Tag)
WITH a, u, collect(t {__typename: 'Tag', .name}) AS tags
RETURN a {
    __typename: 'Article',
    .id, .url, .title, .created,
    user: CASE WHEN u IS NULL THEN null
               ELSE u {__typename: 'User', .username, .avatar} END,
    tags: tags
} AS article
ORDER BY a.created DESC
"""

RECENT_ARTICLES_QUERY = (
    """
MATCH (a:Article)
WITH a ORDER BY a.created DESC LIMIT $limit
"""
    + ARTICLE_PROJECTION
)

ARTICLES_BY_TAG_QUERY = (
    """
MATCH (a:Article)-[:HAS_TAG]->(:Tag {name: $tag})
WITH DISTINCT a ORDER BY a.created DESC LIMIT $limit
"""
    + ARTICLE_PROJECTION
)


class Neo4jClient:
    """Async Neo4j client for the article graph."""

    def __init__(
        self,
        uri: str | None = None,
        user: str | None = None,
        password: str | None = None,
        database: str | None = None,
    ) -> None:
        self.uri = uri or settings.neo4j_uri
        self.user = user or settings.neo4j_user
        self.password = password or settings.neo4j_password
        self.database = database or settings.neo4j_database
        self._driver: AsyncDriver | None = None

    async def connect(self) -> None:
        """Establish connection to Neo4j."""
        if self._driver is None:
            self._driver = AsyncGraphDatabase.driver(
                self.uri,
                auth=(self.user, self.password),
            )
            # Verify connectivity
            try:
                await self._driver.verify_connectivity()
                logger.info(f"Connected to Neo4j at {self.uri}")
            except ServiceUnavailable as e:
                logger.error(f"Failed to connect to Neo4j: {e}")
                raise

    async def close(self) -> None:
        """Close the database connection."""
        if self._driver is not None:
            await self._driver.close()
            self._driver = None
            logger.info("Disconnected from Neo4j")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get a database session."""
        if self._driver is None:
            await self.connect()
        assert self._driver is not None
        async with self._driver.session(database=self.database) as session:
            yield session

    async def setup_schema(self) -> None:
        """Create all constraints and indexes."""
        async with self.session() as session:
            for query in get_all_schema_queries():
                try:
                    await session.run(query)
                    logger.debug(f"Executed schema query: {query[:50]}...")
                except Neo4jError as e:
                    # Constraints might already exist under another name
                    logger.warning(f"Schema query warning: {e}")
        logger.info("Schema setup completed")

    # ==========================================================================
    # Read queries
    # ==========================================================================

    async def recent_articles(self, limit: int | None = None) -> dict[str, Any]:
        """Most recently created articles with submitter and tags.

        Returns:
            ``{"articles": [...]}`` with nested article records

        Raises:
            QueryFailure: If the driver or server fails
        """
        limit = limit or settings.initial_article_limit
        rows = await self._read(RECENT_ARTICLES_QUERY, limit=limit)
        return {"articles": [row["article"] for row in rows]}

    async def articles_by_tag(self, tag: str, limit: int | None = None) -> dict[str, Any]:
        """Most recently created articles carrying ``tag``.

        Returns:
            ``{"articles": [...]}`` with nested article records

        Raises:
            QueryFailure: If the driver or server fails
        """
        limit = limit or settings.expansion_article_limit
        rows = await self._read(ARTICLES_BY_TAG_QUERY, tag=tag, limit=limit)
        return {"articles": [row["article"] for row in rows]}

    async def _read(self, query: str, **params: Any) -> list[dict[str, Any]]:
        try:
            return await self.execute_query(query, **params)
        except (Neo4jError, DriverError) as e:
            logger.warning(f"Query failed ({params}): {e}")
            raise QueryFailure(str(e)) from e

    # ==========================================================================
    # Write operations (seeding)
    # ==========================================================================

    async def save_articles_batch(self, articles: list[dict[str, Any]]) -> None:
        """Save nested article records (same shape the read queries return)."""
        if not articles:
            return

        query = """
        UNWIND $items AS item
        MERGE (a:Article {id: item.id})
        SET a.title = item.title,
            a.url = item.url,
            a.created = datetime(item.created)
        MERGE (u:User {username: item.user.username})
        SET u.avatar = item.user.avatar
        MERGE (u)-[:SUBMITTED]->(a)
        WITH a, item
        UNWIND item.tags AS tag
        MERGE (t:Tag {name: tag.name})
        MERGE (a)-[:HAS_TAG]->(t)
        """
        items = [
            {
                "id": article["id"],
                "title": article.get("title"),
                "url": article.get("url"),
                "created": article["created"],
                "user": article["user"],
                "tags": article.get("tags") or [],
            }
            for article in articles
        ]
        async with self.session() as session:
            await session.run(query, items=items)
        logger.debug(f"Batch saved {len(articles)} articles")

    # ==========================================================================
    # Utility operations
    # ==========================================================================

    async def execute_query(self, query: str, **params: Any) -> list[dict[str, Any]]:
        """Execute a raw Cypher query."""
        results: list[dict[str, Any]] = []
        async with self.session() as session:
            result = await session.run(query, **params)
            async for record in result:
                results.append(dict(record))
        return results

    async def clear_all(self) -> None:
        """Delete all nodes and relationships. Use with caution!"""
        query = "MATCH (n) DETACH DELETE n"
        async with self.session() as session:
            await session.run(query)
        logger.warning("All data cleared from Neo4j")
