"""Pytest configuration and fixtures."""

from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from newsgraph.config import Settings
from newsgraph.graph.layout import Layout
from newsgraph.models import Viewport
from newsgraph.render import AvatarCache
from newsgraph.session import GraphSession
from newsgraph.storage.neo4j_client import Neo4jClient


def make_article(
    article_id: str,
    title: str = "T",
    url: str | None = "http://x",
    username: str = "u1",
    avatar: str | None = "/img.png",
    tags: list[str] | None = None,
    created: str | None = "2024-01-01T00:00:00+00:00",
) -> dict[str, Any]:
    """Nested article record as returned by the query service."""
    return {
        "__typename": "Article",
        "id": article_id,
        "title": title,
        "url": url,
        "created": created,
        "user": {"__typename": "User", "username": username, "avatar": avatar},
        "tags": [{"__typename": "Tag", "name": name} for name in (tags or [])],
    }


@pytest.fixture
def article() -> Callable[..., dict[str, Any]]:
    """Factory for nested article records."""
    return make_article


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with defaults."""
    return Settings(
        neo4j_uri="bolt://localhost:7687",
        neo4j_user="neo4j",
        neo4j_password="test_password",
        avatar_base_url="http://avatars.test",
    )


@pytest.fixture
def initial_response() -> dict[str, Any]:
    """InitialQuery answer with a single article."""
    return {"articles": [make_article("a1", tags=["go"])]}


@pytest.fixture
def expansion_response() -> dict[str, Any]:
    """ExpansionQuery("go") answer: a second article by the same submitter."""
    return {"articles": [make_article("a2", title="T2", url="http://y", tags=["go"])]}


@pytest.fixture
def mock_db(initial_response, expansion_response) -> MagicMock:
    """Mock Neo4j client answering both fixed queries."""
    db = MagicMock(spec=Neo4jClient)
    db.connect = AsyncMock()
    db.close = AsyncMock()
    db.recent_articles = AsyncMock(return_value=initial_response)
    db.articles_by_tag = AsyncMock(return_value=expansion_response)
    return db


@pytest.fixture
def avatar_client() -> httpx.AsyncClient:
    """HTTP client that answers 404 for every avatar."""
    transport = httpx.MockTransport(lambda request: httpx.Response(404))
    return httpx.AsyncClient(transport=transport)


@pytest.fixture
def avatar_cache(avatar_client) -> AvatarCache:
    """Avatar cache that never touches the network."""
    return AvatarCache(base_url="http://avatars.test", client=avatar_client)


@pytest.fixture
def viewport() -> Viewport:
    """Small viewport centred on the origin."""
    return Viewport(width=400, height=300, zoom=1.0)


@pytest.fixture
def session(mock_db, avatar_cache, viewport) -> GraphSession:
    """Session over the mock database."""
    return GraphSession(mock_db, avatars=avatar_cache, layout=Layout(seed=1), viewport=viewport)
