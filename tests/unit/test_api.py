"""Unit tests for API endpoints."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient
from neo4j.exceptions import ServiceUnavailable

from newsgraph.api.graph import ClickResponse, ExpandRequest, HealthResponse
from newsgraph.api.main import create_app
from newsgraph.storage.neo4j_client import Neo4jClient


def footprint_pixel(session, key: str) -> dict:
    frame = session.last_frame
    x, y = frame.viewport.to_screen(*frame.footprints[key].center)
    return {"x": int(x), "y": int(y)}


class TestModels:
    """Tests for request/response models."""

    def test_health_response_defaults(self) -> None:
        """Test health response defaults."""
        resp = HealthResponse(status="healthy")
        assert resp.version == "0.1.0"
        assert resp.pending_expansions == 0

    def test_click_response_none(self) -> None:
        """Test an inert click carries no node."""
        resp = ClickResponse(action="none")
        assert resp.node is None
        assert resp.url is None

    def test_expand_request_rejects_empty_tag(self) -> None:
        """Test an empty tag name is invalid."""
        with pytest.raises(ValueError):
            ExpandRequest(tag="")


class TestEndpoints:
    """Tests for the graph endpoints over a mocked database."""

    def test_lifespan_loads_initial_graph(self, session, mock_db) -> None:
        """Test startup runs InitialQuery."""
        with TestClient(create_app(session)) as client:
            response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["graph_version"] == 1
        assert data["nodes"] == 3
        assert data["links"] == 2
        mock_db.recent_articles.assert_awaited_once()

    def test_lifespan_connects_to_neo4j(self, mock_db, avatar_cache) -> None:
        """Test an app without a session builds one over Neo4j."""
        with patch("newsgraph.api.main.Neo4jClient") as mock_client_cls, \
                patch("newsgraph.session.AvatarCache") as mock_avatars_cls:
            mock_client_cls.return_value = mock_db
            mock_avatars_cls.return_value = avatar_cache
            app = create_app()

            with TestClient(app) as client:
                assert client.get("/health").json()["nodes"] == 3

        mock_db.connect.assert_awaited_once()
        mock_db.close.assert_awaited_once()

    def test_starts_when_neo4j_unreachable(self) -> None:
        """Test the API still starts, with an empty graph, if Neo4j is down."""
        with patch.object(Neo4jClient, "connect", AsyncMock(side_effect=ServiceUnavailable("down"))):
            with TestClient(create_app()) as client:
                response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["nodes"] == 0
        assert response.json()["graph_version"] == 0

    def test_shutdown_closes_db_after_expansion_error(self, mock_db, avatar_cache) -> None:
        """Test the Neo4j client is closed even if an expansion crashed."""
        mock_db.articles_by_tag = AsyncMock(side_effect=RuntimeError("driver blew up"))
        with patch("newsgraph.api.main.Neo4jClient") as mock_client_cls, \
                patch("newsgraph.session.AvatarCache") as mock_avatars_cls:
            mock_client_cls.return_value = mock_db
            mock_avatars_cls.return_value = avatar_cache
            app = create_app()

            with TestClient(app) as client:
                client.get("/graph/frame.png")
                session = app.state.session
                response = client.post("/graph/click", json=footprint_pixel(session, "Tag:go"))
                assert response.json()["action"] == "expand"

        mock_db.close.assert_awaited_once()
        assert len(session.graph.nodes) == 3

    def test_health_without_session(self) -> None:
        """Test endpoints answer 503 before a session exists."""
        app = create_app()
        client = TestClient(app)
        response = client.get("/health")
        assert response.status_code == 503

    def test_graph_data(self, session) -> None:
        """Test the graph is served with node positions."""
        with TestClient(create_app(session)) as client:
            data = client.get("/graph/data").json()

        assert data["version"] == 1
        ids = {node["id"] for node in data["nodes"]}
        assert ids == {"Article:a1", "User:u1", "Tag:go"}
        assert all("x" in node and "y" in node for node in data["nodes"])
        assert {"source": "User:u1", "target": "Article:a1"} in data["links"]

    def test_frame_png(self, session) -> None:
        """Test a frame renders as PNG with the viewport applied."""
        with TestClient(create_app(session)) as client:
            response = client.get("/graph/frame.png", params={"zoom": 2, "width": 320, "height": 200})

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.headers["x-graph-version"] == "1"
        assert response.content.startswith(b"\x89PNG")
        assert (session.viewport.zoom, session.viewport.width) == (2.0, 320)

    def test_frame_rejects_bad_zoom(self, session) -> None:
        """Test a non-positive zoom is a validation error."""
        with TestClient(create_app(session)) as client:
            response = client.get("/graph/frame.png", params={"zoom": 0})
        assert response.status_code == 422

    def test_click_empty_space(self, session) -> None:
        """Test clicking background resolves to nothing."""
        with TestClient(create_app(session)) as client:
            client.get("/graph/frame.png")
            response = client.post("/graph/click", json={"x": 1, "y": 1})

        assert response.json() == {"action": "none", "node": None, "tag": None, "url": None}

    def test_click_article_opens_url(self, session) -> None:
        """Test clicking an article hands its URL back to the browser."""
        with TestClient(create_app(session)) as client:
            client.get("/graph/frame.png")
            response = client.post("/graph/click", json=footprint_pixel(session, "Article:a1"))

        data = response.json()
        assert data["action"] == "open"
        assert data["node"] == "Article:a1"
        assert data["url"] == "http://x"

    def test_click_tag_expands(self, session, mock_db) -> None:
        """Test clicking a tag starts ExpansionQuery and merges on completion."""
        with TestClient(create_app(session)) as client:
            client.get("/graph/frame.png")
            response = client.post("/graph/click", json=footprint_pixel(session, "Tag:go"))
            assert response.json()["action"] == "expand"
            assert response.json()["tag"] == "go"

        # Shutdown drains pending expansions
        mock_db.articles_by_tag.assert_awaited_once_with("go", limit=10)
        assert len(session.graph.nodes) == 4
        assert len(session.graph.links) == 4

    def test_hover_shows_natural_id(self, session) -> None:
        """Test hovering a node returns its id as the tooltip."""
        with TestClient(create_app(session)) as client:
            client.get("/graph/frame.png")
            on_tag = client.get("/graph/hover", params=footprint_pixel(session, "Tag:go"))
            on_user = client.get("/graph/hover", params=footprint_pixel(session, "User:u1"))
            on_nothing = client.get("/graph/hover", params={"x": 1, "y": 1})

        assert on_tag.json() == {"node": "Tag:go", "label": "go"}
        assert on_user.json() == {"node": "User:u1", "label": "u1"}
        assert on_nothing.json() == {"node": None, "label": None}

    def test_expand(self, session) -> None:
        """Test explicit expansion waits for the merge."""
        with TestClient(create_app(session)) as client:
            response = client.post("/graph/expand", json={"tag": "go"})

        data = response.json()
        assert data["tag"] == "go"
        assert data["fragment_nodes"] == 3
        assert data["graph_version"] == 2
        assert data["nodes"] == 4
        assert data["links"] == 4

    def test_expand_empty_tag(self, session) -> None:
        """Test an empty tag is rejected."""
        with TestClient(create_app(session)) as client:
            response = client.post("/graph/expand", json={"tag": ""})
        assert response.status_code == 422

    def test_index_and_favicon(self, session) -> None:
        """Test the page and favicon are served."""
        with TestClient(create_app(session)) as client:
            page = client.get("/")
            icon = client.get("/favicon.ico")

        assert page.status_code == 200
        assert "/graph/frame.png" in page.text
        assert icon.headers["content-type"].startswith("image/svg+xml")
