"""Unit tests for click routing and tag expansion."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from newsgraph.interaction import (
    ExpandByTag,
    ExpansionController,
    InteractionController,
    NoAction,
    OpenExternal,
    action_for,
)
from newsgraph.models import Node, NodeKind
from newsgraph.state import GraphState
from newsgraph.storage.neo4j_client import QueryFailure


def center_pixel(session, key: str) -> tuple[int, int]:
    frame = session.last_frame
    sx, sy = frame.viewport.to_screen(*frame.footprints[key].center)
    return int(sx), int(sy)


class TestActionFor:
    """Tests for mapping clicked nodes to actions."""

    def test_tag_expands(self) -> None:
        """Test clicking a tag asks for an expansion by its name."""
        assert action_for(Node("go", NodeKind.TAG)) == ExpandByTag(tag_name="go")

    def test_article_opens(self) -> None:
        """Test clicking an article opens its URL."""
        node = Node("a1", NodeKind.ARTICLE, url="http://x")
        assert action_for(node) == OpenExternal(url="http://x")

    def test_article_without_url_is_inert(self) -> None:
        """Test an article without URL does nothing."""
        assert action_for(Node("a1", NodeKind.ARTICLE)) == NoAction()

    def test_submitter_is_inert(self) -> None:
        """Test clicking a submitter does nothing."""
        assert action_for(Node("u1", NodeKind.SUBMITTER)) == NoAction()

    def test_empty_space_is_inert(self) -> None:
        """Test clicking no node does nothing."""
        assert action_for(None) == NoAction()

    def test_unknown_kind_rejected(self) -> None:
        """Test an unknown kind raises."""
        node = MagicMock(spec=Node)
        node.kind = "Comment"
        with pytest.raises(ValueError):
            action_for(node)

    def test_action_payloads(self) -> None:
        """Test actions serialize for the HTTP layer."""
        assert ExpandByTag("go").to_dict() == {"action": "expand", "tag": "go"}
        assert OpenExternal("http://x").to_dict() == {"action": "open", "url": "http://x"}
        assert NoAction().to_dict() == {"action": "none"}


class TestInteractionController:
    """Tests for resolving clicks through the last frame."""

    @pytest.mark.asyncio
    async def test_click_on_tag_starts_expansion(self, session, mock_db) -> None:
        """Test clicking the tag node issues ExpansionQuery for it."""
        await session.load_initial()
        session.render()

        action = session.click(*center_pixel(session, "Tag:go"))
        assert action == ExpandByTag(tag_name="go")
        assert session.expansion.pending == 1

        await session.expansion.drain()
        mock_db.articles_by_tag.assert_awaited_once_with("go", limit=10)
        assert len(session.graph.nodes) == 4
        assert len(session.graph.links) == 4

    @pytest.mark.asyncio
    async def test_click_on_article_opens_url(self, session) -> None:
        """Test clicking an article returns its URL to open."""
        await session.load_initial()
        session.render()

        action = session.click(*center_pixel(session, "Article:a1"))
        assert action == OpenExternal(url="http://x")
        assert session.expansion.pending == 0

    @pytest.mark.asyncio
    async def test_click_on_submitter_does_nothing(self, session) -> None:
        """Test clicking the avatar glyph is inert."""
        await session.load_initial()
        session.render()

        assert session.interaction.resolve(*center_pixel(session, "User:u1")).key == "User:u1"
        assert session.click(*center_pixel(session, "User:u1")) == NoAction()

    @pytest.mark.asyncio
    async def test_click_on_empty_canvas(self, session) -> None:
        """Test clicking background does nothing."""
        await session.load_initial()
        session.render()

        assert session.click(1, 1) == NoAction()
        assert session.expansion.pending == 0

    def test_click_before_any_frame(self) -> None:
        """Test clicks before the first frame resolve to nothing."""
        expansion = MagicMock(spec=ExpansionController)
        pick_buffer = MagicMock()
        pick_buffer.resolve.return_value = None
        controller = InteractionController(GraphState(), pick_buffer, expansion)

        assert controller.click(10, 10) == NoAction()
        expansion.request.assert_not_called()

    def test_dispatch_open_external_has_no_side_effect(self) -> None:
        """Test OpenExternal is handed back without starting anything."""
        expansion = MagicMock(spec=ExpansionController)
        controller = InteractionController(GraphState(), MagicMock(), expansion)

        action = OpenExternal("http://x")
        assert controller.dispatch(action) is action
        expansion.request.assert_not_called()


class TestExpansionController:
    """Tests for ExpansionController."""

    @pytest.fixture
    def state(self, initial_response) -> GraphState:
        from newsgraph.graph.normalizer import normalize

        state = GraphState()
        state.apply(normalize(initial_response))
        return state

    @pytest.mark.asyncio
    async def test_expand_merges_fragment(self, mock_db, state) -> None:
        """Test an expansion adds the new article and dedupes the submitter."""
        controller = ExpansionController(mock_db, state, limit=10)

        fragment = await controller.expand("go")

        mock_db.articles_by_tag.assert_awaited_once_with("go", limit=10)
        assert len(fragment.nodes) == 3
        assert set(state.graph.nodes) == {"Article:a1", "Article:a2", "User:u1", "Tag:go"}
        assert len(state.graph.links) == 4

    @pytest.mark.asyncio
    async def test_duplicate_in_flight_requests_not_coalesced(self, mock_db, state) -> None:
        """Test two clicks on one tag query twice and duplicate links only."""
        controller = ExpansionController(mock_db, state)

        controller.request("go")
        controller.request("go")
        assert controller.pending == 2
        await controller.drain()

        assert mock_db.articles_by_tag.await_count == 2
        assert len(state.graph.nodes) == 4
        assert len(state.graph.links) == 6
        assert controller.pending == 0

    @pytest.mark.asyncio
    async def test_failed_query_leaves_graph_unchanged(self, mock_db, state) -> None:
        """Test a QueryFailure merges nothing."""
        mock_db.articles_by_tag = AsyncMock(side_effect=QueryFailure("down"))
        controller = ExpansionController(mock_db, state)
        before = state.graph

        fragment = await controller.expand("go")

        assert fragment.is_empty()
        assert state.graph is before

    @pytest.mark.asyncio
    async def test_empty_answer_leaves_graph_unchanged(self, mock_db, state) -> None:
        """Test a response with no articles does not bump the version."""
        mock_db.articles_by_tag = AsyncMock(return_value={})
        controller = ExpansionController(mock_db, state)
        version = state.graph.version

        await controller.expand("nothing")

        assert state.graph.version == version

    @pytest.mark.asyncio
    async def test_completions_merge_in_completion_order(self, mock_db, state, article) -> None:
        """Test each completion merges on its own, whichever finishes first."""
        release_slow = asyncio.Event()

        async def answer(tag: str, limit: int) -> dict:
            if tag == "slow":
                await release_slow.wait()
                return {"articles": [article("s1", username="u9", tags=["slow"])]}
            return {"articles": [article("f1", username="u8", tags=["fast"])]}

        mock_db.articles_by_tag = AsyncMock(side_effect=answer)
        controller = ExpansionController(mock_db, state)

        slow = controller.request("slow")
        fast = controller.request("fast")
        await fast
        assert "Article:f1" in state.graph.nodes
        assert "Article:s1" not in state.graph.nodes

        release_slow.set()
        await slow
        assert "Article:s1" in state.graph.nodes
        for link in state.graph.links:
            assert link.source in state.graph.nodes
            assert link.target in state.graph.nodes

    @pytest.mark.asyncio
    async def test_drain_tolerates_unexpected_errors(self, mock_db, state, caplog) -> None:
        """Test a crashed expansion is logged and merges nothing."""
        mock_db.articles_by_tag = AsyncMock(side_effect=RuntimeError("driver blew up"))
        controller = ExpansionController(mock_db, state)
        before = state.graph

        controller.request("go")
        fragments = await controller.drain()

        assert len(fragments) == 1
        assert fragments[0].is_empty()
        assert state.graph is before
        assert "driver blew up" in caplog.text
