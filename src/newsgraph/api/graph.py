"""Graph visualization endpoints.

The server owns the session: it renders frames as PNG, keeps the pick
buffer of the last frame, and resolves clicks sent back in device pixels.
"""

import logging

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, Response
from pydantic import BaseModel, Field

from newsgraph.api.graph_template import GRAPH_HTML
from newsgraph.interaction import action_for
from newsgraph.session import GraphSession

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Models
# ============================================================================


class HealthResponse(BaseModel):
    """Session health and graph size."""

    status: str
    version: str = "0.1.0"
    graph_version: int = 0
    nodes: int = 0
    links: int = 0
    pending_expansions: int = 0


class ClickRequest(BaseModel):
    """Pointer position in device pixels of the last frame."""

    x: float
    y: float


class ClickResponse(BaseModel):
    """What the click resolved to."""

    action: str
    node: str | None = None
    tag: str | None = None
    url: str | None = None


class HoverResponse(BaseModel):
    """Tooltip for the node under the pointer."""

    node: str | None = None
    label: str | None = None


class ExpandRequest(BaseModel):
    """Explicit tag expansion."""

    tag: str = Field(min_length=1)


class ExpandResponse(BaseModel):
    """Result of one completed expansion."""

    tag: str
    fragment_nodes: int
    fragment_links: int
    graph_version: int
    nodes: int
    links: int


# ============================================================================
# Helpers
# ============================================================================

# SVG favicon: an article, a user and a tag
FAVICON_SVG = """<svg xmlns='http://www.w3.org/2000/svg' viewBox='0 0 100 100'>
<line x1='50' y1='30' x2='25' y2='72' stroke='#999' stroke-width='4'/>
<line x1='50' y1='30' x2='75' y2='72' stroke='#999' stroke-width='4'/>
<rect x='28' y='20' width='44' height='20' fill='#fff' stroke='#222' stroke-width='4'/>
<rect x='13' y='62' width='24' height='20' fill='#5b8def'/>
<rect x='60' y='64' width='30' height='16' fill='#fff' stroke='red' stroke-width='4'/>
</svg>"""


def get_session(request: Request) -> GraphSession:
    """Get the graph session from app state."""
    session = request.app.state.session
    if session is None:
        raise HTTPException(status_code=503, detail="Session not initialized")
    return session


# ============================================================================
# Endpoints
# ============================================================================


@router.get("/favicon.ico")
async def favicon() -> Response:
    """Return SVG favicon."""
    return Response(content=FAVICON_SVG, media_type="image/svg+xml")


@router.get("/", response_class=HTMLResponse)
async def graph_view() -> str:
    """Serve the graph page."""
    return GRAPH_HTML


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    """Graph size and in-flight expansions."""
    session = get_session(request)
    graph = session.graph
    return HealthResponse(
        status="healthy",
        graph_version=graph.version,
        nodes=len(graph.nodes),
        links=len(graph.links),
        pending_expansions=session.expansion.pending,
    )


@router.get("/graph/data")
async def get_graph_data(request: Request) -> dict:
    """Current graph with node positions."""
    session = get_session(request)
    data = session.graph.to_dict()
    for node in data["nodes"]:
        position = session.state.layout.position(node["id"])
        if position is not None:
            node["x"], node["y"] = position
    return data


@router.get("/graph/frame.png")
async def get_frame(
    request: Request,
    zoom: float | None = Query(default=None, gt=0),
    cx: float | None = None,
    cy: float | None = None,
    width: int | None = Query(default=None, gt=0, le=8192),
    height: int | None = Query(default=None, gt=0, le=8192),
) -> Response:
    """Render one frame, optionally moving the viewport first.

    The pick buffer built here is what the next click is resolved against.
    """
    session = get_session(request)
    changes = {
        name: value
        for name, value in (
            ("zoom", zoom),
            ("center_x", cx),
            ("center_y", cy),
            ("width", width),
            ("height", height),
        )
        if value is not None
    }
    if changes:
        session.set_viewport(**changes)

    frame = session.render()
    return Response(
        content=frame.to_png(),
        media_type="image/png",
        headers={"Cache-Control": "no-store", "X-Graph-Version": str(frame.graph_version)},
    )


@router.post("/graph/click", response_model=ClickResponse)
async def click(request: Request, body: ClickRequest) -> ClickResponse:
    """Resolve a click on the last frame; tag clicks start an expansion."""
    session = get_session(request)
    node = session.interaction.resolve(body.x, body.y)
    action = session.interaction.dispatch(action_for(node))
    return ClickResponse(node=node.key if node else None, **action.to_dict())


@router.get("/graph/hover", response_model=HoverResponse)
async def hover(request: Request, x: float, y: float) -> HoverResponse:
    """Tooltip for device pixel (x, y) of the last frame.

    The tooltip is the node's natural id: article id, username or tag name.
    """
    session = get_session(request)
    node = session.interaction.resolve(x, y)
    if node is None:
        return HoverResponse()
    return HoverResponse(node=node.key, label=node.natural_id)


@router.post("/graph/expand", response_model=ExpandResponse)
async def expand(request: Request, body: ExpandRequest) -> ExpandResponse:
    """Expand a tag and wait for the merge."""
    session = get_session(request)
    fragment = await session.expansion.expand(body.tag)
    graph = session.graph
    return ExpandResponse(
        tag=body.tag,
        fragment_nodes=len(fragment.nodes),
        fragment_links=len(fragment.links),
        graph_version=graph.version,
        nodes=len(graph.nodes),
        links=len(graph.links),
    )
