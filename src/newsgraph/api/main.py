"""FastAPI application for newsgraph.

Serves the interactive graph page and the frame/click/expand endpoints
behind it.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from neo4j.exceptions import DriverError, Neo4jError

from newsgraph.api.graph import router as graph_router
from newsgraph.config import settings
from newsgraph.session import GraphSession
from newsgraph.storage.neo4j_client import Neo4jClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifespan - startup and shutdown."""
    # Startup
    logger.info("Starting newsgraph API...")

    if app.state.session is None:
        db = Neo4jClient()
        try:
            await db.connect()
            logger.info("Connected to Neo4j")
        except (Neo4jError, DriverError) as e:
            # Queries reconnect lazily; until then they fail as QueryFailure
            logger.warning(f"Neo4j unavailable at startup, starting with an empty graph: {e}")
        app.state.db = db
        app.state.session = GraphSession(db)

    await app.state.session.load_initial()

    yield

    # Shutdown
    logger.info("Shutting down newsgraph API...")
    try:
        await app.state.session.close()
    finally:
        if app.state.db is not None:
            await app.state.db.close()
            app.state.db = None
            logger.info("Disconnected from Neo4j")


def create_app(session: GraphSession | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        session: Pre-built session (tests); a Neo4j-backed one is created
            on startup otherwise
    """
    app = FastAPI(
        title="newsgraph",
        description="Interactive article, submitter and tag graph",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.session = session
    app.state.db = None

    app.include_router(graph_router)

    return app


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "newsgraph.api.main:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
