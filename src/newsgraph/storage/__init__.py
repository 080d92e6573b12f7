"""Storage layer for newsgraph."""

from newsgraph.storage.neo4j_client import Neo4jClient, QueryFailure
from newsgraph.storage.schema import get_all_schema_queries

__all__ = [
    "Neo4jClient",
    "QueryFailure",
    "get_all_schema_queries",
]
