"""Neo4j schema setup - constraints, indexes, and graph structure."""

# Schema setup queries
SCHEMA_QUERIES = [
    # Uniqueness constraints
    "CREATE CONSTRAINT article_id IF NOT EXISTS FOR (a:Article) REQUIRE a.id IS UNIQUE",
    "CREATE CONSTRAINT user_username IF NOT EXISTS FOR (u:User) REQUIRE u.username IS UNIQUE",
    "CREATE CONSTRAINT tag_name IF NOT EXISTS FOR (t:Tag) REQUIRE t.name IS UNIQUE",
    # Both fixed queries sort on creation time
    "CREATE INDEX article_created IF NOT EXISTS FOR (a:Article) ON (a.created)",
]

# Relationship types used in the graph:
# (u:User)-[:SUBMITTED]->(a:Article)
# (a:Article)-[:HAS_TAG]->(t:Tag)


def get_all_schema_queries() -> list[str]:
    """Get all schema setup queries in order."""
    return list(SCHEMA_QUERIES)
