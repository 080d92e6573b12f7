"""Result normalization - nested article query results to graph fragments.

One response looks like::

    {"articles": [
        {"__typename": "Article", "id": "a1", "title": "...", "url": "...",
         "created": "...",
         "user": {"__typename": "User", "username": "u1", "avatar": "/a.png"},
         "tags": [{"__typename": "Tag", "name": "go"}]},
    ]}

Every article yields an Article node, a Submitter node, one Tag node per tag,
a submitter -> article link and an article -> tag link per tag. Malformed
records are dropped one at a time; the rest of the batch survives.
"""

import logging
from collections.abc import Mapping
from typing import Any

from newsgraph.models import Fragment, Link, Node, NodeKind, parse_datetime

logger = logging.getLogger(__name__)


class MalformedRecord(ValueError):
    """An article record that cannot be turned into nodes."""


def _require_str(record: Mapping, field: str) -> str:
    value = record.get(field)
    if value is None or value == "":
        raise MalformedRecord(f"missing '{field}'")
    if not isinstance(value, (str, int)):
        raise MalformedRecord(f"'{field}' has unexpected type {type(value).__name__}")
    return str(value)


def _check_kind(record: Mapping, expected: NodeKind) -> None:
    typename = record.get("__typename")
    if typename is None:
        return
    try:
        kind = NodeKind(typename)
    except ValueError as e:
        raise MalformedRecord(f"unknown type '{typename}'") from e
    if kind is not expected:
        raise MalformedRecord(f"expected {expected.value}, got {kind.value}")


def _normalize_article(record: Any) -> tuple[list[Node], list[Link]]:
    """Build the nodes and links of a single article record.

    All-or-nothing: raises MalformedRecord if any part is unusable.
    """
    if not isinstance(record, Mapping):
        raise MalformedRecord(f"article is a {type(record).__name__}, not a mapping")
    _check_kind(record, NodeKind.ARTICLE)

    try:
        created = parse_datetime(record.get("created"))
    except (TypeError, ValueError):
        created = None

    article = Node(
        natural_id=_require_str(record, "id"),
        kind=NodeKind.ARTICLE,
        title=record.get("title"),
        url=record.get("url"),
        created=created,
    )

    user = record.get("user")
    if not isinstance(user, Mapping):
        raise MalformedRecord("missing submitter")
    _check_kind(user, NodeKind.SUBMITTER)
    submitter = Node(
        natural_id=_require_str(user, "username"),
        kind=NodeKind.SUBMITTER,
        avatar_url=user.get("avatar"),
    )

    raw_tags = record.get("tags") or []
    if not isinstance(raw_tags, list):
        raise MalformedRecord("'tags' is not a list")

    tags: list[Node] = []
    for raw_tag in raw_tags:
        if not isinstance(raw_tag, Mapping):
            raise MalformedRecord("tag is not a mapping")
        _check_kind(raw_tag, NodeKind.TAG)
        tags.append(Node(natural_id=_require_str(raw_tag, "name"), kind=NodeKind.TAG))

    nodes = [article, *tags, submitter]
    links = [Link(source=submitter.key, target=article.key)]
    links.extend(Link(source=article.key, target=tag.key) for tag in tags)
    return nodes, links


def normalize(response: Any) -> Fragment:
    """
    Flatten one query response into a fragment.

    Args:
        response: Mapping with an ``articles`` list (may be None or missing)

    Returns:
        Fragment with nodes unique by key (first occurrence wins) and links
        in production order. Empty if there are no usable articles.
    """
    if not isinstance(response, Mapping):
        logger.warning(f"Query response is a {type(response).__name__}, expected a mapping")
        return Fragment.empty()

    articles = response.get("articles")
    if not articles:
        return Fragment.empty()
    if not isinstance(articles, list):
        logger.warning("Query response 'articles' is not a list, dropping batch")
        return Fragment.empty()

    nodes: dict[str, Node] = {}
    links: list[Link] = []
    dropped = 0

    for index, record in enumerate(articles):
        try:
            record_nodes, record_links = _normalize_article(record)
        except MalformedRecord as e:
            dropped += 1
            logger.warning(f"Dropping article record #{index}: {e}")
            continue

        for node in record_nodes:
            nodes.setdefault(node.key, node)
        links.extend(record_links)

    if dropped:
        logger.info(f"Normalized {len(articles) - dropped}/{len(articles)} article records")

    return Fragment(nodes=tuple(nodes.values()), links=tuple(links))
