"""Graph merging - union of a fragment into the versioned graph.

Nodes are deduplicated by key with first-write-wins; links are appended
as-is. Re-merging the same fragment therefore keeps the node set stable but
duplicates its links, and that asymmetry is intentional.
"""

import logging

from newsgraph.models import Fragment, Graph

logger = logging.getLogger(__name__)


def merge(graph: Graph, fragment: Fragment) -> Graph:
    """
    Merge a fragment into a graph.

    Args:
        graph: Current graph value (left untouched)
        fragment: Normalized nodes and links to add

    Returns:
        New graph with version + 1

    Raises:
        ValueError: If a fragment link points at a key that is neither in the
            graph nor in the fragment. Nothing is applied in that case.
    """
    nodes = dict(graph.nodes)
    added = 0
    for node in fragment.nodes:
        if node.key not in nodes:
            nodes[node.key] = node
            added += 1

    for link in fragment.links:
        if link.source not in nodes or link.target not in nodes:
            raise ValueError(
                f"Link {link.source} -> {link.target} references a node missing from the merge"
            )

    merged = Graph(
        nodes=nodes,
        links=graph.links + tuple(fragment.links),
        version=graph.version + 1,
    )
    logger.debug(
        f"Merged fragment into v{graph.version}: +{added} nodes, "
        f"+{len(fragment.links)} links -> v{merged.version}"
    )
    return merged


def new_keys(before: Graph, after: Graph) -> list[str]:
    """Keys present in ``after`` but not in ``before``, in insertion order."""
    return [key for key in after.nodes if key not in before.nodes]
