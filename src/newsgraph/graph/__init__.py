"""Graph model building: normalization, merging and placement."""

from newsgraph.graph.layout import Layout
from newsgraph.graph.merger import merge, new_keys
from newsgraph.graph.normalizer import MalformedRecord, normalize

__all__ = [
    "Layout",
    "MalformedRecord",
    "merge",
    "new_keys",
    "normalize",
]
