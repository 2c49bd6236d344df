"""
Graph assembly and querying.
"""
from startup_graph.graph.assembler import assemble
from startup_graph.graph.query import (
    filter_graph,
    find_node_by_id,
    get_neighbors,
    is_organization,
    is_person,
)

__all__ = [
    "assemble",
    "filter_graph",
    "find_node_by_id",
    "get_neighbors",
    "is_organization",
    "is_person",
]
