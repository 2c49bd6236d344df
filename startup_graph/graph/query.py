# graph/query.py
"""
Graph query utilities.

Neighbor lookup and multi-criterion filtering over an assembled graph. Nothing
here mutates the graph it is given; filtering always builds new node and edge
lists.
"""
from typing import Dict, List, Optional, Sequence, Set

from startup_graph.schemas import FilterCriteria, GraphEdge, GraphModel, GraphNode, NodeKind


def is_organization(node: GraphNode) -> bool:
    """Check if a node is an organization."""
    return node.type == NodeKind.ORGANIZATION


def is_person(node: GraphNode) -> bool:
    """Check if a node is a person."""
    return node.type == NodeKind.PERSON


def find_node_by_id(nodes: Sequence[GraphNode], node_id: str) -> Optional[GraphNode]:
    """Find a node by ID."""
    for node in nodes:
        if node.id == node_id:
            return node
    return None


def get_neighbors(node_id: str, nodes: Sequence[GraphNode], edges: Sequence[GraphEdge]) -> List[GraphNode]:
    """
    Get all nodes one edge away from ``node_id``, in either direction.

    Returns an empty list for unknown or isolated nodes.
    """
    connected: Set[str] = set()
    for edge in edges:
        if edge.source == node_id:
            connected.add(edge.target)
        elif edge.target == node_id:
            connected.add(edge.source)

    return [node for node in nodes if node.id in connected]


def _matches_domain_tags(node: GraphNode, domain_tags: Sequence[str]) -> bool:
    if not is_organization(node):
        return False
    return any(tag in node.data.domain_tags for tag in domain_tags)


def _matches_stages(node: GraphNode, stages: Sequence[str]) -> bool:
    if not is_organization(node):
        return False
    return node.data.stage in stages


def _connected_people(graph: GraphModel, surviving: Set[str]) -> List[GraphNode]:
    """People linked by an original edge to a surviving node, in graph order."""
    by_id: Dict[str, GraphNode] = {node.id: node for node in graph.nodes}
    found: Set[str] = set()

    for edge in graph.edges:
        for here, there in ((edge.source, edge.target), (edge.target, edge.source)):
            if here not in surviving or there in surviving:
                continue
            other = by_id.get(there)
            if other is not None and is_person(other):
                found.add(other.id)

    return [node for node in graph.nodes if node.id in found]


def filter_graph(graph: GraphModel, criteria: FilterCriteria) -> GraphModel:
    """
    Filter a graph by domain tags, stages and a name search term.

    Values within a category are OR-ed, categories are AND-ed. Domain tag and
    stage criteria keep only matching organizations, then add back the people
    directly connected to them so their relationships stay visible. The search
    term matches organization and person names case-insensitively and does not
    add anyone back. Edges survive only when both endpoints do.

    Empty criteria return the input graph unchanged.
    """
    domain_tags = criteria.domain_tags
    stages = criteria.stages
    search_term = (criteria.search_term or "").strip().lower()

    if not domain_tags and not stages and not search_term:
        return graph

    nodes = list(graph.nodes)

    if domain_tags:
        nodes = [node for node in nodes if _matches_domain_tags(node, domain_tags)]

    if stages:
        nodes = [node for node in nodes if _matches_stages(node, stages)]

    if search_term:
        nodes = [node for node in nodes if search_term in node.data.name.lower()]

    if domain_tags or stages:
        nodes.extend(_connected_people(graph, {node.id for node in nodes}))

    node_ids = {node.id for node in nodes}
    edges = [edge for edge in graph.edges if edge.source in node_ids and edge.target in node_ids]

    return GraphModel(nodes=nodes, edges=edges)
