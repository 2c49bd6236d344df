# graph/assembler.py
"""
Graph assembly.

Converts a validated CanonicalDataset into the node/edge GraphModel, checking
id uniqueness and edge endpoints along the way.
"""
from typing import Dict, List

from startup_graph.exceptions import AssemblyError
from startup_graph.schemas import (
    CanonicalDataset,
    EdgeType,
    GraphEdge,
    GraphModel,
    GraphNode,
    NodeKind,
)

EDGE_LABELS = {
    EdgeType.CO_FOUNDED: "Co-founded",
}


def assemble(dataset: CanonicalDataset) -> GraphModel:
    """
    Build the graph for a validated dataset.

    Organizations are inserted first, then people, each in listed order. Edge
    ids are ``edge-<n>`` over the relationship order, so the same input
    always yields the same graph.

    Raises:
        AssemblyError: On the first duplicate id or dangling edge endpoint
    """
    nodes: List[GraphNode] = []
    kinds: Dict[str, NodeKind] = {}

    entities = [(NodeKind.ORGANIZATION, org) for org in dataset.organizations]
    entities += [(NodeKind.PERSON, person) for person in dataset.people]

    for kind, entity in entities:
        if entity.id in kinds:
            raise AssemblyError(f"Duplicate node ID: {entity.id}")
        kinds[entity.id] = kind
        nodes.append(GraphNode(id=entity.id, type=kind, data=entity))

    edges: List[GraphEdge] = []
    for ordinal, relationship in enumerate(dataset.relationships):
        if relationship.source_id not in kinds:
            raise AssemblyError(f"Edge references unknown source node: {relationship.source_id}")
        if relationship.target_id not in kinds:
            raise AssemblyError(f"Edge references unknown target node: {relationship.target_id}")

        edges.append(GraphEdge(
            id=f"edge-{ordinal}",
            source=relationship.source_id,
            target=relationship.target_id,
            type=relationship.type,
            label=EDGE_LABELS.get(relationship.type),
            since_year=relationship.since_year,
        ))

    return GraphModel(nodes=nodes, edges=edges)
