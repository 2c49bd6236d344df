"""
Graph Routes Module

This module handles the graph API endpoints: the full or filtered graph,
node lookup and neighbors, forced refresh, and pipeline statistics.
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from startup_graph.config.logs import get_logger
from startup_graph.schemas import CompanyStage, FilterCriteria, GraphModel, GraphNode
from startup_graph.services.graph_service import GraphService

logger = get_logger(__name__)

router = APIRouter(tags=["Graph"])


def get_graph_service(request: Request) -> GraphService:
    """Graph service built during application startup."""
    return request.app.state.graph_service


@router.get("", response_model=GraphModel)
async def get_graph(
    domain_tags: Optional[List[str]] = Query(None, description="Keep organizations with any of these tags"),
    stages: Optional[List[CompanyStage]] = Query(None, description="Keep organizations in any of these stages"),
    search: Optional[str] = Query(None, description="Case-insensitive name search"),
    service: GraphService = Depends(get_graph_service)
):
    """
    Get the startup ecosystem graph.

    Args:
        domain_tags: Domain tag filter
        stages: Stage filter
        search: Name search term

    Returns:
        The graph, filtered when any criterion is given
    """
    criteria = FilterCriteria(domain_tags=domain_tags or [], stages=stages or [], search_term=search)
    return await service.filter(criteria)


@router.post("/refresh", response_model=GraphModel)
async def refresh_graph(service: GraphService = Depends(get_graph_service)):
    """
    Discard cached data and reload from the network sources.

    Raises:
        SourceDisabledError (400): If no network source is enabled
    """
    return await service.refresh_graph()


@router.get("/stats")
async def get_stats(service: GraphService = Depends(get_graph_service)) -> Dict[str, Any]:
    """Active source, cache state and source configuration."""
    return service.get_stats()


@router.get("/nodes/{node_id}", response_model=GraphNode)
async def get_node(node_id: str, service: GraphService = Depends(get_graph_service)):
    """
    Get one node by ID.

    Raises:
        HTTPException(404): If no node has this ID
    """
    node = await service.find_node(node_id)
    if node is None:
        logger.info(f"Node not found: {node_id}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Node not found: {node_id}")
    return node


@router.get("/nodes/{node_id}/neighbors", response_model=List[GraphNode])
async def get_node_neighbors(node_id: str, service: GraphService = Depends(get_graph_service)):
    """Nodes directly connected to ``node_id``. Unknown IDs have no neighbors."""
    return await service.neighbors(node_id)
