# services/graph_service.py
"""
Graph service.

The inbound interface of the pipeline: callers ask for the graph, force a
refresh, inspect pipeline state, and query nodes. ``build_graph_service``
wires the cache, clients, source steps and orchestrator from settings.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from startup_graph.clients.base_client import BaseSourceClient, RateLimiter
from startup_graph.clients.crunchbase_client import CrunchbaseClient
from startup_graph.clients.github_client import GitHubClient
from startup_graph.config.cache import DataCache
from startup_graph.config.config import Settings
from startup_graph.config.logs import get_logger
from startup_graph.exceptions import SourceDisabledError
from startup_graph.graph.query import filter_graph, find_node_by_id, get_neighbors
from startup_graph.schemas import FilterCriteria, GraphModel, GraphNode
from startup_graph.services.orchestrator import FetchOrchestrator
from startup_graph.services.sources import CrunchbaseSource, GitHubSource, SeedSource

logger = get_logger(__name__)


class GraphService:
    """Serves the assembled graph and pipeline state."""

    def __init__(
        self,
        orchestrator: FetchOrchestrator,
        cache: DataCache,
        settings: Settings,
        clients: Optional[List[BaseSourceClient]] = None
    ):
        self.orchestrator = orchestrator
        self.cache = cache
        self.settings = settings
        self.clients = clients or []

    async def aclose(self) -> None:
        """Close every HTTP client owned by the service."""
        for client in self.clients:
            await client.aclose()

    async def get_graph(self) -> GraphModel:
        """Get the graph, from cache when fresh."""
        return await self.orchestrator.load_graph()

    async def refresh_graph(self) -> GraphModel:
        """
        Drop the cached dataset and rerun the fallback chain.

        Raises:
            SourceDisabledError: If no network source is enabled
        """
        if not (self.settings.GITHUB_ENABLED or self.settings.CRUNCHBASE_ENABLED):
            raise SourceDisabledError(
                "No network data source is enabled. "
                "Set GITHUB_ENABLED=true or CRUNCHBASE_ENABLED=true to refresh."
            )

        logger.info("Refreshing graph data")
        self.cache.invalidate(self.settings.GRAPH_CACHE_KEY)
        return await self.get_graph()

    def get_stats(self) -> Dict[str, Any]:
        """Report the active source, cache state and per-source configuration."""
        key = self.settings.GRAPH_CACHE_KEY
        cache_stats = self.cache.get_stats()
        timestamp = self.cache.get_timestamp(key)
        expired = self.cache.is_expired(key)

        return {
            "active_source": self.orchestrator.active_source,
            "github_enabled": self.settings.GITHUB_ENABLED,
            "crunchbase_enabled": self.settings.CRUNCHBASE_ENABLED,
            "cache_state": {
                "size": cache_stats["size"],
                "keys": cache_stats["keys"],
                "is_cached": not expired,
                "is_expired": expired,
                "timestamp": (
                    datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()
                    if timestamp is not None else None
                ),
            },
            "config": {
                "github": {
                    "fallback_to_seed": self.settings.GITHUB_FALLBACK_TO_SEED,
                    "cache_ttl": self.settings.GITHUB_CACHE_TTL,
                },
                "crunchbase": {
                    "fallback_to_seed": self.settings.CRUNCHBASE_FALLBACK_TO_SEED,
                    "cache_ttl": self.settings.CRUNCHBASE_CACHE_TTL,
                },
                "seed_fallback_enabled": self.settings.SEED_FALLBACK_ENABLED,
            },
        }

    async def find_node(self, node_id: str) -> Optional[GraphNode]:
        """Find a node by ID in the current graph."""
        graph = await self.get_graph()
        return find_node_by_id(graph.nodes, node_id)

    async def neighbors(self, node_id: str) -> List[GraphNode]:
        """Nodes one edge away from ``node_id``."""
        graph = await self.get_graph()
        return get_neighbors(node_id, graph.nodes, graph.edges)

    async def filter(self, criteria: FilterCriteria) -> GraphModel:
        """The current graph filtered by ``criteria``."""
        return filter_graph(await self.get_graph(), criteria)


def build_graph_service(
    settings: Settings,
    cache: Optional[DataCache] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> GraphService:
    """
    Wire a GraphService from settings.

    Clients are only created for enabled sources. Each source gets one rate
    limiter shared by all of its requests.

    Args:
        settings: Application settings
        cache: Dataset cache (a new one is created if omitted)
        transport: Optional httpx transport for every client, used by tests
    """
    cache = cache or DataCache()
    clients: List[BaseSourceClient] = []

    github_client = None
    if settings.GITHUB_ENABLED:
        github_client = GitHubClient(
            settings.github,
            rate_limiter=RateLimiter(settings.GITHUB_RATE_LIMIT_DELAY),
            timeout=settings.HTTP_TIMEOUT,
            transport=transport,
        )
        clients.append(github_client)

    crunchbase_client = None
    if settings.CRUNCHBASE_ENABLED:
        try:
            crunchbase_client = CrunchbaseClient(
                settings.crunchbase,
                rate_limiter=RateLimiter(settings.CRUNCHBASE_RATE_LIMIT_DELAY),
                timeout=settings.HTTP_TIMEOUT,
                transport=transport,
            )
            clients.append(crunchbase_client)
        except ValueError as e:
            # The step reports the missing client on every load and falls through
            logger.error(f"Crunchbase is enabled but unusable: {e}")

    steps = [
        GitHubSource(github_client, settings),
        CrunchbaseSource(crunchbase_client, settings),
        SeedSource(settings.SEED_DATA_PATH, enabled=settings.SEED_FALLBACK_ENABLED),
    ]
    orchestrator = FetchOrchestrator(cache, steps, settings.GRAPH_CACHE_KEY)

    enabled = [step.name for step in steps if step.enabled]
    logger.info(f"Graph service ready with sources: {', '.join(enabled) or 'none'}")

    return GraphService(orchestrator, cache, settings, clients)
