# clients/crunchbase_client.py
"""
Crunchbase API client.

Fetches organizations, people, and founder relationships from the Crunchbase
v4 API. A user key is required.
"""
from typing import Any, Dict, List, Optional

from startup_graph.clients.base_client import BaseSourceClient
from startup_graph.config.logs import get_logger

logger = get_logger(__name__)


def _items(payload: Any) -> List[Dict[str, Any]]:
    return ((payload or {}).get("data") or {}).get("items") or []


class CrunchbaseClient(BaseSourceClient):
    """Client for the Crunchbase v4 API."""

    source_name = "crunchbase"

    def __init__(self, source_settings, **kwargs):
        if not source_settings.api_key:
            logger.error("No Crunchbase key found. Please set CRUNCHBASE_API_KEY in your .env file.")
            raise ValueError("CRUNCHBASE_API_KEY is required")
        super().__init__(source_settings, **kwargs)

    def _build_headers(self) -> Dict[str, str]:
        return {
            "X-cb-user-key": self.settings.api_key,
            "Content-Type": "application/json",
        }

    async def fetch_organizations(
        self,
        categories: Optional[List[str]] = None,
        limit: int = 100
    ) -> List[Dict[str, Any]]:
        """
        Fetch organizations (startups).

        Args:
            categories: Optional category filter
            limit: Maximum number of organizations

        Returns:
            Organization items with ``uuid`` and ``properties``
        """
        params = {"limit": str(limit)}
        if categories:
            params["categories"] = ",".join(categories)

        items = _items(await self.request("/searches/organizations", params=params, expect=dict))
        logger.info(f"Crunchbase returned {len(items)} organizations")
        return items

    async def fetch_people(self, limit: int = 100) -> List[Dict[str, Any]]:
        """Fetch people."""
        items = _items(await self.request("/searches/people", params={"limit": str(limit)}, expect=dict))
        logger.info(f"Crunchbase returned {len(items)} people")
        return items

    async def fetch_founder_relationships(self, organization_id: str) -> List[Dict[str, Any]]:
        """Fetch founder relationships for an organization."""
        return _items(await self.request(
            f"/entities/organizations/{organization_id}/cards/founder_identifiers",
            expect=dict,
        ))
