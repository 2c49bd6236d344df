# clients/github_client.py
"""
GitHub API client.

Fetches organizations, repositories, contributors and users from the GitHub
REST API. Works anonymously when no token is configured, at a lower rate limit.
"""
from typing import Any, Dict, List

from startup_graph.clients.base_client import BaseSourceClient
from startup_graph.config.logs import get_logger

logger = get_logger(__name__)


class GitHubClient(BaseSourceClient):
    """Client for the GitHub REST API."""

    source_name = "github"

    def _build_headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "Startup-Ecosystem-Graph",
        }
        if self.settings.api_key:
            headers["Authorization"] = f"token {self.settings.api_key}"
        else:
            logger.info("No GitHub token configured, using anonymous access")
        return headers

    async def fetch_organizations(self, query: str, limit: int = 30) -> List[Dict[str, Any]]:
        """
        Search for organizations.

        Args:
            query: Free-text search query
            limit: Maximum number of organizations (capped at 100)

        Returns:
            Search result items (login and a few summary fields)
        """
        logger.info(f"Searching GitHub organizations: {query}")
        data = await self.request(
            "/search/users",
            params={
                "q": f"{query} type:org",
                "per_page": min(limit, 100),
                "sort": "joined",
                "order": "desc",
            },
            expect=dict,
        )
        items = (data or {}).get("items") or []
        logger.info(f"GitHub search '{query}' returned {len(items)} organizations")
        return items

    async def fetch_organization(self, login: str) -> Dict[str, Any]:
        """Fetch full details for one organization."""
        return await self.request(f"/orgs/{login}", expect=dict) or {}

    async def fetch_organization_repos(self, login: str) -> List[Dict[str, Any]]:
        """Fetch repositories for an organization."""
        data = await self.request(
            f"/orgs/{login}/repos",
            params={"type": "all", "sort": "updated", "per_page": 100},
            expect=list,
        )
        return data or []

    async def fetch_repo_contributors(self, owner: str, repo: str, limit: int = 30) -> List[Dict[str, Any]]:
        """Fetch contributors for a repository. Empty repositories answer 204."""
        data = await self.request(
            f"/repos/{owner}/{repo}/contributors",
            params={"per_page": min(limit, 100)},
            expect=list,
        )
        return data or []

    async def fetch_user(self, login: str) -> Dict[str, Any]:
        """Fetch user details."""
        return await self.request(f"/users/{login}", expect=dict) or {}
