"""
HTTP clients for the external data sources.
"""
from startup_graph.clients.base_client import BaseSourceClient, RateLimiter
from startup_graph.clients.github_client import GitHubClient
from startup_graph.clients.crunchbase_client import CrunchbaseClient

__all__ = ["BaseSourceClient", "RateLimiter", "GitHubClient", "CrunchbaseClient"]
