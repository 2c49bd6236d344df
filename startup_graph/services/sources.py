# services/sources.py
"""
Source fetch steps.

Each step pulls one source's data and maps it into a raw canonical dataset
(organizations, people, relationships as plain dicts). Validation, caching
and fallback are the orchestrator's job.

Primary searches must succeed or the whole step fails. Per-organization and
per-repository sub-resources are best effort: a failure is logged and that
record is skipped.
"""
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from startup_graph.clients.crunchbase_client import CrunchbaseClient
from startup_graph.clients.github_client import GitHubClient
from startup_graph.config.config import Settings
from startup_graph.config.logs import get_logger
from startup_graph.exceptions import SourceError, SourceRequestError
from startup_graph.mappers import crunchbase_mapper, github_mapper
from startup_graph.mappers.policy import DEFAULT_STAGE_RULES, FounderPolicy, StageRule
from startup_graph.schemas import EdgeType
from startup_graph.services.seed import load_seed_data

logger = get_logger(__name__)

RawDataset = Dict[str, List[Dict[str, Any]]]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _dataset(organizations, people, relationships) -> RawDataset:
    return {
        "organizations": list(organizations),
        "people": list(people),
        "relationships": list(relationships),
    }


class SourceStep:
    """
    One named step of the fallback chain.

    Attributes:
        name: Source name reported in stats and errors
        enabled: Whether the chain runs this step at all
        fallback_allowed: Whether a failure may fall through to the next step
        ttl: Cache TTL in milliseconds for data this step produces
        terminal: Last-resort step; its failure is always fatal
        cacheable: Whether data from this step is written to the cache
    """

    name = "source"
    terminal = False
    cacheable = True

    def __init__(self, enabled: bool, fallback_allowed: bool = True, ttl: int = 0):
        self.enabled = enabled
        self.fallback_allowed = fallback_allowed
        self.ttl = ttl

    async def fetch(self) -> RawDataset:
        """Fetch and map this source's data."""
        raise NotImplementedError


class GitHubSource(SourceStep):
    """
    GitHub step.

    Searches organizations, then for each one reads its details and
    repositories, the contributors of its most starred repositories, and the
    profile of every contributor found.
    """

    name = "github"

    def __init__(
        self,
        client: Optional[GitHubClient],
        settings: Settings,
        now: Callable[[], datetime] = utc_now,
        stage_rules: Sequence[StageRule] = DEFAULT_STAGE_RULES
    ):
        super().__init__(
            enabled=settings.GITHUB_ENABLED,
            fallback_allowed=settings.GITHUB_FALLBACK_TO_SEED,
            ttl=settings.GITHUB_CACHE_TTL,
        )
        self.client = client
        self.settings = settings
        self.now = now
        self.stage_rules = stage_rules
        self.policy = FounderPolicy(
            min_contributions=settings.GITHUB_FOUNDER_MIN_CONTRIBUTIONS,
            window_days=settings.GITHUB_FOUNDER_WINDOW_DAYS,
        )

    async def _search_organizations(self) -> Dict[str, Dict[str, Any]]:
        found: Dict[str, Dict[str, Any]] = {}
        for query in self.settings.GITHUB_SEARCH_QUERIES:
            items = await self.client.fetch_organizations(query, limit=self.settings.GITHUB_ORG_LIMIT)
            for item in items:
                if item.get("login"):
                    found.setdefault(item["login"], item)
        return found

    async def fetch(self) -> RawDataset:
        if self.client is None:
            raise SourceRequestError("GitHub client is not configured", source=self.name)

        now = self.now()
        logger.info("Fetching data from GitHub")

        found = await self._search_organizations()

        organizations: List[Dict[str, Any]] = []
        contributors: Dict[str, Dict[str, Any]] = {}
        relationships: Dict[Tuple[str, str], Dict[str, Any]] = {}

        for login, item in found.items():
            try:
                details = await self.client.fetch_organization(login)
                repos = await self.client.fetch_organization_repos(login)
            except SourceError as e:
                logger.warning(f"Skipping GitHub organization {login}: {e}")
                continue

            organizations.append(github_mapper.map_organization(
                {**item, **details},
                repos,
                now,
                stage_rules=self.stage_rules,
                tag_limit=self.settings.GITHUB_DOMAIN_TAG_LIMIT,
            ))

            top_repos = sorted(repos, key=lambda r: r.get("stargazers_count") or 0, reverse=True)
            for repo in top_repos[:self.settings.GITHUB_MAX_REPOS_PER_ORG]:
                try:
                    repo_contributors = await self.client.fetch_repo_contributors(
                        login, repo["name"], limit=self.settings.GITHUB_MAX_CONTRIBUTORS_PER_REPO
                    )
                except SourceError as e:
                    logger.warning(f"Skipping contributors of {login}/{repo['name']}: {e}")
                    continue

                for contributor in repo_contributors[:self.settings.GITHUB_MAX_CONTRIBUTORS_PER_REPO]:
                    # Bots and anonymous contributors have no profile
                    if not contributor.get("login") or contributor.get("type", "User") != "User":
                        continue
                    contributors.setdefault(contributor["login"], contributor)
                    _merge_relationship(relationships, github_mapper.map_contributor(
                        contributor, login, repo.get("created_at"), now, self.policy
                    ))

        org_ids = {org["id"] for org in organizations}
        people = []
        for login, contributor in contributors.items():
            if login in org_ids:
                continue
            try:
                user = await self.client.fetch_user(login)
            except SourceError as e:
                logger.warning(f"Using bare contributor record for {login}: {e}")
                user = contributor
            people.append(github_mapper.map_user({**contributor, **user}, _roles(login, relationships)))

        person_ids = {person["id"] for person in people}
        edges = [rel for rel in relationships.values() if rel["source_id"] in person_ids]

        logger.info(
            f"GitHub returned {len(organizations)} organizations, "
            f"{len(people)} people and {len(edges)} relationships"
        )
        return _dataset(organizations, people, edges)


def _merge_relationship(relationships: Dict[Tuple[str, str], Dict[str, Any]], relationship: Dict[str, Any]) -> None:
    """Keep one edge per person/organization pair, preferring co-founded."""
    key = (relationship["source_id"], relationship["target_id"])
    existing = relationships.get(key)
    if existing is None or (
        existing["type"] != EdgeType.CO_FOUNDED.value
        and relationship["type"] == EdgeType.CO_FOUNDED.value
    ):
        relationships[key] = relationship


def _roles(login: str, relationships: Dict[Tuple[str, str], Dict[str, Any]]) -> List[str]:
    founder = any(
        rel["type"] == EdgeType.CO_FOUNDED.value
        for (source_id, _), rel in relationships.items()
        if source_id == login
    )
    return ["Founder"] if founder else ["Contributor"]


class CrunchbaseSource(SourceStep):
    """
    Crunchbase step.

    Searches organizations and people, then reads the founder card of every
    organization. Founders missing from the people search get a minimal
    person record.
    """

    name = "crunchbase"

    def __init__(
        self,
        client: Optional[CrunchbaseClient],
        settings: Settings,
        now: Callable[[], datetime] = utc_now
    ):
        super().__init__(
            enabled=settings.CRUNCHBASE_ENABLED,
            fallback_allowed=settings.CRUNCHBASE_FALLBACK_TO_SEED,
            ttl=settings.CRUNCHBASE_CACHE_TTL,
        )
        self.client = client
        self.settings = settings
        self.now = now

    async def fetch(self) -> RawDataset:
        if self.client is None:
            raise SourceRequestError(
                "Crunchbase client is not configured (CRUNCHBASE_API_KEY missing)",
                source=self.name
            )

        now = self.now()
        logger.info("Fetching data from Crunchbase")

        org_items = await self.client.fetch_organizations(
            categories=self.settings.CRUNCHBASE_CATEGORIES,
            limit=self.settings.CRUNCHBASE_LIMIT,
        )
        people_items = await self.client.fetch_people(limit=self.settings.CRUNCHBASE_LIMIT)

        organizations = [
            crunchbase_mapper.map_organization(org, now)
            for org in org_items if org.get("uuid")
        ]
        people: Dict[str, Dict[str, Any]] = {}
        for item in people_items:
            if item.get("uuid"):
                people.setdefault(item["uuid"], crunchbase_mapper.map_person(item))

        relationships: List[Dict[str, Any]] = []
        for org in organizations:
            try:
                cards = await self.client.fetch_founder_relationships(org["id"])
            except SourceError as e:
                logger.warning(f"Skipping founders of {org['name']}: {e}")
                continue

            for card in cards:
                relationship = crunchbase_mapper.map_founder_relationship(card, org["id"])
                if relationship is None:
                    continue
                if relationship["source_id"] not in people:
                    people[relationship["source_id"]] = crunchbase_mapper.map_founder_person(card)
                relationships.append(relationship)

        logger.info(
            f"Crunchbase returned {len(organizations)} organizations, "
            f"{len(people)} people and {len(relationships)} relationships"
        )
        return _dataset(organizations, people.values(), relationships)


class SeedSource(SourceStep):
    """Terminal step serving the bundled dataset. Never cached."""

    name = "seed"
    terminal = True
    cacheable = False

    def __init__(self, path: Optional[str] = None, enabled: bool = True):
        super().__init__(enabled=enabled, fallback_allowed=False, ttl=0)
        self.path = path

    async def fetch(self) -> RawDataset:
        logger.info("Using bundled seed data")
        return load_seed_data(self.path)
