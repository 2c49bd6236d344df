"""
Unit tests for the GitHub and Crunchbase fetch steps.

Clients are mostly in-memory fakes; one case drives the real GitHub client
over httpx.MockTransport. Mapping output is checked by running it through
the validator.
"""
from datetime import datetime, timezone

import httpx
import pytest

from startup_graph.clients.base_client import RateLimiter
from startup_graph.clients.github_client import GitHubClient
from startup_graph.config.config import Settings
from startup_graph.exceptions import NotFoundError, SourceRequestError, TransientError
from startup_graph.schemas import validate_data
from startup_graph.services.sources import CrunchbaseSource, GitHubSource, SeedSource

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


class FakeGitHubClient:
    """Serves a small organization with one failing sub-resource of each kind."""

    def __init__(self, search_error=None):
        self.search_error = search_error
        self.user_requests = []

    async def fetch_organizations(self, query, limit=30):
        if self.search_error:
            raise self.search_error
        return [{"login": "acme"}, {"login": "broken"}, {"login": "acme"}]

    async def fetch_organization(self, login):
        if login == "broken":
            raise NotFoundError("gone", source="github", status_code=404)
        return {
            "login": "acme",
            "name": "Acme AI",
            "created_at": "2024-01-15T00:00:00Z",
            "location": "San Francisco",
            "description": "Agents for finance teams",
        }

    async def fetch_organization_repos(self, login):
        return [
            {"name": "web", "language": "TypeScript", "stargazers_count": 5, "created_at": "2020-01-01T00:00:00Z"},
            {"name": "core", "language": "Python", "stargazers_count": 50, "created_at": "2024-05-01T00:00:00Z"},
        ]

    async def fetch_repo_contributors(self, owner, repo, limit=30):
        if repo == "web":
            raise TransientError("unavailable", source="github", status_code=503)
        return [
            {"login": "alice", "contributions": 120, "type": "User"},
            {"login": "dependabot[bot]", "contributions": 300, "type": "Bot"},
            {"login": "bob", "contributions": 10, "type": "User"},
        ]

    async def fetch_user(self, login):
        self.user_requests.append(login)
        if login == "bob":
            raise NotFoundError("gone", source="github", status_code=404)
        return {"login": "alice", "name": "Alice", "bio": "Building machine learning systems", "company": "@acme"}


def github_settings(**overrides):
    values = {"_env_file": None, "GITHUB_ENABLED": True, "GITHUB_SEARCH_QUERIES": ["AI"]}
    values.update(overrides)
    return Settings(**values)


@pytest.mark.asyncio
async def test_github_fetch_maps_and_skips_failed_sub_resources():
    client = FakeGitHubClient()
    step = GitHubSource(client, github_settings(), now=lambda: NOW)

    dataset = validate_data(await step.fetch())

    assert [org.id for org in dataset.organizations] == ["acme"]
    org = dataset.organizations[0]
    assert org.name == "Acme AI"
    assert org.stage.value == "seed"
    assert org.domain_tags == ["Web Development", "Machine Learning"]

    people = {person.id: person for person in dataset.people}
    assert set(people) == {"alice", "bob"}
    assert people["alice"].roles == ["Founder"]
    assert people["alice"].keywords == ["Building", "machine", "learning", "systems", "acme"]
    # Profile lookup failed, so bob comes from the bare contributor record
    assert people["bob"].roles == ["Contributor"]
    assert people["bob"].name == "bob"

    edges = {(rel.source_id, rel.target_id): rel for rel in dataset.relationships}
    assert edges[("alice", "acme")].type.value == "co-founded"
    assert edges[("alice", "acme")].since_year == 2024
    assert edges[("bob", "acme")].type.value == "works-at"
    assert "dependabot[bot]" not in client.user_requests


@pytest.mark.asyncio
async def test_github_search_failure_fails_step():
    client = FakeGitHubClient(search_error=TransientError("down", source="github", status_code=500))
    step = GitHubSource(client, github_settings(), now=lambda: NOW)

    with pytest.raises(TransientError):
        await step.fetch()


@pytest.mark.asyncio
async def test_github_garbled_sub_resource_skips_only_that_organization():
    responses = {
        "/search/users": httpx.Response(200, json={"items": [{"login": "acme"}, {"login": "beta"}]}),
        "/orgs/acme": httpx.Response(200, json={"login": "acme", "name": "Acme", "created_at": "2024-01-15T00:00:00Z"}),
        "/orgs/acme/repos": httpx.Response(200, json=[]),
        "/orgs/beta": httpx.Response(200, json={"login": "beta"}),
        "/orgs/beta/repos": httpx.Response(200, text="<html>oops</html>"),
    }
    settings = github_settings()
    client = GitHubClient(
        settings.github,
        rate_limiter=RateLimiter(0),
        transport=httpx.MockTransport(lambda request: responses[request.url.path]),
    )
    step = GitHubSource(client, settings, now=lambda: NOW)

    async with client:
        dataset = validate_data(await step.fetch())

    assert [org.id for org in dataset.organizations] == ["acme"]
    assert dataset.organizations[0].domain_tags == ["Software"]
    assert dataset.people == []


@pytest.mark.asyncio
async def test_github_step_settings():
    step = GitHubSource(None, github_settings(GITHUB_FALLBACK_TO_SEED=False, GITHUB_CACHE_TTL=5000))

    assert step.name == "github"
    assert step.enabled is True
    assert step.fallback_allowed is False
    assert step.ttl == 5000

    with pytest.raises(SourceRequestError):
        await step.fetch()


class FakeCrunchbaseClient:

    async def fetch_organizations(self, categories=None, limit=100):
        return [
            {
                "uuid": "org-1",
                "properties": {
                    "name": "Ledgerline",
                    "categories": [{"value": "Fintech"}],
                    "funding_stage": "SERIES_A",
                    "founded_on": "2019-02-01",
                },
            },
            {"uuid": "org-2", "properties": {"name": "Quietco"}},
        ]

    async def fetch_people(self, limit=100):
        return [{"uuid": "person-1", "properties": {"name": "Priya", "job_title": "CEO"}}]

    async def fetch_founder_relationships(self, organization_id):
        if organization_id == "org-2":
            raise TransientError("unavailable", source="crunchbase", status_code=502)
        return [
            {"relationships": {"person": {"uuid": "person-1"}}, "properties": {"started_on": "2019-02-01"}},
            {"relationships": {"person": {"uuid": "person-2", "properties": {"name": "Jonas"}}}},
            {"relationships": {}},
        ]


@pytest.mark.asyncio
async def test_crunchbase_fetch():
    settings = Settings(_env_file=None, CRUNCHBASE_ENABLED=True, CRUNCHBASE_API_KEY="key")
    step = CrunchbaseSource(FakeCrunchbaseClient(), settings, now=lambda: NOW)

    dataset = validate_data(await step.fetch())

    assert [org.id for org in dataset.organizations] == ["org-1", "org-2"]
    assert dataset.organizations[0].stage.value == "series-a"
    assert [person.id for person in dataset.people] == ["person-1", "person-2"]
    assert dataset.people[1].roles == ["Founder"]
    assert [(rel.source_id, rel.target_id, rel.since_year) for rel in dataset.relationships] == [
        ("person-1", "org-1", 2019),
        ("person-2", "org-1", None),
    ]


@pytest.mark.asyncio
async def test_crunchbase_without_client_fails():
    settings = Settings(_env_file=None, CRUNCHBASE_ENABLED=True)
    step = CrunchbaseSource(None, settings)

    with pytest.raises(SourceRequestError, match="CRUNCHBASE_API_KEY"):
        await step.fetch()


@pytest.mark.asyncio
async def test_seed_step(seed_file, sample_raw):
    step = SeedSource(str(seed_file))

    assert step.terminal is True
    assert step.cacheable is False
    assert await step.fetch() == sample_raw
