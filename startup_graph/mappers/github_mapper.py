# mappers/github_mapper.py
"""
GitHub record mapping.

Pure functions that turn GitHub organizations, users and contributors into
canonical organization, person and relationship records (plain dicts, checked
later by ``validate_data``). GitHub has no notion of funding stage or
founders, so both are inferred (see policy.py).
"""
import re
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

from startup_graph.mappers.policy import (
    DEFAULT_STAGE_RULES,
    DEFAULT_TAG_LIMIT,
    LANGUAGE_DOMAIN_TAGS,
    FounderPolicy,
    StageRule,
    dedupe,
    extract_domain_tags,
    infer_stage,
    parse_timestamp,
)
from startup_graph.schemas import EdgeType

DEFAULT_DOMAIN_TAGS = ["Software"]
DEFAULT_KEYWORDS = ["Developer"]
BIO_KEYWORD_MIN_LENGTH = 4
BIO_KEYWORD_LIMIT = 5


def count_languages(repos: Iterable[Dict[str, Any]]) -> Dict[str, int]:
    """Count repositories per primary language, in first-seen order."""
    counts: Dict[str, int] = {}
    for repo in repos:
        language = repo.get("language")
        if language:
            counts[language] = counts.get(language, 0) + 1
    return counts


def map_organization(
    org: Dict[str, Any],
    repos: Sequence[Dict[str, Any]],
    now: datetime,
    stage_rules: Sequence[StageRule] = DEFAULT_STAGE_RULES,
    tag_limit: int = DEFAULT_TAG_LIMIT
) -> Dict[str, Any]:
    """
    Map a GitHub organization and its repositories to an organization record.

    Args:
        org: Organization details from /orgs/{login}
        repos: The organization's repositories
        now: Reference time for age calculations
        stage_rules: Stage inference table
        tag_limit: Number of top languages turned into domain tags
    """
    created_at = parse_timestamp(org.get("created_at"))
    founded_year = created_at.year if created_at else now.year

    total_stars = sum(repo.get("stargazers_count") or 0 for repo in repos)
    stage = infer_stage(len(repos), total_stars, now.year - founded_year, stage_rules)

    domain_tags = extract_domain_tags(count_languages(repos), tag_limit, LANGUAGE_DOMAIN_TAGS)

    return {
        "id": org["login"],
        "name": org.get("name") or org["login"],
        "domain_tags": domain_tags or list(DEFAULT_DOMAIN_TAGS),
        "stage": stage.value,
        "founded_year": founded_year,
        "location": org.get("location") or "",
        "description": org.get("description") or "",
    }


def extract_keywords(user: Dict[str, Any]) -> List[str]:
    """Keywords from the first few meaningful bio words plus the company."""
    keywords: List[str] = []
    bio = user.get("bio")
    if bio:
        words = [word for word in re.split(r"[,\s]+", bio) if len(word) >= BIO_KEYWORD_MIN_LENGTH]
        keywords.extend(words[:BIO_KEYWORD_LIMIT])
    company = user.get("company")
    if company:
        keywords.append(company.replace("@", "").strip())
    keywords = dedupe(keyword for keyword in keywords if keyword)
    return keywords or list(DEFAULT_KEYWORDS)


def map_user(user: Dict[str, Any], roles: Optional[List[str]] = None) -> Dict[str, Any]:
    """Map a GitHub user (or a bare contributor record) to a person record."""
    return {
        "id": user["login"],
        "name": user.get("name") or user["login"],
        "roles": list(roles or []),
        "keywords": extract_keywords(user),
        "bio": user.get("bio") or "",
    }


def map_contributor(
    contributor: Dict[str, Any],
    org_id: str,
    repo_created_at: Optional[str],
    now: datetime,
    policy: FounderPolicy = FounderPolicy()
) -> Dict[str, Any]:
    """
    Map a repository contributor to a person -> organization relationship.

    Heavy contributors to a recently created repository are treated as
    co-founders; everyone else works at the organization.
    """
    created_at = parse_timestamp(repo_created_at)
    founder = policy.is_founder(contributor.get("contributions") or 0, created_at, now)

    relationship = {
        "source_id": contributor["login"],
        "target_id": org_id,
        "type": (EdgeType.CO_FOUNDED if founder else EdgeType.WORKS_AT).value,
    }
    if created_at:
        relationship["since_year"] = created_at.year
    return relationship
