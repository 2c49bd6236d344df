# mappers/crunchbase_mapper.py
"""
Crunchbase record mapping.

Pure functions that turn Crunchbase organizations, people and founder cards
into canonical records (plain dicts, checked later by ``validate_data``).
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from startup_graph.mappers.policy import (
    DEFAULT_TAG_LIMIT,
    dedupe,
    extract_domain_tags,
    normalize_funding_stage,
    parse_timestamp,
)
from startup_graph.schemas import EdgeType

UNKNOWN_NAME = "Unknown"


def _values(items: Optional[List[Dict[str, Any]]]) -> List[str]:
    return [item["value"] for item in items or [] if item.get("value")]


def map_organization(
    org: Dict[str, Any],
    now: datetime,
    tag_limit: int = DEFAULT_TAG_LIMIT
) -> Dict[str, Any]:
    """Map a Crunchbase organization to an organization record."""
    props = org.get("properties") or {}
    founded_on = parse_timestamp(props.get("founded_on"))

    return {
        "id": org["uuid"],
        "name": props.get("name") or UNKNOWN_NAME,
        "domain_tags": extract_domain_tags(_values(props.get("categories")), tag_limit),
        "stage": normalize_funding_stage(props.get("funding_stage")).value,
        "founded_year": founded_on.year if founded_on else now.year,
        "location": ", ".join(_values(props.get("location_identifiers"))),
        "description": props.get("short_description") or "",
    }


def map_person(person: Dict[str, Any]) -> Dict[str, Any]:
    """Map a Crunchbase person to a person record."""
    props = person.get("properties") or {}

    roles = [props["job_title"]] if props.get("job_title") else []

    keywords: List[str] = []
    for experience in props.get("experience") or []:
        if experience.get("title"):
            keywords.append(experience["title"])
        if experience.get("organization_name"):
            keywords.append(experience["organization_name"])

    return {
        "id": person["uuid"],
        "name": props.get("name") or UNKNOWN_NAME,
        "roles": roles,
        "keywords": dedupe(keywords),
        "bio": props.get("bio") or "",
    }


def founder_of(card: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """The person side of a founder card, if present."""
    person = (card.get("relationships") or {}).get("person")
    if person and person.get("uuid"):
        return person
    return None


def map_founder_relationship(card: Dict[str, Any], org_id: str) -> Optional[Dict[str, Any]]:
    """
    Map a founder card to a person -> organization co-founded relationship.

    Returns None when the card does not identify a person.
    """
    person = founder_of(card)
    if person is None:
        return None

    relationship = {
        "source_id": person["uuid"],
        "target_id": org_id,
        "type": EdgeType.CO_FOUNDED.value,
    }
    started_on = parse_timestamp((card.get("properties") or {}).get("started_on"))
    if started_on:
        relationship["since_year"] = started_on.year
    return relationship


def map_founder_person(card: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Minimal person record for a founder missing from the people search."""
    person = founder_of(card)
    if person is None:
        return None

    return {
        "id": person["uuid"],
        "name": (person.get("properties") or {}).get("name") or UNKNOWN_NAME,
        "roles": ["Founder"],
        "keywords": [],
        "bio": "",
    }
