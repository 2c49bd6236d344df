"""
Unit tests for Crunchbase record mapping.
"""
from datetime import datetime, timezone

from startup_graph.mappers import crunchbase_mapper

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def test_map_organization():
    org = {
        "uuid": "org-1",
        "properties": {
            "name": "Ledgerline",
            "short_description": "Reconciliation for B2B payments",
            "categories": [{"value": "Fintech"}, {"value": "Payments"}, {"value": "SaaS"}, {"value": "B2B"}],
            "location_identifiers": [{"value": "New York"}, {"value": "NY"}],
            "founded_on": "2016-04-01",
            "funding_stage": "SERIES_B",
        },
    }

    result = crunchbase_mapper.map_organization(org, NOW)

    assert result == {
        "id": "org-1",
        "name": "Ledgerline",
        "domain_tags": ["Fintech", "Payments", "SaaS"],
        "stage": "series-b",
        "founded_year": 2016,
        "location": "New York, NY",
        "description": "Reconciliation for B2B payments",
    }


def test_map_organization_defaults():
    result = crunchbase_mapper.map_organization({"uuid": "org-2"}, NOW)

    assert result["name"] == "Unknown"
    assert result["domain_tags"] == []
    assert result["stage"] == "seed"
    assert result["founded_year"] == 2024
    assert result["location"] == ""


def test_map_person():
    person = {
        "uuid": "person-1",
        "properties": {
            "name": "Priya Natarajan",
            "job_title": "CEO",
            "bio": "Treasury operator",
            "experience": [
                {"title": "Head of Treasury", "organization_name": "First Bank"},
                {"title": "Analyst", "organization_name": "First Bank"},
            ],
        },
    }

    result = crunchbase_mapper.map_person(person)

    assert result == {
        "id": "person-1",
        "name": "Priya Natarajan",
        "roles": ["CEO"],
        "keywords": ["Head of Treasury", "First Bank", "Analyst"],
        "bio": "Treasury operator",
    }


def test_map_founder_relationship():
    card = {
        "relationships": {"person": {"uuid": "person-1"}},
        "properties": {"started_on": "2016-04-01"},
    }

    result = crunchbase_mapper.map_founder_relationship(card, "org-1")

    assert result == {"source_id": "person-1", "target_id": "org-1", "type": "co-founded", "since_year": 2016}


def test_map_founder_relationship_without_person():
    assert crunchbase_mapper.map_founder_relationship({"relationships": {}}, "org-1") is None
    assert crunchbase_mapper.map_founder_person({}) is None


def test_map_founder_person():
    card = {"relationships": {"person": {"uuid": "person-9", "properties": {"name": "Jonas Weber"}}}}

    result = crunchbase_mapper.map_founder_person(card)

    assert result == {"id": "person-9", "name": "Jonas Weber", "roles": ["Founder"], "keywords": [], "bio": ""}
