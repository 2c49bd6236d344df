"""
Unit tests for the normalization and inference policy.
"""
from datetime import datetime, timedelta, timezone

import pytest

from startup_graph.mappers.policy import (
    LANGUAGE_DOMAIN_TAGS,
    FounderPolicy,
    StageRule,
    dedupe,
    extract_domain_tags,
    infer_stage,
    normalize_funding_stage,
    parse_timestamp,
)
from startup_graph.schemas import CompanyStage

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize("value,expected", [
    ("SERIES_B", CompanyStage.SERIES_B),
    ("series_a", CompanyStage.SERIES_A),
    ("ipo", CompanyStage.IPO),
    (" Acquired ", CompanyStage.ACQUIRED),
    ("pre_seed", CompanyStage.SEED),
    ("", CompanyStage.SEED),
    (None, CompanyStage.SEED),
])
def test_normalize_funding_stage(value, expected):
    assert normalize_funding_stage(value) == expected


@pytest.mark.parametrize("repos,stars,age,expected", [
    (3, 20, 1, CompanyStage.SEED),
    (20, 500, 3, CompanyStage.SERIES_A),
    (80, 5000, 8, CompanyStage.SERIES_B),
    # Too many repos for series-a but too young for series-b
    (60, 20000, 2, CompanyStage.GROWTH),
    # Nothing matches
    (60, 500, 1, CompanyStage.SEED),
])
def test_infer_stage_default_table(repos, stars, age, expected):
    assert infer_stage(repos, stars, age) == expected


def test_infer_stage_boundaries_are_exclusive_maximums():
    """A value equal to a maximum fails that rule."""
    assert infer_stage(10, 50, 1) == CompanyStage.SERIES_A
    assert infer_stage(50, 1000, 5) == CompanyStage.SERIES_B


def test_infer_stage_custom_rules():
    rules = [StageRule(CompanyStage.IDEA, max_repos=1)]
    assert infer_stage(0, 0, 0, rules) == CompanyStage.IDEA
    assert infer_stage(5, 0, 0, rules) == CompanyStage.SEED


def test_extract_domain_tags_from_weights():
    """Signals are ranked by weight; ties keep insertion order."""
    signals = {"Go": 1, "Python": 4, "TypeScript": 2, "JavaScript": 2}
    tags = extract_domain_tags(signals, limit=3, mapping=LANGUAGE_DOMAIN_TAGS)

    # TypeScript and JavaScript both map to Web Development
    assert tags == ["Machine Learning", "Web Development"]


def test_extract_domain_tags_from_sequence():
    assert extract_domain_tags(["AI", "Fintech", "AI", "SaaS"], limit=3) == ["AI", "Fintech"]
    assert extract_domain_tags(["Elixir"], mapping=LANGUAGE_DOMAIN_TAGS) == ["Elixir"]
    assert extract_domain_tags(None) == []


def test_founder_policy():
    policy = FounderPolicy()
    recent = NOW - timedelta(days=30)
    old = NOW - timedelta(days=400)

    assert policy.is_founder(51, recent, NOW) is True
    # Strictly more than the minimum is required
    assert policy.is_founder(50, recent, NOW) is False
    assert policy.is_founder(500, old, NOW) is False
    assert policy.is_founder(500, None, NOW) is False


def test_founder_policy_is_configurable():
    policy = FounderPolicy(min_contributions=5, window_days=1000)
    assert policy.is_founder(6, NOW - timedelta(days=400), NOW) is True


def test_parse_timestamp():
    assert parse_timestamp("2020-03-01T12:00:00Z") == datetime(2020, 3, 1, 12, tzinfo=timezone.utc)
    assert parse_timestamp("2019-05-20") == datetime(2019, 5, 20, tzinfo=timezone.utc)
    assert parse_timestamp("not a date") is None
    assert parse_timestamp(None) is None


def test_dedupe_keeps_first_occurrence():
    assert dedupe(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]
