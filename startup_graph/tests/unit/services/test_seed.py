"""
Unit tests for the bundled seed dataset loader.
"""
import json

import pytest

from startup_graph.config.config import DEFAULT_SEED_PATH
from startup_graph.exceptions import SeedDataError
from startup_graph.graph.assembler import assemble
from startup_graph.services.seed import load_seed_data, load_seed_dataset


def test_bundled_seed_is_valid():
    """The shipped dataset validates and assembles."""
    dataset = load_seed_dataset(DEFAULT_SEED_PATH)
    graph = assemble(dataset)

    assert 20 <= len(dataset.organizations) <= 30
    assert 30 <= len(dataset.people) <= 50
    assert len(graph.edges) == len(dataset.relationships) > 0


def test_load_seed_data(seed_file, sample_raw):
    assert load_seed_data(str(seed_file)) == sample_raw


def test_missing_file(tmp_path):
    with pytest.raises(SeedDataError, match="could not be read"):
        load_seed_data(str(tmp_path / "missing.json"))


def test_invalid_json(tmp_path):
    path = tmp_path / "seed.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SeedDataError, match="not valid JSON"):
        load_seed_data(str(path))


def test_schema_violation(tmp_path):
    path = tmp_path / "seed.json"
    path.write_text(json.dumps({"organizations": [{"id": "s1"}], "people": [], "relationships": []}))

    with pytest.raises(SeedDataError, match="corrupted"):
        load_seed_dataset(str(path))
