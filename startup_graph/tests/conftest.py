"""
Root conftest file for pytest.

Shared fixtures: a small canonical dataset, a controllable clock, a sleep
that records instead of waiting, and settings isolated from the local .env.
"""
import json

import pytest

from startup_graph.config.config import Settings
from startup_graph.schemas import validate_data


class FakeClock:
    """Clock returning a settable time in seconds."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Async sleep replacement that records delays and advances a clock."""

    def __init__(self, clock: FakeClock = None):
        self.calls = []
        self.clock = clock

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        if self.clock is not None:
            self.clock.advance(seconds)


@pytest.fixture
def sample_raw():
    """Three organizations, two people, two relationships."""
    return {
        "organizations": [
            {
                "id": "s1",
                "name": "Neuralfield Labs",
                "domain_tags": ["AI", "Machine Learning"],
                "stage": "series-a",
                "founded_year": 2019,
                "location": "San Francisco, CA",
                "description": "Foundation models for sensor data.",
            },
            {
                "id": "s2",
                "name": "Mediloop",
                "domain_tags": ["Healthcare"],
                "stage": "seed",
                "founded_year": 2021,
                "location": "Nashville, TN",
                "description": "Patient billing for clinics.",
            },
            {
                "id": "s3",
                "name": "Quillstream",
                "domain_tags": ["AI"],
                "stage": "seed",
                "founded_year": 2023,
                "location": "London, UK",
                "description": "Contract drafting assistant.",
            },
        ],
        "people": [
            {
                "id": "p1",
                "name": "Maya Okafor",
                "roles": ["Founder", "CEO"],
                "keywords": ["machine learning"],
                "bio": "Research scientist.",
            },
            {
                "id": "p2",
                "name": "Daniel Reyes",
                "roles": ["Engineer"],
                "keywords": ["billing"],
                "bio": "Backend engineer.",
            },
        ],
        "relationships": [
            {"source_id": "p1", "target_id": "s1", "type": "co-founded", "since_year": 2019},
            {"source_id": "p2", "target_id": "s2", "type": "works-at"},
        ],
    }


@pytest.fixture
def sample_dataset(sample_raw):
    """The sample dataset, validated."""
    return validate_data(sample_raw)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def recording_sleep(fake_clock):
    """Records sleeps and advances ``fake_clock`` by each one."""
    return RecordingSleep(fake_clock)


@pytest.fixture
def seed_file(tmp_path, sample_raw):
    """The sample dataset written as a seed bundle."""
    path = tmp_path / "seed.json"
    path.write_text(json.dumps(sample_raw), encoding="utf-8")
    return path


@pytest.fixture
def test_settings(seed_file):
    """Seed-only settings that ignore the environment's .env file."""
    return Settings(
        _env_file=None,
        GITHUB_ENABLED=False,
        CRUNCHBASE_ENABLED=False,
        SEED_DATA_PATH=str(seed_file),
        SEED_FALLBACK_ENABLED=True,
        LOG_FILE_ENABLED=False,
    )
