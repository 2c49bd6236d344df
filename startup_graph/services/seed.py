# services/seed.py
"""
Bundled seed dataset.

The seed dataset ships with the package and is the terminal fallback when
every network source is disabled or failing. A missing or corrupted bundle
is a packaging bug, so every failure here raises SeedDataError.
"""
import json
from typing import Any, Dict, Optional

from startup_graph.config.config import settings
from startup_graph.config.logs import get_logger
from startup_graph.exceptions import DataValidationError, SeedDataError
from startup_graph.schemas import CanonicalDataset, validate_data

logger = get_logger(__name__)


def load_seed_data(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Read the raw seed bundle.

    Args:
        path: JSON file to read (defaults to settings.SEED_DATA_PATH)

    Returns:
        The parsed JSON document, not yet validated

    Raises:
        SeedDataError: If the file cannot be read or is not valid JSON
    """
    path = path or settings.SEED_DATA_PATH
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except OSError as e:
        raise SeedDataError(f"Seed data could not be read from {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise SeedDataError(f"Seed data at {path} is not valid JSON: {e}") from e

    logger.debug(f"Loaded seed data from {path}")
    return raw


def load_seed_dataset(path: Optional[str] = None) -> CanonicalDataset:
    """Read and validate the seed bundle."""
    try:
        return validate_data(load_seed_data(path))
    except DataValidationError as e:
        raise SeedDataError(f"Seed data is corrupted: {e}") from e
