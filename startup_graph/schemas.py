"""
Schemas for the Startup Ecosystem Graph.

This module defines the Pydantic models for the canonical dataset exchanged
between ingestion and caching, and for the node/edge graph served to
consumers. ``validate_data`` is the single gate every dataset passes before
it reaches the cache or the assembler.
"""
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError

from startup_graph.exceptions import DataValidationError

MIN_YEAR = 1900
MAX_YEAR = 2100


# Enums
class CompanyStage(str, Enum):
    """Lifecycle stage of an organization."""
    IDEA = "idea"
    SEED = "seed"
    SERIES_A = "series-a"
    SERIES_B = "series-b"
    SERIES_C = "series-c"
    SERIES_D = "series-d"
    GROWTH = "growth"
    IPO = "ipo"
    ACQUIRED = "acquired"


class EdgeType(str, Enum):
    """Relationship type between two entities."""
    CO_FOUNDED = "co-founded"
    WORKS_AT = "works-at"
    INVESTS_IN = "invests-in"


class NodeKind(str, Enum):
    """Discriminator for graph nodes."""
    ORGANIZATION = "organization"
    PERSON = "person"


# ----------------
# Canonical Schemas
# ----------------

class BaseSchema(BaseModel):
    """Base schema with common configuration."""
    model_config = ConfigDict(frozen=True)


class Organization(BaseSchema):
    """A startup or company."""
    id: StrictStr
    name: StrictStr
    domain_tags: List[StrictStr]
    stage: CompanyStage
    founded_year: StrictInt = Field(ge=MIN_YEAR, le=MAX_YEAR)
    location: StrictStr
    description: StrictStr


class Person(BaseSchema):
    """A founder, employee or investor."""
    id: StrictStr
    name: StrictStr
    roles: List[StrictStr]
    keywords: List[StrictStr]
    bio: StrictStr


class Relationship(BaseSchema):
    """Directed edge between two entity ids."""
    source_id: StrictStr
    target_id: StrictStr
    type: EdgeType
    since_year: Optional[StrictInt] = Field(default=None, ge=MIN_YEAR, le=MAX_YEAR)


class CanonicalDataset(BaseSchema):
    """Normalized organizations/people/relationships triple produced by any source."""
    organizations: List[Organization]
    people: List[Person]
    relationships: List[Relationship]


Entity = Union[Organization, Person]


# ----------------
# Graph Schemas
# ----------------

class Position(BaseModel):
    """2D layout position, owned by the rendering layer."""
    x: float
    y: float


class GraphNode(BaseModel):
    """One entity wrapped with its kind discriminator."""
    id: str
    type: NodeKind
    data: Union[Organization, Person]
    position: Optional[Position] = None


class GraphEdge(BaseModel):
    """One relationship with a synthesized id."""
    id: str
    source: str
    target: str
    type: EdgeType
    label: Optional[str] = None
    since_year: Optional[int] = None


class GraphModel(BaseModel):
    """Node/edge structure assembled from a canonical dataset."""
    nodes: List[GraphNode] = Field(default_factory=list)
    edges: List[GraphEdge] = Field(default_factory=list)


class FilterCriteria(BaseModel):
    """Graph filter criteria. Empty categories are ignored."""
    domain_tags: List[str] = Field(default_factory=list)
    stages: List[CompanyStage] = Field(default_factory=list)
    search_term: Optional[str] = None


class ErrorResponse(BaseModel):
    """Error body returned by the API."""
    error: str
    message: str


# ----------------
# Validation
# ----------------

def _format_error(error: Dict[str, Any]) -> str:
    path = ".".join(str(part) for part in error["loc"]) or "(root)"
    return f"{path}: {error['msg']}"


def validate_data(raw: Any) -> CanonicalDataset:
    """
    Validate a raw dataset against the canonical schema.

    Args:
        raw: Parsed JSON (or any mapping) describing a dataset

    Returns:
        The validated CanonicalDataset

    Raises:
        DataValidationError: With every violation found, not just the first
    """
    try:
        return CanonicalDataset.model_validate(raw)
    except ValidationError as e:
        raise DataValidationError([_format_error(err) for err in e.errors()]) from e


def serialize_data(dataset: CanonicalDataset) -> Dict[str, Any]:
    """Serialize a dataset to its JSON-compatible form."""
    return dataset.model_dump(mode="json", exclude_none=True)
