"""
Source record mappers and the normalization policy they share.
"""
from startup_graph.mappers.policy import (
    DEFAULT_STAGE_RULES,
    LANGUAGE_DOMAIN_TAGS,
    FounderPolicy,
    StageRule,
    extract_domain_tags,
    infer_stage,
    normalize_funding_stage,
)

__all__ = [
    "DEFAULT_STAGE_RULES",
    "LANGUAGE_DOMAIN_TAGS",
    "FounderPolicy",
    "StageRule",
    "extract_domain_tags",
    "infer_stage",
    "normalize_funding_stage",
]
