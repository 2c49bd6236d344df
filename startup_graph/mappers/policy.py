# mappers/policy.py
"""
Normalization and inference policy shared by the source mappers.

Thresholds live in data tables here rather than in mapper control flow, so a
policy change is a table change.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from startup_graph.schemas import CompanyStage

DEFAULT_TAG_LIMIT = 3

# Primary repository language -> human domain tag
LANGUAGE_DOMAIN_TAGS: Dict[str, str] = {
    "Python": "Machine Learning",
    "JavaScript": "Web Development",
    "TypeScript": "Web Development",
    "Java": "Enterprise Software",
    "Go": "Infrastructure",
    "Rust": "Systems Programming",
    "C++": "Systems Programming",
    "C": "Systems Programming",
    "Swift": "Mobile Development",
    "Kotlin": "Mobile Development",
    "Dart": "Mobile Development",
    "PHP": "Web Development",
    "Ruby": "Web Development",
    "C#": "Enterprise Software",
    "Scala": "Data Engineering",
    "R": "Data Science",
    "MATLAB": "Data Science",
    "Julia": "Data Science",
    "HTML": "Web Development",
    "CSS": "Web Development",
    "Shell": "DevOps",
    "Dockerfile": "DevOps",
    "YAML": "DevOps",
    "JSON": "Data Processing",
    "SQL": "Data Engineering",
    "Vue": "Web Development",
    "Jupyter Notebook": "Data Science",
}


@dataclass(frozen=True)
class StageRule:
    """
    One row of the stage inference table.

    Minimums are inclusive, maximums exclusive; ``None`` leaves a bound open.
    """
    stage: CompanyStage
    min_repos: Optional[int] = None
    max_repos: Optional[int] = None
    min_stars: Optional[int] = None
    max_stars: Optional[int] = None
    min_age_years: Optional[int] = None
    max_age_years: Optional[int] = None

    def matches(self, repo_count: int, total_stars: int, age_years: int) -> bool:
        return (
            _within(repo_count, self.min_repos, self.max_repos)
            and _within(total_stars, self.min_stars, self.max_stars)
            and _within(age_years, self.min_age_years, self.max_age_years)
        )


def _within(value: int, minimum: Optional[int], maximum: Optional[int]) -> bool:
    if minimum is not None and value < minimum:
        return False
    if maximum is not None and value >= maximum:
        return False
    return True


# Checked in order; the first match wins
DEFAULT_STAGE_RULES: Sequence[StageRule] = (
    StageRule(CompanyStage.SEED, max_repos=10, max_stars=100, max_age_years=2),
    StageRule(CompanyStage.SERIES_A, max_repos=50, max_stars=1000, max_age_years=5),
    StageRule(CompanyStage.SERIES_B, min_repos=50, min_stars=1000, min_age_years=5),
    StageRule(CompanyStage.GROWTH, min_stars=10000),
)


@dataclass(frozen=True)
class FounderPolicy:
    """
    Classifies an implicit contributor relationship as founding or not.

    A contributor counts as a co-founder when their contribution count is
    above ``min_contributions`` and the repository was created within
    ``window_days`` of now. This is a coarse heuristic with no ground truth.
    """
    min_contributions: int = 50
    window_days: int = 180

    def is_founder(self, contributions: int, created_at: Optional[datetime], now: datetime) -> bool:
        if contributions <= self.min_contributions or created_at is None:
            return False
        return created_at > now - timedelta(days=self.window_days)


def normalize_funding_stage(value: Optional[str]) -> CompanyStage:
    """
    Normalize a source funding stage onto CompanyStage.

    ``"SERIES_B"`` becomes ``series-b``; unknown or missing input becomes ``seed``.
    """
    if not value:
        return CompanyStage.SEED
    normalized = value.strip().lower().replace("_", "-")
    try:
        return CompanyStage(normalized)
    except ValueError:
        return CompanyStage.SEED


def infer_stage(
    repo_count: int,
    total_stars: int,
    age_years: int,
    rules: Iterable[StageRule] = DEFAULT_STAGE_RULES
) -> CompanyStage:
    """Infer a lifecycle stage from activity proxies using the first matching rule."""
    for rule in rules:
        if rule.matches(repo_count, total_stars, age_years):
            return rule.stage
    return CompanyStage.SEED


def extract_domain_tags(
    signals: Union[Mapping[str, float], Sequence[str], None],
    limit: int = DEFAULT_TAG_LIMIT,
    mapping: Optional[Mapping[str, str]] = None
) -> List[str]:
    """
    Turn ranked categorical signals into domain tags.

    Args:
        signals: Either signal -> weight (ranked by weight, ties keep insertion
            order) or a sequence already in rank order
        limit: Number of top signals to keep
        mapping: Optional signal -> tag lookup; unmapped signals pass through

    Returns:
        Deduplicated tags in rank order
    """
    if not signals:
        return []

    if isinstance(signals, Mapping):
        ranked = [name for name, _ in sorted(signals.items(), key=lambda item: -item[1])]
    else:
        ranked = list(signals)

    mapping = mapping or {}
    tags = [mapping.get(signal, signal) for signal in ranked[:limit]]
    return dedupe(tags)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 date or timestamp into an aware UTC datetime."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = datetime.combine(date.fromisoformat(value[:10]), datetime.min.time())
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def dedupe(values: Iterable[str]) -> List[str]:
    """Remove duplicates, keeping first occurrences."""
    return list(dict.fromkeys(values))
