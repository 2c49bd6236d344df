# services/orchestrator.py
"""
Fetch orchestrator.

Runs the ordered fallback chain: cache, then each enabled source step in
priority order, then the bundled seed data. The first step that yields a
valid, assemblable dataset wins. Network data is written through to the
cache with the producing source's TTL; seed data never is, so the next load
tries the network again.
"""
import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence

from startup_graph.config.cache import DataCache
from startup_graph.config.logs import get_logger
from startup_graph.exceptions import (
    AllSourcesExhaustedError,
    SeedDataError,
    SourceFailedError,
    StartupGraphError,
)
from startup_graph.graph.assembler import assemble
from startup_graph.schemas import CanonicalDataset, GraphModel, validate_data
from startup_graph.services.sources import SourceStep

logger = get_logger(__name__)


class StepOutcome(str, Enum):
    """Result classification for one step of the chain."""
    SUCCESS = "success"
    RECOVERABLE = "recoverable"
    FATAL = "fatal"


@dataclass
class StepResult:
    """Outcome of running one step."""
    outcome: StepOutcome
    dataset: Optional[CanonicalDataset] = None
    error: Optional[Exception] = None


class FetchOrchestrator:
    """Loads the canonical dataset through the fallback chain."""

    def __init__(self, cache: DataCache, steps: Sequence[SourceStep], cache_key: str):
        """
        Initialize the orchestrator.

        Args:
            cache: Shared dataset cache
            steps: Source steps in priority order, seed last
            cache_key: Key the dataset is cached under
        """
        self.cache = cache
        self.steps: List[SourceStep] = list(steps)
        self.cache_key = cache_key
        self.active_source: Optional[str] = None
        self._lock = asyncio.Lock()

    async def run_step(self, step: SourceStep) -> StepResult:
        """
        Fetch, validate and trial-assemble one step's data.

        Any error is classified rather than raised: the terminal step and
        steps that forbid fallback are FATAL, everything else is RECOVERABLE.
        """
        try:
            raw = await step.fetch()
            dataset = validate_data(raw)
            assemble(dataset)
        except Exception as e:
            if not isinstance(e, StartupGraphError):
                logger.error(f"Unexpected error in {step.name} step: {e}", exc_info=True)
            if step.terminal:
                error = e if isinstance(e, SeedDataError) else SeedDataError(f"Seed data is corrupted: {e}")
                return StepResult(StepOutcome.FATAL, error=error)
            outcome = StepOutcome.RECOVERABLE if step.fallback_allowed else StepOutcome.FATAL
            return StepResult(outcome, error=e)

        return StepResult(StepOutcome.SUCCESS, dataset=dataset)

    async def load(self) -> CanonicalDataset:
        """
        Return the current dataset, running the chain on a cache miss.

        Concurrent callers share one chain run.

        Raises:
            SourceFailedError: A source failed and forbids fallback
            SeedDataError: The bundled dataset is corrupted
            AllSourcesExhaustedError: Every enabled step failed
        """
        cached = self.cache.get(self.cache_key)
        if cached is not None:
            logger.debug("Serving dataset from cache")
            return cached

        async with self._lock:
            # Another caller may have filled the cache while we waited
            cached = self.cache.get(self.cache_key)
            if cached is not None:
                return cached
            return await self._run_chain()

    async def _run_chain(self) -> CanonicalDataset:
        failures: Dict[str, str] = {}

        for step in self.steps:
            if not step.enabled:
                continue

            result = await self.run_step(step)

            if result.outcome == StepOutcome.SUCCESS:
                if step.cacheable:
                    self.cache.set(self.cache_key, result.dataset, step.ttl)
                self.active_source = step.name
                logger.info(
                    f"Loaded {len(result.dataset.organizations)} organizations and "
                    f"{len(result.dataset.people)} people from {step.name}"
                )
                return result.dataset

            if result.outcome == StepOutcome.FATAL:
                logger.error(f"{step.name} failed and cannot fall back: {result.error}")
                if step.terminal:
                    raise result.error
                raise SourceFailedError(step.name, result.error) from result.error

            failures[step.name] = str(result.error)
            logger.warning(f"{step.name} failed, falling back to next source: {result.error}")

        raise AllSourcesExhaustedError(failures)

    async def load_graph(self) -> GraphModel:
        """Load the dataset and assemble it into a graph."""
        return assemble(await self.load())
