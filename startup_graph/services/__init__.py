"""
Pipeline services: source steps, the fallback orchestrator and the graph service.
"""
from startup_graph.services.graph_service import GraphService, build_graph_service
from startup_graph.services.orchestrator import FetchOrchestrator, StepOutcome, StepResult
from startup_graph.services.seed import load_seed_data, load_seed_dataset
from startup_graph.services.sources import CrunchbaseSource, GitHubSource, SeedSource, SourceStep

__all__ = [
    "GraphService",
    "build_graph_service",
    "FetchOrchestrator",
    "StepOutcome",
    "StepResult",
    "load_seed_data",
    "load_seed_dataset",
    "CrunchbaseSource",
    "GitHubSource",
    "SeedSource",
    "SourceStep",
]
