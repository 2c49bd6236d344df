"""
Error types for the Startup Ecosystem Graph.

Source errors are raised by the HTTP clients and classified by status code so
the retry policy and the fallback chain can decide what to do with them.
"""
from typing import Dict, List, Optional


class StartupGraphError(Exception):
    """Base class for all pipeline errors."""


class SourceError(StartupGraphError):
    """An external source call failed."""

    def __init__(self, message: str, source: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.source = source
        self.status_code = status_code


class NotFoundError(SourceError):
    """The source reported a missing resource (404). Never retried."""


class RateLimitedError(SourceError):
    """The source throttled the request. Retried after ``retry_after`` seconds."""

    def __init__(self, message: str, source: str = "", status_code: Optional[int] = None,
                 retry_after: float = 0):
        super().__init__(message, source=source, status_code=status_code)
        self.retry_after = retry_after


class TransientError(SourceError):
    """A 5xx response. Retried with exponential backoff."""


class SourceRequestError(SourceError):
    """Any other request failure (unexpected status, transport error)."""


class DataValidationError(StartupGraphError):
    """A dataset failed schema validation. Carries every violation found."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__(f"Data validation failed: {', '.join(errors)}")


class AssemblyError(StartupGraphError):
    """Duplicate node id or dangling edge reference in a validated dataset."""


class SeedDataError(StartupGraphError):
    """The bundled fallback dataset is missing or corrupted."""


class SourceFailedError(StartupGraphError):
    """A source failed and its configuration forbids falling through."""

    def __init__(self, source: str, cause: Exception):
        self.source = source
        self.cause = cause
        super().__init__(f"Source '{source}' failed: {cause}")


class AllSourcesExhaustedError(StartupGraphError):
    """Every enabled source failed and no fallback remained."""

    def __init__(self, failures: Dict[str, str]):
        self.failures = failures
        if failures:
            detail = "; ".join(f"{name}: {reason}" for name, reason in failures.items())
        else:
            detail = "no data source is enabled"
        super().__init__(f"All data sources exhausted ({detail})")


class SourceDisabledError(StartupGraphError):
    """A refresh was requested but no network source is enabled."""
