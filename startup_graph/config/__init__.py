"""
Configuration package for the Startup Ecosystem Graph.

This package provides centralized configuration management for the application,
including settings, logging, and caching.

Key Components:
- Settings: Pydantic-based configuration with environment variable support
- Logging: Console and rotating-file logging
- Caching: In-process TTL cache for validated datasets

Usage:
    from startup_graph.config import settings, get_logger, init_logging, DataCache

    # Initialize logging
    init_logging()

    # Get a logger
    logger = get_logger(__name__)

    # Access settings
    ttl = settings.github.cache_ttl
"""

from startup_graph.config.config import (
    settings,
    get_settings,
    get_log_level,
    Settings,
    SourceSettings,
)

from startup_graph.config.logs import (
    LogManager,
    get_logger,
    init_logging,
)

from startup_graph.config.cache import (
    CACHE_KEYS,
    CacheEntry,
    DataCache,
)

__all__ = [
    # Config
    "settings",
    "get_settings",
    "get_log_level",
    "Settings",
    "SourceSettings",

    # Logging
    "LogManager",
    "get_logger",
    "init_logging",

    # Caching
    "CACHE_KEYS",
    "CacheEntry",
    "DataCache",
]
