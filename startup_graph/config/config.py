# config/config.py
"""
Configuration management for the Startup Ecosystem Graph.

This module provides a centralized configuration system that loads settings from
environment variables, .env files, and default values. It uses Pydantic for validation
and type checking.
"""
import json
from pathlib import Path
from typing import Annotated, List

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

DEFAULT_SEED_PATH = str(Path(__file__).resolve().parent.parent / "data" / "seed.json")


class SourceSettings(BaseModel):
    """Per-source view over the flat settings."""
    name: str
    enabled: bool
    api_key: str
    base_url: str
    cache_ttl: int
    fallback_to_seed: bool
    max_retries: int
    rate_limit_delay: int
    retry_after_default: int


class Settings(BaseSettings):
    """Main settings class for the Startup Ecosystem Graph."""

    # Core settings
    ENV: str = Field(default="development", description="Environment (development, staging, production)")
    DEBUG: bool = Field(default=False, description="Debug mode")
    API_PREFIX: str = Field(default="/api", description="API prefix for all endpoints")
    PROJECT_NAME: str = Field(default="Startup Ecosystem Graph", description="Project name")
    CORS_ORIGINS: Annotated[List[str], NoDecode] = Field(default=["*"], description="Allowed CORS origins")

    # GitHub settings
    GITHUB_ENABLED: bool = Field(default=False, description="Use GitHub as the primary data source")
    GITHUB_API_KEY: str = Field(default="", description="GitHub token (anonymous access when empty)")
    GITHUB_BASE_URL: str = Field(default="https://api.github.com", description="GitHub API base URL")
    GITHUB_CACHE_TTL: int = Field(default=86400000, description="GitHub dataset cache TTL in milliseconds")
    GITHUB_FALLBACK_TO_SEED: bool = Field(default=True, description="Fall through to the next source on failure")
    GITHUB_MAX_RETRIES: int = Field(default=3, description="Maximum GitHub request retries")
    GITHUB_RATE_LIMIT_DELAY: int = Field(default=100, description="Minimum delay between GitHub requests in milliseconds")
    GITHUB_RETRY_AFTER_DEFAULT: int = Field(default=60, description="Seconds to wait on a rate limit without Retry-After")
    GITHUB_SEARCH_QUERIES: Annotated[List[str], NoDecode] = Field(
        default=["AI startup", "machine learning", "artificial intelligence"],
        description="Organization search queries"
    )
    GITHUB_ORG_LIMIT: int = Field(default=10, description="Organizations fetched per search query")
    GITHUB_MAX_REPOS_PER_ORG: int = Field(default=5, description="Repositories per organization scanned for contributors")
    GITHUB_MAX_CONTRIBUTORS_PER_REPO: int = Field(default=10, description="Contributors kept per repository")
    GITHUB_FOUNDER_MIN_CONTRIBUTIONS: int = Field(default=50, description="Contributions above which a contributor may be a founder")
    GITHUB_FOUNDER_WINDOW_DAYS: int = Field(default=180, description="Repository age window in days for founder inference")
    GITHUB_DOMAIN_TAG_LIMIT: int = Field(default=3, description="Number of top languages turned into domain tags")

    # Crunchbase settings
    CRUNCHBASE_ENABLED: bool = Field(default=False, description="Use Crunchbase as the secondary data source")
    CRUNCHBASE_API_KEY: str = Field(default="", description="Crunchbase user key")
    CRUNCHBASE_BASE_URL: str = Field(default="https://api.crunchbase.com/v4", description="Crunchbase API base URL")
    CRUNCHBASE_CACHE_TTL: int = Field(default=86400000, description="Crunchbase dataset cache TTL in milliseconds")
    CRUNCHBASE_FALLBACK_TO_SEED: bool = Field(default=True, description="Fall through to the next source on failure")
    CRUNCHBASE_MAX_RETRIES: int = Field(default=3, description="Maximum Crunchbase request retries")
    CRUNCHBASE_RATE_LIMIT_DELAY: int = Field(default=1000, description="Minimum delay between Crunchbase requests in milliseconds")
    CRUNCHBASE_RETRY_AFTER_DEFAULT: int = Field(default=5, description="Seconds to wait on a rate limit without Retry-After")
    CRUNCHBASE_CATEGORIES: Annotated[List[str], NoDecode] = Field(default=["artificial-intelligence"], description="Organization categories to search")
    CRUNCHBASE_LIMIT: int = Field(default=100, description="Maximum organizations and people per search")

    # Pipeline settings
    HTTP_TIMEOUT: int = Field(default=30, description="HTTP request timeout in seconds")
    GRAPH_CACHE_KEY: str = Field(default="graph-data", description="Cache key for the assembled dataset")
    SEED_DATA_PATH: str = Field(default=DEFAULT_SEED_PATH, description="Path to the bundled fallback dataset")
    SEED_FALLBACK_ENABLED: bool = Field(default=True, description="Use the bundled dataset as the terminal fallback")

    # Logging settings
    LOG_LEVEL: str = Field(default="INFO", description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
    LOG_FORMAT: str = Field(default="console", description="Log format (console, json)")
    LOG_FILE_ENABLED: bool = Field(default=False, description="Enable file logging")
    LOG_FILE_PATH: str = Field(default="logs", description="Log file path")

    @field_validator("CORS_ORIGINS", "GITHUB_SEARCH_QUERIES", "CRUNCHBASE_CATEGORIES", mode="before")
    def parse_list(cls, v):
        if isinstance(v, str):
            try:
                return json.loads(v) if v.startswith("[") else [x.strip() for x in v.split(",") if x.strip()]
            except json.JSONDecodeError:
                return []
        return v

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def github(self) -> SourceSettings:
        """GitHub source settings."""
        return SourceSettings(
            name="github",
            enabled=self.GITHUB_ENABLED,
            api_key=self.GITHUB_API_KEY,
            base_url=self.GITHUB_BASE_URL,
            cache_ttl=self.GITHUB_CACHE_TTL,
            fallback_to_seed=self.GITHUB_FALLBACK_TO_SEED,
            max_retries=self.GITHUB_MAX_RETRIES,
            rate_limit_delay=self.GITHUB_RATE_LIMIT_DELAY,
            retry_after_default=self.GITHUB_RETRY_AFTER_DEFAULT,
        )

    @property
    def crunchbase(self) -> SourceSettings:
        """Crunchbase source settings."""
        return SourceSettings(
            name="crunchbase",
            enabled=self.CRUNCHBASE_ENABLED,
            api_key=self.CRUNCHBASE_API_KEY,
            base_url=self.CRUNCHBASE_BASE_URL,
            cache_ttl=self.CRUNCHBASE_CACHE_TTL,
            fallback_to_seed=self.CRUNCHBASE_FALLBACK_TO_SEED,
            max_retries=self.CRUNCHBASE_MAX_RETRIES,
            rate_limit_delay=self.CRUNCHBASE_RATE_LIMIT_DELAY,
            retry_after_default=self.CRUNCHBASE_RETRY_AFTER_DEFAULT,
        )


# Create a global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the settings instance."""
    return settings


def get_log_level() -> str:
    """Get the log level."""
    return settings.LOG_LEVEL
