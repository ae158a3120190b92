"""
Configuration management for PharmaPrice backend.
Uses pydantic-settings for environment variable handling.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore")

    # API Configuration
    api_title: str = "PharmaPrice API"
    api_version: str = "1.0.0"
    debug: bool = False

    # Source catalog (JSON map of source id -> selectors). None = packaged default.
    catalog_path: str | None = None

    # Fetch Configuration
    fetch_timeout: float = 15.0  # per-request timeout in seconds
    max_retries: int = 2  # additional attempts after the first
    retry_backoff_seconds: float = 1.0  # attempt N waits N * this

    # Cache Configuration
    cache_ttl_seconds: int = 10800  # 3 hours

    # Matching Configuration
    max_results_per_source: int = 5
    match_threshold: float = 0.4  # 0 = perfect match, accept below this
    min_match_ratio: float = 0.5  # share of the query the matched span must cover
    min_match_length: int = 2

    # Extraction Configuration
    price_pairing_tolerance: int = 0  # allowed name/price count gap for positional pairing

    # Overall deadline for one aggregated search
    search_deadline_seconds: float = 60.0


# Global settings instance
settings = Settings()
