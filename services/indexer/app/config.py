"""Indexer Service configuration via environment variables."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Indexer Service configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="DOOFINDER_",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars not defined in this model
    )

    # Service settings
    service_name: str = "indexer"
    environment: str = "development"
    log_level: str = "INFO"
    log_json: bool = True

    # Management API credentials
    api_key: str = ""
    api_host: str = ""  # e.g. eu1-api.doofinder.com
    search_engine_hash: str = ""  # Hash for the default language
    search_engine_hashes: dict[str, str] = Field(default_factory=dict)

    # Skip every remote call (debug mode); operations still report success
    api_disabled: bool = False

    # Throttling
    rate_limit: float = 2.0  # Requests per second
    rate_limit_burst: int = 1
    request_timeout: float = 30.0

    # Indexing
    batch_size: int = Field(default=100, ge=1)
    index_preset: str = "generic"

    def get_search_engine_hash(self, language: str | None = None) -> str:
        """Resolve the search engine hash for a language.

        Args:
            language: Language code, or None for the default language

        Returns:
            Language-specific hash if configured, otherwise the default hash
        """
        if language and language in self.search_engine_hashes:
            return self.search_engine_hashes[language]
        return self.search_engine_hash

    def has_credentials(self, language: str | None = None) -> bool:
        """Check that key, host and hash are all present."""
        return bool(
            self.api_key and self.api_host and self.get_search_engine_hash(language)
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Module-level settings instance for direct import
settings = get_settings()
