"""Doofinder management API clients."""

from services.indexer.app.clients.base import BaseManagementClient
from services.indexer.app.clients.management import ManagementClient, normalize_host
from services.indexer.app.clients.throttle import RateLimiter, Throttle
from services.indexer.app.config import Settings
from shared.utils.logging import get_logger

logger = get_logger(__name__)


def build_client(
    settings: Settings,
    language: str | None = None,
) -> BaseManagementClient | None:
    """Create a throttled management client for a language.

    Args:
        settings: Service settings
        language: Language whose search engine hash is used

    Returns:
        Throttled client, or None when key, host or hash is missing
    """
    if not settings.has_credentials(language):
        logger.warning(
            "management_credentials_missing",
            language=language,
            has_api_key=bool(settings.api_key),
            has_api_host=bool(settings.api_host),
            has_hash=bool(settings.get_search_engine_hash(language)),
        )
        return None

    client = ManagementClient(
        api_host=settings.api_host,
        api_key=settings.api_key,
        hashid=settings.get_search_engine_hash(language),
        timeout=settings.request_timeout,
    )
    return Throttle(
        client,
        RateLimiter(rate=settings.rate_limit, burst=settings.rate_limit_burst),
    )


__all__ = [
    "BaseManagementClient",
    "ManagementClient",
    "RateLimiter",
    "Throttle",
    "build_client",
    "normalize_host",
]
