"""Factory functions to create storage instances.

The store URL comes from DATABASE_URL when set (standard for cloud
platforms), otherwise from the configured store address and database name.
SQLAlchemy picks the driver from the URL scheme.
"""

import os
from functools import lru_cache

import structlog

logger = structlog.get_logger()


def get_database_url() -> str:
    """Get database URL from environment, with fallback to settings."""
    # Check for DATABASE_URL first (standard for cloud platforms)
    url = os.environ.get('DATABASE_URL')
    if url:
        return url

    # Check for CFRSS_ prefixed version
    url = os.environ.get('CFRSS_DATABASE_URL')
    if url:
        return url

    from ..config.settings import get_settings
    return get_settings().database_url


@lru_cache(maxsize=1)
def get_recent_action_store(database_url: str = None):
    """Get the shared recent action store for database_url (or the configured one)."""
    from .database import RecentActionStore

    url = database_url or get_database_url()
    # SQLAlchemy no longer accepts the postgres:// alias
    if url.startswith('postgres://'):
        url = 'postgresql://' + url[len('postgres://'):]

    logger.info("using_store", backend=url.split(":", 1)[0])
    return RecentActionStore(url)


def clear_cache():
    """Clear cached instances (useful for testing)."""
    get_recent_action_store.cache_clear()
