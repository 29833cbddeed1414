"""Database storage and models."""

from .interfaces import CodeforcesStore, StoreError, StoreConnectionError
from .database import RecentActionStore
from .models import RecentActionModel, init_db

__all__ = [
    "CodeforcesStore", "StoreError", "StoreConnectionError",
    "RecentActionStore", "RecentActionModel", "init_db",
]
