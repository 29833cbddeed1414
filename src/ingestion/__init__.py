"""Data ingestion - fetching recent actions from Codeforces."""

from .interfaces import (
    RecentAction, CodeforcesInterface, CodeforcesError,
    RequestConstructionError, TransportError, ResponseParseError, RemoteStatusError,
)
from .codeforces import CodeforcesClient

__all__ = [
    "RecentAction", "CodeforcesInterface", "CodeforcesError",
    "RequestConstructionError", "TransportError", "ResponseParseError",
    "RemoteStatusError", "CodeforcesClient",
]
