"""Interface definitions for recent action storage."""

from typing import List, Optional

from ..ingestion.interfaces import RecentAction


class StoreError(Exception):
    """A store operation failed."""


class StoreConnectionError(StoreError):
    """The store could not be reached at construction time."""


class CodeforcesStore:
    """Interface needed to persist Codeforces data."""

    def add_recent_actions(self, actions: Optional[List[RecentAction]]) -> None:
        """Append all actions. None or an empty list is a successful no-op.

        Raises StoreError if the batch could not be written.
        """
        raise NotImplementedError

    def query_recent_actions(self, timestamp: int) -> List[RecentAction]:
        """Get actions created at or after timestamp."""
        raise NotImplementedError

    def last_recorded_timestamp(self) -> int:
        """Latest time_seconds of any stored action, 0 if none."""
        raise NotImplementedError
