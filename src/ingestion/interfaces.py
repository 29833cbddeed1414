"""Interface definitions for Codeforces ingestion."""

from dataclasses import dataclass
from typing import Optional, List, Any, Dict


class CodeforcesError(Exception):
    """Base class for every failure of a Codeforces API call."""


class RequestConstructionError(CodeforcesError):
    """The HTTP request could not be built."""


class TransportError(CodeforcesError):
    """The HTTP call failed or its body could not be read."""


class ResponseParseError(CodeforcesError):
    """The response body was not the expected JSON envelope."""


class RemoteStatusError(CodeforcesError):
    """Codeforces answered with a non-OK status."""

    def __init__(self, comment: str):
        self.comment = comment
        super().__init__(f"codeforces returned an internal error with comment [{comment}]")


@dataclass
class RecentAction:
    """A blog entry or comment reported by /recentActions.

    Only time_seconds is interpreted; blog_entry and comment are stored as-is.
    """
    time_seconds: int
    blog_entry: Optional[Dict[str, Any]] = None
    comment: Optional[Dict[str, Any]] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "RecentAction":
        """Build from one element of the API "result" array."""
        if not isinstance(data, dict):
            raise ResponseParseError(f"recent action is not an object: {data!r}")
        time_seconds = data.get("timeSeconds")
        # bool is an int subclass, reject it explicitly
        if not isinstance(time_seconds, int) or isinstance(time_seconds, bool):
            raise ResponseParseError(f"recent action has invalid timeSeconds: {time_seconds!r}")
        return cls(
            time_seconds=time_seconds,
            blog_entry=data.get("blogEntry"),
            comment=data.get("comment"),
        )

    def to_dict(self) -> dict:
        """Convert to the API wire shape."""
        data = {"timeSeconds": self.time_seconds}
        if self.blog_entry is not None:
            data["blogEntry"] = self.blog_entry
        if self.comment is not None:
            data["comment"] = self.comment
        return data


class CodeforcesInterface:
    """Interface for the Codeforces API."""

    async def recent_actions(self, max_count: int) -> List[RecentAction]:
        """Fetch up to max_count of the most recent blog entries/comments.

        Raises a CodeforcesError subclass on any failure.
        """
        raise NotImplementedError
