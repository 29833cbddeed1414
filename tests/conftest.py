"""Pytest configuration and shared fixtures."""

import pytest
import tempfile
import os
from pathlib import Path

# Add project root to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.ingestion.interfaces import RecentAction, CodeforcesInterface
from src.storage.interfaces import CodeforcesStore


def make_action(time_seconds: int, comment_id: int = None) -> RecentAction:
    """A recent action with a minimal blog entry payload."""
    blog_entry = {"id": 1000 + time_seconds, "title": f"<p>Blog {time_seconds}</p>",
                  "authorHandle": "tourist"}
    comment = {"id": comment_id, "text": "nice", "commentatorHandle": "Petr"} if comment_id else None
    return RecentAction(time_seconds=time_seconds, blog_entry=blog_entry, comment=comment)


class ScriptedClient(CodeforcesInterface):
    """Returns scripted batches in order; an exception in the script is raised."""

    def __init__(self, batches):
        self.batches = list(batches)
        self.calls = []

    async def recent_actions(self, max_count):
        self.calls.append(max_count)
        batch = self.batches.pop(0) if self.batches else []
        if isinstance(batch, Exception):
            raise batch
        return list(batch)


class MemoryStore(CodeforcesStore):
    """In-memory store that can be told to fail the next appends."""

    def __init__(self, actions=None):
        self.actions = list(actions or [])
        self.append_calls = []
        self.failures = []

    def add_recent_actions(self, actions):
        self.append_calls.append(list(actions or []))
        if self.failures:
            raise self.failures.pop(0)
        self.actions.extend(actions or [])

    def query_recent_actions(self, timestamp):
        return [a for a in self.actions if a.time_seconds >= timestamp]

    def last_recorded_timestamp(self):
        return max((a.time_seconds for a in self.actions), default=0)


@pytest.fixture
def temp_db():
    """Provide a temporary database file."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name
    yield f"sqlite:///{db_path}"
    # Cleanup
    try:
        os.unlink(db_path)
    except FileNotFoundError:
        pass


@pytest.fixture
def sample_actions():
    """Provide a batch in the order Codeforces returns it (newest first)."""
    return [make_action(110, comment_id=7), make_action(105), make_action(90)]
