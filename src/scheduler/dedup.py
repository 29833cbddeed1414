"""Timestamp watermark filter for recent actions."""

from typing import Iterable, List, Tuple

from ..ingestion.interfaces import RecentAction


def filter_new_actions(
    actions: Iterable[RecentAction],
    watermark: int
) -> Tuple[List[RecentAction], int]:
    """Split a fetched batch against the current watermark.

    Returns the actions strictly newer than watermark, in feed order, and the
    watermark to commit once they are stored: the max of watermark and every
    time_seconds in the batch.

    The feed order is not assumed to be sorted. Actions sharing a timestamp
    that is already at or below watermark are treated as stored.
    """
    new_actions = []
    max_timestamp = watermark
    for action in actions:
        now = action.time_seconds
        if now > max_timestamp:
            max_timestamp = now
        if now > watermark:
            new_actions.append(action)
    return new_actions, max_timestamp
