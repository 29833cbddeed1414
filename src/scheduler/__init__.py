"""Polling scheduler - fetch, dedup and persist recent actions."""

from .dedup import filter_new_actions
from .scheduler import CodeforcesScheduler, CycleResult

__all__ = ["filter_new_actions", "CodeforcesScheduler", "CycleResult"]
