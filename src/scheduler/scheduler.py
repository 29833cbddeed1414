"""Scheduler that persists Codeforces recent actions at fixed intervals."""

import asyncio
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

import structlog

from .dedup import filter_new_actions
from ..ingestion.interfaces import CodeforcesInterface, CodeforcesError
from ..storage.interfaces import CodeforcesStore, StoreError


@dataclass
class CycleResult:
    """Outcome of one fetch/filter/persist pass."""
    fetched: int = 0
    new: int = 0
    watermark: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class CodeforcesScheduler:
    """Polls recent actions and appends the unseen ones to the store.

    The scheduler owns last_inserted_timestamp: everything with
    time_seconds <= it is already stored. It only moves forward, and only
    after the store confirms a write. A failed cycle leaves it untouched and
    the next cycle retries after the same cooldown.
    """

    def __init__(
        self,
        cf_client: CodeforcesInterface,
        cf_store: CodeforcesStore,
        batch_size: int,
        last_inserted_timestamp: int,
        cooldown: timedelta,
        logger=None
    ):
        self.cf_client = cf_client
        self.cf_store = cf_store
        self.batch_size = batch_size
        self.last_inserted_timestamp = last_inserted_timestamp
        self.cooldown = cooldown
        self.logger = logger if logger is not None else structlog.get_logger(component="scheduler")

    @classmethod
    def from_store(
        cls,
        cf_client: CodeforcesInterface,
        cf_store: CodeforcesStore,
        batch_size: int,
        cooldown: timedelta,
        logger=None
    ) -> "CodeforcesScheduler":
        """Resume from the latest timestamp already in the store."""
        last_recorded = cf_store.last_recorded_timestamp()
        scheduler = cls(cf_client, cf_store, batch_size, last_recorded, cooldown, logger)
        scheduler.logger.info("scheduler_resumed", last_inserted_timestamp=last_recorded)
        return scheduler

    async def run_cycle(self) -> CycleResult:
        """Fetch, filter and persist once. Never raises."""
        result = CycleResult(watermark=self.last_inserted_timestamp)

        try:
            actions = await self.cf_client.recent_actions(self.batch_size)
        except CodeforcesError as e:
            self.logger.error("codeforces_query_failed", error=str(e))
            result.error = str(e)
            return result
        except Exception as e:
            self.logger.exception("cycle_failed", stage="fetch", error=str(e))
            result.error = str(e)
            return result

        new_actions, max_timestamp = filter_new_actions(actions, self.last_inserted_timestamp)
        result.fetched = len(actions)
        result.new = len(new_actions)
        self.logger.debug("actions_filtered", fetched=result.fetched, new=result.new,
                          candidate_timestamp=max_timestamp)

        try:
            self.cf_store.add_recent_actions(new_actions)
        except StoreError as e:
            self.logger.error("store_insert_failed", error=str(e))
            result.error = str(e)
            return result
        except Exception as e:
            self.logger.exception("cycle_failed", stage="persist", error=str(e))
            result.error = str(e)
            return result

        # Commit only after the insertion succeeded
        self.last_inserted_timestamp = max_timestamp
        result.watermark = max_timestamp
        self.logger.info("actions_persisted", count=result.new,
                         last_inserted_timestamp=self.last_inserted_timestamp)
        return result

    async def start(self, stop_event: Optional[asyncio.Event] = None) -> None:
        """Run cycles until stop_event is set (forever if it is None)."""
        if stop_event is None:
            stop_event = asyncio.Event()

        self.logger.info("scheduler_started", batch_size=self.batch_size,
                         cooldown_seconds=self.cooldown.total_seconds(),
                         last_inserted_timestamp=self.last_inserted_timestamp)

        while not stop_event.is_set():
            await self.run_cycle()

            self.logger.info("sleeping", seconds=self.cooldown.total_seconds())
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.cooldown.total_seconds())
            except asyncio.TimeoutError:
                pass

        self.logger.info("scheduler_stopped", last_inserted_timestamp=self.last_inserted_timestamp)
