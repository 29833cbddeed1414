"""Codeforces API client for the /recentActions endpoint."""

import asyncio
import json
from datetime import timedelta
from typing import List, Optional

import aiohttp
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential
import structlog

from .interfaces import (
    CodeforcesInterface,
    RecentAction,
    RemoteStatusError,
    RequestConstructionError,
    ResponseParseError,
    TransportError,
)
from ..config.settings import get_settings

logger = structlog.get_logger()

RECENT_ACTIONS_ENDPOINT = "/recentActions"
STATUS_OK = "OK"


class CodeforcesClient(CodeforcesInterface):
    """Async Codeforces client. Use as an async context manager.

    One session is opened on enter and reused for every call until exit.
    """

    def __init__(
        self,
        timeout: Optional[timedelta] = None,
        base_url: Optional[str] = None,
        max_attempts: Optional[int] = None,
    ):
        if timeout is None:
            timeout = timedelta(minutes=get_settings().codeforces_timeout_minutes)
        self.timeout = timeout
        self.base_url = (base_url or get_settings().codeforces_base_url).rstrip("/")
        self.max_attempts = max_attempts or get_settings().fetch_max_attempts
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        self.session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout.total_seconds()),
            headers={"User-Agent": "cfrss/1.0"}
        )
        return self

    async def __aexit__(self, *args):
        if self.session:
            await self.session.close()
            self.session = None

    async def recent_actions(self, max_count: int) -> List[RecentAction]:
        """Fetch a list of recent blogs/comments from Codeforces."""
        logger.info("executing_recent_actions", max_count=max_count)

        url = self.base_url + RECENT_ACTIONS_ENDPOINT
        if self.session is None or self.session.closed:
            raise RequestConstructionError(
                "could not create request for /recentActions: client session is not open"
            )
        if max_count < 1:
            raise RequestConstructionError(
                f"could not create request for /recentActions: invalid maxCount {max_count}"
            )

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type(TransportError),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                body = await self._get(url, max_count)

        return self._parse(body)

    async def _get(self, url: str, max_count: int) -> bytes:
        """Make the HTTP call and read the whole body."""
        params = {"maxCount": str(max_count)}
        try:
            async with self.session.get(url, params=params) as response:
                return await response.read()
        except aiohttp.InvalidURL as e:
            logger.debug("invalid_request_url", url=url)
            raise RequestConstructionError(
                f"could not create request for /recentActions with error [{e}]"
            ) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.debug("request_failed", url=url, params=params)
            raise TransportError(
                f"http call to /recentActions failed with error [{e!r}]"
            ) from e

    def _parse(self, body: bytes) -> List[RecentAction]:
        """Unwrap the {status, comment, result} envelope."""
        try:
            wrapper = json.loads(body)
        except ValueError as e:
            logger.debug("unparseable_body", body=body[:2000])
            raise ResponseParseError(
                f"could not unmarshal /recentActions response with error [{e}]"
            ) from e

        if not isinstance(wrapper, dict):
            logger.debug("unexpected_body", body=body[:2000])
            raise ResponseParseError("/recentActions response is not a JSON object")

        # Internal server errors from Codeforces
        if wrapper.get("status") != STATUS_OK:
            logger.debug("remote_status_not_ok", body=body[:2000])
            raise RemoteStatusError(wrapper.get("comment") or "")

        result = wrapper.get("result") or []
        if not isinstance(result, list):
            raise ResponseParseError("/recentActions result is not a list")

        actions = [RecentAction.from_api(item) for item in result]
        logger.info("recent_actions_fetched", count=len(actions))
        return actions
