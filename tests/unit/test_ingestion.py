"""Unit tests for ingestion module."""

from datetime import timedelta

import pytest
from aiohttp import web, test_utils

from src.ingestion.codeforces import CodeforcesClient
from src.ingestion.interfaces import (
    RecentAction,
    RequestConstructionError,
    TransportError,
    ResponseParseError,
    RemoteStatusError,
)

BLOG_ACTION = {
    "timeSeconds": 1700000100,
    "blogEntry": {"id": 123, "title": "<p>Round 900</p>", "authorHandle": "MikeMirzayanov"},
}
COMMENT_ACTION = {
    "timeSeconds": 1700000050,
    "blogEntry": {"id": 123, "title": "<p>Round 900</p>"},
    "comment": {"id": 9, "text": "<p>thanks</p>", "commentatorHandle": "Um_nik"},
}


class TestRecentAction:
    """Tests for RecentAction."""

    def test_from_api(self):
        """Should parse the wire shape."""
        action = RecentAction.from_api(COMMENT_ACTION)
        assert action.time_seconds == 1700000050
        assert action.blog_entry["id"] == 123
        assert action.comment["commentatorHandle"] == "Um_nik"

    def test_from_api_without_comment(self):
        action = RecentAction.from_api(BLOG_ACTION)
        assert action.comment is None

    @pytest.mark.parametrize("data", [
        {"blogEntry": {}},
        {"timeSeconds": "1700000000"},
        {"timeSeconds": True},
        {"timeSeconds": 1.5},
        ["timeSeconds", 1],
    ])
    def test_from_api_rejects_bad_timestamp(self, data):
        with pytest.raises(ResponseParseError):
            RecentAction.from_api(data)

    def test_to_dict(self):
        """Should convert back to the wire shape."""
        assert RecentAction.from_api(COMMENT_ACTION).to_dict() == COMMENT_ACTION
        assert RecentAction.from_api(BLOG_ACTION).to_dict() == BLOG_ACTION

    def test_remote_status_error_keeps_comment(self):
        error = RemoteStatusError("Call limit exceeded")
        assert error.comment == "Call limit exceeded"
        assert "Call limit exceeded" in str(error)


def make_app(payload=None, body=None, status=200):
    """A fake Codeforces API that records the query strings it receives."""
    requests = []

    async def recent_actions(request):
        requests.append(dict(request.query))
        if body is not None:
            return web.Response(body=body, status=status)
        return web.json_response(payload, status=status)

    app = web.Application()
    app.router.add_get("/api/recentActions", recent_actions)
    return app, requests


async def fetch(app, max_count=2, max_attempts=1):
    server = test_utils.TestServer(app)
    await server.start_server()
    try:
        async with CodeforcesClient(
            timeout=timedelta(seconds=10),
            base_url=str(server.make_url("/api")),
            max_attempts=max_attempts,
        ) as client:
            return await client.recent_actions(max_count)
    finally:
        await server.close()


@pytest.mark.asyncio
class TestCodeforcesClient:
    """Tests for CodeforcesClient against a local server."""

    async def test_fetch_recent_actions(self):
        """Should return actions in the order the API sent them."""
        app, requests = make_app({"status": "OK", "result": [BLOG_ACTION, COMMENT_ACTION]})

        actions = await fetch(app, max_count=2)

        assert [a.time_seconds for a in actions] == [1700000100, 1700000050]
        assert requests == [{"maxCount": "2"}]

    async def test_empty_result(self):
        app, _ = make_app({"status": "OK", "result": []})
        assert await fetch(app) == []

    async def test_remote_status_not_ok(self):
        """Should surface the Codeforces comment and not retry."""
        app, requests = make_app(
            {"status": "FAILED", "comment": "maxCount: Field should be no more than 100"},
            status=400,
        )

        with pytest.raises(RemoteStatusError) as exc_info:
            await fetch(app, max_count=500, max_attempts=3)

        assert exc_info.value.comment == "maxCount: Field should be no more than 100"
        assert len(requests) == 1

    async def test_malformed_body(self):
        app, _ = make_app(body=b"<html>502 Bad Gateway</html>", status=502)
        with pytest.raises(ResponseParseError):
            await fetch(app)

    async def test_result_not_a_list(self):
        app, _ = make_app({"status": "OK", "result": {"timeSeconds": 1}})
        with pytest.raises(ResponseParseError):
            await fetch(app)

    async def test_malformed_action(self):
        app, _ = make_app({"status": "OK", "result": [{"blogEntry": {}}]})
        with pytest.raises(ResponseParseError):
            await fetch(app)

    async def test_connection_refused(self):
        """Should raise TransportError when the server is gone."""
        server = test_utils.TestServer(web.Application())
        await server.start_server()
        url = str(server.make_url("/api"))
        await server.close()

        async with CodeforcesClient(timeout=timedelta(seconds=5), base_url=url,
                                    max_attempts=1) as client:
            with pytest.raises(TransportError):
                await client.recent_actions(10)

    async def test_requires_open_session(self):
        client = CodeforcesClient(timeout=timedelta(seconds=5), base_url="http://127.0.0.1:1/api")
        with pytest.raises(RequestConstructionError):
            await client.recent_actions(10)

    async def test_rejects_non_positive_count(self):
        async with CodeforcesClient(timeout=timedelta(seconds=5),
                                    base_url="http://127.0.0.1:1/api") as client:
            with pytest.raises(RequestConstructionError):
                await client.recent_actions(0)
