"""
Shared fixtures: an in-process fake of Zoom's OAuth and REST endpoints, and an
httpx client wired straight into the FastAPI app.
"""
import httpx
import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from zoom_relay.config import Settings
from zoom_relay.main import create_app

DEFAULT_REPLIES = {
    "token": (200, {"access_token": "fake-access-token", "token_type": "bearer", "expires_in": 3599}),
    "meetings": (201, {
        "id": 85746065432,
        "join_url": "https://zoom.us/j/85746065432",
        "start_url": "https://zoom.us/s/85746065432?zak=abc",
    }),
    "webinars": (201, {
        "id": 93412345678,
        "join_url": "https://zoom.us/j/93412345678",
        "start_url": "https://zoom.us/s/93412345678?zak=xyz",
    }),
    "add_registrant": (201, {
        "id": 93412345678,
        "registrant_id": "reg-42",
        "join_url": "https://zoom.us/w/93412345678?tk=token",
    }),
    "list_registrants": (200, {
        "page_size": 30,
        "total_records": 1,
        "next_page_token": "",
        "registrants": [{"email": "ada@example.com", "first_name": "Ada", "status": "approved"}],
    }),
}


class FakeZoom:
    """Records every request and answers with a canned (status, body) per endpoint."""

    def __init__(self):
        self.calls = []
        self.replies = dict(DEFAULT_REPLIES)
        self.base_url = ""

    def reply(self, name, status, body):
        self.replies[name] = (status, body)

    def calls_to(self, name):
        return [c for c in self.calls if c["name"] == name]

    def app(self):
        app = web.Application()
        app.router.add_post("/oauth/token", self._handler("token"))
        app.router.add_post("/v2/users/{user_id}/meetings", self._handler("meetings"))
        app.router.add_post("/v2/users/{user_id}/webinars", self._handler("webinars"))
        app.router.add_post("/v2/webinars/{webinar_id}/registrants", self._handler("add_registrant"))
        app.router.add_get("/v2/webinars/{webinar_id}/registrants", self._handler("list_registrants"))
        return app

    def _handler(self, name):
        async def handle(request):
            if not request.body_exists:
                body = None
            elif request.content_type == "application/json":
                body = await request.json()
            else:
                body = dict(await request.post())
            self.calls.append({
                "name": name,
                "path": request.path,
                "headers": {k.lower(): v for k, v in request.headers.items()},
                "query": dict(request.query),
                "body": body,
            })
            status, payload = self.replies[name]
            if isinstance(payload, str):
                return web.Response(status=status, text=payload)
            return web.json_response(payload, status=status)

        return handle


@pytest_asyncio.fixture
async def fake_zoom():
    fake = FakeZoom()
    server = TestServer(fake.app())
    await server.start_server()
    fake.base_url = f"http://{server.host}:{server.port}"
    yield fake
    await server.close()


@pytest.fixture
def settings(fake_zoom):
    return Settings(
        account_id="acct-123",
        client_id="client-abc",
        client_secret="s3cret",
        oauth_url=f"{fake_zoom.base_url}/oauth/token",
        api_base_url=f"{fake_zoom.base_url}/v2",
        http_timeout=5,
    )


@pytest_asyncio.fixture
async def client(settings):
    app = create_app(settings)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://relay") as c:
        yield c
