"""In-process provider endpoint used by transport-level tests.

The server speaks the provider contract: it records each JSON request and
replays queued responses.
"""

from contextlib import asynccontextmanager

from aiohttp import web
from aiohttp.test_utils import TestServer


class RecordingProvider:
    """Fake provider endpoint that records requests and replays responses.
    
    Each queued response is a (status, body) tuple, a callable coroutine
    for custom behavior, or a dict sent as JSON with status 200. The last
    response is repeated once the queue is exhausted.
    """
    
    def __init__(self, *responses) -> None:
        self.responses = list(responses)
        self.requests: list[dict] = []
        self.headers: list[dict] = []
    
    async def handle(self, request: web.Request) -> web.StreamResponse:
        self.requests.append(await request.json())
        self.headers.append(dict(request.headers))
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if callable(response):
            return await response(request)
        if isinstance(response, tuple):
            status, body = response
            return web.Response(status=status, text=body)
        return web.json_response(response)


@asynccontextmanager
async def provider_server(provider: RecordingProvider):
    app = web.Application()
    app.router.add_post("/run", provider.handle)
    server = TestServer(app)
    await server.start_server()
    try:
        yield str(server.make_url("/run"))
    finally:
        await server.close()


class SleepRecorder:
    """Records requested backoff delays without sleeping."""
    
    def __init__(self) -> None:
        self.delays: list[float] = []
    
    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
