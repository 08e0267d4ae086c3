import json
from collections.abc import Callable
from urllib.parse import parse_qs

import httpx
import pytest


class RecordingProvider:
    """Fake identity provider serving discovery and token endpoints."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}

    def route(self, method: str, url: str, response: httpx.Response) -> None:
        self.routes[(method, url)] = lambda request: response

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, str(request.url))
        if key not in self.routes:
            return httpx.Response(404, json={"error": "not_found"})
        return self.routes[key](request)

    def requests_to(self, url: str) -> list[httpx.Request]:
        return [r for r in self.requests if str(r.url) == url]

    @staticmethod
    def form_body(request: httpx.Request) -> dict[str, str]:
        return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}

    @staticmethod
    def json_body(request: httpx.Request) -> dict:
        return json.loads(request.content)


@pytest.fixture
def provider() -> RecordingProvider:
    return RecordingProvider()


@pytest.fixture
async def http_client(provider: RecordingProvider):
    client = httpx.AsyncClient(transport=httpx.MockTransport(provider.handler))
    yield client
    await client.aclose()
