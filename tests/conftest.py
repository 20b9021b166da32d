"""Shared test fixtures for regwatch tests."""

from typing import Any, Callable

import httpx
import pytest

from regwatch.registry.transport import HttpxTransport

Handler = Callable[[httpx.Request], httpx.Response]


class FakeRegistry:
    """In-memory registry served through httpx.MockTransport.

    Routes are matched on the full URL first, then on the URL without its
    query string. Unknown routes answer 404. Every request is recorded.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        url: str,
        status: int = 200,
        json: Any = None,
        headers: dict[str, str] | None = None,
        content: bytes | None = None,
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if json is not None:
                return httpx.Response(status, json=json, headers=headers)
            return httpx.Response(status, content=content or b"", headers=headers)

        self.routes[(method, url)] = handler

    def add_handler(self, method: str, url: str, handler: Handler) -> None:
        self.routes[(method, url)] = handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        full = str(request.url)
        bare = full.split("?", 1)[0]
        handler = self.routes.get((request.method, full)) or self.routes.get(
            (request.method, bare)
        )
        if handler is None:
            return httpx.Response(404)
        return handler(request)

    def requests_to(self, url: str) -> list[httpx.Request]:
        return [r for r in self.requests if str(r.url).split("?", 1)[0] == url]


@pytest.fixture
def registry() -> FakeRegistry:
    """Create an empty fake registry."""
    return FakeRegistry()


@pytest.fixture
def transport(registry: FakeRegistry) -> HttpxTransport:
    """Create a transport wired to the fake registry."""
    client = httpx.Client(transport=httpx.MockTransport(registry.handle))
    return HttpxTransport(client=client)


@pytest.fixture
def anonymous_ghcr(registry: FakeRegistry) -> FakeRegistry:
    """A ghcr.io that allows anonymous access."""
    registry.add("GET", "https://ghcr.io/v2/", status=200)
    return registry


@pytest.fixture
def token_ghcr(registry: FakeRegistry) -> FakeRegistry:
    """A ghcr.io that requires a bearer token."""
    registry.add(
        "GET",
        "https://ghcr.io/v2/",
        status=401,
        headers={
            "WWW-Authenticate": 'Bearer realm="https://ghcr.io/token",service="ghcr.io"',
        },
    )
    registry.add("GET", "https://ghcr.io/token", json={"token": "secret-token"})
    return registry
