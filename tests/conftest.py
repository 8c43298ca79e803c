"""Pytest fixtures for asanakit tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator

import httpx
import pytest

from asanakit.client import AsanaClient

Handler = Callable[[httpx.Request], httpx.Response]

TEST_BASE_URL = "http://asana.test/"


class Router:
    """Path-keyed request handlers backing an httpx.MockTransport.

    Records every request it receives so tests can assert on
    method, headers and body.
    """

    def __init__(self) -> None:
        self.routes: dict[str, Handler] = {}
        self.requests: list[httpx.Request] = []

    def add(self, path: str, handler: Handler) -> None:
        self.routes[path] = handler

    def respond(self, path: str, body: str, status_code: int = 200) -> None:
        """Serve a fixed body without a JSON content type."""
        self.add(path, lambda request: httpx.Response(status_code, text=body))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get(request.url.path)
        if handler is None:
            return httpx.Response(
                404,
                json={"errors": [{"message": "Not Found", "phrase": request.url.path}]},
            )
        return handler(request)

    def calls(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]


@pytest.fixture
def router() -> Router:
    return Router()


@pytest.fixture
def client(router: Router) -> Iterator[AsanaClient]:
    """AsanaClient wired to the in-memory router."""
    http = httpx.Client(transport=httpx.MockTransport(router))
    asana = AsanaClient(http, base_url=TEST_BASE_URL)
    yield asana
    http.close()
