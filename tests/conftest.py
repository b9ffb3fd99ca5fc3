from collections.abc import Callable
from typing import Any

import httpx
import pytest

from httpchain_sessions import ChainRunner, SessionStore

Route = dict[str, Any] | Callable[[httpx.Request], httpx.Response] | Exception


class MockApi:
    """Route table served through ``httpx.MockTransport``, keyed by method and path."""

    def __init__(self):
        self.routes: dict[tuple[str, str], Route] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, route: Route) -> None:
        self.routes[(method.upper(), path)] = route

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        match route:
            case None:
                return httpx.Response(404, json={"error": "not found"})
            case Exception():
                raise route
            case dict():
                return httpx.Response(**route)
            case _:
                return route(request)


@pytest.fixture
def mock_api() -> MockApi:
    return MockApi()


@pytest.fixture
def client(mock_api):
    with httpx.Client(transport=httpx.MockTransport(mock_api)) as client:
        yield client


@pytest.fixture
def store() -> SessionStore:
    return SessionStore()


@pytest.fixture
def runner(store, client) -> ChainRunner:
    return ChainRunner(store, client)
