"""
Shared pytest fixtures for route-creator tests.

Provides:
- A controllable clock and a memory store driven by it
- Starlette request objects built straight from an ASGI scope
- TestClient factory that binds an ApiRouter through the app lifespan
"""

from contextlib import ExitStack
from typing import Callable, Dict, Generator, Optional, Tuple

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.requests import Request

from route_creator.db.transient import MemoryStore
from route_creator.routing import ApiRouter


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> MemoryStore:
    return MemoryStore(clock=clock)


@pytest.fixture
def make_request() -> Callable[..., Request]:
    """Build a Request without going through an app."""

    def _make(
        method: str = "GET",
        path: str = "/custom/v2/example",
        headers: Optional[Dict[str, str]] = None,
        client: Optional[Tuple[str, int]] = ("203.0.113.7", 52000),
        user: object = None,
    ) -> Request:
        scope = {
            "type": "http",
            "http_version": "1.1",
            "method": method,
            "scheme": "http",
            "path": path,
            "raw_path": path.encode(),
            "query_string": b"",
            "root_path": "",
            "headers": [
                (name.lower().encode("latin-1"), value.encode("latin-1"))
                for name, value in (headers or {}).items()
            ],
            "client": client,
            "server": ("testserver", 80),
        }
        if user is not None:
            scope["user"] = user
        return Request(scope)

    return _make


@pytest.fixture
def client_for() -> Generator[Callable[..., TestClient], None, None]:
    """
    Return a factory that starts an app for an ApiRouter.

    Routes are bound by the app lifespan, the same way a real
    deployment binds them.
    """
    with ExitStack() as stack:

        def _start(routes: ApiRouter, app: Optional[FastAPI] = None) -> TestClient:
            app = app or FastAPI(lifespan=routes.lifespan)
            return stack.enter_context(TestClient(app))

        yield _start
