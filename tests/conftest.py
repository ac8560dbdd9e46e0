import os
from typing import Any, Callable, Dict, List

import httpx
import pytest
from typer.testing import CliRunner

from deelmcp.domain.interfaces.user_interface import UserInterface
from deelmcp.infrastructure.cache.caching_service import InMemoryCache
from deelmcp.infrastructure.config import settings
from deelmcp.infrastructure.http.deel_client import DeelApiClient
from deelmcp.infrastructure.resilience.rate_limiter import RateLimiter

BASE_URL = "https://api.test.deel/rest/v2"
TOKEN = "test-token"

class FakeClock:
    """Virtual time source whose sleep advances the clock instead of waiting."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

class FakeDeelApi:
    """httpx transport handler serving canned responses by request path.

    Routes map a path (below the base URL) to a JSON-serialisable body, a
    handler taking the request, or a list of `httpx.Response`/exceptions
    consumed one per request (the last one repeats).
    """

    def __init__(self) -> None:
        self.routes: Dict[str, Any] = {}
        self.requests: List[httpx.Request] = []
        # Body served for unrouted paths; None means 404
        self.default: Any = None

    def add(self, path: str, body: Any) -> None:
        self.routes[path] = body

    def add_sequence(self, path: str, responses: List[Any]) -> None:
        self.routes[path] = list(responses)

    def paths(self) -> List[str]:
        return [request.url.path for request in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path[len("/rest/v2"):]
        if path not in self.routes and self.default is not None:
            return httpx.Response(200, json=self.default)
        if path not in self.routes:
            return httpx.Response(404, json={"message": f"No route for {path}"})
        route = self.routes[path]
        if isinstance(route, list):
            item = route.pop(0) if len(route) > 1 else route[0]
            if isinstance(item, Exception):
                raise item
            return item
        if callable(route):
            return route(request)
        return httpx.Response(200, json=route)

@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Keeps tests independent of the developer's environment and config files."""
    for key in list(os.environ):
        if key.startswith("DEEL_"):
            monkeypatch.delenv(key, raising=False)
    settings.reset_configuration()
    settings.clear_test_config()
    yield
    settings.reset_configuration()
    settings.clear_test_config()

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()

@pytest.fixture
def fake_api() -> FakeDeelApi:
    return FakeDeelApi()

@pytest.fixture
def make_client(clock: FakeClock, fake_api: FakeDeelApi) -> Callable[..., DeelApiClient]:
    """Factory building a DeelApiClient wired to the fake API and virtual time."""

    def factory(**overrides: Any) -> DeelApiClient:
        options: Dict[str, Any] = dict(
            api_token=TOKEN,
            base_url=BASE_URL,
            cache=InMemoryCache(clock=clock),
            rate_limiter=RateLimiter(clock=clock, sleep=clock.sleep),
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(fake_api)),
            sleep=clock.sleep,
        )
        options.update(overrides)
        return DeelApiClient(**options)

    return factory

@pytest.fixture
def client(make_client) -> DeelApiClient:
    return make_client()

@pytest.fixture
def mock_ui(mocker):
    return mocker.MagicMock(spec=UserInterface)

@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()
