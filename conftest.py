"""Shared fixtures: a scripted fake upstream API and the objects wired to it."""

import json
from typing import Any, Dict, List, Tuple

import httpx
import pytest

from generic_mcp_server.api_client import ApiClient
from generic_mcp_server.config import Settings
from generic_mcp_server.resource_service import ResourceService
from generic_mcp_server.resources import build_resource_registry
from generic_mcp_server.tools import build_tool_registry

BASE_URL = "https://api.test"


class FakeUpstream:
    """httpx MockTransport handler with canned responses per (method, path)."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._routes: Dict[Tuple[str, str], List[Dict[str, Any]]] = {}

    def route(self, method: str, path: str, json_body: Any = None, status: int = 200, text: str = None):
        if text is not None:
            canned = {"text": text}
        elif json_body is None:
            canned = {}
        else:
            canned = {"json": json_body}
        self._routes.setdefault((method, path), []).append(dict(canned, status_code=status))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self._routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, text=f"no route for {request.method} {request.url.path}")
        # the last response repeats once the queue is down to one
        canned = dict(queue.pop(0) if len(queue) > 1 else queue[0])
        return httpx.Response(canned.pop("status_code"), **canned)

    def body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def api_client(upstream, clock):
    return ApiClient(BASE_URL, api_key="secret", cache_ttl_seconds=60, transport=upstream.transport, clock=clock)


@pytest.fixture
def service(api_client):
    return ResourceService(api_client)


@pytest.fixture
def tools(service):
    return build_tool_registry(service, choose=lambda options: options[0])


@pytest.fixture
def settings():
    return Settings(base_url=BASE_URL, api_key="secret", environment="test", port=9000)


@pytest.fixture
def resources(settings):
    return build_resource_registry(settings)
