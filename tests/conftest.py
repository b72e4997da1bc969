"""Pytest configuration and fixtures."""
import json
from typing import Callable, Dict, List, Tuple

import httpx
import pytest

from tracker.config import AppConfig
from tracker.dependencies import Services, init_services
from tracker.domain.entities import AlertEvent
from tracker.services.notification_bus import NotificationBus


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


class FakeBackend:
    """Routes (method, path) pairs to canned handlers and records requests."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: List[httpx.Request] = []

    def on(self, method: str, path: str, status: int = 200, payload=None, handler=None):
        if handler is None:
            def handler(request: httpx.Request) -> httpx.Response:
                if payload is None:
                    return httpx.Response(status)
                return httpx.Response(status, json=payload)
        self.routes[(method.upper(), path)] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"error": "not found"})
        return handler(request)

    def bodies(self, method: str, path: str) -> List[dict]:
        return [
            json.loads(r.content)
            for r in self.requests
            if r.method == method and r.url.path == path and r.content
        ]

    def calls(self, method: str, path: str) -> int:
        return sum(1 for r in self.requests if r.method == method and r.url.path == path)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def config() -> AppConfig:
    config = AppConfig()
    config.BACKEND_URL = "http://tracker.test"
    config.REQUEST_TIMEOUT = 5.0
    config.ALERT_DURATION_SECONDS = 10
    return config


@pytest.fixture
def services(config, backend) -> Services:
    return init_services(config, transport=httpx.MockTransport(backend))


@pytest.fixture
def bus() -> NotificationBus:
    return NotificationBus()


@pytest.fixture
def alerts(services) -> List[AlertEvent]:
    """Every alert published on the services bus."""
    received: List[AlertEvent] = []
    services.bus.subscribe_alerts(received.append)
    return received


@pytest.fixture
def navigations() -> List[str]:
    return []
