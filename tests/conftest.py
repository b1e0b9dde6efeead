"""Pytest fixtures and configuration.

Provides a fake HTTP session so that executor and taglet tests never
touch the network.
"""
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple

import pytest
import requests

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from doc_restlet.config import Settings  # noqa: E402
from doc_restlet.constants import ConstantRegistry  # noqa: E402

BASE_URI = "http://example.org/rest/"


@dataclass
class FakeResponse:
    status_code: int = 200
    content: bytes = b""
    reason: str = "OK"


@dataclass
class FakeSession:
    """Stands in for requests.Session.

    ``routes`` maps (verb, url) to a FakeResponse, or to an exception to
    raise. Every call is recorded in ``calls``.
    """
    routes: Dict[Tuple[str, str], object] = field(default_factory=dict)
    calls: List[dict] = field(default_factory=list)
    closed: bool = False

    def add(self, verb: str, url: str, content, status_code: int = 200, reason: str = "OK") -> None:
        if isinstance(content, str):
            content = content.encode("utf-8")
        self.routes[(verb, url)] = FakeResponse(status_code, content, reason)

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        route = self.routes.get((method, url))
        if route is None:
            raise requests.exceptions.ConnectionError(f"No route for {method} {url}")
        if isinstance(route, Exception):
            raise route
        return route

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def settings() -> Settings:
    return Settings(rest_uri=BASE_URI)


@pytest.fixture
def registry() -> ConstantRegistry:
    registry = ConstantRegistry()
    registry.register("com.x.Svc#NAME", "health")
    registry.register("com.x.Svc#LIMIT", 2)
    return registry
