"""Shared fixtures: a recording fake of the Bubble API behind httpx.MockTransport."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import httpx
import pytest

from bubble_mcp.config import ServerMode
from bubble_mcp.dispatcher import ToolDispatcher
from bubble_mcp.service import BubbleService


BASE_URL = "https://testapp.bubbleapps.io"


class FakeUpstream:
    """Records every request and answers with the configured handler."""

    def __init__(self, handler=None):
        self.requests = []
        self.handler = handler or (lambda request: httpx.Response(200, json={"ok": True}))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def calls(self):
        return [(r.method, r.url.path) for r in self.requests]


def make_service(upstream: FakeUpstream) -> BubbleService:
    client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(upstream))
    return BubbleService(client)


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def service(upstream):
    return make_service(upstream)


@pytest.fixture
def read_only(service):
    return ToolDispatcher(service, mode=ServerMode.READ_ONLY)


@pytest.fixture
def read_write(service):
    return ToolDispatcher(service, mode=ServerMode.READ_WRITE)
