import base64
from typing import List

import httpx
import pytest

from webqa_flows.api import build_async_client
from webqa_flows.config import ApiSettings, Credentials, RetryPolicy, UiSettings

TOKEN_URL = "https://auth.example.test/v1/oauth2/token"
ORDER_URL = "https://api.example.test/v2/checkout/orders"


class FakeUIHandle:
    """In-memory UIHandle. Element refs are plain tuples describing how they were located.

    ``row_counts`` scripts successive row-count readings (the last value repeats once the
    script runs out); without it the count follows ``rows``, which a confirmed delete
    decrements.
    """

    def __init__(self, rows=0, row_counts=None, invisible=(), confirm_hides=True, failing_clicks=()):
        self.rows = rows
        self.row_counts = list(row_counts) if row_counts is not None else None
        self.invisible = set(invisible)
        self.confirm_hides = confirm_hides
        self.failing_clicks = set(failing_clicks)
        self.count_calls = 0
        self.clicks: List[tuple] = []
        self.typed: List[tuple] = []
        self.waits: List[tuple] = []
        self.network_idle_calls = 0

    def get_by_role(self, role, name=None, exact=False):
        return ("role", role, getattr(name, "pattern", name), exact)

    def get_by_text(self, text, exact=False):
        return ("text", text)

    def locate(self, selector, within=None, nth=None):
        return ("css", selector, within, nth)

    @staticmethod
    def is_row_action(element):
        return element[0] == "css" and element[1] == "button"

    @staticmethod
    def is_rows(element):
        return element[0] == "css" and element[1] == ".oxd-table-card" and element[3] is None

    async def count(self, element):
        assert self.is_rows(element)
        self.count_calls += 1
        if self.row_counts is not None:
            return self.row_counts.pop(0) if len(self.row_counts) > 1 else self.row_counts[0]
        return self.rows

    async def click(self, element, timeout=None):
        if element in self.failing_clicks:
            raise RuntimeError(f"click intercepted on {element}")
        self.clicks.append(element)
        if element[:2] == ("role", "button") and "delete" in str(element[2]) and self.confirm_hides:
            self.rows = max(self.rows - 1, 0)

    async def type(self, element, text, timeout=None):
        self.typed.append((element, text))

    async def text(self, element, timeout=None):
        return "  PIM  " if element[:2] == ("role", "heading") else ""

    async def is_visible(self, element, timeout=None):
        self.waits.append(("visible", element, timeout))
        return element not in self.invisible

    async def is_attached(self, element, timeout=None):
        self.waits.append(("attached", element, timeout))
        return True

    async def is_hidden(self, element, timeout=None):
        self.waits.append(("hidden", element, timeout))
        return self.confirm_hides

    async def wait_for_network_idle(self, timeout=None):
        self.network_idle_calls += 1

    @property
    def delete_clicks(self):
        return [c for c in self.clicks if self.is_row_action(c)]


@pytest.fixture
def ui_settings() -> UiSettings:
    return UiSettings(custom_wait_ms=500, row_count_retry=RetryPolicy(max_attempts=3, delay_ms=0))


@pytest.fixture
def api_settings() -> ApiSettings:
    return ApiSettings.from_env(
        {
            "CLIENT_ID": "test-client",
            "CLIENT_SECRET": "test-secret-value",
            "API_AUTH_URL": TOKEN_URL,
            "BUY_ORDER_ENDPOINT": ORDER_URL,
        }
    )


@pytest.fixture
def credentials(api_settings) -> Credentials:
    return api_settings.credentials


@pytest.fixture
def expected_basic_auth() -> str:
    return "Basic " + base64.b64encode(b"test-client:test-secret-value").decode()


class RecordingTransport:
    """Routes requests to per-URL responders and keeps every request it saw."""

    def __init__(self, routes):
        self.routes = routes
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder = self.routes[str(request.url).split("?")[0].rstrip("/")]
        return responder(request) if callable(responder) else responder

    def client(self, settings=None) -> httpx.AsyncClient:
        return build_async_client(settings, transport=httpx.MockTransport(self))


@pytest.fixture
def make_transport():
    return RecordingTransport
