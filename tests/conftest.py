"""Pytest configuration and fixtures."""

import os
from typing import Any, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "true"
os.environ["DRY_RUN"] = "true"

from bridgequote.api.app import create_app
from bridgequote.config import Settings
from bridgequote.routing.base import RouteProvider, UpstreamQuoteParams
from bridgequote.services.quote_service import QuoteService
from bridgequote.tokens import TokenRegistry


class StubRouteProvider(RouteProvider):
    """Route provider returning a canned response and counting calls."""

    def __init__(self, response: Any = None, error: Optional[Exception] = None):
        self.response = response if response is not None else []
        self.error = error
        self.calls = 0
        self.last_params: Optional[UpstreamQuoteParams] = None

    @property
    def name(self) -> str:
        return "stub"

    async def fetch_routes(self, params: UpstreamQuoteParams) -> Any:
        self.calls += 1
        self.last_params = params
        if self.error is not None:
            raise self.error
        return self.response


TWO_ROUTES = [
    {"type": "WH", "feeUsd": "2.50", "etaSeconds": 900, "expectedAmountOutBaseUnits": "99000000"},
    {"type": "SWIFT", "feeUsd": "0.80", "etaSeconds": 20, "expectedAmountOutBaseUnits": "99500000"},
]


def make_settings(**overrides) -> Settings:
    """Build settings isolated from any local .env file."""
    values = {
        "fee_bps": 50,
        "referrer_address": "RefAddr111",
        "referrer_bps": 50,
        "dry_run": True,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def registry(settings) -> TokenRegistry:
    return TokenRegistry.from_settings(settings)


@pytest.fixture
def stub_provider() -> StubRouteProvider:
    return StubRouteProvider(response=TWO_ROUTES)


@pytest.fixture
def quote_service(settings, stub_provider, registry) -> QuoteService:
    return QuoteService(settings=settings, provider=stub_provider, registry=registry)


@pytest.fixture
def test_app(settings, stub_provider):
    """Create test application backed by the stub provider."""
    return create_app(settings=settings, provider=stub_provider)


@pytest_asyncio.fixture
async def client(test_app):
    """Create async test client."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
