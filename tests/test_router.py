"""Tests for the routing module."""

import logging
from decimal import Decimal

import httpx
import pytest

from conftest import make_settings
from bridgequote.amounts import to_smallest_units
from bridgequote.errors import InvalidRoutingPolicyError, NoRoutesError, UpstreamCallError
from bridgequote.routing.base import AUTO_SLIPPAGE, RoutingPolicy, UpstreamQuoteParams
from bridgequote.routing.dry_run import DryRunRouteProvider
from bridgequote.routing.factory import create_route_provider
from bridgequote.routing.mayan import MayanProvider
from bridgequote.routing.normalizer import (
    BestRouteEnvelope,
    RouteList,
    RoutesEnvelope,
    classify_response,
    normalize_routes,
)
from bridgequote.routing.selector import select_route
from bridgequote.tokens import TokenRegistry

ROUTE_A = {"type": "A", "feeUsd": 3, "etaSeconds": 10}
ROUTE_B = {"type": "B", "feeUsd": 1, "etaSeconds": 20}
ROUTE_C = {"type": "C", "feeUsd": 2, "etaSeconds": 5}


def make_params(amount: str = "100", slippage=AUTO_SLIPPAGE, **kwargs) -> UpstreamQuoteParams:
    registry = TokenRegistry()
    source = registry.lookup("solana", "USDC")
    dest = registry.lookup("ethereum", "USDC")
    return UpstreamQuoteParams(
        from_token=source,
        to_token=dest,
        amount_in=to_smallest_units(amount, source.decimals),
        slippage_bps=slippage,
        **kwargs,
    )


class TestRouteNormalizer:
    """Tests for provider response normalization."""

    def test_bare_list(self):
        routes = normalize_routes([ROUTE_A, ROUTE_B])
        assert [r.provider_label for r in routes] == ["A", "B"]

    def test_routes_field(self):
        routes = normalize_routes({"routes": [ROUTE_A, ROUTE_B]})
        assert [r.provider_label for r in routes] == ["A", "B"]

    def test_best_route_field(self):
        routes = normalize_routes({"bestRoute": ROUTE_A})
        assert [r.provider_label for r in routes] == ["A"]

    def test_empty_object_has_no_routes(self):
        with pytest.raises(NoRoutesError):
            normalize_routes({})

    @pytest.mark.parametrize("raw", [[], None, "routes", 42, {"routes": []}, {"bestRoute": None}])
    def test_unusable_responses(self, raw):
        with pytest.raises(NoRoutesError):
            normalize_routes(raw)

    def test_routes_field_checked_before_best_route(self):
        routes = normalize_routes({"routes": [ROUTE_B], "bestRoute": ROUTE_A})
        assert [r.provider_label for r in routes] == ["B"]

    def test_empty_routes_falls_through_to_best_route(self):
        routes = normalize_routes({"routes": [], "bestRoute": ROUTE_C})
        assert [r.provider_label for r in routes] == ["C"]

    def test_non_object_entries_skipped(self):
        routes = normalize_routes([ROUTE_A, "junk", None, ROUTE_B])
        assert [r.provider_label for r in routes] == ["A", "B"]

    def test_classify_shapes(self):
        assert isinstance(classify_response([ROUTE_A]), RouteList)
        assert isinstance(classify_response({"routes": [ROUTE_A]}), RoutesEnvelope)
        assert isinstance(classify_response({"bestRoute": ROUTE_A}), BestRouteEnvelope)
        assert classify_response({"quotes": [ROUTE_A]}) is None

    def test_field_extraction(self):
        route = {
            "type": "SWIFT",
            "etaSeconds": 15,
            "feeUsd": "0.75",
            "expectedAmountOutBaseUnits": "99500000",
            "extra": {"nested": True},
        }
        [candidate] = normalize_routes([route])

        assert candidate.provider_label == "SWIFT"
        assert candidate.estimated_seconds == 15
        assert candidate.fee_estimate_usd == Decimal("0.75")
        assert candidate.net_amount_smallest == 99_500_000
        assert candidate.raw is route

    def test_float_fee_parsed_exactly(self):
        [candidate] = normalize_routes([{"feeUsd": 0.1}])
        assert candidate.fee_estimate_usd == Decimal("0.1")

    def test_missing_fields(self):
        [candidate] = normalize_routes([{"foo": "bar"}], default_label="Mayan")

        assert candidate.provider_label == "Mayan"
        assert candidate.estimated_seconds is None
        assert candidate.fee_estimate_usd is None
        assert candidate.net_amount_smallest is None

    def test_malformed_fields_ignored(self):
        [candidate] = normalize_routes([{"feeUsd": "n/a", "etaSeconds": -3, "netAmountSmallest": "1.5"}])

        assert candidate.fee_estimate_usd is None
        assert candidate.estimated_seconds is None
        assert candidate.net_amount_smallest is None

    def test_out_of_range_exponents_ignored(self):
        """Metrics with absurd exponents are dropped instead of expanded."""
        [candidate] = normalize_routes([{
            "type": "X",
            "etaSeconds": "1e999999999",
            "feeUsd": "1E+999999999",
            "expectedAmountOutBaseUnits": "9e999999999",
        }])

        assert candidate.provider_label == "X"
        assert candidate.estimated_seconds is None
        assert candidate.fee_estimate_usd is None
        assert candidate.net_amount_smallest is None

    def test_tiny_exponents_parse(self):
        [candidate] = normalize_routes([{"etaSeconds": "1e-999999999", "feeUsd": "2.5e1"}])

        assert candidate.estimated_seconds == 0
        assert candidate.fee_estimate_usd == Decimal("25")


class TestRouteSelector:
    """Tests for route selection policies."""

    @pytest.fixture
    def candidates(self):
        return normalize_routes([ROUTE_A, ROUTE_B, ROUTE_C])

    def test_cheapest(self, candidates):
        assert select_route(candidates, RoutingPolicy.CHEAPEST).provider_label == "B"

    def test_fastest(self, candidates):
        assert select_route(candidates, RoutingPolicy.FASTEST).provider_label == "C"

    def test_default(self, candidates):
        assert select_route(candidates, RoutingPolicy.DEFAULT).provider_label == "A"

    def test_safest_keeps_provider_order(self, candidates):
        assert select_route(candidates, RoutingPolicy.SAFEST).provider_label == "A"

    def test_ties_go_to_first_listed(self):
        candidates = normalize_routes([
            {"type": "first", "feeUsd": 1, "etaSeconds": 7},
            {"type": "second", "feeUsd": 1, "etaSeconds": 7},
        ])
        assert select_route(candidates, RoutingPolicy.CHEAPEST).provider_label == "first"
        assert select_route(candidates, RoutingPolicy.FASTEST).provider_label == "first"

    def test_missing_metric_ranks_last(self):
        candidates = normalize_routes([
            {"type": "unknown"},
            {"type": "priced", "feeUsd": 9, "etaSeconds": 999},
        ])
        assert select_route(candidates, RoutingPolicy.CHEAPEST).provider_label == "priced"
        assert select_route(candidates, RoutingPolicy.FASTEST).provider_label == "priced"

    def test_all_metrics_missing_falls_back_to_first(self):
        candidates = normalize_routes([{"type": "x"}, {"type": "y"}])
        assert select_route(candidates, RoutingPolicy.CHEAPEST).provider_label == "x"

    def test_all_metrics_missing_is_logged(self, caplog):
        candidates = normalize_routes([{"type": "x"}, {"type": "y", "etaSeconds": 5}])

        with caplog.at_level(logging.WARNING, logger="bridgequote.routing.selector"):
            select_route(candidates, RoutingPolicy.CHEAPEST)
            select_route(candidates, RoutingPolicy.FASTEST)

        messages = [r.getMessage() for r in caplog.records]
        assert any("fee_estimate_usd" in m for m in messages)
        assert not any("estimated_seconds" in m for m in messages)

    def test_accepts_policy_string(self, candidates):
        assert select_route(candidates, "fastest").provider_label == "C"

    def test_empty_candidates(self):
        with pytest.raises(NoRoutesError):
            select_route([], RoutingPolicy.DEFAULT)

    def test_does_not_mutate_candidates(self, candidates):
        before = list(candidates)
        select_route(candidates, RoutingPolicy.CHEAPEST)
        assert candidates == before


class TestRoutingPolicy:
    """Tests for policy parsing."""

    @pytest.mark.parametrize("raw,expected", [
        (None, RoutingPolicy.DEFAULT),
        ("", RoutingPolicy.DEFAULT),
        ("cheapest", RoutingPolicy.CHEAPEST),
        ("FASTEST", RoutingPolicy.FASTEST),
        (" safest ", RoutingPolicy.SAFEST),
        (RoutingPolicy.CHEAPEST, RoutingPolicy.CHEAPEST),
    ])
    def test_parse(self, raw, expected):
        assert RoutingPolicy.parse(raw) == expected

    def test_unknown_policy(self):
        with pytest.raises(InvalidRoutingPolicyError):
            RoutingPolicy.parse("luckiest")


class TestDryRunProvider:
    """Tests for the simulated route provider."""

    @pytest.mark.asyncio
    async def test_returns_bare_list(self):
        provider = DryRunRouteProvider()
        raw = await provider.fetch_routes(make_params())

        assert isinstance(raw, list)
        assert [r["type"] for r in raw] == ["SWIFT", "MCTP", "WH"]
        assert provider.calls == 1

    @pytest.mark.asyncio
    async def test_routes_are_normalizable(self):
        provider = DryRunRouteProvider()
        candidates = normalize_routes(await provider.fetch_routes(make_params("100")))

        swift = candidates[0]
        # 100 USD - (1.20 + 0.05) fee at 1:1 into a 6-decimal token
        assert swift.net_amount_smallest == 98_750_000
        assert swift.fee_estimate_usd == Decimal("1.25")
        assert swift.estimated_seconds == 15

    @pytest.mark.asyncio
    @pytest.mark.parametrize("shape", ["list", "routes", "bestRoute"])
    async def test_response_shapes(self, shape):
        provider = DryRunRouteProvider(response_shape=shape)
        candidates = normalize_routes(await provider.fetch_routes(make_params()))

        assert candidates[0].provider_label == "SWIFT"

    @pytest.mark.asyncio
    async def test_dust_amount_yields_no_routes(self):
        provider = DryRunRouteProvider()
        raw = await provider.fetch_routes(make_params("0.01"))

        assert raw == []

    def test_invalid_shape(self):
        with pytest.raises(ValueError):
            DryRunRouteProvider(response_shape="xml")


class TestMayanProvider:
    """Tests for the Mayan HTTP client."""

    def test_build_query(self):
        provider = MayanProvider(solana_program="Prog111", forwarder_address="0xfwd")
        params = make_params("90", referrer="RefAddr111", referrer_bps=50, gas_drop=Decimal("0.005"))
        query = provider.build_query(params)

        assert query["amountIn64"] == "90000000"
        assert query["fromToken"] == "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
        assert query["toToken"] == "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
        assert query["fromChain"] == "solana"
        assert query["toChain"] == "ethereum"
        assert query["slippageBps"] == "auto"
        assert query["gasDrop"] == "0.005"
        assert query["referrer"] == "RefAddr111"
        assert query["referrerBps"] == "50"
        assert query["solanaProgram"] == "Prog111"
        assert query["forwarderAddress"] == "0xfwd"
        assert query["swift"] == "true"

    def test_build_query_explicit_slippage_without_referrer(self):
        query = MayanProvider().build_query(make_params(slippage=150))

        assert query["slippageBps"] == "150"
        assert "referrer" not in query
        assert "solanaProgram" not in query

    @pytest.mark.asyncio
    async def test_unwraps_quotes_envelope(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            return httpx.Response(200, json={"quotes": [{"type": "SWIFT"}]})

        provider = MayanProvider(base_url="https://mayan.test/v3/quote", transport=httpx.MockTransport(handler))
        raw = await provider.fetch_routes(make_params())

        assert raw == [{"type": "SWIFT"}]
        assert "amountIn64=100000000" in seen["url"]

    @pytest.mark.asyncio
    async def test_passes_through_other_shapes(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"bestRoute": {"type": "WH"}}))
        raw = await MayanProvider(transport=transport).fetch_routes(make_params())

        assert raw == {"bestRoute": {"type": "WH"}}

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(500, text="internal boom"))

        with pytest.raises(UpstreamCallError) as exc_info:
            await MayanProvider(transport=transport).fetch_routes(make_params())

        assert exc_info.value.status_code == 500
        assert "internal boom" in exc_info.value.detail
        assert "internal boom" not in exc_info.value.public_message

    @pytest.mark.asyncio
    async def test_api_error_payload(self):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, json={"code": "AMOUNT_TOO_SMALL", "msg": "too small"})
        )

        with pytest.raises(UpstreamCallError):
            await MayanProvider(transport=transport).fetch_routes(make_params())

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(UpstreamCallError):
            await MayanProvider(transport=transport).fetch_routes(make_params())

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamCallError):
            await MayanProvider(transport=httpx.MockTransport(handler)).fetch_routes(make_params())


class TestProviderFactory:
    """Tests for provider selection."""

    def test_dry_run(self):
        assert isinstance(create_route_provider(make_settings(dry_run=True)), DryRunRouteProvider)

    def test_live(self):
        provider = create_route_provider(
            make_settings(dry_run=False, price_api_url="https://mayan.test/q", upstream_timeout_seconds=5)
        )

        assert isinstance(provider, MayanProvider)
        assert provider.base_url == "https://mayan.test/q"
        assert provider.timeout == 5
