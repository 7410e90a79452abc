"""Tests for the signal generator."""

import pytest

from market_analytics.analytics import OrderbookAnalyzer, SignalGenerator
from market_analytics.interfaces import DataUnavailableError
from market_analytics.metrics import TradeFlow
from market_analytics.models import (
    DepthMetrics,
    OrderbookAnalysis,
    SignalAction,
    SpreadAnalysis,
)

from conftest import make_snapshot, make_trades


def orderbook(spread_pct=0.2, concentration=0.0, mid=100.0):
    return OrderbookAnalysis(
        market_id="m1",
        liquidity_concentration=concentration,
        whale_orders=[],
        spread_analysis=SpreadAnalysis(
            bid_ask_spread=mid * spread_pct / 100,
            spread_percentage=spread_pct,
            mid_price=mid,
        ),
        depth_metrics=DepthMetrics(
            bid1_percent=0, ask1_percent=0, total_bid_volume=0, total_ask_volume=0
        ),
    )


def flow(*rows):
    return TradeFlow.from_trades(make_trades(*rows))


@pytest.fixture
def generator(provider, cache):
    return SignalGenerator(provider, OrderbookAnalyzer(provider, cache))


class TestClassification:
    def test_buy(self, generator):
        signal = generator.evaluate(
            "m1", orderbook(0.2), flow(("102", "1", "buy"), ("100", "1", "buy"))
        )

        assert signal.signal is SignalAction.BUY
        assert signal.reasons == ["positive momentum", "buy-side dominance", "tight spread"]
        assert signal.entry_price == pytest.approx(102.0)
        assert signal.exit_price == pytest.approx(104.04)

    def test_sell(self, generator):
        signal = generator.evaluate(
            "m1", orderbook(0.2), flow(("98", "1", "sell"), ("100", "1", "sell"))
        )

        assert signal.signal is SignalAction.SELL
        assert signal.reasons == ["negative momentum", "sell-side dominance", "tight spread"]
        assert signal.exit_price == pytest.approx(96.04)

    def test_wide_spread_blocks_entry(self, generator):
        signal = generator.evaluate(
            "m1", orderbook(0.6), flow(("102", "1", "buy"), ("100", "1", "buy"))
        )

        assert signal.signal is SignalAction.HOLD
        assert signal.reasons == ["positive momentum", "buy-side dominance"]

    def test_hold_uses_downside_exit(self, generator):
        signal = generator.evaluate(
            "m1", orderbook(0.6), flow(("102", "1", "buy"), ("100", "1", "buy"))
        )

        # Positive momentum: max(-0.02, 0.01) = 0.01
        assert signal.exit_price == pytest.approx(102 * 0.99)

    def test_buy_exit_minimum_move(self, generator):
        signal = generator.evaluate(
            "m1", orderbook(0.2), flow(("100.6", "1", "buy"), ("100", "1", "buy"))
        )

        assert signal.signal is SignalAction.BUY
        assert signal.exit_price == pytest.approx(100.6 * 1.01)

    def test_momentum_threshold_is_strict(self, generator):
        signal = generator.evaluate(
            "m1", orderbook(0.2), flow(("100.5", "1", "buy"), ("100", "1", "buy"))
        )

        assert signal.signal is SignalAction.HOLD
        assert "positive momentum" not in signal.reasons

    def test_weak_imbalance_holds(self, generator):
        signal = generator.evaluate(
            "m1",
            orderbook(0.2),
            flow(("102", "11", "buy"), ("100", "10", "sell")),
        )

        # (11 - 10) / 21 < 0.1
        assert signal.signal is SignalAction.HOLD
        assert signal.reasons == ["positive momentum", "tight spread"]

    def test_wide_spread_reason(self, generator):
        signal = generator.evaluate("m1", orderbook(1.5), flow(("100", "1", None)))

        assert signal.reasons == ["wide spread"]

    def test_mid_spread_has_no_spread_reason(self, generator):
        signal = generator.evaluate("m1", orderbook(0.3), flow(("100", "1", None)))

        assert signal.reasons == []


class TestScores:
    def test_confidence(self, generator):
        # |0.004| * 10 + |0| = 0.04
        signal = generator.evaluate(
            "m1", orderbook(0.2), flow(("100.4", "1", None), ("100", "1", None))
        )

        assert signal.confidence == pytest.approx(0.04)

    def test_confidence_clamped(self, generator):
        signal = generator.evaluate(
            "m1", orderbook(0.2), flow(("1000", "1", "buy"), ("1", "1", "buy"))
        )

        assert signal.confidence == 1.0

    def test_risk_score(self, generator):
        signal = generator.evaluate("m1", orderbook(0.2, concentration=0.5), flow())

        assert signal.risk_score == pytest.approx(60.0)

    def test_risk_score_clamped(self, generator):
        signal = generator.evaluate("m1", orderbook(5.0, concentration=1.0), flow())

        assert signal.risk_score == 100.0

    def test_adversarial_inputs_stay_bounded(self, generator):
        signal = generator.evaluate(
            "m1",
            orderbook(-50.0, concentration=0.0),
            flow(("1e9", "-5", "buy"), ("1e-9", "1", "sell")),
        )

        assert 0.0 <= signal.confidence <= 1.0
        assert 0.0 <= signal.risk_score <= 100.0


class TestEntryPrice:
    def test_falls_back_to_mid_without_trades(self, generator):
        signal = generator.evaluate("m1", orderbook(0.2, mid=50.0), flow())

        assert signal.signal is SignalAction.HOLD
        assert signal.entry_price == pytest.approx(50.0)
        assert signal.exit_price == pytest.approx(49.5)
        assert signal.confidence == 0.0

    def test_empty_market_is_zero(self, generator):
        signal = generator.evaluate("m1", orderbook(0.0, mid=0.0), flow())

        assert signal.entry_price == 0.0
        assert signal.exit_price == 0.0


class TestGenerate:
    async def test_end_to_end(self, generator, provider, cache):
        provider.orderbooks["m1"] = make_snapshot(
            "m1", bids=[("100", "5")], asks=[("100.2", "5")]
        )
        provider.trades["m1"] = make_trades(("102", "1", "buy"), ("100", "1", "buy"))

        signal = await generator.generate("m1")

        assert signal.signal is SignalAction.BUY
        assert signal.market_id == "m1"
        assert provider.trade_limits == [50]
        assert "orderbook:analysis:m1" in cache.entries

    async def test_limit_clamped(self, generator, provider):
        await generator.generate("m1", trade_limit=1000)
        await generator.generate("m1", trade_limit=-3)

        assert provider.trade_limits == [200, 1]

    async def test_reuses_cached_orderbook(self, generator, provider):
        await generator.generate("m1")
        await generator.generate("m1")

        assert provider.orderbook_calls["m1"] == 1
        assert provider.trade_calls["m1"] == 2

    async def test_provider_failure_propagates(self, generator, provider):
        provider.failing.add("m1")

        with pytest.raises(DataUnavailableError):
            await generator.generate("m1")

    async def test_serialized_names(self, generator):
        payload = (await generator.generate("m1")).model_dump(mode="json", by_alias=True)

        assert set(payload) == {
            "marketId",
            "signal",
            "confidence",
            "riskScore",
            "entryPrice",
            "exitPrice",
            "reasons",
        }
        assert payload["signal"] == "hold"
