"""Tests for market data and result models."""

import json
from decimal import Decimal

import pytest
from pydantic import ValidationError

from market_analytics.metrics.trade_flow import TradeFlow
from market_analytics.models import (
    DepthMetrics,
    OrderbookAnalysis,
    OrderLevel,
    Signal,
    SignalAction,
    SpreadAnalysis,
    Trade,
    TradeSide,
    WhaleOrder,
    parse_decimal,
)
from market_analytics.models.numeric import finite_float

from conftest import make_snapshot


class TestParseDecimal:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("101.25", Decimal("101.25")),
            (" 7 ", Decimal("7")),
            (3, Decimal("3")),
            (Decimal("0.5"), Decimal("0.5")),
        ],
    )
    def test_valid_values(self, raw, expected):
        assert parse_decimal(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "n/a", "NaN", "Infinity", "-inf", True, {}])
    def test_malformed_values_are_zero(self, raw):
        assert parse_decimal(raw) == Decimal("0")

    @pytest.mark.parametrize("raw", ["1e400", "-1e400", "1e999999", "1e-400", Decimal("1E+500")])
    def test_outside_float_range_is_zero(self, raw):
        assert parse_decimal(raw) == Decimal("0")

    def test_float_range_edges_kept(self):
        assert parse_decimal("1e308") == Decimal("1e308")
        assert parse_decimal("5e-324") == Decimal("5e-324")

    def test_huge_trade_aggregates_without_overflow(self):
        trades = [Trade(price="1e999999", quantity="1e999999", execution_side="buy")]

        flow = TradeFlow.from_trades(trades)

        assert flow.total_notional == Decimal("0")
        assert flow.total_volume == Decimal("0")


class TestFiniteFloat:
    def test_in_range(self):
        assert finite_float(Decimal("0.25")) == 0.25

    @pytest.mark.parametrize("value", [Decimal("1e400"), Decimal("-1e400"), float("inf"), float("nan")])
    def test_out_of_range_is_zero(self, value):
        assert finite_float(value) == 0.0


class TestOrderModels:
    def test_level_parses_strings(self):
        level = OrderLevel(price="100.5", quantity="2")
        assert level.price == Decimal("100.5")
        assert level.quantity == Decimal("2")

    def test_level_malformed_quantity_is_zero(self):
        assert OrderLevel(price="100", quantity="garbage").quantity == Decimal("0")

    def test_snapshot_requires_market_id(self):
        with pytest.raises(ValidationError):
            make_snapshot("")

    def test_empty_snapshot_reads_zero(self):
        snapshot = make_snapshot("m")
        assert snapshot.best_bid == Decimal("0")
        assert snapshot.best_ask == Decimal("0")
        assert snapshot.best_bid_quantity == Decimal("0")
        assert snapshot.total_ask_volume == Decimal("0")

    def test_top_volume(self, basic_snapshot):
        assert basic_snapshot.top_volume("bid", 1) == Decimal("5")
        assert basic_snapshot.top_volume("ask", 10) == Decimal("10")

    def test_top_volume_rejects_unknown_side(self, basic_snapshot):
        with pytest.raises(ValueError):
            basic_snapshot.top_volume("mid", 1)


class TestTrade:
    def test_accepts_wire_alias(self):
        trade = Trade.model_validate({"price": "10", "quantity": "2", "executionSide": "Buy"})
        assert trade.side is TradeSide.BUY
        assert trade.notional == Decimal("20")

    def test_unknown_side(self):
        trade = Trade(price="10", quantity="1", execution_side="maker")
        assert trade.side is None
        assert not trade.is_buy
        assert not trade.is_sell

    def test_missing_fields_default_to_zero(self):
        trade = Trade()
        assert trade.price == Decimal("0")
        assert trade.quantity == Decimal("0")


class TestResultSerialization:
    def _analysis(self):
        return OrderbookAnalysis(
            market_id="m1",
            liquidity_concentration=1.0,
            whale_orders=[
                WhaleOrder(price=Decimal("100"), quantity=Decimal("5"), side=TradeSide.BUY)
            ],
            spread_analysis=SpreadAnalysis(bid_ask_spread=1.0, spread_percentage=0.5, mid_price=100.5),
            depth_metrics=DepthMetrics(
                bid1_percent=0.625,
                ask1_percent=0.4,
                total_bid_volume=8.0,
                total_ask_volume=10.0,
            ),
        )

    def test_camel_case_field_names(self):
        payload = json.loads(self._analysis().to_json())
        assert set(payload) == {
            "marketId",
            "liquidityConcentration",
            "whaleOrders",
            "spreadAnalysis",
            "depthMetrics",
        }
        assert payload["spreadAnalysis"]["midPrice"] == 100.5
        assert payload["depthMetrics"]["bid1Percent"] == 0.625
        assert payload["whaleOrders"][0]["isWhale"] is True
        assert payload["whaleOrders"][0]["side"] == "buy"

    def test_cached_json_round_trip_is_byte_identical(self):
        text = self._analysis().to_json()
        assert OrderbookAnalysis.model_validate_json(text).to_json() == text

    @pytest.mark.parametrize(
        "raw,expected",
        [("0.0000001", "0.0000001"), ("1E+3", "1000"), ("100.50", "100.50")],
    )
    def test_whale_decimals_are_fixed_point(self, raw, expected):
        whale = WhaleOrder(price=Decimal(raw), quantity=Decimal(raw), side=TradeSide.SELL)

        payload = json.loads(whale.to_json())

        assert payload["price"] == expected
        assert payload["quantity"] == expected
        assert WhaleOrder.model_validate_json(whale.to_json()).to_json() == whale.to_json()

    def test_concentration_bounded(self):
        with pytest.raises(ValidationError):
            OrderbookAnalysis(
                market_id="m1",
                liquidity_concentration=1.5,
                whale_orders=[],
                spread_analysis=SpreadAnalysis(bid_ask_spread=0, spread_percentage=0, mid_price=0),
                depth_metrics=DepthMetrics(
                    bid1_percent=0, ask1_percent=0, total_bid_volume=0, total_ask_volume=0
                ),
            )

    def test_signal_bounds(self):
        with pytest.raises(ValidationError):
            Signal(
                market_id="m1",
                signal=SignalAction.BUY,
                confidence=1.2,
                risk_score=10,
                entry_price=1,
                exit_price=1,
                reasons=[],
            )
