"""
Injective exchange indexer data normalizer.

Converts indexer JSON payloads to our unified Pydantic models. Numeric
strings are parsed by the models themselves (malformed values become 0).

Indexer Orderbook Format (spot v2):
    {
        "orderbook": {
            "buys":  [{"price": "100.5", "quantity": "3", "timestamp": 1700000000000}, ...],
            "sells": [{"price": "101.0", "quantity": "2", "timestamp": 1700000000000}, ...],
            "sequence": 12345
        }
    }
    A bare {"buys": [...], "sells": [...]} body is accepted as well.

Indexer Trades Format (spot v1):
    {
        "trades": [
            {
                "marketId": "0x...",
                "tradeDirection": "buy",
                "executionSide": "taker",
                "price": {"price": "100.5", "quantity": "3", "timestamp": 1700000000000}
            },
            ...
        ]
    }
    Flat trades {"price": "100.5", "quantity": "3", "executionSide": "buy"}
    are accepted as well.

The aggressor side is read from ``executionSide`` when it is "buy" or
"sell"; otherwise ``tradeDirection`` is used. Anything else is kept as-is
and treated downstream as an unknown side.
"""

from typing import Any, Dict, List, Optional

import structlog

from market_analytics.models.orderbook import OrderBookSnapshot, OrderLevel
from market_analytics.models.trade import Trade, TradeSide

logger = structlog.get_logger(__name__)

_KNOWN_SIDES = {TradeSide.BUY.value, TradeSide.SELL.value}


class IndexerNormalizer:
    """
    Normalizes indexer payloads to unified models.

    Example:
        >>> snapshot = IndexerNormalizer.normalize_orderbook(
        ...     {"orderbook": {"buys": [{"price": "100", "quantity": "5"}], "sells": []}},
        ...     market_id="0xabc",
        ... )
        >>> snapshot.best_bid
        Decimal('100')
    """

    @staticmethod
    def normalize_orderbook(raw: Dict[str, Any], market_id: str) -> OrderBookSnapshot:
        """
        Normalize an orderbook payload to OrderBookSnapshot.

        Levels are sorted best-first (bids descending, asks ascending) so the
        snapshot satisfies the provider ordering contract even if the
        indexer's ordering changes.

        Args:
            raw: Parsed JSON body.
            market_id: Market identifier the payload belongs to.

        Returns:
            OrderBookSnapshot: Normalized snapshot.

        Raises:
            ValueError: If the payload is not an orderbook object.
        """
        if not isinstance(raw, dict):
            raise ValueError(f"Invalid orderbook payload type: {type(raw).__name__}")

        book = raw.get("orderbook", raw)
        if not isinstance(book, dict):
            raise ValueError("Invalid orderbook payload: 'orderbook' is not an object")

        bids = [IndexerNormalizer._level(level) for level in book.get("buys") or []]
        asks = [IndexerNormalizer._level(level) for level in book.get("sells") or []]

        bids.sort(key=lambda x: x.price, reverse=True)
        asks.sort(key=lambda x: x.price)

        return OrderBookSnapshot(market_id=market_id, bids=bids, asks=asks)

    @staticmethod
    def normalize_trades(raw: Dict[str, Any], limit: Optional[int] = None) -> List[Trade]:
        """
        Normalize a trades payload to a newest-first list of Trade.

        Args:
            raw: Parsed JSON body.
            limit: Maximum number of trades to keep.

        Returns:
            List[Trade]: Trades in the order delivered (newest first).

        Raises:
            ValueError: If the payload is not a trades object.
        """
        if not isinstance(raw, dict):
            raise ValueError(f"Invalid trades payload type: {type(raw).__name__}")

        records = raw.get("trades") or []
        if not isinstance(records, list):
            raise ValueError("Invalid trades payload: 'trades' is not a list")

        if limit is not None:
            records = records[:limit]

        return [IndexerNormalizer._trade(record) for record in records]

    @staticmethod
    def _level(raw_level: Any) -> OrderLevel:
        if isinstance(raw_level, dict):
            return OrderLevel(price=raw_level.get("price"), quantity=raw_level.get("quantity"))
        if isinstance(raw_level, (list, tuple)) and len(raw_level) >= 2:
            return OrderLevel(price=raw_level[0], quantity=raw_level[1])

        logger.warning("indexer_level_unrecognized", level=repr(raw_level))
        return OrderLevel()

    @staticmethod
    def _trade(record: Any) -> Trade:
        if not isinstance(record, dict):
            logger.warning("indexer_trade_unrecognized", trade=repr(record))
            return Trade()

        # Indexer nests price/quantity under "price"
        price_field = record.get("price")
        if isinstance(price_field, dict):
            price = price_field.get("price")
            quantity = price_field.get("quantity")
        else:
            price = price_field
            quantity = record.get("quantity")

        return Trade(
            price=price,
            quantity=quantity,
            execution_side=IndexerNormalizer._side(record),
        )

    @staticmethod
    def _side(record: Dict[str, Any]) -> Optional[str]:
        execution_side = record.get("executionSide")
        if isinstance(execution_side, str) and execution_side.lower() in _KNOWN_SIDES:
            return execution_side

        direction = record.get("tradeDirection")
        if isinstance(direction, str) and direction.lower() in _KNOWN_SIDES:
            return direction

        return None if execution_side is None else str(execution_side)
