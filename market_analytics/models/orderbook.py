"""
Order book data models for the analytics engine.

This module defines the order book snapshot consumed by the orderbook
analyzer. All financial values use Decimal for precision; raw provider
strings are parsed at construction time via parse_decimal.

Models:
    OrderLevel: Single resting price level (price, quantity)
    OrderBookSnapshot: Point-in-time bid/ask levels for one market
"""

from decimal import Decimal
from typing import Any, List

from pydantic import BaseModel, Field, field_validator

from market_analytics.models.numeric import ZERO, parse_decimal


class OrderLevel(BaseModel):
    """
    Single price level in an order book.

    Attributes:
        price: Price at this level in quote currency.
        quantity: Quantity resting at this level in base currency.

    Example:
        >>> OrderLevel(price="100.5", quantity="oops").quantity
        Decimal('0')
    """

    model_config = {"frozen": True, "extra": "ignore"}

    price: Decimal = Field(
        default=ZERO,
        description="Price at this level in quote currency",
    )
    quantity: Decimal = Field(
        default=ZERO,
        description="Quantity resting at this level in base currency",
    )

    @field_validator("price", "quantity", mode="before")
    @classmethod
    def coerce_numeric(cls, v: Any) -> Decimal:
        """Parse provider numeric strings, normalizing malformed values to 0."""
        return parse_decimal(v)


class OrderBookSnapshot(BaseModel):
    """
    Order book snapshot for a single market.

    Ordering invariant: the market data provider returns both sides ordered
    best-first. ``bids[0]`` is the highest bid and ``asks[0]`` the lowest
    ask. The snapshot does not re-sort; analytics read the top of book from
    index 0.

    Attributes:
        market_id: Opaque market identifier.
        bids: Bid levels, best (highest price) first.
        asks: Ask levels, best (lowest price) first.

    Example:
        >>> snapshot = OrderBookSnapshot(
        ...     market_id="0xabc",
        ...     bids=[OrderLevel(price="100", quantity="5")],
        ...     asks=[OrderLevel(price="101", quantity="4")],
        ... )
        >>> snapshot.best_ask - snapshot.best_bid
        Decimal('1')
    """

    model_config = {"frozen": True, "extra": "ignore"}

    market_id: str = Field(
        ...,
        description="Market identifier",
        min_length=1,
    )
    bids: List[OrderLevel] = Field(
        default_factory=list,
        description="Bid levels, sorted best (highest) to worst",
    )
    asks: List[OrderLevel] = Field(
        default_factory=list,
        description="Ask levels, sorted best (lowest) to worst",
    )

    @property
    def best_bid(self) -> Decimal:
        """Best bid price, or 0 if there are no bids."""
        return self.bids[0].price if self.bids else ZERO

    @property
    def best_ask(self) -> Decimal:
        """Best ask price, or 0 if there are no asks."""
        return self.asks[0].price if self.asks else ZERO

    @property
    def best_bid_quantity(self) -> Decimal:
        """Quantity at the best bid, or 0 if there are no bids."""
        return self.bids[0].quantity if self.bids else ZERO

    @property
    def best_ask_quantity(self) -> Decimal:
        """Quantity at the best ask, or 0 if there are no asks."""
        return self.asks[0].quantity if self.asks else ZERO

    @property
    def total_bid_volume(self) -> Decimal:
        """Sum of quantities across all bid levels."""
        return sum((level.quantity for level in self.bids), ZERO)

    @property
    def total_ask_volume(self) -> Decimal:
        """Sum of quantities across all ask levels."""
        return sum((level.quantity for level in self.asks), ZERO)

    def top_volume(self, side: str, levels: int) -> Decimal:
        """
        Sum the quantities of the first ``levels`` levels on one side.

        Args:
            side: Either "bid" or "ask".
            levels: Number of levels from the top of book to include.

        Returns:
            Decimal: Total quantity within the top levels.

        Raises:
            ValueError: If side is not "bid" or "ask".
        """
        if side not in ("bid", "ask"):
            raise ValueError(f"side must be 'bid' or 'ask', got '{side}'")

        book_side = self.bids if side == "bid" else self.asks
        return sum((level.quantity for level in book_side[:levels]), ZERO)
