"""
Trade data models for the analytics engine.

Models:
    TradeSide: Enum for aggressor side (buy/sell)
    Trade: Single executed trade as returned by the market data provider
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from market_analytics.models.numeric import ZERO, parse_decimal


class TradeSide(str, Enum):
    """
    Enumeration for trade side.

    Attributes:
        BUY: Buyer was the aggressor (taker bought)
        SELL: Seller was the aggressor (taker sold)
    """

    BUY = "buy"
    SELL = "sell"


class Trade(BaseModel):
    """
    Executed trade.

    Providers return trades newest-first; consumers rely on that order to
    pick the first and last price of a window.

    The raw execution side is kept as delivered. Anything other than a
    case-insensitive "buy" or "sell" is an unknown side and counts toward
    neither buy nor sell volume.

    Attributes:
        price: Execution price.
        quantity: Executed quantity in base currency.
        execution_side: Raw aggressor side as reported by the provider.

    Example:
        >>> trade = Trade(price="10", quantity="2", executionSide="BUY")
        >>> trade.side
        <TradeSide.BUY: 'buy'>
        >>> trade.notional
        Decimal('20')
    """

    model_config = {"frozen": True, "extra": "ignore", "populate_by_name": True}

    price: Decimal = Field(
        default=ZERO,
        description="Trade execution price",
    )
    quantity: Decimal = Field(
        default=ZERO,
        description="Trade quantity in base currency",
    )
    execution_side: Optional[str] = Field(
        default=None,
        alias="executionSide",
        description="Aggressor side as reported by the provider",
    )

    @field_validator("price", "quantity", mode="before")
    @classmethod
    def coerce_numeric(cls, v: Any) -> Decimal:
        """Parse provider numeric strings, normalizing malformed values to 0."""
        return parse_decimal(v)

    @field_validator("execution_side", mode="before")
    @classmethod
    def coerce_side(cls, v: Any) -> Optional[str]:
        """Keep whatever the provider sent, as a string."""
        if v is None:
            return None
        return str(v)

    @property
    def side(self) -> Optional[TradeSide]:
        """Parsed aggressor side, or None if the side is unknown."""
        normalized = (self.execution_side or "").lower()
        if normalized == TradeSide.BUY.value:
            return TradeSide.BUY
        if normalized == TradeSide.SELL.value:
            return TradeSide.SELL
        return None

    @property
    def is_buy(self) -> bool:
        return self.side is TradeSide.BUY

    @property
    def is_sell(self) -> bool:
        return self.side is TradeSide.SELL

    @property
    def notional(self) -> Decimal:
        """Price times quantity."""
        return self.price * self.quantity
