"""
Trading signal result model.

Models:
    SignalAction: Enum for the directional call (buy/sell/hold)
    Signal: Signal with confidence, risk and price targets
"""

from enum import Enum
from typing import List

from pydantic import Field

from market_analytics.models.base import ResultModel


class SignalAction(str, Enum):
    """Directional call produced by the signal generator."""

    BUY = "buy"
    SELL = "sell"
    HOLD = "hold"


class Signal(ResultModel):
    """
    Directional trading signal for one market.

    Attributes:
        market_id: Market identifier.
        signal: buy, sell or hold.
        confidence: Strength of the call in [0, 1].
        risk_score: Spread and concentration risk in [0, 100].
        entry_price: Newest trade price, or orderbook mid with no trades.
        exit_price: Target derived from momentum (min 1% move).
        reasons: Tags explaining the inputs, in fixed check order.
    """

    market_id: str
    signal: SignalAction
    confidence: float = Field(..., ge=0.0, le=1.0)
    risk_score: float = Field(..., ge=0.0, le=100.0)
    entry_price: float
    exit_price: float
    reasons: List[str] = Field(default_factory=list)
