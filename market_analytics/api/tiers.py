"""
Identity tier gating for analytics endpoints.

The upstream identity gateway verifies NFT ownership and forwards the caller's
tier in a request header. Endpoints declare the minimum tier they require.
"""

from enum import Enum
from typing import Callable, Optional

import structlog
from fastapi import Depends, HTTPException, Request

logger = structlog.get_logger(__name__)


class IdentityTier(str, Enum):
    """Caller tiers, ordered from least to most privileged."""

    UNVERIFIED = "unverified"
    NFT_HOLDER = "nftHolder"
    PREMIUM = "premium"

    @property
    def rank(self) -> int:
        return _TIER_ORDER.index(self)

    @classmethod
    def parse(cls, value: Optional[str]) -> "IdentityTier":
        """Parse a header value; missing or unknown values are unverified."""
        if value:
            for tier in cls:
                if tier.value.lower() == value.strip().lower():
                    return tier
        return cls.UNVERIFIED


_TIER_ORDER = [IdentityTier.UNVERIFIED, IdentityTier.NFT_HOLDER, IdentityTier.PREMIUM]

TIER_DENIED_MESSAGES = {
    IdentityTier.NFT_HOLDER: "NFT ownership required for this endpoint",
    IdentityTier.PREMIUM: "Premium NFT required for this endpoint",
}

TierResolver = Callable[[Request], IdentityTier]


def header_tier_resolver(header_name: str) -> TierResolver:
    """
    Build a resolver that reads the tier from a request header.

    Args:
        header_name: Header set by the identity gateway.

    Returns:
        TierResolver: Callable mapping a request to its tier.
    """

    def resolve(request: Request) -> IdentityTier:
        return IdentityTier.parse(request.headers.get(header_name))

    return resolve


def resolve_tier(request: Request) -> IdentityTier:
    """Resolve the caller's tier with the resolver installed on the app."""
    resolver: TierResolver = request.app.state.tier_resolver
    return resolver(request)


def require_tier(minimum: IdentityTier) -> Callable[..., IdentityTier]:
    """
    Dependency factory rejecting callers below ``minimum`` with 403.

    Example:
        >>> @router.get("/x", dependencies=[Depends(require_tier(IdentityTier.PREMIUM))])
    """

    def dependency(tier: IdentityTier = Depends(resolve_tier)) -> IdentityTier:
        if tier.rank < minimum.rank:
            logger.info("tier_rejected", tier=tier.value, required=minimum.value)
            raise HTTPException(status_code=403, detail=TIER_DENIED_MESSAGES[minimum])
        return tier

    return dependency
