"""
HTTP surface for the analytics engine.

Components:
    app: FastAPI application factory
    routes: Analytics endpoints
    tiers: Identity tier gating
    main: Uvicorn entry point and logging setup
"""

from market_analytics.api.app import create_app
from market_analytics.api.tiers import IdentityTier, header_tier_resolver, require_tier

__all__: list[str] = [
    "create_app",
    "IdentityTier",
    "header_tier_resolver",
    "require_tier",
]
