"""
Market Microstructure Analytics.

Analytics engine for exchange order books and recent trades, producing
orderbook analyses, cross-market intelligence and trading signals.

This package provides:
- Data models for order books, trades and analysis results
- Abstract interfaces for market data providers and cache stores
- Statistical helpers on exact decimals
- An Injective indexer adapter and a Redis cache store
- A FastAPI surface with identity tier gating
"""

__version__ = "0.1.0"
__author__ = "Om Mengshetti"
