"""Market domain API package."""

from market.api.routes import market_router

__all__ = ["market_router"]
