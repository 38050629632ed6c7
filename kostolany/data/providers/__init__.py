"""Market input providers (drivers, sentiment, volume)."""

from kostolany.data.providers.base import MarketConditionsProvider, MarketDriverProvider
from kostolany.data.providers.mock import (
    FixedMarketConditions,
    RandomMarketConditions,
    StaticMarketDriverProvider,
)

__all__ = [
    "FixedMarketConditions",
    "MarketConditionsProvider",
    "MarketDriverProvider",
    "RandomMarketConditions",
    "StaticMarketDriverProvider",
]
