"""Abstract market input providers.

Neither provider fetches live data today; both are seams so the sources
can be swapped without touching classification logic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable

from kostolany.models.diagnosis import MarketDriver
from kostolany.models.phase import MarketSentiment, VolumeCondition


class MarketDriverProvider(ABC):
    """Source of the ranked macro factors attached to each diagnosis."""

    @abstractmethod
    def get_drivers(self) -> list[MarketDriver] | Awaitable[list[MarketDriver]]:
        """Ranked drivers, rank 1 first. May be sync or async."""
        ...


class MarketConditionsProvider(ABC):
    """Source of the secondary classifier inputs (sentiment, volume)."""

    @abstractmethod
    def sentiment(self) -> MarketSentiment: ...

    @abstractmethod
    def volume(self) -> VolumeCondition: ...
