"""Static and simulated market inputs used until real feeds are wired in."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

import numpy as np

from kostolany.config import MarketSettings, get_settings
from kostolany.data.providers.base import MarketConditionsProvider, MarketDriverProvider
from kostolany.models.diagnosis import MarketDriver
from kostolany.models.phase import MarketSentiment, VolumeCondition


class StaticMarketDriverProvider(MarketDriverProvider):
    """Top drivers from ``market.drivers`` in defaults.yaml."""

    def __init__(self, cfg: MarketSettings | None = None) -> None:
        self._cfg = cfg or get_settings().market

    def get_drivers(self) -> list[MarketDriver]:
        drivers = [MarketDriver(**d.model_dump()) for d in self._cfg.drivers]
        return sorted(drivers, key=lambda d: d.rank)


class RandomMarketConditions(MarketConditionsProvider):
    """Weighted-random sentiment and time-of-day volume.

    Sentiment weights default to FEAR 15 / CAUTIOUS 25 / NEUTRAL 30 /
    OPTIMISTIC 20 / GREED 10.  Volume follows the New York session as seen
    from KST: open and close hours are HIGH, the overnight middle MEDIUM,
    the rest LOW.
    """

    def __init__(
        self,
        seed: int | None = None,
        clock: Callable[[], datetime] | None = None,
        cfg: MarketSettings | None = None,
    ) -> None:
        self._rng = np.random.default_rng(seed)
        self._clock = clock or datetime.now
        self._cfg = cfg or get_settings().market

    def sentiment(self) -> MarketSentiment:
        names = list(self._cfg.sentiment_weights)
        weights = np.asarray([self._cfg.sentiment_weights[n] for n in names], dtype=float)
        choice = self._rng.choice(len(names), p=weights / weights.sum())
        return MarketSentiment(names[int(choice)])

    def volume(self) -> VolumeCondition:
        hour = self._clock().hour
        if hour in self._cfg.high_volume_hours:
            return VolumeCondition.HIGH
        if hour in self._cfg.medium_volume_hours:
            return VolumeCondition.MEDIUM
        return VolumeCondition.LOW


class FixedMarketConditions(MarketConditionsProvider):
    """Always returns the same inputs. Useful for tests and replays."""

    def __init__(
        self,
        sentiment: MarketSentiment = MarketSentiment.NEUTRAL,
        volume: VolumeCondition = VolumeCondition.MEDIUM,
    ) -> None:
        self._sentiment = sentiment
        self._volume = volume

    def sentiment(self) -> MarketSentiment:
        return self._sentiment

    def volume(self) -> VolumeCondition:
        return self._volume
