"""DiagnosisService: answers + holdings -> classified, coached, persisted result."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from kostolany.config import get_settings
from kostolany.data.providers.base import MarketConditionsProvider, MarketDriverProvider
from kostolany.data.providers.mock import RandomMarketConditions, StaticMarketDriverProvider
from kostolany.data.store import DiagnosisStore
from kostolany.exceptions import ValidationError
from kostolany.features.portfolio import snapshot
from kostolany.models.diagnosis import (
    DiagnosisAnswers,
    DiagnosisHistory,
    DiagnosisResult,
    HistoryStats,
    MarketDriver,
)
from kostolany.models.phase import InterestRateTrend, MarketInputs
from kostolany.models.portfolio import Holding
from kostolany.service.coaching import CoachingService
from kostolany.service.phase import PhaseService

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DiagnosisService:
    """Run a full diagnosis for one user and keep their last results.

    Each run is independent: the phase is recomputed from the answers every
    time, never advanced from the previous result.  Concurrent runs against
    the same store race on the history update; callers serialize if needed.
    """

    def __init__(
        self,
        store: DiagnosisStore,
        conditions: MarketConditionsProvider | None = None,
        drivers: MarketDriverProvider | None = None,
        phase_service: PhaseService | None = None,
        coaching_service: CoachingService | None = None,
        clock: Callable[[], datetime] | None = None,
        history_size: int | None = None,
    ) -> None:
        self.store = store
        self.conditions = conditions or RandomMarketConditions()
        self.drivers = drivers or StaticMarketDriverProvider()
        self.phase_service = phase_service or PhaseService()
        self.coaching_service = coaching_service or CoachingService()
        self._clock = clock or _utcnow
        self.history_size = (
            history_size if history_size is not None else get_settings().diagnosis.history_size
        )

    async def run_diagnosis(
        self, answers: DiagnosisAnswers, holdings: list[Holding]
    ) -> DiagnosisResult:
        """Classify, analyze, coach, then save as the newest history entry.

        Raises:
            ValidationError: interest rate trend is UNKNOWN. Nothing is
                computed or persisted.
            StorageError: propagated unchanged from the store.
        """
        if answers.interest_rate_trend == InterestRateTrend.UNKNOWN:
            raise ValidationError(
                "interest_rate_trend", "set the interest rate trend before running a diagnosis"
            )

        inputs = MarketInputs(
            interest_rate_trend=answers.interest_rate_trend,
            sentiment=self.conditions.sentiment(),
            volume=self.conditions.volume(),
        )
        classification = self.phase_service.classify(inputs)
        analysis = self.coaching_service.analyze(holdings)
        message = self.coaching_service.coach(classification, analysis)
        market_drivers = await self._market_drivers()

        try:
            history = await self.store.load()
        except Exception:
            logger.warning("Failed to load diagnosis history", exc_info=True)
            raise

        created_at = self._next_timestamp(history)
        result = DiagnosisResult(
            answers=answers.model_copy(update={"timestamp": created_at}),
            classification=classification,
            coaching_message=message,
            market_drivers=market_drivers,
            portfolio_snapshot=snapshot(holdings),
            portfolio_analysis=analysis,
            created_at=created_at,
        )
        entries = [result, *history.entries][: self.history_size]

        try:
            await self.store.save(DiagnosisHistory(
                latest=result, entries=entries, last_updated=created_at,
            ))
        except Exception:
            logger.warning("Failed to save diagnosis", exc_info=True)
            raise

        logger.info(
            "Diagnosis saved: %s %s (%.0f), coaching=%s, history=%d",
            classification.phase, classification.action, classification.confidence,
            message.rule, len(entries),
        )
        return result

    def _next_timestamp(self, history: DiagnosisHistory) -> datetime:
        """Clock time, bumped past the stored latest so timestamps stay unique."""
        now = self._clock()
        latest = history.latest
        if latest is not None and now <= latest.created_at:
            now = latest.created_at + timedelta(microseconds=1)
        return now

    async def _market_drivers(self) -> list[MarketDriver]:
        drivers = self.drivers.get_drivers()
        if inspect.isawaitable(drivers):
            drivers = await drivers
        return list(drivers)

    # --- History access (delegates to the store) ---

    async def latest(self) -> DiagnosisResult | None:
        return await self.store.load_latest()

    async def history(self) -> list[DiagnosisResult]:
        return await self.store.load_history()

    async def find(self, created_at: datetime) -> DiagnosisResult | None:
        return await self.store.find_by_timestamp(created_at)

    async def delete(self, created_at: datetime) -> None:
        await self.store.delete_by_timestamp(created_at, updated_at=self._clock())

    async def clear(self) -> None:
        await self.store.clear_all()

    async def stats(self) -> HistoryStats:
        return await self.store.stats()
