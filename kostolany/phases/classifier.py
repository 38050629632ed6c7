"""Egg-cycle phase classifier.

Maps (rate trend, sentiment, volume) to a phase, an action and a
confidence.  Total and deterministic: every well-typed input yields a
result, nothing is raised and nothing is remembered between calls.

Rules:
    PEAK     -> A1 / BUY   conf 85 if volume LOW else 70
    FALLING  -> A2 / HOLD  conf 80
    BOTTOM   -> A3 / SELL  conf 90 if volume HIGH else 75
    RISING   -> B1 / HOLD  conf 65 if sentiment CAUTIOUS
                B2 / HOLD  conf 45 otherwise
    UNKNOWN  -> A2 / HOLD  conf 50, next phase A2 (not the ring successor)
"""

from __future__ import annotations

import logging

from kostolany.config import ClassifierSettings, get_settings
from kostolany.models.phase import (
    ClassificationResult,
    EggPhase,
    InterestRateTrend,
    InvestmentAction,
    MarketInputs,
    MarketSentiment,
    RiskLevel,
    VolumeCondition,
)
from kostolany.phases.registry import PhaseRegistry, get_registry

logger = logging.getLogger(__name__)


def _result(
    registry: PhaseRegistry,
    phase: EggPhase,
    action: InvestmentAction,
    action_label: str,
    confidence: float,
    description: str,
    next_phase: EggPhase | None = None,
) -> ClassificationResult:
    meta = registry.get(phase)
    return ClassificationResult(
        phase=phase,
        action=action,
        action_label=action_label,
        confidence=confidence,
        description=description,
        next_phase=next_phase if next_phase is not None else registry.successor(phase),
        phase_title=meta.title,
        historical_success=meta.historical_success_rate,
    )


def classify(
    trend: InterestRateTrend,
    sentiment: MarketSentiment = MarketSentiment.NEUTRAL,
    volume: VolumeCondition = VolumeCondition.MEDIUM,
    registry: PhaseRegistry | None = None,
    cfg: ClassifierSettings | None = None,
) -> ClassificationResult:
    """Classify the current market into an egg phase."""
    registry = registry or get_registry()
    cfg = cfg or get_settings().classifier

    if trend == InterestRateTrend.PEAK:
        # Both sentiment branches land on A1; kept apart for a future split.
        phase = (
            EggPhase.A1_CORRECTION
            if sentiment == MarketSentiment.FEAR
            else EggPhase.A1_CORRECTION
        )
        result = _result(
            registry, phase, InvestmentAction.BUY, "Buy (accumulate)",
            cfg.peak_low_volume_confidence if volume == VolumeCondition.LOW else cfg.peak_confidence,
            "Interest rates have peaked. This is the best time to enter the market; "
            "historically, buying from here has produced the highest returns.",
        )
    elif trend == InterestRateTrend.FALLING:
        result = _result(
            registry, EggPhase.A2_ACCOMPANIMENT, InvestmentAction.HOLD, "Hold (ride the wave)",
            cfg.falling_confidence,
            "Interest rates are falling and the market is trending up. "
            "Earnings are improving, so holding is recommended.",
        )
    elif trend == InterestRateTrend.BOTTOM:
        # Both sentiment branches land on A3; kept apart for a future split.
        phase = (
            EggPhase.A3_EXAGGERATION
            if sentiment == MarketSentiment.GREED
            else EggPhase.A3_EXAGGERATION
        )
        result = _result(
            registry, phase, InvestmentAction.SELL, "Sell (take profits)",
            cfg.bottom_high_volume_confidence if volume == VolumeCondition.HIGH else cfg.bottom_confidence,
            "Interest rates have bottomed and the market is overheating. Overconfident "
            "investors have pushed prices above intrinsic value; consider taking profits.",
        )
    elif trend == InterestRateTrend.RISING:
        if sentiment == MarketSentiment.CAUTIOUS:
            result = _result(
                registry, EggPhase.B1_CORRECTION, InvestmentAction.HOLD,
                "Partial sell (realize gains)",
                cfg.rising_cautious_confidence,
                "Rates have started to rise and sentiment is souring. "
                "Time to take some profit or reduce positions.",
            )
        else:
            result = _result(
                registry, EggPhase.B2_ACCOMPANIMENT, InvestmentAction.HOLD,
                "Defend (raise cash)",
                cfg.rising_confidence,
                "Rates keep rising and the market is weak. Business sentiment is "
                "deteriorating, so stay defensive.",
            )
    else:
        # Unreachable through DiagnosisService, which rejects UNKNOWN first.
        result = _result(
            registry, EggPhase.A2_ACCOMPANIMENT, InvestmentAction.HOLD, "Hold",
            cfg.fallback_confidence,
            "Keep monitoring market signals.",
            next_phase=EggPhase.A2_ACCOMPANIMENT,
        )

    logger.debug(
        "classify(%s, %s, %s) -> %s %s (%.0f)",
        trend, sentiment, volume, result.phase, result.action, result.confidence,
    )
    return result


def classify_inputs(
    inputs: MarketInputs,
    registry: PhaseRegistry | None = None,
    cfg: ClassifierSettings | None = None,
) -> ClassificationResult:
    return classify(
        inputs.interest_rate_trend, inputs.sentiment, inputs.volume,
        registry=registry, cfg=cfg,
    )


def get_next_phase(phase: EggPhase, registry: PhaseRegistry | None = None) -> EggPhase:
    return (registry or get_registry()).successor(phase)


def get_previous_phase(phase: EggPhase, registry: PhaseRegistry | None = None) -> EggPhase:
    """Ring predecessor; inverse of get_next_phase for all six phases."""
    return (registry or get_registry()).predecessor(phase)


def adjust_action(action: InvestmentAction, portfolio_risk: RiskLevel) -> InvestmentAction:
    """Adjust the base action for the portfolio's risk tier.

    Conservative portfolios keep SELL and aggressive ones keep BUY; there is
    no stronger variant of either yet, so every combination maps to itself.
    """
    if portfolio_risk == RiskLevel.LOW and action == InvestmentAction.SELL:
        return InvestmentAction.SELL
    if portfolio_risk == RiskLevel.HIGH and action == InvestmentAction.BUY:
        return InvestmentAction.BUY
    return action
