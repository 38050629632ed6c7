"""Egg-cycle phase classification data models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class InterestRateTrend(StrEnum):
    PEAK = "PEAK"
    FALLING = "FALLING"
    BOTTOM = "BOTTOM"
    RISING = "RISING"
    UNKNOWN = "UNKNOWN"


class MarketSentiment(StrEnum):
    FEAR = "FEAR"
    CAUTIOUS = "CAUTIOUS"
    NEUTRAL = "NEUTRAL"
    OPTIMISTIC = "OPTIMISTIC"
    GREED = "GREED"
    UNKNOWN = "UNKNOWN"


class VolumeCondition(StrEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    UNKNOWN = "UNKNOWN"


class EggPhase(StrEnum):
    """The six phases of the egg, in ring order.

    A-side: rates falling, market rising.  B-side: rates rising, market falling.
    """

    A1_CORRECTION = "A1_CORRECTION"
    A2_ACCOMPANIMENT = "A2_ACCOMPANIMENT"
    A3_EXAGGERATION = "A3_EXAGGERATION"
    B1_CORRECTION = "B1_CORRECTION"
    B2_ACCOMPANIMENT = "B2_ACCOMPANIMENT"
    B3_EXAGGERATION = "B3_EXAGGERATION"


class InvestmentAction(StrEnum):
    BUY = "BUY"
    HOLD = "HOLD"
    SELL = "SELL"


class RiskLevel(StrEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class CycleSide(StrEnum):
    RISING_MARKET = "RISING_MARKET"    # A1-A3
    FALLING_MARKET = "FALLING_MARKET"  # B1-B3


class MarketInputs(BaseModel):
    """Coarse market inputs. Only the rate trend drives the phase."""

    interest_rate_trend: InterestRateTrend
    sentiment: MarketSentiment = MarketSentiment.NEUTRAL
    volume: VolumeCondition = VolumeCondition.MEDIUM


class PhaseMetadata(BaseModel):
    """Static description of one phase. Immutable."""

    model_config = ConfigDict(frozen=True)

    phase: EggPhase
    title: str
    subtitle: str
    color: str
    historical_success_rate: float  # 0-100
    description: str
    investor_sentiment: str
    price_trend: str
    risk_level: RiskLevel
    action: InvestmentAction
    recommended_action: str
    next_phase: EggPhase
    transition_condition: str
    side: CycleSide


class ClassificationResult(BaseModel):
    """Output of a single classify() call. Never persisted on its own."""

    phase: EggPhase
    action: InvestmentAction
    action_label: str  # "Buy (accumulate)", shown to the user
    confidence: float = Field(ge=0.0, le=100.0)
    description: str
    next_phase: EggPhase
    phase_title: str
    historical_success: float
