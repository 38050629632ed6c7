"""Diagnosis request/response and storage records."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from kostolany.models.coaching import CoachingMessage
from kostolany.models.phase import ClassificationResult, InterestRateTrend
from kostolany.models.portfolio import PortfolioAnalysis, PortfolioSnapshot


class DiagnosisAnswers(BaseModel):
    """Questionnaire answers. Only the rate trend is required."""

    interest_rate_trend: InterestRateTrend = InterestRateTrend.UNKNOWN
    macro_outlook: str | None = None
    investment_theme: str | None = None
    favorite_guru: str | None = None
    timestamp: datetime | None = None


class MarketDriver(BaseModel):
    """A ranked macro factor currently moving markets."""

    rank: int
    title: str
    description: str
    affected_assets: list[str]
    impact_level: str  # "LOW" | "MEDIUM" | "HIGH"
    icon: str


class DiagnosisResult(BaseModel):
    """Everything produced by one diagnosis run."""

    answers: DiagnosisAnswers
    classification: ClassificationResult
    coaching_message: CoachingMessage
    market_drivers: list[MarketDriver]
    portfolio_snapshot: PortfolioSnapshot
    portfolio_analysis: PortfolioAnalysis
    created_at: datetime


class DiagnosisHistory(BaseModel):
    """What the store keeps per user: latest result plus bounded history."""

    latest: DiagnosisResult | None = None
    entries: list[DiagnosisResult] = Field(default_factory=list)  # newest first
    last_updated: datetime | None = None


class HistoryStats(BaseModel):
    has_latest: bool
    history_count: int
    last_updated: datetime | None
