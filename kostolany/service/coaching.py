"""CoachingService: portfolio analysis + phase -> personalised advice."""

from __future__ import annotations

from kostolany.features.coaching import generate
from kostolany.features.portfolio import analyze, portfolio_tip, profile
from kostolany.models.coaching import CoachingMessage
from kostolany.models.phase import ClassificationResult
from kostolany.models.portfolio import Holding, PortfolioAnalysis, PortfolioProfile


class CoachingService:
    """Stateless facade over the portfolio analyzer and coaching rules."""

    def analyze(self, holdings: list[Holding]) -> PortfolioAnalysis:
        return analyze(holdings)

    def profile(self, holdings: list[Holding]) -> PortfolioProfile:
        return profile(analyze(holdings))

    def coach(
        self, classification: ClassificationResult, analysis: PortfolioAnalysis
    ) -> CoachingMessage:
        return generate(classification, analysis)

    def advise(
        self, classification: ClassificationResult, holdings: list[Holding]
    ) -> CoachingMessage:
        """Analyze holdings, then pick the coaching message."""
        return self.coach(classification, analyze(holdings))

    def tip(self, holdings: list[Holding]) -> str:
        return portfolio_tip(analyze(holdings))
