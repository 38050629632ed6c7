"""Coaching engine: phase classification + portfolio shape -> one message.

Rules are evaluated in order and the first match wins.  The order is part
of the contract: a crypto-heavy portfolio on a SELL signal gets the DANGER
message even when other rules would also match.
"""

from __future__ import annotations

from collections.abc import Callable

from pydantic import BaseModel, ConfigDict

from kostolany.config import CoachingSettings, get_settings
from kostolany.models.coaching import CoachingMessage, CoachingSeverity
from kostolany.models.phase import ClassificationResult, InvestmentAction
from kostolany.models.portfolio import PortfolioAnalysis

Predicate = Callable[[ClassificationResult, PortfolioAnalysis, CoachingSettings], bool]
Builder = Callable[[ClassificationResult, PortfolioAnalysis], CoachingMessage]


class CoachingRule(BaseModel):
    """A named (predicate, message builder) pair."""

    model_config = ConfigDict(frozen=True)

    name: str
    predicate: Predicate
    build: Builder


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

def _crypto_overheated(c: ClassificationResult, p: PortfolioAnalysis, cfg: CoachingSettings) -> bool:
    return p.crypto_allocation > cfg.extreme_pct and c.action == InvestmentAction.SELL


def _cash_rich_at_peak(c: ClassificationResult, p: PortfolioAnalysis, cfg: CoachingSettings) -> bool:
    return p.cash_allocation > cfg.extreme_pct and c.action == InvestmentAction.BUY


def _cash_ready_at_peak(c: ClassificationResult, p: PortfolioAnalysis, cfg: CoachingSettings) -> bool:
    return p.cash_allocation > cfg.cash_ready_pct and c.action == InvestmentAction.BUY


def _cash_heavy_on_sell(c: ClassificationResult, p: PortfolioAnalysis, cfg: CoachingSettings) -> bool:
    return p.cash_allocation > cfg.extreme_pct and c.action == InvestmentAction.SELL


def _always(c: ClassificationResult, p: PortfolioAnalysis, cfg: CoachingSettings) -> bool:
    return True


# ---------------------------------------------------------------------------
# Message builders
# ---------------------------------------------------------------------------

def _danger_message(c: ClassificationResult, p: PortfolioAnalysis) -> CoachingMessage:
    return CoachingMessage(
        severity=CoachingSeverity.DANGER,
        message=(
            "Danger! The market is overheating (egg phase A3) and most of your "
            "portfolio is in crypto. Taking profits is strongly recommended."
        ),
        detailed_message=(
            "Rates have bottomed and investors are euphoric. Historically, prices at this "
            "point run well above intrinsic value. Realize some gains and lower your risk."
        ),
        icon="siren",
        recommended_action="Reduce position immediately",
        rule="crypto_overheated",
    )


def _dry_powder_message(c: ClassificationResult, p: PortfolioAnalysis) -> CoachingMessage:
    return CoachingMessage(
        severity=CoachingSeverity.SUCCESS,
        message=(
            "Opportunity! Buy when others are fearful. Rates are at the peak "
            "and you are holding plenty of cash."
        ),
        detailed_message=(
            "This is a value-investing window. With rates at the peak they are more likely "
            "to fall from here, and buying from this point has historically paid best."
        ),
        icon="gem",
        recommended_action="Phase into positions",
        rule="cash_rich_at_peak",
    )


def _buy_timing_message(c: ClassificationResult, p: PortfolioAnalysis) -> CoachingMessage:
    return CoachingMessage(
        severity=CoachingSeverity.SUCCESS,
        message="Good timing! Rates are at the peak. Put your cash reserve to work.",
        detailed_message=(
            f"Your cash weighting is {p.cash_allocation:.1f}%. "
            "This environment favors buying."
        ),
        icon="sprout",
        recommended_action="Buy gradually",
        rule="cash_ready_at_peak",
    )


def _defensive_message(c: ClassificationResult, p: PortfolioAnalysis) -> CoachingMessage:
    return CoachingMessage(
        severity=CoachingSeverity.WARNING,
        message=(
            "A sell signal while mostly in cash means re-evaluate, not sell. "
            "Get ready for the next correction."
        ),
        detailed_message=(
            "The market is overheated, but your cash weighting is high. "
            "You are already defensive enough."
        ),
        icon="shield",
        recommended_action="Stay put and prepare for the correction",
        rule="cash_heavy_on_sell",
    )


def _phase_message(c: ClassificationResult, p: PortfolioAnalysis) -> CoachingMessage:
    return CoachingMessage(
        severity=CoachingSeverity.INFO,
        message=f"You are in the '{c.action_label}' zone. {c.description}",
        detailed_message=(
            f"Diversification: {p.holding_count} holdings, "
            f"crypto {p.crypto_allocation:.1f}% | cash {p.cash_allocation:.1f}%"
        ),
        icon="chart",
        recommended_action=f"Stick with '{c.action_label}'",
        rule="default",
    )


COACHING_RULES: tuple[CoachingRule, ...] = (
    CoachingRule(name="crypto_overheated", predicate=_crypto_overheated, build=_danger_message),
    CoachingRule(name="cash_rich_at_peak", predicate=_cash_rich_at_peak, build=_dry_powder_message),
    CoachingRule(name="cash_ready_at_peak", predicate=_cash_ready_at_peak, build=_buy_timing_message),
    CoachingRule(name="cash_heavy_on_sell", predicate=_cash_heavy_on_sell, build=_defensive_message),
    CoachingRule(name="default", predicate=_always, build=_phase_message),
)


def match_rule(
    classification: ClassificationResult,
    analysis: PortfolioAnalysis,
    rules: tuple[CoachingRule, ...] = COACHING_RULES,
    cfg: CoachingSettings | None = None,
) -> CoachingRule:
    """Return the first rule whose predicate holds."""
    cfg = cfg or get_settings().coaching
    for rule in rules:
        if rule.predicate(classification, analysis, cfg):
            return rule
    # COACHING_RULES ends with a catch-all; only custom rule lists get here.
    return COACHING_RULES[-1]


def generate(
    classification: ClassificationResult,
    analysis: PortfolioAnalysis,
    rules: tuple[CoachingRule, ...] = COACHING_RULES,
    cfg: CoachingSettings | None = None,
) -> CoachingMessage:
    """Pick the highest-priority coaching message for this situation."""
    rule = match_rule(classification, analysis, rules, cfg)
    return rule.build(classification, analysis)
