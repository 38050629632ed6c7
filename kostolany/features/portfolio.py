"""Pure computation for portfolio concentration analysis.

All functions are stateless: they accept holdings and config, and
return model objects.  Categories are decided by keyword lists kept in
``defaults.yaml`` (``portfolio.keywords``), not in this module.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from kostolany.config import KeywordSet, PortfolioSettings, get_settings
from kostolany.models.phase import RiskLevel
from kostolany.models.portfolio import (
    AssetCategory,
    Holding,
    PortfolioAnalysis,
    PortfolioProfile,
    PortfolioSnapshot,
)

EXPLICIT_CATEGORIES: tuple[AssetCategory, ...] = (
    AssetCategory.CRYPTO,
    AssetCategory.CASH,
    AssetCategory.STOCK,
    AssetCategory.REAL_ESTATE,
)


# ---------------------------------------------------------------------------
# Categorization
# ---------------------------------------------------------------------------

def _matches(keywords: KeywordSet, name: str, ticker: str) -> bool:
    return (
        any(k.lower() in name for k in keywords.name)
        or any(k.lower() in ticker for k in keywords.ticker)
    )


def categorize(holding: Holding, cfg: PortfolioSettings | None = None) -> AssetCategory:
    """Assign a holding to exactly one bucket. First matching bucket wins."""
    cfg = cfg or get_settings().portfolio
    name = holding.name.lower()
    ticker = (holding.ticker or "").lower()
    for category in EXPLICIT_CATEGORIES:
        if _matches(getattr(cfg.keywords, category.value), name, ticker):
            return category
    return AssetCategory.OTHER


def _category_values(holdings: list[Holding], cfg: PortfolioSettings) -> pd.Series:
    frame = pd.DataFrame({
        "category": [categorize(h, cfg).value for h in holdings],
        "value": [float(h.current_value) for h in holdings],
    })
    return (
        frame.groupby("category")["value"].sum()
        .reindex([c.value for c in AssetCategory], fill_value=0.0)
    )


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

def diversification_score(
    holding_count: int,
    allocations: list[float],
    cfg: PortfolioSettings | None = None,
) -> float:
    """0-100: holding-count points plus balance points across the four buckets.

    Each bucket earns up to ``balance_points_per_bucket`` and loses one point
    per percentage point away from the 25% target.
    """
    cfg = cfg or get_settings().portfolio
    if holding_count == 0:
        return 0.0
    count_score = min(holding_count * cfg.points_per_holding, cfg.holding_points_cap)
    deviation = np.abs(np.asarray(allocations, dtype=float) / 100 - cfg.target_allocation)
    balance_score = np.maximum(0.0, cfg.balance_points_per_bucket - deviation * 100).sum()
    return float(np.clip(count_score + balance_score, 0.0, cfg.max_score))


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------

def _unanalyzable(holding_count: int, note: str) -> PortfolioAnalysis:
    return PortfolioAnalysis(
        crypto_allocation=0.0,
        cash_allocation=0.0,
        stock_allocation=0.0,
        real_estate_allocation=0.0,
        other_allocation=0.0,
        holding_count=holding_count,
        total_value=0.0,
        diversification_score=0.0,
        is_analyzable=False,
        analysis_note=note,
    )


def analyze(holdings: list[Holding], cfg: PortfolioSettings | None = None) -> PortfolioAnalysis:
    """Allocation percentages per bucket and a diversification score."""
    cfg = cfg or get_settings().portfolio
    if not holdings:
        return _unanalyzable(0, "Portfolio is empty")

    total = float(sum(h.current_value for h in holdings))
    if not np.isfinite(total):
        return _unanalyzable(len(holdings), "Portfolio total is too large to analyze")

    values = _category_values(holdings, cfg)
    explicit = {c: float(values[c.value]) for c in EXPLICIT_CATEGORIES}
    other = max(total - sum(explicit.values()), 0.0)

    def pct(value: float) -> float:
        return value / total * 100 if total > 0 else 0.0

    allocations = {c: pct(v) for c, v in explicit.items()}
    score = diversification_score(len(holdings), list(allocations.values()), cfg)

    return PortfolioAnalysis(
        crypto_allocation=allocations[AssetCategory.CRYPTO],
        cash_allocation=allocations[AssetCategory.CASH],
        stock_allocation=allocations[AssetCategory.STOCK],
        real_estate_allocation=allocations[AssetCategory.REAL_ESTATE],
        other_allocation=pct(other),
        holding_count=len(holdings),
        total_value=total,
        diversification_score=score,
        is_analyzable=total > 0,
        analysis_note=None if total > 0 else "Portfolio has no value",
    )


def profile(analysis: PortfolioAnalysis, cfg: PortfolioSettings | None = None) -> PortfolioProfile:
    """Extreme-concentration flags and a coarse risk tier."""
    cfg = cfg or get_settings().portfolio
    is_extreme_crypto = analysis.crypto_allocation > cfg.extreme_pct
    is_extreme_cash = analysis.cash_allocation > cfg.extreme_pct
    is_extreme_real_estate = analysis.real_estate_allocation > cfg.extreme_pct

    risk_level = RiskLevel.MEDIUM
    if is_extreme_cash or (
        analysis.crypto_allocation < cfg.low_crypto_pct
        and analysis.stock_allocation > cfg.stock_heavy_pct
    ):
        risk_level = RiskLevel.LOW
    elif is_extreme_crypto or analysis.crypto_allocation > cfg.high_crypto_pct:
        risk_level = RiskLevel.HIGH

    return PortfolioProfile(
        is_extreme_crypto=is_extreme_crypto,
        is_extreme_cash=is_extreme_cash,
        is_extreme_real_estate=is_extreme_real_estate,
        risk_level=risk_level,
        diversification_score=analysis.diversification_score,
    )


def portfolio_tip(analysis: PortfolioAnalysis, cfg: PortfolioSettings | None = None) -> str:
    """One-line tip about the portfolio's shape, independent of the phase."""
    cfg = cfg or get_settings().portfolio
    if not analysis.is_analyzable:
        return "Add holdings to your portfolio to start the analysis."
    if analysis.holding_count < cfg.few_holdings:
        return (
            f"You hold only {analysis.holding_count} asset(s). Spreading across more "
            "asset classes reduces risk."
        )
    if analysis.crypto_allocation > cfg.tip_crypto_pct:
        return "Crypto weighting is very high. Consider adding cash or bonds for stability."
    if analysis.cash_allocation > cfg.tip_cash_pct:
        return (
            "Cash weighting is high. You are either waiting for an entry point "
            "or holding a defensive position."
        )
    return (
        f"Diversification: {analysis.holding_count} holdings with "
        f"{analysis.crypto_allocation:.1f}% crypto and {analysis.cash_allocation:.1f}% cash."
    )


def snapshot(holdings: list[Holding], cfg: PortfolioSettings | None = None) -> PortfolioSnapshot:
    """Absolute values recorded with a diagnosis."""
    cfg = cfg or get_settings().portfolio
    if not holdings:
        return PortfolioSnapshot(total_value=0.0, crypto_value=0.0, cash_value=0.0, holding_count=0)
    values = _category_values(holdings, cfg)
    return PortfolioSnapshot(
        total_value=float(sum(h.current_value for h in holdings)),
        crypto_value=float(values[AssetCategory.CRYPTO.value]),
        cash_value=float(values[AssetCategory.CASH.value]),
        holding_count=len(holdings),
    )
