"""Portfolio concentration data models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

from kostolany.models.phase import RiskLevel


class AssetCategory(StrEnum):
    CRYPTO = "crypto"
    CASH = "cash"
    STOCK = "stock"
    REAL_ESTATE = "real_estate"
    OTHER = "other"


class Holding(BaseModel):
    """A single position supplied by the caller."""

    name: str
    ticker: str | None = None
    current_value: float = Field(ge=0.0, allow_inf_nan=False)


class PortfolioAnalysis(BaseModel):
    """Category allocation (percent of total value) and diversification."""

    crypto_allocation: float
    cash_allocation: float
    stock_allocation: float
    real_estate_allocation: float
    other_allocation: float
    holding_count: int
    total_value: float
    diversification_score: float = Field(ge=0.0, le=100.0)
    is_analyzable: bool
    analysis_note: str | None = None

    def allocation(self, category: AssetCategory) -> float:
        return getattr(self, f"{category.value}_allocation")


class PortfolioProfile(BaseModel):
    """Concentration flags derived from an analysis."""

    is_extreme_crypto: bool
    is_extreme_cash: bool
    is_extreme_real_estate: bool
    risk_level: RiskLevel
    diversification_score: float


class PortfolioSnapshot(BaseModel):
    """Absolute values captured alongside a diagnosis."""

    total_value: float
    crypto_value: float
    cash_value: float
    holding_count: int
