"""Central configuration: loaded from YAML, overridable per-field."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field


# --- Settings models ---


class PhaseDefinition(BaseModel):
    """Static description of one egg-cycle phase."""

    title: str
    subtitle: str
    color: str
    historical_success_rate: float  # 0-100
    description: str
    investor_sentiment: str
    price_trend: str
    risk_level: str  # "LOW" | "MEDIUM" | "HIGH"
    action: str  # "BUY" | "HOLD" | "SELL"
    recommended_action: str
    next_phase: str
    transition_condition: str


class ClassifierSettings(BaseModel):
    peak_confidence: float = 70.0
    peak_low_volume_confidence: float = 85.0
    falling_confidence: float = 80.0
    bottom_confidence: float = 75.0
    bottom_high_volume_confidence: float = 90.0
    rising_cautious_confidence: float = 65.0
    rising_confidence: float = 45.0
    fallback_confidence: float = 50.0


class KeywordSet(BaseModel):
    """Case-insensitive substrings matched against a holding's name / ticker."""

    name: list[str] = Field(default_factory=list)
    ticker: list[str] = Field(default_factory=list)


class PortfolioKeywords(BaseModel):
    crypto: KeywordSet = Field(default_factory=lambda: KeywordSet(
        name=["bitcoin", "ethereum", "crypto"],
        ticker=["btc", "eth"],
    ))
    cash: KeywordSet = Field(default_factory=lambda: KeywordSet(
        name=["cash", "stable", "usd"],
        ticker=["usdt", "usdc"],
    ))
    stock: KeywordSet = Field(default_factory=lambda: KeywordSet(
        name=["stock", "etf", "nasdaq"],
        ticker=["qqq", "spy"],
    ))
    real_estate: KeywordSet = Field(default_factory=lambda: KeywordSet(
        name=["real", "estate", "property"],
    ))


class PortfolioSettings(BaseModel):
    keywords: PortfolioKeywords = Field(default_factory=PortfolioKeywords)
    points_per_holding: float = 5.0
    holding_points_cap: float = 40.0
    target_allocation: float = 0.25
    balance_points_per_bucket: float = 15.0
    max_score: float = 100.0
    extreme_pct: float = 70.0
    low_crypto_pct: float = 10.0
    high_crypto_pct: float = 60.0
    stock_heavy_pct: float = 60.0
    few_holdings: int = 3
    tip_crypto_pct: float = 80.0
    tip_cash_pct: float = 60.0


class CoachingSettings(BaseModel):
    extreme_pct: float = 70.0
    cash_ready_pct: float = 30.0


class DiagnosisSettings(BaseModel):
    history_size: int = 10
    storage_dir: str | None = None  # None = ~/.kostolany/diagnosis


class MarketDriverDefinition(BaseModel):
    rank: int
    title: str
    description: str
    affected_assets: list[str]
    impact_level: str
    icon: str


class MarketSettings(BaseModel):
    drivers: list[MarketDriverDefinition] = Field(default_factory=list)
    sentiment_weights: dict[str, float] = Field(default_factory=lambda: {
        "FEAR": 15.0,
        "CAUTIOUS": 25.0,
        "NEUTRAL": 30.0,
        "OPTIMISTIC": 20.0,
        "GREED": 10.0,
    })
    high_volume_hours: list[int] = Field(default_factory=lambda: [3, 4, 21, 22, 23])
    medium_volume_hours: list[int] = Field(default_factory=lambda: [0, 1, 2])


class Settings(BaseModel):
    """Central config: loaded from YAML, overridable per-field."""

    phases: dict[str, PhaseDefinition] = Field(default_factory=dict)
    classifier: ClassifierSettings = Field(default_factory=ClassifierSettings)
    portfolio: PortfolioSettings = Field(default_factory=PortfolioSettings)
    coaching: CoachingSettings = Field(default_factory=CoachingSettings)
    diagnosis: DiagnosisSettings = Field(default_factory=DiagnosisSettings)
    market: MarketSettings = Field(default_factory=MarketSettings)


# --- Loading ---

_DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"
_USER_CONFIG_PATH = Path.home() / ".kostolany" / "config.yaml"

_cached_settings: Settings | None = None


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base. Returns new dict."""
    merged = base.copy()
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings(
    user_config_path: Path | None = None,
    _force_reload: bool = False,
) -> Settings:
    """Load defaults.yaml, merge ~/.kostolany/config.yaml if present.

    Args:
        user_config_path: Override path for user config file.
        _force_reload: Bypass cache (for testing).

    Returns:
        Merged Settings instance.
    """
    global _cached_settings
    if _cached_settings is not None and not _force_reload:
        return _cached_settings

    # Layer 1: package defaults
    with open(_DEFAULTS_PATH, encoding="utf-8") as f:
        defaults = yaml.safe_load(f)

    # Layer 2: user overrides
    user_path = user_config_path or _USER_CONFIG_PATH
    if user_path.exists():
        with open(user_path, encoding="utf-8") as f:
            user = yaml.safe_load(f) or {}
        merged = _deep_merge(defaults, user)
    else:
        merged = defaults

    _cached_settings = Settings(**merged)
    return _cached_settings


def get_settings() -> Settings:
    """Get cached settings (singleton). Loads on first call."""
    return load_settings()


def reset_settings() -> None:
    """Clear cached settings. Next get_settings() will reload from YAML."""
    global _cached_settings
    _cached_settings = None
