"""Kostolany egg-cycle diagnosis: phase classification, portfolio analysis and coaching."""

# Config
from kostolany.config import Settings, get_settings, load_settings, reset_settings

# Errors
from kostolany.exceptions import KostolanyError, RegistryError, StorageError, ValidationError

# Models
from kostolany.models.phase import (
    ClassificationResult,
    CycleSide,
    EggPhase,
    InterestRateTrend,
    InvestmentAction,
    MarketInputs,
    MarketSentiment,
    PhaseMetadata,
    RiskLevel,
    VolumeCondition,
)
from kostolany.models.portfolio import (
    AssetCategory,
    Holding,
    PortfolioAnalysis,
    PortfolioProfile,
    PortfolioSnapshot,
)
from kostolany.models.coaching import CoachingMessage, CoachingSeverity
from kostolany.models.diagnosis import (
    DiagnosisAnswers,
    DiagnosisHistory,
    DiagnosisResult,
    HistoryStats,
    MarketDriver,
)

# Pure engine
from kostolany.phases.registry import PhaseRegistry, get_registry
from kostolany.phases.classifier import classify, get_next_phase, get_previous_phase
from kostolany.features.portfolio import analyze
from kostolany.features.coaching import COACHING_RULES, CoachingRule, generate

# Collaborators
from kostolany.data.store import DiagnosisStore, InMemoryDiagnosisStore, JsonFileDiagnosisStore
from kostolany.data.providers import (
    FixedMarketConditions,
    MarketConditionsProvider,
    MarketDriverProvider,
    RandomMarketConditions,
    StaticMarketDriverProvider,
)

# Services
from kostolany.service.phase import PhaseService
from kostolany.service.coaching import CoachingService
from kostolany.service.diagnosis import DiagnosisService
