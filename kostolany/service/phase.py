"""PhaseService: egg-cycle classification and ring navigation."""

from __future__ import annotations

from kostolany.models.phase import (
    ClassificationResult,
    CycleSide,
    EggPhase,
    InvestmentAction,
    MarketInputs,
    PhaseMetadata,
    RiskLevel,
)
from kostolany.phases.classifier import adjust_action, classify_inputs
from kostolany.phases.registry import PhaseRegistry, get_registry


class PhaseService:
    """Classify market inputs into egg phases (A1-B3).

    Holds no per-call state; one instance can serve any number of callers.
    """

    def __init__(self, registry: PhaseRegistry | None = None) -> None:
        self.registry = registry or get_registry()

    def classify(self, inputs: MarketInputs) -> ClassificationResult:
        return classify_inputs(inputs, registry=self.registry)

    def next_phase(self, phase: EggPhase) -> EggPhase:
        return self.registry.successor(phase)

    def previous_phase(self, phase: EggPhase) -> EggPhase:
        return self.registry.predecessor(phase)

    def info(self, phase: EggPhase) -> PhaseMetadata:
        return self.registry.get(phase)

    def colors(self) -> dict[EggPhase, str]:
        return self.registry.colors()

    def phases_for_action(self, action: InvestmentAction) -> tuple[EggPhase, ...]:
        return self.registry.by_action(action)

    def phases_for_risk(self, risk_level: RiskLevel) -> tuple[EggPhase, ...]:
        return self.registry.by_risk(risk_level)

    def phases_for_side(self, side: CycleSide) -> tuple[EggPhase, ...]:
        return self.registry.by_side(side)

    def adjusted_action(self, action: InvestmentAction, portfolio_risk: RiskLevel) -> InvestmentAction:
        return adjust_action(action, portfolio_risk)
