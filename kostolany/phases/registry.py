"""Phase metadata registry: the six egg phases and their fixed ring.

Built once from ``defaults.yaml`` and treated as read-only afterwards.
Every phase must have a complete entry and the successor relation must
form a single 6-cycle; anything else is rejected at construction.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from kostolany.config import PhaseDefinition, get_settings
from kostolany.exceptions import RegistryError
from kostolany.models.phase import (
    CycleSide,
    EggPhase,
    InvestmentAction,
    PhaseMetadata,
    RiskLevel,
)

_RISING_SIDE = frozenset({
    EggPhase.A1_CORRECTION,
    EggPhase.A2_ACCOMPANIMENT,
    EggPhase.A3_EXAGGERATION,
})


class PhaseRegistry:
    """Immutable lookup table for phase metadata and ring navigation."""

    def __init__(self, entries: Mapping[EggPhase, PhaseMetadata]) -> None:
        missing = [p for p in EggPhase if p not in entries]
        if missing:
            raise RegistryError(
                f"Missing metadata for phases: {', '.join(p.value for p in missing)}"
            )
        for key, meta in entries.items():
            if meta.phase != key:
                raise RegistryError(f"Entry under {key} describes {meta.phase}")

        self._entries: Mapping[EggPhase, PhaseMetadata] = MappingProxyType(
            {p: entries[p] for p in EggPhase}
        )
        self._previous: Mapping[EggPhase, EggPhase] = MappingProxyType(
            {meta.next_phase: p for p, meta in self._entries.items()}
        )
        self._check_ring()

    def _check_ring(self) -> None:
        start = EggPhase.A1_CORRECTION
        seen = [start]
        current = self._entries[start].next_phase
        while current != start:
            if current in seen:
                raise RegistryError(f"Phase ring revisits {current} before closing")
            seen.append(current)
            current = self._entries[current].next_phase
        if len(seen) != len(EggPhase):
            raise RegistryError(
                f"Phase ring closes after {len(seen)} phases, expected {len(EggPhase)}"
            )

    @classmethod
    def from_definitions(cls, definitions: Mapping[str, PhaseDefinition]) -> PhaseRegistry:
        """Build from the ``phases`` section of the settings."""
        entries: dict[EggPhase, PhaseMetadata] = {}
        for key, d in definitions.items():
            try:
                phase = EggPhase(key)
                next_phase = EggPhase(d.next_phase)
                risk = RiskLevel(d.risk_level)
                action = InvestmentAction(d.action)
            except ValueError as e:
                raise RegistryError(f"Bad phase definition {key!r}: {e}") from e
            entries[phase] = PhaseMetadata(
                phase=phase,
                title=d.title,
                subtitle=d.subtitle,
                color=d.color,
                historical_success_rate=d.historical_success_rate,
                description=d.description,
                investor_sentiment=d.investor_sentiment,
                price_trend=d.price_trend,
                risk_level=risk,
                action=action,
                recommended_action=d.recommended_action,
                next_phase=next_phase,
                transition_condition=d.transition_condition,
                side=CycleSide.RISING_MARKET if phase in _RISING_SIDE else CycleSide.FALLING_MARKET,
            )
        return cls(entries)

    # --- Lookup ---

    @property
    def entries(self) -> Mapping[EggPhase, PhaseMetadata]:
        return self._entries

    def get(self, phase: EggPhase) -> PhaseMetadata:
        return self._entries[phase]

    def successor(self, phase: EggPhase) -> EggPhase:
        return self._entries[phase].next_phase

    def predecessor(self, phase: EggPhase) -> EggPhase:
        return self._previous[phase]

    # --- Grouping (ring order) ---

    def by_action(self, action: InvestmentAction) -> tuple[EggPhase, ...]:
        return tuple(p for p, m in self._entries.items() if m.action == action)

    def by_risk(self, risk_level: RiskLevel) -> tuple[EggPhase, ...]:
        return tuple(p for p, m in self._entries.items() if m.risk_level == risk_level)

    def by_side(self, side: CycleSide) -> tuple[EggPhase, ...]:
        return tuple(p for p, m in self._entries.items() if m.side == side)

    def rising_market(self) -> tuple[EggPhase, ...]:
        return self.by_side(CycleSide.RISING_MARKET)

    def falling_market(self) -> tuple[EggPhase, ...]:
        return self.by_side(CycleSide.FALLING_MARKET)

    def colors(self) -> dict[EggPhase, str]:
        return {p: m.color for p, m in self._entries.items()}


_registry: PhaseRegistry | None = None


def get_registry() -> PhaseRegistry:
    """Process-wide registry built from the current settings. Loads on first call."""
    global _registry
    if _registry is None:
        _registry = PhaseRegistry.from_definitions(get_settings().phases)
    return _registry


def reset_registry() -> None:
    """Drop the cached registry (after reset_settings(), in tests)."""
    global _registry
    _registry = None
