"""Egg-cycle phase registry and classifier."""

from kostolany.phases.classifier import classify, classify_inputs, get_next_phase, get_previous_phase
from kostolany.phases.registry import PhaseRegistry, get_registry

__all__ = [
    "PhaseRegistry",
    "classify",
    "classify_inputs",
    "get_next_phase",
    "get_previous_phase",
    "get_registry",
]
