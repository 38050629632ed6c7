"""Diagnosis services."""

from kostolany.service.coaching import CoachingService
from kostolany.service.diagnosis import DiagnosisService
from kostolany.service.phase import PhaseService

__all__ = [
    "CoachingService",
    "DiagnosisService",
    "PhaseService",
]
