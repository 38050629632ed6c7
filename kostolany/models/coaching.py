"""Coaching message data models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class CoachingSeverity(StrEnum):
    DANGER = "DANGER"
    WARNING = "WARNING"
    INFO = "INFO"
    SUCCESS = "SUCCESS"


class CoachingMessage(BaseModel):
    """One prioritized piece of advice for the user."""

    severity: CoachingSeverity
    message: str  # one-line summary
    detailed_message: str | None = None
    icon: str
    recommended_action: str | None = None
    rule: str  # name of the coaching rule that produced this message
