"""Pure portfolio analysis and coaching computations."""

from kostolany.features.coaching import COACHING_RULES, generate, match_rule
from kostolany.features.portfolio import analyze, categorize, portfolio_tip, profile

__all__ = ["COACHING_RULES", "analyze", "categorize", "generate", "match_rule", "portfolio_tip", "profile"]
