"""Signal chain — order pedals and assign routing zones.

Submodules:
  models   Context, warning, suggestion and result dataclasses.
  rules    Ordering rules as data and the interpreter that applies them.
  engine   compute_signal_chain plus diagnostics and host helpers.
"""

from .models import ChainContext, ChainWarning, ChainSuggestion, SignalChainResult
from .rules import ChainRule, PedalMatch, RuleAction, SIGNAL_CHAIN_RULES, apply_rule
from .engine import (
    compute_signal_chain, provisional_chain_position, applicable_rules,
    detect_warnings, generate_suggestions, ZONE_ORDER,
)

__all__ = [
    # Models
    "ChainContext", "ChainWarning", "ChainSuggestion", "SignalChainResult",
    # Rules
    "ChainRule", "PedalMatch", "RuleAction", "SIGNAL_CHAIN_RULES", "apply_rule",
    # Engine
    "compute_signal_chain", "provisional_chain_position", "applicable_rules",
    "detect_warnings", "generate_suggestions", "ZONE_ORDER",
]
