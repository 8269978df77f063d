"""Compliance and persona warning engine for supplement product content."""

from .aggregator import WarningAggregator, summarize
from .compliance import PhraseComplianceChecker
from .models import (
    BannedPhraseRule,
    CheckResult,
    CheckStatus,
    CombinedWarning,
    PersonaRule,
    PersonaWarning,
    Position,
    Severity,
    Violation,
    WarningKind,
)
from .orchestrator import CheckOrchestrator
from .persona import PersonaRuleEngine
from .rules import RuleStore

__all__ = [
    "BannedPhraseRule",
    "CheckOrchestrator",
    "CheckResult",
    "CheckStatus",
    "CombinedWarning",
    "PersonaRule",
    "PersonaRuleEngine",
    "PersonaWarning",
    "PhraseComplianceChecker",
    "Position",
    "RuleStore",
    "Severity",
    "Violation",
    "WarningAggregator",
    "WarningKind",
    "summarize",
]
