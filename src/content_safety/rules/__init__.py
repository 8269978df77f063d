"""Rule sources, built-in rule packs and the caching rule store."""

from .rule_store import RuleStore
from .sources import (
    BuiltinRuleSource,
    CandidateFilesSource,
    FileRuleSource,
    InvalidRule,
    RuleSource,
    ValidRule,
    compile_rule,
)

__all__ = [
    "RuleStore",
    "RuleSource",
    "FileRuleSource",
    "CandidateFilesSource",
    "BuiltinRuleSource",
    "ValidRule",
    "InvalidRule",
    "compile_rule",
]
