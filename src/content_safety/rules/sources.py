"""Banned-phrase rule sources.

Each source is one step of the resolution chain used by RuleStore:
explicit override file, then conventional file locations, then the
built-in defaults. A source either yields a non-empty rule list or None;
it never raises for a missing or malformed file.
"""

import json
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from common.constants import RULE_FILE_CANDIDATES, RULE_FILE_KEY
from common.logger import get_logger

from ..errors import RuleLoadFailure, RulePatternError
from ..models import BannedPhraseRule
from .default_rules import DEFAULT_BANNED_PHRASE_RULES

logger = get_logger(__name__)


@dataclass(frozen=True)
class ValidRule:
    """A rule whose pattern compiled successfully."""

    rule: BannedPhraseRule
    regex: re.Pattern


@dataclass(frozen=True)
class InvalidRule:
    """A rule that cannot be used, with the reason it was rejected."""

    pattern: str
    reason: str


CompiledRule = ValidRule | InvalidRule


def compile_rule(rule: BannedPhraseRule) -> CompiledRule:
    """Compile a rule's pattern case-insensitively.

    Args:
        rule: Rule to compile

    Returns:
        ValidRule carrying the compiled regex, or InvalidRule with the error
    """
    try:
        return ValidRule(rule=rule, regex=re.compile(rule.pattern, re.IGNORECASE))
    except re.error as e:
        return InvalidRule(pattern=rule.pattern, reason=str(e))


def parse_rule_document(data: Any, origin: str) -> list[BannedPhraseRule]:
    """Extract usable rules from a decoded rule document.

    Entries that are not objects, lack a string pattern/suggest, or whose
    pattern does not compile are skipped individually.

    Args:
        data: Decoded JSON document, expected shape {"ng": [{"pattern", "suggest"}]}
        origin: Description of where the document came from (for log lines)

    Returns:
        Usable rules in document order

    Raises:
        RuleLoadFailure: If the document has no "ng" list or no usable rules
    """
    if not isinstance(data, dict) or not isinstance(data.get(RULE_FILE_KEY), list):
        raise RuleLoadFailure(f"{origin}: missing '{RULE_FILE_KEY}' array")

    rules: list[BannedPhraseRule] = []
    for index, entry in enumerate(data[RULE_FILE_KEY]):
        if not isinstance(entry, dict):
            logger.warning(f"{origin}: rule #{index} is not an object, skipping")
            continue

        pattern = entry.get("pattern")
        suggestion = entry.get("suggest")
        if not isinstance(pattern, str) or not pattern or not isinstance(suggestion, str):
            logger.warning(f"{origin}: rule #{index} lacks pattern/suggest, skipping")
            continue

        compiled = compile_rule(BannedPhraseRule(pattern=pattern, suggestion=suggestion))
        if isinstance(compiled, InvalidRule):
            logger.warning(f"{origin}: {RulePatternError(compiled.pattern, compiled.reason)}")
            continue

        rules.append(compiled.rule)

    if not rules:
        raise RuleLoadFailure(f"{origin}: no usable rules")

    return rules


class RuleSource(ABC):
    """One step of the banned-phrase rule resolution chain."""

    @abstractmethod
    def try_load(self) -> list[BannedPhraseRule] | None:
        """Load rules from this source.

        Returns:
            Non-empty list of rules, or None if this source cannot supply any
        """
        pass

    @abstractmethod
    def describe(self) -> str:
        """Short human-readable description used in log lines."""
        pass


class FileRuleSource(RuleSource):
    """Rules read from a single JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def try_load(self) -> list[BannedPhraseRule] | None:
        if not self.path.is_file():
            logger.debug(f"Rule file not found: {self.path}")
            return None

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return parse_rule_document(data, origin=str(self.path))
        # ValueError covers JSONDecodeError and UnicodeDecodeError; deep nesting
        # raises RecursionError from the decoder
        except (OSError, ValueError, RecursionError) as e:
            logger.warning(f"Failed to read rules from {self.path}: {e}")
        except RuleLoadFailure as e:
            logger.warning(str(e))
        return None

    def describe(self) -> str:
        return f"file {self.path}"


class CandidateFilesSource(RuleSource):
    """The first loadable file among the conventional rule locations."""

    def __init__(self, base_dir: Path, candidates: tuple[Path, ...] = RULE_FILE_CANDIDATES):
        self.sources = [FileRuleSource(Path(base_dir) / c) for c in candidates]

    def try_load(self) -> list[BannedPhraseRule] | None:
        for source in self.sources:
            rules = source.try_load()
            if rules is not None:
                logger.debug(f"Resolved banned-phrase rules from {source.describe()}")
                return rules
        return None

    def describe(self) -> str:
        return "conventional locations (" + ", ".join(str(s.path) for s in self.sources) + ")"


class BuiltinRuleSource(RuleSource):
    """The built-in minimal rule set; always succeeds."""

    def try_load(self) -> list[BannedPhraseRule] | None:
        return list(DEFAULT_BANNED_PHRASE_RULES)

    def describe(self) -> str:
        return "built-in defaults"
