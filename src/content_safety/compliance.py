"""Banned-phrase compliance checking for product copy."""

from .models import Position, Violation
from .rules.rule_store import RuleStore
from .rules.sources import ValidRule


class PhraseComplianceChecker:
    """Find regulated phrasing in text and propose compliant rewordings.

    Usage:
        checker = PhraseComplianceChecker(RuleStore())
        violations = checker.check("このサプリで完治を目指しましょう")
        fixed = checker.suggest_alternatives("このサプリで完治を目指しましょう")
    """

    def __init__(self, rule_store: RuleStore):
        self.rule_store = rule_store

    def check(self, text: str) -> list[Violation]:
        """Scan text for every non-overlapping match of every banned-phrase rule.

        Args:
            text: Text to scan

        Returns:
            Violations ordered by start offset; ties keep rule order
        """
        if not isinstance(text, str) or not text:
            return []
        return self._scan(text, self.rule_store.load_compiled_rules())

    async def acheck(self, text: str) -> list[Violation]:
        """Async variant of check; suspends only while rules are (re)loaded."""
        if not isinstance(text, str) or not text:
            return []
        return self._scan(text, await self.rule_store.aload_compiled_rules())

    def _scan(self, text: str, rules: list[ValidRule]) -> list[Violation]:
        violations: list[Violation] = []
        for compiled in rules:
            violations.extend(self._matches(compiled, text))

        # sort() is stable, so equal starts keep rule order
        violations.sort(key=lambda v: v.position.start)
        return violations

    @staticmethod
    def _matches(compiled: ValidRule, text: str) -> list[Violation]:
        found = []
        for match in compiled.regex.finditer(text):
            if match.end() == match.start():
                continue
            found.append(
                Violation(
                    pattern=compiled.rule.pattern,
                    matched_text=match.group(0),
                    suggestion=compiled.rule.suggestion,
                    position=Position(start=match.start(), end=match.end()),
                )
            )
        return found

    def suggest_alternatives(self, text: str) -> str:
        """Rewrite text by replacing each violation with its suggestion.

        Replacements are applied from the end of the text backwards so that
        earlier offsets stay valid. When violations from different rules
        overlap, the one starting first (then the earlier rule) wins.

        Args:
            text: Text to rewrite

        Returns:
            Rewritten text, or the input unchanged when nothing matches
        """
        if not isinstance(text, str) or not text:
            return text

        violations = self.check(text)
        if not violations:
            return text

        return apply_suggestions(text, violations)


def apply_suggestions(text: str, violations: list[Violation]) -> str:
    """Apply violation suggestions to text in descending position order.

    Args:
        text: Original text the violations were found in
        violations: Violations ordered by start offset

    Returns:
        Text with non-overlapping violations replaced
    """
    selected: list[Violation] = []
    last_end = 0
    for violation in violations:
        if violation.position.start >= last_end:
            selected.append(violation)
            last_end = violation.position.end

    result = text
    for violation in reversed(selected):
        start, end = violation.position.start, violation.position.end
        result = result[:start] + violation.suggestion + result[end:]
    return result
