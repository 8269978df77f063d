"""Merge compliance violations and persona warnings into one display list."""

from dataclasses import replace

from .models import (
    CombinedWarning,
    PersonaWarning,
    Severity,
    Violation,
    WarningKind,
    WarningSummary,
)

# Banned-phrase rules carry no severity of their own
COMPLIANCE_SEVERITY = Severity.MID

SUGGESTION_SEPARATOR = " / "


def compliance_message(violation: Violation) -> str:
    """User-facing message for a banned-phrase violation."""
    return f"「{violation.matched_text}」という表現について注意が必要です"


class WarningAggregator:
    """Deduplicate and severity-sort warnings from both checkers.

    Ids are assigned from (kind, index within kind) before deduplication,
    so the same inputs always produce the same ids and a dismissal made on
    one result stays valid on the next.
    """

    def aggregate(
        self,
        violations: list[Violation] | None,
        persona_warnings: list[PersonaWarning] | None,
    ) -> list[CombinedWarning]:
        """Build the combined warning list.

        Args:
            violations: Compliance violations in scan order (None treated as empty)
            persona_warnings: Persona warnings in rule order (None treated as empty)

        Returns:
            Deduplicated warnings, highest severity first; ties keep
            compliance-before-persona encounter order
        """
        combined = self._from_violations(violations or []) + self._from_persona(
            persona_warnings or []
        )
        merged = self._deduplicate(combined)
        # sort() is stable, so equal severities keep encounter order
        merged.sort(key=lambda w: w.priority, reverse=True)
        return merged

    @staticmethod
    def _from_violations(violations: list[Violation]) -> list[CombinedWarning]:
        return [
            CombinedWarning(
                id=f"compliance-{index}",
                kind=WarningKind.COMPLIANCE,
                severity=COMPLIANCE_SEVERITY,
                message=compliance_message(violation),
                suggestion=violation.suggestion,
            )
            for index, violation in enumerate(violations)
        ]

    @staticmethod
    def _from_persona(warnings: list[PersonaWarning]) -> list[CombinedWarning]:
        return [
            CombinedWarning(
                id=f"persona-{warning.rule_id}-{index}",
                kind=WarningKind.PERSONA,
                severity=warning.severity,
                message=warning.message,
                suggestion=warning.action,
                affected_ingredients=list(warning.affected_ingredients),
            )
            for index, warning in enumerate(warnings)
        ]

    @staticmethod
    def _deduplicate(warnings: list[CombinedWarning]) -> list[CombinedWarning]:
        by_message: dict[str, CombinedWarning] = {}

        for warning in warnings:
            existing = by_message.get(warning.message)
            if existing is None:
                by_message[warning.message] = replace(
                    warning, affected_ingredients=list(warning.affected_ingredients)
                )
                continue

            if warning.severity.priority > existing.severity.priority:
                existing.severity = warning.severity

            for ingredient in warning.affected_ingredients:
                if ingredient not in existing.affected_ingredients:
                    existing.affected_ingredients.append(ingredient)

            existing.suggestion = _merge_suggestions(existing.suggestion, warning.suggestion)

        return list(by_message.values())


def _merge_suggestions(first: str | None, second: str | None) -> str | None:
    if not second:
        return first
    if not first:
        return second
    parts = first.split(SUGGESTION_SEPARATOR)
    if second in parts:
        return first
    return first + SUGGESTION_SEPARATOR + second


def summarize(warnings: list[CombinedWarning]) -> WarningSummary:
    """Count warnings per severity and pick the most important one.

    The most important warning is the first with the highest severity, so
    on an aggregated list it is simply the head.
    """
    by_severity = {severity: 0 for severity in Severity}
    most_important: CombinedWarning | None = None

    for warning in warnings:
        by_severity[warning.severity] += 1
        if most_important is None or warning.priority > most_important.priority:
            most_important = warning

    return WarningSummary(total=len(warnings), by_severity=by_severity, most_important=most_important)
