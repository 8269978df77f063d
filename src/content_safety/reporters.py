"""Check result reporters."""

import json

from rich.markup import escape

from common.logger import get_logger

from .aggregator import summarize
from .models import CheckResult, PersonaRule, Severity, Violation

logger = get_logger(__name__)

_ICONS = {
    Severity.HIGH: "[red]✗[/red]",
    Severity.MID: "[yellow]⚠[/yellow]",
    Severity.LOW: "ℹ",
}


class WarningReporter:
    """Format and display check results."""

    def __init__(self, show_low: bool = True):
        """Initialize the reporter.

        Args:
            show_low: Whether to show low-severity warnings
        """
        self.show_low = show_low

    def report_console(self, result: CheckResult) -> int:
        """Print a check result to the console.

        Args:
            result: Result to report

        Returns:
            Exit code (1 if high-severity warnings or total failure, else 0)
        """
        if result.error:
            logger.error(result.error)
            return 1

        for warning in result.warnings:
            if not self.show_low and warning.severity == Severity.LOW:
                continue

            logger.info(f"  {_ICONS[warning.severity]} [bold]{warning.id}[/bold]: {escape(warning.message)}")
            if warning.affected_ingredients:
                logger.info(f"      Ingredients: {escape(', '.join(warning.affected_ingredients))}")
            if warning.suggestion:
                logger.info(f"      Suggestion: {escape(warning.suggestion)}")

        summary = summarize(result.warnings)
        logger.info("\n" + "=" * 60)
        logger.info(
            f"Total: [bold]{summary.by_severity[Severity.HIGH]}[/bold] high, "
            f"[bold]{summary.by_severity[Severity.MID]}[/bold] mid, "
            f"[bold]{summary.by_severity[Severity.LOW]}[/bold] low"
        )
        if result.partial_failure:
            logger.warning("Some checks could not run; results may be incomplete")

        return 1 if result.has_high_severity else 0

    def report_json(self, result: CheckResult) -> str:
        """Format a check result as JSON."""
        data = {
            "warnings": [w.to_dict() for w in result.warnings],
            "isLoading": result.is_loading,
            "error": result.error,
            "partialFailure": result.partial_failure,
        }
        return json.dumps(data, indent=2, ensure_ascii=False)

    def report_violations_console(self, violations: list[Violation]) -> int:
        """Print banned-phrase violations; returns 1 if any were found."""
        for v in violations:
            logger.info(
                f"  {_ICONS[Severity.MID]} [{v.position.start}:{v.position.end}] "
                f"「{escape(v.matched_text)}」 → {escape(v.suggestion)}"
            )
        logger.info(f"Total: [bold]{len(violations)}[/bold] violation(s)")
        return 1 if violations else 0

    @staticmethod
    def report_violations_json(violations: list[Violation]) -> str:
        """Format banned-phrase violations as JSON."""
        data = {
            "violations": [
                {
                    "pattern": v.pattern,
                    "matchedText": v.matched_text,
                    "suggestion": v.suggestion,
                    "position": {"start": v.position.start, "end": v.position.end},
                }
                for v in violations
            ]
        }
        return json.dumps(data, indent=2, ensure_ascii=False)

    @staticmethod
    def report_rules_json(rules: list[PersonaRule]) -> str:
        """Format persona rules as JSON."""
        data = {
            "rules": [
                {
                    "id": r.id,
                    "personaTag": r.persona_tag,
                    "ingredientPattern": r.ingredient_pattern,
                    "severity": r.severity.value,
                    "message": r.message,
                    "recommendedAction": r.recommended_action,
                }
                for r in rules
            ]
        }
        return json.dumps(data, indent=2, ensure_ascii=False)
