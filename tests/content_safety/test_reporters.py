"""Tests for console and JSON reporters."""

import json
import logging

from rich.text import Text

from content_safety.models import (
    CheckResult,
    CombinedWarning,
    PersonaRule,
    Position,
    Severity,
    Violation,
    WarningKind,
)
from content_safety.reporters import WarningReporter


def make_result(*severities, **kwargs) -> CheckResult:
    warnings = [
        CombinedWarning(
            id=f"persona-r{i}-{i}",
            kind=WarningKind.PERSONA,
            severity=severity,
            message=f"message {i}",
            suggestion="相談してください",
            affected_ingredients=["caffeine"],
        )
        for i, severity in enumerate(severities)
    ]
    return CheckResult(warnings=warnings, **kwargs)


def test_console_exit_code_high():
    assert WarningReporter().report_console(make_result(Severity.HIGH, Severity.LOW)) == 1


def test_console_exit_code_clean():
    assert WarningReporter().report_console(make_result(Severity.MID)) == 0
    assert WarningReporter().report_console(CheckResult()) == 0


def test_console_reports_error(caplog):
    with caplog.at_level(logging.INFO):
        code = WarningReporter().report_console(CheckResult(error="警告チェックを実行できませんでした"))

    assert code == 1
    assert "警告チェックを実行できませんでした" in caplog.text


def test_console_hides_low(caplog):
    with caplog.at_level(logging.INFO):
        WarningReporter(show_low=False).report_console(make_result(Severity.MID, Severity.LOW))

    assert "message 0" in caplog.text
    assert "message 1" not in caplog.text


def test_json_shape():
    data = json.loads(WarningReporter().report_json(make_result(Severity.HIGH, partial_failure=True)))

    assert data["error"] is None
    assert data["isLoading"] is False
    assert data["partialFailure"] is True
    assert data["warnings"][0] == {
        "id": "persona-r0-0",
        "kind": "persona",
        "severity": "high",
        "message": "message 0",
        "suggestion": "相談してください",
        "priority": 3,
        "affected_ingredients": ["caffeine"],
    }


def test_violations_json_and_exit_code():
    violations = [Violation("完治", "完治", "改善", Position(6, 8))]
    reporter = WarningReporter()

    data = json.loads(reporter.report_violations_json(violations))

    assert data["violations"][0]["matchedText"] == "完治"
    assert data["violations"][0]["position"] == {"start": 6, "end": 8}
    assert reporter.report_violations_console(violations) == 1
    assert reporter.report_violations_console([]) == 0


def test_rules_json():
    rule = PersonaRule("r", "pregnancy", "a|b", Severity.MID, "m")
    data = json.loads(WarningReporter.report_rules_json([rule]))
    assert data["rules"][0]["severity"] == "mid"
    assert data["rules"][0]["recommendedAction"] is None


def test_console_escapes_rule_supplied_text(caplog):
    """Test that brackets from rule files render literally instead of as markup."""
    warning = CombinedWarning(
        id="compliance-0",
        kind=WarningKind.COMPLIANCE,
        severity=Severity.MID,
        message="「完治」という表現について注意が必要です",
        suggestion="[/注] 個人差があります",
        affected_ingredients=["[red]カフェイン"],
    )

    with caplog.at_level(logging.INFO):
        WarningReporter().report_console(CheckResult(warnings=[warning]))

    rendered = "\n".join(Text.from_markup(r.getMessage()).plain for r in caplog.records)
    assert "Suggestion: [/注] 個人差があります" in rendered
    assert "Ingredients: [red]カフェイン" in rendered
