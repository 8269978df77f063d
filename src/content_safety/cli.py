#!/usr/bin/env python3
"""CLI interface for the content safety engine."""

import argparse
import asyncio
import json
from pathlib import Path

from common.env import env
from common.logger import error, setup_logging, success, warning

from .compliance import PhraseComplianceChecker
from .orchestrator import CheckOrchestrator
from .reporters import WarningReporter
from .rules.rule_store import RuleStore


def _read_text(args) -> str | None:
    if args.text is not None:
        return args.text
    path = Path(args.file)
    if not path.exists():
        error(f"File '{path}' does not exist")
        return None
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        error(f"File '{path}' is not valid UTF-8: {e}")
        return None


def _rule_store(args) -> RuleStore:
    return RuleStore(override_path=Path(args.rules) if args.rules else None)


def cmd_scan(args):
    """Scan text for banned phrases.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 if clean, 1 if violations found, 2 for bad input)
    """
    text = _read_text(args)
    if text is None:
        return 2

    violations = PhraseComplianceChecker(_rule_store(args)).check(text)
    reporter = WarningReporter()

    if args.format == "json":
        print(reporter.report_violations_json(violations))
        return 1 if violations else 0

    code = reporter.report_violations_console(violations)
    if not violations:
        success("No banned phrases found")
    return code


def cmd_rewrite(args):
    """Print text with banned phrases replaced by their suggestions."""
    text = _read_text(args)
    if text is None:
        return 2

    print(PhraseComplianceChecker(_rule_store(args)).suggest_alternatives(text))
    return 0


def cmd_check(args):
    """Run the full compliance and persona check for a product JSON file.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 if high-severity warnings, 2 for bad input)
    """
    product_path = Path(args.product)
    if not product_path.exists():
        error(f"Product file '{product_path}' does not exist")
        return 2

    try:
        product = json.loads(product_path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        error(f"Product file '{product_path}' is not valid UTF-8: {e}")
        return 2
    except (json.JSONDecodeError, RecursionError) as e:
        error(f"Product file '{product_path}' is not valid JSON: {e}")
        return 2

    async def run():
        async with CheckOrchestrator(rule_store=_rule_store(args)) as orchestrator:
            return await orchestrator.check_product(product, args.persona)

    result = asyncio.run(run())
    reporter = WarningReporter(show_low=not args.hide_low)

    if args.format == "json":
        print(reporter.report_json(result))
        return 1 if result.error or result.has_high_severity else 0

    code = reporter.report_console(result)
    if not result.error and not result.warnings:
        success("No warnings for this product")
    return code


def cmd_rules(args):
    """List built-in persona rules, optionally filtered."""
    store = RuleStore()
    known = set(store.available_persona_tags())
    for tag in args.persona or []:
        if tag not in known:
            warning(f"Unknown persona tag '{tag}'")

    if args.persona:
        rules = [r for tag in dict.fromkeys(args.persona) for r in store.persona_rules_by_tag(tag)]
    else:
        rules = store.load_persona_rules()
    if args.severity:
        allowed = {r.id for r in store.persona_rules_by_severity(args.severity)}
        rules = [r for r in rules if r.id in allowed]

    if args.format == "json":
        print(WarningReporter.report_rules_json(rules))
        return 0

    for rule in rules:
        print(f"{rule.id} [{rule.persona_tag}, {rule.severity.value}] {rule.ingredient_pattern}")
        print(f"    {rule.message}")
    print(f"\nAvailable persona tags: {', '.join(store.available_persona_tags())}")
    return 0


def _add_text_input(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--text", type=str, help="Text to check")
    group.add_argument("--file", type=str, help="Path to a UTF-8 text file to check")


def main(argv: list[str] | None = None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Check supplement product copy for compliance and persona risks"
    )
    parser.add_argument(
        "--rules",
        type=str,
        help="Banned-phrase rule file (overrides CONTENT_SAFETY_RULES_PATH)",
    )
    parser.add_argument("--log-file", type=str, help="Also write logs to this file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Scan command
    scan_parser = subparsers.add_parser("scan", help="Find banned phrases in text")
    _add_text_input(scan_parser)
    scan_parser.add_argument(
        "--format", choices=["console", "json"], default="console", help="Output format"
    )
    scan_parser.set_defaults(func=cmd_scan)

    # Rewrite command
    rewrite_parser = subparsers.add_parser(
        "rewrite", help="Replace banned phrases with compliant suggestions"
    )
    _add_text_input(rewrite_parser)
    rewrite_parser.set_defaults(func=cmd_rewrite)

    # Check command
    check_parser = subparsers.add_parser("check", help="Check a product JSON file")
    check_parser.add_argument("--product", type=str, required=True, help="Product JSON file")
    check_parser.add_argument(
        "--persona",
        action="append",
        default=[],
        help="Persona tag to evaluate (repeatable), e.g. --persona pregnancy",
    )
    check_parser.add_argument(
        "--format", choices=["console", "json"], default="console", help="Output format"
    )
    check_parser.add_argument(
        "--hide-low", action="store_true", help="Hide low-severity warnings"
    )
    check_parser.set_defaults(func=cmd_check)

    # Rules command
    rules_parser = subparsers.add_parser("rules", help="List built-in persona rules")
    rules_parser.add_argument("--persona", action="append", help="Only rules for this tag")
    rules_parser.add_argument(
        "--severity", choices=["low", "mid", "medium", "high"], help="Only rules of this severity"
    )
    rules_parser.add_argument(
        "--format", choices=["console", "json"], default="console", help="Output format"
    )
    rules_parser.set_defaults(func=cmd_rules)

    args = parser.parse_args(argv)
    setup_logging(level=env.log_level(), log_file=args.log_file)
    return args.func(args)


if __name__ == "__main__":
    exit(main())
