"""Shared constants for the content safety engine.

For environment-based configuration (rule file override, log level), use
the env module:
    from common.env import env
    override = env.rules_path()
"""

from pathlib import Path

# Banned-phrase rules are re-read from disk after this many seconds
RULE_CACHE_TTL_SECONDS: float = 5 * 60

# Conventional rule file locations, tried in order relative to the base dir
RULE_FILE_CANDIDATES: tuple[Path, ...] = (
    Path("tools/phrase-checker/rules.json"),
    Path("config/phrase-rules.json"),
    Path("rules.json"),
)

# Top-level key of the banned-phrase rule document
RULE_FILE_KEY = "ng"

# User-facing message when neither checker could run
CHECKS_UNAVAILABLE_MESSAGE = "警告チェックを実行できませんでした"
