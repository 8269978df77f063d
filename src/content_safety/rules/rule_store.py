"""Loading and caching of banned-phrase and persona rules."""

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from common.constants import RULE_CACHE_TTL_SECONDS, RULE_FILE_CANDIDATES
from common.env import env
from common.logger import get_logger

from ..models import BannedPhraseRule, PersonaRule, Severity
from .default_rules import DEFAULT_PERSONA_RULES, PERSONA_TAGS
from .sources import (
    BuiltinRuleSource,
    CandidateFilesSource,
    FileRuleSource,
    InvalidRule,
    RuleSource,
    ValidRule,
    compile_rule,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class _Snapshot:
    rules: tuple[BannedPhraseRule, ...]
    compiled: tuple[ValidRule, ...]
    loaded_at: float


class RuleStore:
    """Resolve and cache rule sets for the checkers.

    Banned-phrase rules are resolved through an ordered chain of sources
    (override file, conventional locations, built-in defaults) and cached
    for a fixed TTL. The cache holds an immutable snapshot that is replaced
    by a single assignment, so concurrent readers see either the old or the
    new rule list.

    Example:
        >>> store = RuleStore(override_path=Path("rules.json"))
        >>> rules = store.load_banned_phrase_rules()
    """

    def __init__(
        self,
        override_path: Path | None = None,
        base_dir: Path | None = None,
        sources: list[RuleSource] | None = None,
        ttl_seconds: float = RULE_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the store.

        Args:
            override_path: Explicit rule file (if None, uses CONTENT_SAFETY_RULES_PATH)
            base_dir: Directory for conventional locations (if None, uses env/cwd)
            sources: Full resolution chain, replacing the default one
            ttl_seconds: How long a loaded rule set stays cached
            clock: Monotonic time source, injectable for tests
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._snapshot: _Snapshot | None = None

        if sources is not None:
            self.sources = list(sources)
        else:
            self.sources = self._default_sources(override_path, base_dir)

    @staticmethod
    def _default_sources(override_path: Path | None, base_dir: Path | None) -> list[RuleSource]:
        sources: list[RuleSource] = []

        override = override_path or env.rules_path()
        if override is not None:
            sources.append(FileRuleSource(override))

        sources.append(CandidateFilesSource(base_dir or env.rules_base_dir(), RULE_FILE_CANDIDATES))
        sources.append(BuiltinRuleSource())
        return sources

    def _is_fresh(self, snapshot: _Snapshot | None) -> bool:
        return snapshot is not None and self._clock() - snapshot.loaded_at < self.ttl_seconds

    def _resolve(self) -> tuple[BannedPhraseRule, ...]:
        for source in self.sources:
            rules = source.try_load()
            if rules:
                logger.debug(f"Loaded {len(rules)} banned-phrase rule(s) from {source.describe()}")
                return tuple(rules)
            logger.debug(f"No rules from {source.describe()}, trying next source")

        # Only reachable with a custom chain lacking a built-in source
        logger.warning("No rule source resolved, falling back to built-in defaults")
        return tuple(BuiltinRuleSource().try_load() or [])

    @staticmethod
    def _compile_all(rules: tuple[BannedPhraseRule, ...]) -> tuple[ValidRule, ...]:
        compiled: list[ValidRule] = []
        for rule in rules:
            result = compile_rule(rule)
            if isinstance(result, InvalidRule):
                logger.warning(f"Invalid regex pattern skipped: {result.pattern!r} ({result.reason})")
                continue
            compiled.append(result)
        return tuple(compiled)

    def _current(self) -> _Snapshot:
        snapshot = self._snapshot
        if not self._is_fresh(snapshot):
            rules = self._resolve()
            snapshot = _Snapshot(
                rules=rules, compiled=self._compile_all(rules), loaded_at=self._clock()
            )
            self._snapshot = snapshot
        return snapshot

    def load_banned_phrase_rules(self) -> list[BannedPhraseRule]:
        """Get banned-phrase rules, reloading only when the cache is cold or expired.

        Returns:
            List of rules (a fresh list; the cached snapshot is never exposed)
        """
        return list(self._current().rules)

    def load_compiled_rules(self) -> list[ValidRule]:
        """Get the compiled banned-phrase rules, invalid patterns already dropped.

        Patterns are compiled once per load and reused until the cache expires.
        """
        return list(self._current().compiled)

    async def aload_banned_phrase_rules(self) -> list[BannedPhraseRule]:
        """Async variant that performs cold/expired loads in a worker thread.

        Returns immediately without suspending when the cache is fresh.
        """
        snapshot = self._snapshot
        if self._is_fresh(snapshot):
            return list(snapshot.rules)
        return await asyncio.to_thread(self.load_banned_phrase_rules)

    async def aload_compiled_rules(self) -> list[ValidRule]:
        """Async variant of load_compiled_rules."""
        snapshot = self._snapshot
        if self._is_fresh(snapshot):
            return list(snapshot.compiled)
        return await asyncio.to_thread(self.load_compiled_rules)

    def invalidate(self) -> None:
        """Drop the cached banned-phrase rules so the next call reloads them."""
        self._snapshot = None

    def load_persona_rules(self) -> list[PersonaRule]:
        """Get the built-in persona rules."""
        return list(DEFAULT_PERSONA_RULES)

    def persona_rules_by_tag(self, tag: str) -> list[PersonaRule]:
        """Get persona rules for one persona tag."""
        return [r for r in self.load_persona_rules() if r.persona_tag == tag]

    def persona_rules_by_severity(self, severity: Severity | str) -> list[PersonaRule]:
        """Get persona rules with the given severity ('medium' accepted for 'mid')."""
        wanted = Severity.parse(severity)
        return [r for r in self.load_persona_rules() if r.severity == wanted]

    @staticmethod
    def available_persona_tags() -> list[str]:
        """Get every persona tag the built-in rules recognise."""
        return list(PERSONA_TAGS)
