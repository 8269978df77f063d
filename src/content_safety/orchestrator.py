"""High-level orchestration of compliance and persona checks for a product."""

import asyncio
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from common.constants import CHECKS_UNAVAILABLE_MESSAGE
from common.logger import get_logger

from .aggregator import WarningAggregator
from .compliance import PhraseComplianceChecker
from .errors import (
    CheckerFailure,
    ContentSafetyError,
    NoProductError,
    PartialCheckFailure,
    TotalCheckFailure,
)
from .models import CheckResult, CheckStatus, CombinedWarning
from .persona import (
    PersonaRuleEngine,
    extract_product_text,
    normalize_persona_tags,
    product_fields,
)
from .rules.rule_store import RuleStore

logger = get_logger(__name__)

Listener = Callable[["CheckOrchestrator"], None]


@dataclass
class _Computed:
    warnings: list[CombinedWarning]
    failures: list[CheckerFailure] = field(default_factory=list)


def _input_key(product: Any, persona_tags: frozenset[str]) -> tuple:
    """Value-identity key for a (product, persona tags) request.

    Built from the fields the checkers read, so mutating a product object
    in place yields a new key. A product whose fields can't be read gets a
    key that never matches, and the checkers report the failure.
    """
    try:
        product_key = product_fields(product)
    except Exception as e:
        logger.debug(f"[Checks] product fields unreadable, not memoizing: {e}")
        product_key = object()
    return (product_key, persona_tags)


class CheckOrchestrator:
    """Run both checkers for one product and track what the user dismissed.

    The two checkers run concurrently and independently. A failure in one
    leaves the other's warnings intact; only a double failure yields an
    error state. Results are memoized by the value of the inputs, and the
    dismissed-id set survives recomputation until the inputs change.

    Example:
        >>> orchestrator = CheckOrchestrator()
        >>> result = await orchestrator.check_product(product, ["pregnancy"])
        >>> orchestrator.dismiss(result.warnings[0].id)
        >>> orchestrator.current_result().warnings  # first warning hidden
    """

    def __init__(
        self,
        rule_store: RuleStore | None = None,
        compliance_checker: PhraseComplianceChecker | None = None,
        persona_engine: PersonaRuleEngine | None = None,
        aggregator: WarningAggregator | None = None,
    ):
        """Initialize orchestrator.

        Args:
            rule_store: Shared rule store (if None, creates one from env)
            compliance_checker: Banned-phrase checker (if None, built on rule_store)
            persona_engine: Persona rule engine (if None, built on rule_store)
            aggregator: Warning aggregator (if None, uses the default)
        """
        self.rule_store = rule_store or RuleStore()
        self.compliance_checker = compliance_checker or PhraseComplianceChecker(self.rule_store)
        self.persona_engine = persona_engine or PersonaRuleEngine(self.rule_store)
        self.aggregator = aggregator or WarningAggregator()

        self.status = CheckStatus.IDLE
        self.last_error: ContentSafetyError | None = None

        self._key: tuple | None = None
        self._computed: _Computed | None = None
        self._task: asyncio.Task | None = None
        self._dismissed: set[str] = set()
        self._listeners: list[Listener] = []
        self._closed = False

    async def check_product(
        self,
        product: Any,
        persona_tags: Iterable[str] | None,
        force: bool = False,
    ) -> CheckResult:
        """Check a product, reusing the previous result when inputs are unchanged.

        Args:
            product: Product mapping or object; None means nothing to check yet
            persona_tags: Active persona tags
            force: Re-run both checkers even if inputs are unchanged
                (dismissals are kept)

        Returns:
            CheckResult with dismissed warnings removed
        """
        if self._closed:
            return CheckResult()

        if product is None:
            self._reset()
            self.last_error = NoProductError("No product to check")
            return CheckResult()

        tags = normalize_persona_tags(persona_tags)
        key = _input_key(product, tags)

        if key == self._key and not force:
            if self._task is not None and not self._task.done():
                return await self._await_task(self._task)
            if self._computed is not None:
                return self.current_result()

        if key != self._key:
            self._dismissed.clear()

        if self._task is not None and not self._task.done():
            self._task.cancel()

        self._key = key
        self._computed = None
        self.last_error = None
        self._set_status(CheckStatus.RUNNING)

        task = asyncio.create_task(self._run(product, tags))
        self._task = task
        return await self._await_task(task)

    async def _await_task(self, task: asyncio.Task) -> CheckResult:
        # wait() does not raise when the task is cancelled (superseded or closed)
        await asyncio.wait({task})
        if self._closed:
            return CheckResult()
        if task is self._task and not task.cancelled():
            self._finish(task.result())
        return self.current_result()

    async def _run(self, product: Any, tags: frozenset[str]) -> _Computed:
        """Run both checkers concurrently and aggregate after both finish."""
        results = await asyncio.gather(
            self._check_compliance(product),
            asyncio.to_thread(self.persona_engine.check, product, tags),
            return_exceptions=True,
        )

        names = ("compliance", "persona")
        outputs: list[list] = []
        failures: list[CheckerFailure] = []
        for name, r in zip(names, results, strict=True):
            if isinstance(r, BaseException):
                logger.error(f"[Checks] {name} check failed: {r}")
                failures.append(CheckerFailure(name, r))
                outputs.append([])
                continue
            outputs.append(r)

        violations, persona_warnings = outputs
        if len(failures) == len(names):
            return _Computed(warnings=[], failures=failures)

        return _Computed(
            warnings=self.aggregator.aggregate(violations, persona_warnings),
            failures=failures,
        )

    async def _check_compliance(self, product: Any) -> list:
        text = extract_product_text(product, lowercase=False)
        return await self.compliance_checker.acheck(text)

    def _finish(self, computed: _Computed) -> None:
        if self._computed is computed:
            return
        self._computed = computed

        if len(computed.failures) >= 2:
            self.last_error = TotalCheckFailure(computed.failures)
            self._set_status(CheckStatus.FAILED)
            return

        if computed.failures:
            self.last_error = PartialCheckFailure(computed.failures[0])
            logger.info(f"[Checks] continuing with partial results: {self.last_error}")
        self._set_status(CheckStatus.READY)

    def current_result(self) -> CheckResult:
        """Snapshot of the current state as a CheckResult."""
        if self.status == CheckStatus.RUNNING:
            return CheckResult(is_loading=True)
        if self.status == CheckStatus.FAILED:
            return CheckResult(error=CHECKS_UNAVAILABLE_MESSAGE)
        if self.status == CheckStatus.READY and self._computed is not None:
            return CheckResult(
                warnings=self.visible_warnings(),
                partial_failure=bool(self._computed.failures),
            )
        return CheckResult()

    def all_warnings(self) -> list[CombinedWarning]:
        """Every computed warning, including dismissed ones."""
        return list(self._computed.warnings) if self._computed else []

    def visible_warnings(self) -> list[CombinedWarning]:
        """Computed warnings minus the dismissed ids."""
        return [w for w in self.all_warnings() if w.id not in self._dismissed]

    def dismiss(self, warning_id: str) -> None:
        """Hide one warning until the product or persona tags change.

        Args:
            warning_id: Id of a CombinedWarning from the current result
        """
        if self._closed or warning_id in self._dismissed:
            return
        self._dismissed.add(warning_id)
        logger.debug(f"[Checks] dismissed {warning_id}")
        self._notify()

    @property
    def dismissed_ids(self) -> frozenset[str]:
        return frozenset(self._dismissed)

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Register a callback for state and dismissal changes.

        Returns:
            Function that unregisters the listener
        """
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def close(self) -> None:
        """Tear down: abandon any in-flight check and release listeners."""
        self._closed = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._listeners.clear()

    async def __aenter__(self) -> "CheckOrchestrator":
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()

    def _reset(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        self._key = None
        self._computed = None
        self._dismissed.clear()
        self._set_status(CheckStatus.IDLE)

    def _set_status(self, status: CheckStatus) -> None:
        changed = status != self.status
        self.status = status
        if changed:
            self._notify()

    def _notify(self) -> None:
        if self._closed:
            return
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error(f"[Checks] listener failed: {e}")
