"""Data models for rules, check results and combined warnings."""

from dataclasses import dataclass, field
from enum import Enum


class Severity(Enum):
    """Ordinal risk level of a warning."""

    LOW = "low"
    MID = "mid"
    HIGH = "high"

    @property
    def priority(self) -> int:
        """Numeric rank used for sorting (higher is more severe)."""
        return _PRIORITY[self]

    @classmethod
    def parse(cls, value: "str | Severity") -> "Severity":
        """Parse a severity name, accepting 'medium' as an alias of 'mid'.

        Raises:
            ValueError: If the value is not a known severity
        """
        if isinstance(value, Severity):
            return value
        normalized = str(value).strip().lower()
        if normalized == "medium":
            normalized = "mid"
        return cls(normalized)


_PRIORITY = {Severity.LOW: 1, Severity.MID: 2, Severity.HIGH: 3}


class WarningKind(Enum):
    """Which checker produced a combined warning."""

    COMPLIANCE = "compliance"
    PERSONA = "persona"


class CheckStatus(Enum):
    """Lifecycle state of a check orchestrator."""

    IDLE = "idle"
    RUNNING = "running"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class BannedPhraseRule:
    """A regex pattern for non-compliant wording and its compliant rewording."""

    pattern: str
    suggestion: str


@dataclass(frozen=True)
class PersonaRule:
    """A persona-tagged ingredient risk rule."""

    id: str
    persona_tag: str
    ingredient_pattern: str  # pipe-separated alternatives, e.g. "カフェイン|caffeine"
    severity: Severity
    message: str
    recommended_action: str | None = None

    @property
    def alternatives(self) -> list[str]:
        """Lowercased, trimmed, non-empty ingredient alternatives."""
        return [
            alt.strip().lower() for alt in self.ingredient_pattern.split("|") if alt.strip()
        ]


@dataclass(frozen=True)
class Position:
    """0-based character span of a match; end is exclusive."""

    start: int
    end: int


@dataclass(frozen=True)
class Violation:
    """A single banned-phrase match found in a text."""

    pattern: str
    matched_text: str
    suggestion: str
    position: Position


@dataclass
class PersonaWarning:
    """A persona rule that fired for a product."""

    rule_id: str
    severity: Severity
    message: str
    action: str | None = None
    affected_ingredients: list[str] = field(default_factory=list)


@dataclass
class CombinedWarning:
    """Display-ready warning produced by the aggregator."""

    id: str
    kind: WarningKind
    severity: Severity
    message: str
    suggestion: str | None = None
    affected_ingredients: list[str] = field(default_factory=list)

    @property
    def priority(self) -> int:
        return self.severity.priority

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "severity": self.severity.value,
            "message": self.message,
            "suggestion": self.suggestion,
            "priority": self.priority,
            "affected_ingredients": list(self.affected_ingredients),
        }


@dataclass
class CheckResult:
    """Outcome of one orchestrated product check."""

    warnings: list[CombinedWarning] = field(default_factory=list)
    is_loading: bool = False
    error: str | None = None
    partial_failure: bool = False

    @property
    def has_warnings(self) -> bool:
        """Check if the result contains any warnings."""
        return len(self.warnings) > 0

    @property
    def has_high_severity(self) -> bool:
        """Check if any warning is high severity."""
        return any(w.severity == Severity.HIGH for w in self.warnings)


@dataclass
class WarningSummary:
    """Severity counts and the single most important warning."""

    total: int
    by_severity: dict[Severity, int]
    most_important: CombinedWarning | None = None
