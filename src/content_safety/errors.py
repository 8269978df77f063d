"""Exception taxonomy for the content safety engine.

Only TotalCheckFailure is ever reported to callers, and then as an error
value on the check result rather than a raised exception. Everything else
is recovered at the lowest boundary and logged.
"""


class ContentSafetyError(Exception):
    """Base exception for content safety errors."""

    pass


class RuleLoadFailure(ContentSafetyError):
    """A rule source was missing, unreadable, malformed, or had no usable rules."""

    pass


class RulePatternError(ContentSafetyError):
    """A single rule's pattern could not be compiled as a regular expression."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"Invalid regex pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class CheckerFailure(ContentSafetyError):
    """One checker raised while processing a product."""

    def __init__(self, checker: str, cause: BaseException):
        super().__init__(f"{checker} check failed: {cause}")
        self.checker = checker
        self.cause = cause


class NoProductError(ContentSafetyError):
    """No product has been supplied yet; nothing should be rendered."""

    pass


class PartialCheckFailure(ContentSafetyError):
    """Exactly one checker failed; results from the other are still valid."""

    def __init__(self, failure: CheckerFailure):
        super().__init__(str(failure))
        self.failure = failure


class TotalCheckFailure(ContentSafetyError):
    """Both checkers failed; callers show a generic 'checks unavailable' state."""

    def __init__(self, failures: list[CheckerFailure]):
        super().__init__("; ".join(str(f) for f in failures))
        self.failures = failures
