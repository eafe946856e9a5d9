from __future__ import annotations

from typing import Final, Sequence

# Typed errors let the CLI emit a stable `error.type` without parsing messages.
# Keep this list minimal and grow it only when a new type is actually emitted.
KNOWN_ERROR_TYPES: Final[set[str]] = {
    "AMBIGUOUS_STEP",
    "INVALID_ARGUMENT",
    "INVALID_PLAN",
    "LITERAL_DELIMITER",
    "NOT_FOUND",
    "TABLE_INTEGRITY",
    "UNMATCHED_STEP",
}


def assert_known_error_type(error_type: str) -> None:
    if error_type not in KNOWN_ERROR_TYPES:
        raise ValueError(f"Unknown error type: {error_type!r}. Add it to stepscript.core.errors.KNOWN_ERROR_TYPES.")


class TraceFormatError(ValueError):
    error_type = "INVALID_ARGUMENT"


class TableIntegrityError(TraceFormatError):
    error_type = "TABLE_INTEGRITY"


class LiteralDelimiterError(TraceFormatError):
    error_type = "LITERAL_DELIMITER"

    def __init__(self, what: str, value: str, delimiter: str) -> None:
        super().__init__(f"{what} contains literal delimiter {delimiter!r}: {value!r}")
        self.what = what
        self.value = value
        self.delimiter = delimiter


class PlanError(ValueError):
    error_type = "INVALID_PLAN"


class StepArgumentError(ValueError):
    error_type = "INVALID_ARGUMENT"

    def __init__(self, pattern: str, raw: str, reason: str) -> None:
        super().__init__(f"Step argument {raw!r} captured by {pattern!r} could not be converted: {reason}")
        self.pattern = pattern
        self.raw = raw


class UnmatchedStepError(LookupError):
    error_type = "UNMATCHED_STEP"

    def __init__(self, kind: str, text: str) -> None:
        super().__init__(f"No step definition matches {kind} {text!r}")
        self.kind = kind
        self.text = text


class AmbiguousStepError(LookupError):
    error_type = "AMBIGUOUS_STEP"

    def __init__(self, kind: str, text: str, patterns: Sequence[str]) -> None:
        super().__init__(f"Several step definitions match {kind} {text!r}: {', '.join(patterns)}")
        self.kind = kind
        self.text = text
        self.patterns = list(patterns)
