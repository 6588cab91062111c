"""Signals raised while a test body runs, and the records built from them."""

from dataclasses import dataclass
from enum import Enum
from traceback import StackSummary
from typing import Optional


@dataclass(frozen=True)
class SourceLocation:
    """Span of source code that produced an expectation.

    Lines are 1-based, columns are 0-based character offsets and the end
    column is exclusive, matching the ``ast`` module.
    """

    file: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def __str__(self) -> str:
        return f"{self.file}:{self.start_line}:{self.start_col + 1}"

    def to_dict(self) -> dict:
        """Convert to dictionary format."""
        return {
            "file": self.file,
            "start_line": self.start_line,
            "start_col": self.start_col,
            "end_line": self.end_line,
            "end_col": self.end_col,
        }


class ExpectationKind(str, Enum):
    """Outcome category of a single expectation."""

    PASS = "pass"
    FAIL = "fail"
    SKIP = "skip"


@dataclass
class Expectation:
    """Normalized outcome of one assertion, skip or error."""

    passed: bool
    kind: ExpectationKind
    message: str = ""
    location: Optional[SourceLocation] = None
    calls: Optional[StackSummary] = None
    error: Optional[BaseException] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def is_skip(self) -> bool:
        return self.kind == ExpectationKind.SKIP

    def to_dict(self) -> dict:
        """Convert to dictionary format."""
        return {
            "passed": self.passed,
            "kind": self.kind.value,
            "message": self.message,
            "location": self.location.to_dict() if self.location else None,
            "calls": self.calls.format() if self.calls else [],
            "error": type(self.error).__name__ if self.error else None,
        }


class Condition:
    """Base class for everything a test body can signal."""


class ExpectationResult(Condition):
    """Outcome of an assertion. Execution continues after it is handled."""

    def __init__(
        self,
        passed: bool,
        message: str = "",
        location: Optional[SourceLocation] = None,
    ):
        self.passed = passed
        self.message = message
        self.location = location

    def __repr__(self) -> str:
        return f"ExpectationResult(passed={self.passed!r}, message={self.message!r})"


class DiagnosticMessage(Condition):
    """Informational output from a test body; never recorded."""

    def __init__(self, text: str):
        self.text = text

    def __repr__(self) -> str:
        return f"DiagnosticMessage({self.text!r})"


class Skip(Condition, BaseException):
    """Raised to abandon the rest of a test body without failing it.

    Not an Exception, so ``except Exception`` in the body cannot swallow it.
    """

    def __init__(self, reason: str = "skipped"):
        super().__init__(reason)
        self.reason = reason


class ExpectationFailure(AssertionError):
    """Raised when a failing expectation is signalled with no test running."""

    def __init__(self, result: ExpectationResult):
        super().__init__(result.message)
        self.result = result
