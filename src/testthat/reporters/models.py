"""Data models for per-test and per-run results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from testthat.core.signals import Expectation


class TestStatus(str, Enum):
    """Status of a finished test."""

    __test__ = False

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclass
class TestRecord:
    """Everything a single test reported."""

    __test__ = False

    description: str = ""
    context: Optional[str] = None
    results: list[Expectation] = field(default_factory=list)
    duration_ms: int = 0

    @property
    def status(self) -> TestStatus:
        """Overall status.

        A test whose only records are skips counts as skipped, not passed.
        """
        failures = [r for r in self.results if not r.passed]
        if any(r.is_error for r in failures):
            return TestStatus.ERROR
        if failures:
            return TestStatus.FAILED
        if self.results and all(r.is_skip for r in self.results):
            return TestStatus.SKIPPED
        return TestStatus.PASSED

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.results)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "description": self.description,
            "context": self.context,
            "status": self.status.value,
            "duration_ms": self.duration_ms,
            "results": [r.to_dict() for r in self.results],
        }


@dataclass
class RunSummary:
    """Aggregate of the tests run in one session."""

    tests: list[TestRecord] = field(default_factory=list)
    duration_ms: int = 0

    def _count(self, status: TestStatus) -> int:
        return sum(1 for t in self.tests if t.status == status)

    @property
    def total(self) -> int:
        return len(self.tests)

    @property
    def passed(self) -> int:
        return self._count(TestStatus.PASSED)

    @property
    def failed(self) -> int:
        return self._count(TestStatus.FAILED)

    @property
    def skipped(self) -> int:
        return self._count(TestStatus.SKIPPED)

    @property
    def errors(self) -> int:
        return self._count(TestStatus.ERROR)

    @property
    def success(self) -> bool:
        """Check if no test failed or errored."""
        return self.failed == 0 and self.errors == 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "skipped": self.skipped,
            "errors": self.errors,
            "duration_ms": self.duration_ms,
            "tests": [t.to_dict() for t in self.tests],
        }
