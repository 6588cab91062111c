"""Reporters that collect results instead of printing them."""

import time
from typing import Optional

from testthat.core.signals import Expectation
from testthat.reporters.base import Reporter
from testthat.reporters.models import TestRecord


class ListReporter(Reporter):
    """Keeps a TestRecord for every test it sees."""

    def __init__(self):
        super().__init__()
        self.records: list[TestRecord] = []
        self._current: Optional[TestRecord] = None
        self._start_time = 0.0

    def start_test(self, description: str) -> None:
        super().start_test(description)
        self._current = TestRecord(description=description, context=self.context)
        self._start_time = time.time()

    def add_result(self, expectation: Expectation) -> None:
        if self._current is None:
            # Result reported outside start_test/end_test
            self._current = TestRecord(description="", context=self.context)
        self._current.results.append(expectation)

    def end_test(self) -> None:
        if self._current is not None:
            self._current.duration_ms = int((time.time() - self._start_time) * 1000)
            self.records.append(self._current)
            self._current = None
        super().end_test()


class SilentReporter(ListReporter):
    """Collects results and prints nothing."""


class MultiReporter(Reporter):
    """Forwards every event to several reporters."""

    def __init__(self, reporters: list[Reporter]):
        super().__init__()
        self.reporters = list(reporters)

    def start_reporter(self) -> None:
        for reporter in self.reporters:
            reporter.start_reporter()

    def end_reporter(self) -> None:
        super().end_reporter()
        for reporter in self.reporters:
            reporter.end_reporter()

    def start_context(self, context: str) -> None:
        super().start_context(context)
        for reporter in self.reporters:
            reporter.start_context(context)

    def end_context(self) -> None:
        super().end_context()
        for reporter in self.reporters:
            reporter.end_context()

    def start_test(self, description: str) -> None:
        super().start_test(description)
        for reporter in self.reporters:
            reporter.start_test(description)

    def add_result(self, expectation: Expectation) -> None:
        for reporter in self.reporters:
            reporter.add_result(expectation)

    def end_test(self) -> None:
        for reporter in self.reporters:
            reporter.end_test()
        super().end_test()
