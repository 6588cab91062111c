"""Shared fixtures."""

import pytest

from testthat.core.signals import Expectation
from testthat.reporters.base import Reporter


class RecordingReporter(Reporter):
    """Reporter that keeps the raw event stream."""

    def __init__(self):
        super().__init__()
        self.events: list[tuple] = []

    def start_test(self, description: str) -> None:
        super().start_test(description)
        self.events.append(("start_test", description))

    def add_result(self, expectation: Expectation) -> None:
        self.events.append(("add_result", expectation))

    def end_test(self) -> None:
        self.events.append(("end_test",))
        super().end_test()

    @property
    def names(self) -> list[str]:
        return [event[0] for event in self.events]

    @property
    def results(self) -> list[Expectation]:
        return [event[1] for event in self.events if event[0] == "add_result"]


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()
