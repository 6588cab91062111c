"""Base reporter interface."""

from abc import ABC, abstractmethod
from typing import Optional

from testthat.core.signals import Expectation


class Reporter(ABC):
    """Receives the event stream of a test session.

    For every test the engine calls ``start_test`` once, ``add_result`` once
    per recorded expectation, and ``end_test`` once. Sessions and contexts
    wrap those calls with ``start_reporter``/``end_reporter`` and
    ``start_context``/``end_context``.
    """

    def __init__(self):
        self.context: Optional[str] = None
        self.test: Optional[str] = None

    def start_reporter(self) -> None:
        pass

    def end_reporter(self) -> None:
        if self.context is not None:
            self.end_context()

    def start_context(self, context: str) -> None:
        """Open a named group of tests, closing the previous one."""
        if self.context is not None:
            self.end_context()
        self.context = context

    def end_context(self) -> None:
        self.context = None

    def start_test(self, description: str) -> None:
        self.test = description

    @abstractmethod
    def add_result(self, expectation: Expectation) -> None:
        """Receive one expectation of the running test."""
        pass

    def end_test(self) -> None:
        self.test = None
