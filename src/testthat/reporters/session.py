"""Access to the reporter of the current test session."""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

from testthat.reporters.base import Reporter
from testthat.reporters.console import StopReporter

_current_reporter: ContextVar[Optional[Reporter]] = ContextVar(
    "testthat_reporter", default=None
)


def get_reporter() -> Reporter:
    """Return the session reporter, or a StopReporter if none is set."""
    reporter = _current_reporter.get()
    if reporter is None:
        return StopReporter()
    return reporter


def set_reporter(reporter: Optional[Reporter]) -> Optional[Reporter]:
    """Set the session reporter and return the previous one."""
    previous = _current_reporter.get()
    _current_reporter.set(reporter)
    return previous


@contextmanager
def with_reporter(reporter: Reporter) -> Iterator[Reporter]:
    """Run a block as one reporting session of ``reporter``."""
    token = _current_reporter.set(reporter)
    reporter.start_reporter()
    try:
        yield reporter
    finally:
        reporter.end_reporter()
        _current_reporter.reset(token)


def context(name: str) -> None:
    """Start a named group of tests on the session reporter."""
    get_reporter().start_context(name)
