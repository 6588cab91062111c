"""Reporters receiving the results of executed tests."""

from typing import Any

from testthat.reporters.base import Reporter
from testthat.reporters.collect import ListReporter, MultiReporter, SilentReporter
from testthat.reporters.console import MinimalReporter, StopReporter, SummaryReporter
from testthat.reporters.models import RunSummary, TestRecord, TestStatus
from testthat.reporters.session import context, get_reporter, set_reporter, with_reporter

REPORTERS: dict[str, type[Reporter]] = {
    "summary": SummaryReporter,
    "minimal": MinimalReporter,
    "stop": StopReporter,
    "silent": SilentReporter,
    "list": ListReporter,
}


def find_reporter(name: str, **kwargs: Any) -> Reporter:
    """Create a reporter by name.

    Args:
        name: One of the keys of REPORTERS
        **kwargs: Passed to the reporter constructor

    Raises:
        ValueError: If no reporter has that name
    """
    try:
        reporter_class = REPORTERS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown reporter {name!r}. Choose from: {', '.join(sorted(REPORTERS))}"
        ) from None
    return reporter_class(**kwargs)


__all__ = [
    "REPORTERS",
    "ListReporter",
    "MinimalReporter",
    "MultiReporter",
    "Reporter",
    "RunSummary",
    "SilentReporter",
    "StopReporter",
    "SummaryReporter",
    "TestRecord",
    "TestStatus",
    "context",
    "find_reporter",
    "get_reporter",
    "set_reporter",
    "with_reporter",
]
