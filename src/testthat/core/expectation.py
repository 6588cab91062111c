"""Normalize signals into Expectation records."""

import traceback
from traceback import StackSummary
from typing import Iterable, Optional, Union

from testthat.core.signals import (
    Expectation,
    ExpectationFailure,
    ExpectationKind,
    ExpectationResult,
    Skip,
)
from testthat.core.srcref import FrameRef, find_test_srcref


def as_expectation(
    condition: Union[ExpectationResult, ExpectationFailure, Skip, BaseException],
    frames: Iterable[FrameRef] = (),
    calls: Optional[StackSummary] = None,
) -> Expectation:
    """Build the Expectation record for a signal.

    Args:
        condition: The signalled expectation, skip or error
        frames: Frames to search for the assertion call site, most recent first
        calls: Call stack captured for an error

    Returns:
        Expectation describing the outcome
    """
    if isinstance(condition, ExpectationFailure):
        condition = condition.result

    if isinstance(condition, ExpectationResult):
        return Expectation(
            passed=condition.passed,
            kind=ExpectationKind.PASS if condition.passed else ExpectationKind.FAIL,
            message=condition.message,
            location=condition.location or find_test_srcref(frames),
        )

    if isinstance(condition, Skip):
        return Expectation(
            passed=True,
            kind=ExpectationKind.SKIP,
            message=condition.reason,
        )

    return Expectation(
        passed=False,
        kind=ExpectationKind.FAIL,
        message=error_message(condition),
        location=find_test_srcref(frames),
        calls=calls,
        error=condition,
    )


def error_message(error: BaseException) -> str:
    """One-line description of an exception, e.g. ``ValueError: bad``."""
    return "".join(traceback.format_exception_only(error)).strip()
