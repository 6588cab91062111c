"""Core test execution functionality."""

from testthat.core.engine import execute_test, test_that
from testthat.core.dispatch import Dispatcher, classify, signal_condition
from testthat.core.signals import (
    DiagnosticMessage,
    Expectation,
    ExpectationFailure,
    ExpectationKind,
    ExpectationResult,
    Skip,
    SourceLocation,
)

__all__ = [
    "DiagnosticMessage",
    "Dispatcher",
    "Expectation",
    "ExpectationFailure",
    "ExpectationKind",
    "ExpectationResult",
    "Skip",
    "SourceLocation",
    "classify",
    "execute_test",
    "signal_condition",
    "test_that",
]
