"""
testthat - run tests made of expectations.

``test_that`` runs a block of code in its own scope, records every
expectation it signals, and reports the results:

    from testthat import test_that, expect_equal

    test_that("addition works", "expect_equal(1 + 1, 2)")

Failed expectations do not stop a test; ``skip`` and errors end it early.
Failures are reported, never raised: ``test_that`` returns True or False.
"""

__version__ = "0.1.0"

from testthat.core import (
    Expectation,
    ExpectationFailure,
    ExpectationKind,
    SourceLocation,
    execute_test,
    test_that,
)
from testthat.expectations import (
    expect,
    expect_equal,
    expect_error,
    expect_false,
    expect_identical,
    expect_is,
    expect_match,
    expect_none,
    expect_true,
    message,
    skip,
)
from testthat.reporters import context, get_reporter, set_reporter, with_reporter

__all__ = [
    "Expectation",
    "ExpectationFailure",
    "ExpectationKind",
    "SourceLocation",
    "context",
    "execute_test",
    "expect",
    "expect_equal",
    "expect_error",
    "expect_false",
    "expect_identical",
    "expect_is",
    "expect_match",
    "expect_none",
    "expect_true",
    "get_reporter",
    "message",
    "set_reporter",
    "skip",
    "test_that",
    "with_reporter",
]
