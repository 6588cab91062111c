"""Assertion helpers.

Every helper signals an ExpectationResult. Inside a test the result is
recorded and the test goes on; outside a test a failure raises
ExpectationFailure.
"""

import math
import re
from numbers import Number
from typing import Any, Callable, Optional, Union

from testthat.core.dispatch import signal_condition
from testthat.core.signals import DiagnosticMessage, ExpectationResult, Skip, SourceLocation


def expect(
    ok: bool,
    failure_message: str,
    success_message: str = "",
    srcref: Optional[SourceLocation] = None,
) -> ExpectationResult:
    """Signal the outcome of a check.

    Args:
        ok: Whether the check passed
        failure_message: Message recorded when it failed
        success_message: Message recorded when it passed
        srcref: Location of the check, found from the call stack if omitted

    Returns:
        The signalled ExpectationResult
    """
    ok = bool(ok)
    result = ExpectationResult(
        passed=ok,
        message=success_message if ok else failure_message,
        location=srcref,
    )
    signal_condition(result)
    return result


def expect_true(value: Any, info: str = "") -> ExpectationResult:
    return expect(value is True, _with_info(f"{value!r} isn't true", info))


def expect_false(value: Any, info: str = "") -> ExpectationResult:
    return expect(value is False, _with_info(f"{value!r} isn't false", info))


def expect_none(value: Any, info: str = "") -> ExpectationResult:
    return expect(value is None, _with_info(f"{value!r} isn't None", info))


def expect_equal(
    actual: Any,
    expected: Any,
    tolerance: float = 1.5e-8,
    info: str = "",
) -> ExpectationResult:
    """Check equality, comparing real numbers within ``tolerance``."""
    if _is_real(actual) and _is_real(expected):
        ok = math.isclose(actual, expected, rel_tol=tolerance, abs_tol=tolerance)
    else:
        try:
            ok = bool(actual == expected)
        except Exception as e:
            # e.g. comparisons that return ambiguous arrays
            return expect(False, _with_info(f"could not compare {actual!r} and {expected!r}: {e}", info))

    return expect(ok, _with_info(f"{actual!r} not equal to {expected!r}", info))


def expect_identical(actual: Any, expected: Any, info: str = "") -> ExpectationResult:
    return expect(
        actual is expected,
        _with_info(f"{actual!r} is not the same object as {expected!r}", info),
    )


def expect_is(value: Any, cls: Union[type, tuple[type, ...]], info: str = "") -> ExpectationResult:
    name = " or ".join(c.__name__ for c in cls) if isinstance(cls, tuple) else cls.__name__
    return expect(
        isinstance(value, cls),
        _with_info(f"{value!r} is a {type(value).__name__}, not a {name}", info),
    )


def expect_match(text: str, pattern: str, info: str = "") -> ExpectationResult:
    """Check that ``pattern`` matches somewhere in ``text``."""
    return expect(
        re.search(pattern, text) is not None,
        _with_info(f"{text!r} does not match {pattern!r}", info),
    )


def expect_error(
    func: Callable[..., Any],
    pattern: Optional[str] = None,
    *args: Any,
    **kwargs: Any,
) -> ExpectationResult:
    """Check that calling ``func`` raises, optionally with a matching message."""
    try:
        func(*args, **kwargs)
    except Exception as e:
        if pattern is None:
            return expect(True, "")
        return expect(
            re.search(pattern, str(e)) is not None,
            f"error message {str(e)!r} does not match {pattern!r}",
        )

    return expect(False, "no error raised")


def skip(reason: str = "skipped") -> None:
    """Abandon the rest of the current test without failing it."""
    signal_condition(Skip(reason))


def message(text: str) -> None:
    """Emit a diagnostic message. Ignored while a test runs."""
    signal_condition(DiagnosticMessage(text))


def _is_real(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, (bool, complex))


def _with_info(text: str, info: str) -> str:
    return f"{text}\n{info}" if info else text
