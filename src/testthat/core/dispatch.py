"""Signal classification and dispatch.

A Dispatcher is installed only while a test body runs. Expectations are
recorded and execution resumes right after the assertion call, diagnostic
messages are dropped, and skips and errors unwind the body back to the
engine, which hands them to ``Dispatcher.handle_exception``.
"""

import sys
import traceback
from contextlib import contextmanager
from contextvars import ContextVar
from enum import Enum
from types import FrameType, TracebackType
from typing import Iterator, Optional

from testthat.core.expectation import as_expectation
from testthat.core.signals import (
    Condition,
    DiagnosticMessage,
    Expectation,
    ExpectationFailure,
    ExpectationResult,
    Skip,
)
from testthat.core.srcref import stack_frames, traceback_frames
from testthat.logging_utils import get_logger
from testthat.reporters.base import Reporter

logger = get_logger(__name__)

_dispatchers: ContextVar[tuple["Dispatcher", ...]] = ContextVar(
    "testthat_dispatchers", default=()
)


class ConditionKind(str, Enum):
    """How a signal is handled."""

    EXPECTATION = "expectation"
    SKIP = "skip"
    MESSAGE = "message"
    ERROR = "error"


def classify(condition: object) -> ConditionKind:
    """Classify a signal. The first matching kind wins."""
    if isinstance(condition, (ExpectationResult, ExpectationFailure)):
        return ConditionKind.EXPECTATION
    if isinstance(condition, Skip):
        return ConditionKind.SKIP
    if isinstance(condition, DiagnosticMessage):
        return ConditionKind.MESSAGE
    return ConditionKind.ERROR


class Dispatcher:
    """Routes the signals of one test body and accumulates its outcome."""

    def __init__(self, reporter: Reporter, entry_frame: Optional[FrameType] = None):
        self.reporter = reporter
        # Frame evaluating the body; location lookups stop there
        self.entry_frame = entry_frame
        self.results: list[Expectation] = []

    @property
    def ok(self) -> bool:
        """True unless a recorded expectation failed."""
        return all(result.passed for result in self.results)

    @contextmanager
    def installed(self) -> Iterator["Dispatcher"]:
        """Make this the active dispatcher for the duration of the block."""
        token = _dispatchers.set(_dispatchers.get() + (self,))
        try:
            yield self
        finally:
            _dispatchers.reset(token)

    def register(self, expectation: Expectation) -> None:
        self.results.append(expectation)
        self.reporter.add_result(expectation)

    def handle(self, condition: Condition) -> None:
        """Handle a signal at the point it was raised.

        Returns normally to let the body continue; raises to abort it.
        """
        kind = classify(condition)

        if kind == ConditionKind.EXPECTATION:
            frames = stack_frames(sys._getframe(1), stop=self.entry_frame)
            self.register(as_expectation(condition, frames=frames))
        elif kind == ConditionKind.MESSAGE:
            return
        else:
            _unwind(condition)

    def handle_exception(self, exc: BaseException, entry_frame: FrameType) -> None:
        """Record a signal that unwound the body.

        A reporter that fails while recording it is logged, not raised: the
        test still fails.

        Args:
            exc: The Skip or error that aborted the body
            entry_frame: Frame that was evaluating the body
        """
        kind = classify(exc)

        if kind == ConditionKind.SKIP:
            logger.debug("Test body skipped: %s", exc.reason)
            expectation = as_expectation(exc)
        elif kind == ConditionKind.EXPECTATION:
            expectation = as_expectation(exc)
        else:
            logger.debug("Test body raised %s", type(exc).__name__)
            tb = trim_traceback(exc.__traceback__, entry_frame)
            expectation = as_expectation(
                exc,
                frames=traceback_frames(tb),
                calls=traceback.extract_tb(tb),
            )

        try:
            self.register(expectation)
        except Exception:
            logger.exception("Reporter failed to record %s", expectation.kind.value)
            if expectation.passed:
                self.results.append(as_expectation(RuntimeError("reporter failed")))


def trim_traceback(
    tb: Optional[TracebackType], entry_frame: FrameType
) -> Optional[TracebackType]:
    """Drop the traceback entries up to and including ``entry_frame``."""
    start = tb
    while tb is not None and tb.tb_frame is not entry_frame:
        tb = tb.tb_next
    if tb is None:
        return start
    return tb.tb_next


def active_dispatcher() -> Optional[Dispatcher]:
    """The dispatcher of the innermost running test, if any."""
    dispatchers = _dispatchers.get()
    return dispatchers[-1] if dispatchers else None


def signal_condition(condition: Condition) -> None:
    """Deliver a signal to the running test.

    With no test running, a passing expectation is ignored, a failing one
    raises ExpectationFailure, a skip is raised and a message is written
    to stderr.
    """
    dispatcher = active_dispatcher()
    if dispatcher is not None:
        dispatcher.handle(condition)
        return

    kind = classify(condition)
    if kind == ConditionKind.EXPECTATION:
        if isinstance(condition, ExpectationFailure):
            raise condition
        if not condition.passed:
            raise ExpectationFailure(condition)
    elif kind == ConditionKind.MESSAGE:
        print(condition.text, file=sys.stderr)
    else:
        _unwind(condition)


def _unwind(condition: object) -> None:
    if isinstance(condition, BaseException):
        raise condition
    raise TypeError(f"Cannot signal {condition!r}")
