"""Test execution engine.

``execute_test`` runs one test body, routes everything the body signals
through a Dispatcher, and drives the reporter through exactly one
``start_test``/``end_test`` pair. Nothing the body raises escapes it: the
boolean it returns is the only outcome visible to the caller.
"""

import itertools
import linecache
import sys
from types import CodeType
from typing import Any, Callable, Mapping, Optional, Union

from testthat.core.dispatch import Dispatcher
from testthat.core.signals import Skip
from testthat.logging_utils import get_logger
from testthat.reporters.base import Reporter
from testthat.reporters.session import get_reporter

logger = get_logger(__name__)

TestBody = Union[Callable[[], Any], str, CodeType]

_source_ids = itertools.count(1)


def execute_test(
    description: str,
    body: TestBody,
    env: Optional[Mapping[str, Any]] = None,
    reporter: Optional[Reporter] = None,
    keep_source: bool = True,
) -> bool:
    """Run a single test.

    Args:
        description: Name of the test, passed to the reporter
        body: Zero-argument callable, Python source or code object
        env: Bindings visible to a source or code body (default: the
            caller's globals and locals). The body runs in a copy, so
            nothing it binds leaks back.
        reporter: Reporter to drive (default: the session reporter)
        keep_source: Keep the source of a str body so failing
            expectations can be located

    Returns:
        True if every recorded expectation passed (or none were recorded)
    """
    if reporter is None:
        reporter = get_reporter()
    if env is None and not callable(body):
        caller = sys._getframe(1)
        env = {**caller.f_globals, **caller.f_locals}

    namespace = _isolated_namespace(env)
    filename = None
    if isinstance(body, str):
        filename = f"<test_that-{next(_source_ids)}: {description}>"
        if keep_source:
            _remember_source(filename, body)

    logger.debug("Starting test %r", description)
    reporter.start_test(description)
    try:
        dispatcher = Dispatcher(reporter, entry_frame=sys._getframe())
        with dispatcher.installed():
            try:
                if isinstance(body, str):
                    body = compile(body, filename, "exec")
                if isinstance(body, CodeType):
                    exec(body, namespace)
                else:
                    body()
            except (Skip, Exception) as exc:
                dispatcher.handle_exception(exc, dispatcher.entry_frame)
        logger.debug(
            "Finished test %r: %d expectations, ok=%s",
            description,
            len(dispatcher.results),
            dispatcher.ok,
        )
        return dispatcher.ok
    finally:
        reporter.end_test()
        if filename is not None:
            linecache.cache.pop(filename, None)


def test_that(
    description: str,
    body: Optional[TestBody] = None,
    *,
    reporter: Optional[Reporter] = None,
    keep_source: bool = True,
) -> Union[bool, Callable[[Callable[[], Any]], bool]]:
    """Run a test made of a series of expectations.

    ``body`` may be a zero-argument callable or a string of code, which is
    evaluated in a private copy of the caller's scope::

        test_that("addition works", "expect_equal(1 + 1, 2)")

    Without a body, works as a decorator that runs the function at once::

        @test_that("addition works")
        def _():
            expect_equal(1 + 1, 2)

    Returns:
        True if the test passed
    """
    if body is None:
        def decorator(func: Callable[[], Any]) -> bool:
            return execute_test(description, func, reporter=reporter, keep_source=keep_source)

        return decorator

    env = None
    if not callable(body):
        caller = sys._getframe(1)
        env = {**caller.f_globals, **caller.f_locals}

    return execute_test(description, body, env=env, reporter=reporter, keep_source=keep_source)


def _isolated_namespace(env: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    namespace = dict(env or {})
    namespace.setdefault("__builtins__", __builtins__)
    return namespace


def _remember_source(filename: str, source: str) -> None:
    """Register source text so tracebacks and locations can read it."""
    lines = source.splitlines(keepends=True)
    if lines and not lines[-1].endswith("\n"):
        lines[-1] += "\n"
    linecache.cache[filename] = (len(source), None, lines, filename)


# Keep pytest from collecting the entry point when it is imported into test modules
test_that.__test__ = False
