"""Tests for the test execution engine."""

import pytest

from testthat.core.dispatch import active_dispatcher
from testthat.core.engine import execute_test, test_that
from testthat.core.signals import ExpectationFailure, ExpectationKind
from testthat.expectations import expect_equal, expect_true, message, skip
from testthat.reporters.session import with_reporter


def fail_deep(depth: int) -> None:
    """Raise from ``depth`` nested calls."""
    if depth == 0:
        raise ValueError("deep failure")
    fail_deep(depth - 1)


class TestEventSequence:
    """Tests for the reporter event stream of a single test."""

    def test_two_passing_expectations(self, reporter):
        """Two passes give start, two results, end and a True outcome."""

        def body():
            expect_equal(1 + 1, 2)
            expect_true(True)

        assert execute_test("two passes", body, reporter=reporter) is True
        assert reporter.names == ["start_test", "add_result", "add_result", "end_test"]
        assert reporter.events[0] == ("start_test", "two passes")
        assert all(r.kind == ExpectationKind.PASS for r in reporter.results)

    def test_failure_does_not_stop_the_body(self, reporter):
        """A failed expectation is recorded and the body keeps running."""
        ran = []

        def body():
            expect_equal(1, 2)
            ran.append("after failure")
            expect_equal(2, 2)

        assert execute_test("fail then pass", body, reporter=reporter) is False
        assert ran == ["after failure"]
        assert [r.kind for r in reporter.results] == [ExpectationKind.FAIL, ExpectationKind.PASS]
        assert reporter.results[0].passed is False
        assert "1 not equal to 2" in reporter.results[0].message

    def test_skip_aborts_body(self, reporter):
        """A skip ends the body, is recorded once and does not fail the test."""
        ran = []

        def body():
            skip("not implemented")
            ran.append("after skip")
            expect_equal(1, 1)

        assert execute_test("skipped", body, reporter=reporter) is True
        assert ran == []
        assert reporter.names == ["start_test", "add_result", "end_test"]
        result = reporter.results[0]
        assert result.kind == ExpectationKind.SKIP
        assert result.passed is True
        assert result.message == "not implemented"

    def test_skip_after_failure_keeps_failure(self, reporter):
        """An earlier failure still fails a test that is later skipped."""

        def body():
            expect_equal(1, 2)
            skip("give up")

        assert execute_test("fail then skip", body, reporter=reporter) is False
        assert reporter.names[-1] == "end_test"

    def test_error_is_recorded_as_failure(self, reporter):
        """An unrelated error yields one failing result with a call stack."""

        def body():
            fail_deep(2)
            expect_equal(1, 1)

        assert execute_test("error", body, reporter=reporter) is False
        assert reporter.names == ["start_test", "add_result", "end_test"]

        result = reporter.results[0]
        assert result.passed is False
        assert result.kind == ExpectationKind.FAIL
        assert result.is_error
        assert isinstance(result.error, ValueError)
        assert result.message == "ValueError: deep failure"

        names = [frame.name for frame in result.calls]
        assert names == ["body", "fail_deep", "fail_deep", "fail_deep"]
        assert "execute_test" not in names

    def test_no_expectations_passes(self, reporter):
        """A test recording nothing passes vacuously."""
        assert execute_test("empty", lambda: None, reporter=reporter) is True
        assert reporter.names == ["start_test", "end_test"]

    def test_messages_are_not_recorded(self, reporter, capsys):
        """Diagnostic messages never reach the reporter."""

        def body():
            message("just so you know")
            expect_true(True)

        assert execute_test("chatty", body, reporter=reporter) is True
        assert reporter.names == ["start_test", "add_result", "end_test"]
        assert "just so you know" not in capsys.readouterr().err

    def test_failed_assert_statement_is_an_error(self, reporter):
        """A plain assert statement counts as an error, not an expectation."""

        def body():
            assert 1 == 2, "plain assert"

        assert execute_test("assert", body, reporter=reporter) is False
        assert reporter.results[0].is_error
        assert "plain assert" in reporter.results[0].message

    def test_skip_is_not_swallowed_by_except_exception(self, reporter):
        """A broad except clause in the body cannot catch a skip."""
        ran = []

        def body():
            try:
                skip("later")
            except Exception:
                ran.append("handled")
            ran.append("after skip")
            expect_equal(1, 2)

        assert execute_test("guarded skip", body, reporter=reporter) is True
        assert ran == []
        assert [r.kind for r in reporter.results] == [ExpectationKind.SKIP]

    def test_reporter_error_does_not_escape(self, reporter):
        """A reporter that raises from add_result fails the test instead of escaping."""

        class BrokenReporter(type(reporter)):
            def add_result(self, expectation):
                super().add_result(expectation)
                raise RuntimeError("reporter broke")

        broken = BrokenReporter()

        assert execute_test("broken reporter", lambda: expect_true(True), reporter=broken) is False
        assert broken.names[0] == "start_test"
        assert broken.names[-1] == "end_test"
        assert broken.names.count("end_test") == 1

    def test_end_test_fires_on_interrupt(self, reporter):
        """KeyboardInterrupt is not a test signal but still closes the test."""

        def body():
            raise KeyboardInterrupt

        with pytest.raises(KeyboardInterrupt):
            execute_test("interrupted", body, reporter=reporter)

        assert reporter.names == ["start_test", "end_test"]


class TestSourceBodies:
    """Tests for bodies given as source code."""

    def test_reads_caller_bindings(self, reporter):
        """Source bodies can see the caller's local variables."""
        answer = 42

        assert test_that("reads caller", "expect_equal(answer, 42)", reporter=reporter) is True
        assert answer == 42

    def test_bindings_do_not_escape(self, reporter):
        """Names bound by the body stay inside the test."""
        value = 1

        code = "value = 2\nglobal leaked_by_test_body\nleaked_by_test_body = 3\nexpect_equal(value, 2)"
        assert test_that("isolated", code, reporter=reporter) is True

        assert value == 1
        assert "leaked_by_test_body" not in globals()

    def test_explicit_env(self, reporter):
        """execute_test evaluates a source body against the given bindings."""
        env = {"expect_equal": expect_equal, "x": 10}

        assert execute_test("env", "expect_equal(x * 2, 20)", env=env, reporter=reporter) is True
        assert env == {"expect_equal": expect_equal, "x": 10}

    def test_syntax_error_is_recorded(self, reporter):
        """Unparseable source fails the test instead of raising."""
        assert test_that("broken", "expect_equal(1,", reporter=reporter) is False
        assert reporter.names == ["start_test", "add_result", "end_test"]
        assert isinstance(reporter.results[0].error, SyntaxError)

    def test_code_object_body(self, reporter):
        """Compiled code objects run like source bodies."""
        code = compile("expect_equal(3, 4)", "<compiled>", "exec")

        assert test_that("compiled", code, reporter=reporter) is False
        assert len(reporter.results) == 1


class TestEntryPoint:
    """Tests for test_that and the dispatch lifecycle."""

    def test_decorator_form(self, reporter):
        """Used as a decorator, test_that runs the function immediately."""

        @test_that("decorated", reporter=reporter)
        def outcome():
            expect_equal("a", "a")

        assert outcome is True
        assert reporter.events[0] == ("start_test", "decorated")

    def test_uses_session_reporter(self, reporter):
        """Without an explicit reporter the session reporter is used."""
        with with_reporter(reporter):
            test_that("session", lambda: expect_true(True))

        assert reporter.names == ["start_test", "add_result", "end_test"]

    def test_dispatcher_removed_after_abort(self, reporter):
        """After a test ends, expectations are no longer captured."""
        execute_test("aborted", lambda: skip("done"), reporter=reporter)

        assert active_dispatcher() is None
        with pytest.raises(ExpectationFailure):
            expect_equal(1, 2)

    def test_nested_tests_keep_separate_outcomes(self, reporter):
        """An inner test's failure is recorded on the inner test only."""
        inner_outcome = []

        def inner():
            expect_equal(1, 2)

        def outer():
            inner_outcome.append(execute_test("inner", inner, reporter=reporter))
            expect_true(True)

        assert execute_test("outer", outer, reporter=reporter) is True
        assert inner_outcome == [False]
        assert reporter.names == [
            "start_test",
            "start_test",
            "add_result",
            "end_test",
            "add_result",
            "end_test",
        ]

    def test_sibling_tests_are_independent(self, reporter):
        """A failure in one test does not affect the next."""
        assert execute_test("first", lambda: expect_equal(1, 2), reporter=reporter) is False
        assert execute_test("second", lambda: expect_equal(2, 2), reporter=reporter) is True
