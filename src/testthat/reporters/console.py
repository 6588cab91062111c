"""Reporters that render results on a rich console."""

import string
from typing import Optional

from rich.console import Console
from rich.rule import Rule
from rich.text import Text

from testthat.core.signals import Expectation
from testthat.reporters.base import Reporter

FAILURE_LABELS = [str(i) for i in range(1, 10)] + list(string.ascii_letters)


def make_console(use_colours: bool = True) -> Console:
    """Create the console reporters write to."""
    return Console(no_color=not use_colours, highlight=False)


def describe_failure(expectation: Expectation) -> str:
    """Heading word for a failed expectation."""
    return "Error" if expectation.is_error else "Failure"


def render_failure(
    console: Console,
    label: str,
    test: Optional[str],
    expectation: Expectation,
) -> None:
    """Print the detailed report of one failed expectation."""
    heading = f"{label}. {describe_failure(expectation)}"
    if expectation.location is not None:
        heading += f" (at {expectation.location})"
    heading += f": {test or '(unnamed test)'}"

    console.print(Rule(Text(heading, style="bold red"), align="left"))
    console.print(Text(expectation.message))
    if expectation.calls:
        console.print(Text("".join(expectation.calls.format()).rstrip(), style="dim"))
    console.print()


class MinimalReporter(Reporter):
    """One character per expectation: ``.`` pass, ``S`` skip, ``F`` fail, ``E`` error."""

    def __init__(self, console: Optional[Console] = None, use_colours: bool = True):
        super().__init__()
        self.console = console or make_console(use_colours)

    def add_result(self, expectation: Expectation) -> None:
        if expectation.is_skip:
            self.console.print(Text("S", style="yellow"), end="")
        elif expectation.passed:
            self.console.print(Text(".", style="green"), end="")
        elif expectation.is_error:
            self.console.print(Text("E", style="red"), end="")
        else:
            self.console.print(Text("F", style="red"), end="")

    def end_reporter(self) -> None:
        super().end_reporter()
        self.console.print()


class SummaryReporter(Reporter):
    """Progress line per context, followed by detailed failure reports."""

    def __init__(
        self,
        console: Optional[Console] = None,
        use_colours: bool = True,
        max_reports: int = 15,
    ):
        super().__init__()
        self.console = console or make_console(use_colours)
        self.max_reports = max_reports
        self.failures: list[tuple[Optional[str], Expectation]] = []
        self.skips = 0
        self._line_open = False

    def start_context(self, context: str) -> None:
        super().start_context(context)
        self.console.print(Text(f"{context}: ", style="bold"), end="")
        self._line_open = True

    def end_context(self) -> None:
        super().end_context()
        self._close_line()

    def add_result(self, expectation: Expectation) -> None:
        if expectation.is_skip:
            self.skips += 1
            self.console.print(Text("S", style="yellow"), end="")
        elif expectation.passed:
            self.console.print(Text(".", style="green"), end="")
        else:
            self.failures.append((self.test, expectation))
            label = self._label(len(self.failures) - 1)
            self.console.print(Text(label, style="bold red"), end="")
        self._line_open = True

    def end_reporter(self) -> None:
        super().end_reporter()
        self._close_line()
        self.console.print()

        if self.skips:
            self.console.print(Text(f"Skipped: {self.skips}", style="yellow"))

        if not self.failures:
            self.console.print(Text("DONE", style="bold green"))
            return

        self.console.print(Rule(Text("Failed", style="bold red")))
        for index, (test, expectation) in enumerate(self.failures[: self.max_reports]):
            render_failure(self.console, self._label(index), test, expectation)

        hidden = len(self.failures) - self.max_reports
        if hidden > 0:
            self.console.print(Text(f"... and {hidden} more failures", style="dim"))

    def _label(self, index: int) -> str:
        if index < len(FAILURE_LABELS):
            return FAILURE_LABELS[index]
        return "F"

    def _close_line(self) -> None:
        if self._line_open:
            self.console.print()
            self._line_open = False


class StopReporter(Reporter):
    """Prints each failure as soon as it is reported.

    Used when no session reporter has been set, e.g. when ``test_that`` is
    called interactively.
    """

    def __init__(self, console: Optional[Console] = None, use_colours: bool = True):
        super().__init__()
        self.console = console or make_console(use_colours)
        self.failures = 0

    def add_result(self, expectation: Expectation) -> None:
        if expectation.passed:
            return
        self.failures += 1
        render_failure(self.console, str(self.failures), self.test, expectation)
