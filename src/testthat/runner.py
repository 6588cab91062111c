"""Run explicitly named test files."""

import time
from pathlib import Path
from typing import Iterable, Optional

from testthat.config import ReporterConfig, TestThatConfig
from testthat.core.signals import Skip
from testthat.logging_utils import get_logger
from testthat.reporters import (
    REPORTERS,
    ListReporter,
    MinimalReporter,
    MultiReporter,
    Reporter,
    RunSummary,
    StopReporter,
    SummaryReporter,
    with_reporter,
)
from testthat.reporters.session import context

logger = get_logger(__name__)


class TestFileError(Exception):
    """Raised when a test file fails outside of any test."""

    __test__ = False

    def __init__(self, path: Path, error: BaseException):
        super().__init__(f"Error in {path}: {type(error).__name__}: {error}")
        self.path = path
        self.error = error


def reporter_from_config(config: ReporterConfig) -> Reporter:
    """Create the reporter described by the configuration."""
    reporter_class = REPORTERS[config.name]
    if reporter_class is SummaryReporter:
        return SummaryReporter(use_colours=config.use_colours, max_reports=config.max_reports)
    if reporter_class in (MinimalReporter, StopReporter):
        return reporter_class(use_colours=config.use_colours)
    return reporter_class()


def test_file(
    path: Path | str,
    reporter: Optional[Reporter] = None,
    keep_source: bool = True,
) -> RunSummary:
    """Run every test in one file."""
    return test_files([path], reporter=reporter, keep_source=keep_source)


def test_files(
    paths: Iterable[Path | str],
    reporter: Optional[Reporter] = None,
    keep_source: bool = True,
) -> RunSummary:
    """Run the given files as one reporting session.

    Each file gets its own context, named after the file, and is executed
    as a script whose top level calls ``test_that``.

    Args:
        paths: Test files to run, in order
        reporter: Reporter to show progress on (results are always collected)
        keep_source: Keep file sources so failing expectations can be located

    Returns:
        RunSummary of all tests in all files

    Raises:
        FileNotFoundError: If a file does not exist
        TestFileError: If a file raises outside of any test
    """
    collector = ListReporter()
    reporters: list[Reporter] = [collector]
    if reporter is not None:
        reporters.append(reporter)

    start_time = time.time()
    with with_reporter(MultiReporter(reporters)):
        for path in paths:
            _source_file(Path(path), keep_source)

    return RunSummary(
        tests=collector.records,
        duration_ms=int((time.time() - start_time) * 1000),
    )


def test_files_with_config(paths: Iterable[Path | str], config: TestThatConfig) -> RunSummary:
    """Run files with the reporter and options from ``config``."""
    return test_files(
        paths,
        reporter=reporter_from_config(config.reporter),
        keep_source=config.keep_source,
    )


def _source_file(path: Path, keep_source: bool) -> None:
    if not path.exists():
        raise FileNotFoundError(f"Test file not found: {path}")

    logger.debug("Running test file %s", path)
    context(path.stem)

    source = path.read_text(encoding="utf-8")
    # Without the real filename the tracebacks and srcrefs have no source
    filename = str(path) if keep_source else f"<{path.name}>"
    namespace = {
        "__name__": path.stem,
        "__file__": str(path),
        "__builtins__": __builtins__,
    }

    try:
        code = compile(source, filename, "exec")
        exec(code, namespace)
    except (Skip, Exception) as e:
        raise TestFileError(path, e) from e


# Keep pytest from collecting these when imported into test modules
test_file.__test__ = False
test_files.__test__ = False
test_files_with_config.__test__ = False
