"""Recover the source location of the assertion call that raised a signal.

The resolver walks frames from the most recent to the oldest and picks the
first one that runs code outside this package, whose current instruction is
an ``expect_*`` call, and for which line/column positions and source text
are available.
"""

import itertools
import linecache
import re
from types import CodeType, FrameType, TracebackType
from typing import Iterable, Iterator, NamedTuple, Optional

from testthat.core.signals import SourceLocation
from testthat.logging_utils import get_logger

logger = get_logger(__name__)

PACKAGE_NAME = "testthat"

_EXPECT_CALL = re.compile(r"\bexpect_\w+")


class FrameRef(NamedTuple):
    """The parts of a frame the resolver needs."""

    code: CodeType
    lasti: int
    module: Optional[str]


def stack_frames(
    frame: Optional[FrameType], stop: Optional[FrameType] = None
) -> Iterator[FrameRef]:
    """Walk a live stack from ``frame`` towards the oldest caller.

    The walk ends before ``stop``, so nothing that called it is visited.
    """
    while frame is not None and frame is not stop:
        yield FrameRef(frame.f_code, frame.f_lasti, frame.f_globals.get("__name__"))
        frame = frame.f_back


def traceback_frames(tb: Optional[TracebackType]) -> list[FrameRef]:
    """Frames of a traceback, most recent first."""
    frames = []
    while tb is not None:
        frame = tb.tb_frame
        frames.append(FrameRef(frame.f_code, tb.tb_lasti, frame.f_globals.get("__name__")))
        tb = tb.tb_next
    frames.reverse()
    return frames


def is_package_module(module: Optional[str]) -> bool:
    """Check whether a module name belongs to this package."""
    if not module:
        return False
    return module == PACKAGE_NAME or module.startswith(PACKAGE_NAME + ".")


def find_test_srcref(frames: Iterable[FrameRef]) -> Optional[SourceLocation]:
    """Find the location of the most recent ``expect_*`` call, or None."""
    for ref in frames:
        if is_package_module(ref.module):
            continue

        location = _instruction_location(ref.code, ref.lasti)
        if location is None:
            continue

        text = _source_text(location)
        if text and _EXPECT_CALL.search(text):
            return location

    logger.debug("Could not resolve a source location for the expectation")
    return None


def _instruction_location(code: CodeType, lasti: int) -> Optional[SourceLocation]:
    """Position of the instruction at byte offset ``lasti`` in ``code``."""
    if lasti < 0:
        return None

    try:
        position = next(itertools.islice(code.co_positions(), lasti // 2, None), None)
    except (ValueError, TypeError):
        return None

    if position is None or None in position:
        return None

    start_line, end_line, start_col, end_col = position
    lines = linecache.getlines(code.co_filename)
    if not lines or end_line > len(lines):
        return None

    # co_positions reports UTF-8 byte offsets
    return SourceLocation(
        file=code.co_filename,
        start_line=start_line,
        start_col=_char_offset(lines[start_line - 1], start_col),
        end_line=end_line,
        end_col=_char_offset(lines[end_line - 1], end_col),
    )


def _char_offset(line: str, byte_offset: int) -> int:
    return len(line.encode("utf-8")[:byte_offset].decode("utf-8", errors="replace"))


def _source_text(location: SourceLocation) -> str:
    """Source text spanned by ``location``."""
    lines = linecache.getlines(location.file)[location.start_line - 1 : location.end_line]
    if not lines:
        return ""

    if len(lines) == 1:
        return lines[0][location.start_col : location.end_col]

    lines[0] = lines[0][location.start_col :]
    lines[-1] = lines[-1][: location.end_col]
    return "".join(lines)
