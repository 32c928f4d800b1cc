import logging
from typing import BinaryIO

logger = logging.getLogger(__name__)


class LineSource:
    """
    Forward-only line reader over a binary stream.

    Lines keep their terminator. A stream of None behaves as an already
    exhausted source (used for files that do not exist yet). One line can be
    pushed back so the phase that reads a line it does not own can hand it
    to the next phase.
    """

    def __init__(self, stream: BinaryIO | None):
        self._stream = stream
        self._pending: bytes | None = None
        self.lines_read = 0

    @classmethod
    def empty(cls) -> "LineSource":
        return cls(None)

    def read(self) -> bytes | None:
        if self._pending is not None:
            line, self._pending = self._pending, None
            return line
        if self._stream is None:
            return None
        line = self._stream.readline()
        if not line:
            return None
        self.lines_read += 1
        return line

    def push_back(self, line: bytes) -> None:
        if self._pending is not None:
            raise RuntimeError("only one line can be pushed back")
        self._pending = line


def copy_lines(src: LineSource, dst: BinaryIO, count: int | None) -> int:
    """
    Copy up to `count` lines verbatim from `src` to `dst`.

    `count=None` copies until the source is exhausted. Returns how many of
    the requested lines could not be copied (always 0 for `None`).
    """

    remaining = count
    while remaining is None or remaining > 0:
        line = src.read()
        if line is None:
            break
        dst.write(line)
        if remaining is not None:
            remaining -= 1

    if remaining:
        logger.debug("Source exhausted with %d lines still requested", remaining)
    return remaining or 0
