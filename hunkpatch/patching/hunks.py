import logging
import re
from collections.abc import Iterator
from enum import StrEnum
from typing import BinaryIO

from hunkpatch.config import PatchOptions
from hunkpatch.errors import BadSourceFileError, InvalidPatchError
from hunkpatch.patching.lines import LineSource, copy_lines
from hunkpatch.patching.patch_models import Edit, EditKind, Hunk
from hunkpatch.patching.report import Reporter

logger = logging.getLogger(__name__)

# Accepts "@@ -S,C +S2,C2" and the abbreviated "@@ -S +S2,C2"; a missing
# count means a single line.
HUNK_HEADER_RE = re.compile(rb"@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))?")

_BLANK_LINES = (b"\n", b"\r\n")


class HunkState(StrEnum):
    PARSING_HEADER = "parsing_header"
    COPYING_LEADING_CONTEXT = "copying_leading_context"
    APPLYING_EDITS = "applying_edits"
    HUNK_DONE = "hunk_done"
    HUNK_FAILED = "hunk_failed"
    NO_MORE_HUNKS = "no_more_hunks"


def parse_hunk_header(line: bytes) -> Hunk | None:
    match = HUNK_HEADER_RE.match(line)
    if not match:
        return None

    src_start, src_count, dst_start, dst_count = match.groups()
    return Hunk(
        src_start = int(src_start),
        src_count = int(src_count or 1),
        dst_start = int(dst_start),
        dst_count = int(dst_count or 1),
    )


def iter_edits(patch: LineSource, options: PatchOptions) -> Iterator[Edit]:
    """
    Yield the edits of one hunk body, one patch line at a time.

    Stops at end of stream or at the first line that is not a hunk body line;
    that line is pushed back for the header parser. A bare blank line is a
    whitespace-damaged context line for an empty source line. In reverse mode
    `+` lines are removals and `-` lines are additions.
    """

    while True:
        line = patch.read()
        if line is None:
            return
        if line in _BLANK_LINES:
            line = b" " + line

        marker = line[:1]
        if marker == b" ":
            kind = EditKind.CONTEXT
        elif marker == options.remove_marker:
            kind = EditKind.REMOVE
        elif marker == options.add_marker:
            kind = EditKind.ADD
        else:
            patch.push_back(line)
            return

        yield Edit(kind=kind, payload=line[1:], line=line)


class HunkEngine:
    """
    Applies every hunk of one file section.

    Source lines are numbered from 1 and destination lines from 0, matching
    the hunk header convention: `src_cursor` is the next source line to read
    and `dst_cursor` the count of destination lines emitted so far by hunks
    and their leading context.
    """

    def __init__(
        self,
        patch: LineSource,
        source: LineSource,
        dest: BinaryIO,
        options: PatchOptions,
        reporter: Reporter,
        name: str = ""
    ):
        self.patch = patch
        self.source = source
        self.dest = dest
        self.options = options
        self.reporter = reporter
        self.name = name

        self.src_cursor = 1
        self.dst_cursor = 0
        self.hunk_count = 0
        self.failed_hunk_count = 0
        self.trailing_lines = 0
        self.flush_trailing = False
        self.hunk_offset = 0

    @property
    def produced_lines(self) -> int:
        return self.dst_cursor + self.trailing_lines

    def run(self) -> None:
        state = HunkState.PARSING_HEADER
        hunk = None

        while state is not HunkState.NO_MORE_HUNKS:
            if state is HunkState.PARSING_HEADER:
                hunk = self._next_hunk()
                state = (
                    HunkState.COPYING_LEADING_CONTEXT
                    if hunk is not None
                    else HunkState.NO_MORE_HUNKS
                )
            elif state is HunkState.COPYING_LEADING_CONTEXT:
                self._copy_leading_context(hunk)
                state = HunkState.APPLYING_EDITS
            elif state is HunkState.APPLYING_EDITS:
                state = self._apply_edits(hunk)
            elif state is HunkState.HUNK_FAILED:
                self.failed_hunk_count += 1
                self.reporter.hunk_failed(self.hunk_count, self.hunk_offset)
                state = HunkState.PARSING_HEADER
            else:
                state = HunkState.PARSING_HEADER

        if self.flush_trailing:
            before = self.source.lines_read
            copy_lines(self.source, self.dest, None)
            self.trailing_lines = self.source.lines_read - before

        logger.debug(
            "%s: %d hunks, %d failed, %d lines produced",
            self.name, self.hunk_count, self.failed_hunk_count, self.produced_lines,
        )

    def _next_hunk(self) -> Hunk | None:
        line = self.patch.read()
        if line is None:
            return None

        hunk = parse_hunk_header(line)
        if hunk is None:
            self.patch.push_back(line)
            return None

        if self.options.reverse:
            hunk = hunk.reversed()
        self.hunk_count += 1
        return hunk

    def _copy_leading_context(self, hunk: Hunk) -> None:
        # a zero start means the file is created or deleted whole
        if not (hunk.src_start and hunk.dst_start):
            return

        count = hunk.src_start - self.src_cursor
        if count < 0:
            raise InvalidPatchError(
                f"invalid patch: hunk #{self.hunk_count} starts at line "
                f"{hunk.src_start}, before line {self.src_cursor}"
            )
        missing = copy_lines(self.source, self.dest, count)
        if missing:
            raise BadSourceFileError(self.name, missing)

        self.src_cursor += count
        self.dst_cursor += count
        self.flush_trailing = True

    def _apply_edits(self, hunk: Hunk) -> HunkState:
        self.hunk_offset = self.src_cursor
        src_last = hunk.src_count + self.src_cursor
        dst_last = hunk.dst_count + self.dst_cursor

        edits = iter_edits(self.patch, self.options)
        src_seen = dst_seen = 0

        for edit in edits:
            src_seen += edit.kind is not EditKind.ADD
            dst_seen += edit.kind is not EditKind.REMOVE

            if edit.kind is not EditKind.ADD:
                # the line past the bound belongs to whatever follows the hunk,
                # typically the next file's "---" marker
                if self.src_cursor == src_last:
                    self.patch.push_back(edit.line)
                    break

                src_line = self.source.read()
                if src_line is not None:
                    self.src_cursor += 1

                if src_line != edit.payload:
                    if self.options.skip_applied:
                        logger.debug(
                            "%s: hunk #%d line treated as already applied",
                            self.name, self.hunk_count,
                        )
                        continue
                    self._skip_rest_of_hunk(edits, hunk, src_seen, dst_seen)
                    return HunkState.HUNK_FAILED

                if edit.kind is EditKind.REMOVE:
                    continue

            if self.dst_cursor == dst_last:
                self.patch.push_back(edit.line)
                break
            self.dest.write(edit.payload)
            self.dst_cursor += 1

        return HunkState.HUNK_DONE

    def _skip_rest_of_hunk(
        self,
        edits: Iterator[Edit],
        hunk: Hunk,
        src_seen: int,
        dst_seen: int
    ) -> None:
        """Consume the body lines of a failed hunk that its header still accounts for."""

        for edit in edits:
            src_seen += edit.kind is not EditKind.ADD
            dst_seen += edit.kind is not EditKind.REMOVE
            if src_seen > hunk.src_count or dst_seen > hunk.dst_count:
                self.patch.push_back(edit.line)
                return
