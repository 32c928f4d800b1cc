import os
import re

OLD_MARKER = b"--- "
NEW_MARKER = b"+++ "
DEV_NULL = "/dev/null"

# diff -u separates the name from its timestamp with a tab
_NAME_END_RE = re.compile(rb"[\t\r\n]")


def strip_leading_segments(segments: list[str], level: int) -> list[str]:
    """
    Drop up to `level` leading path segments.

    The last segment is always kept, so a level larger than the path depth
    reduces the path to its final component. `level <= 0` strips nothing.
    """

    if level <= 0:
        return list(segments)
    drop = min(level, len(segments) - 1)
    return list(segments[drop:])


def extract_filename(line: bytes, strip_level: int, marker: bytes) -> str | None:
    """
    Parse a `--- name` / `+++ name` marker line into a stripped path.

    Returns None when the line does not start with `marker`.
    """

    if not line.startswith(marker):
        return None

    raw = line[len(marker):]
    end = _NAME_END_RE.search(raw)
    if end:
        raw = raw[:end.start()]

    segments = os.fsdecode(raw).split("/")
    return "/".join(strip_leading_segments(segments, strip_level))
