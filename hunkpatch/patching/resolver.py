import errno
import logging
import os
import stat
from contextlib import ExitStack
from enum import StrEnum
from typing import BinaryIO

from hunkpatch.config import PatchOptions
from hunkpatch.errors import InvalidPatchError, PatchIOError
from hunkpatch.patching.filenames import DEV_NULL, NEW_MARKER, OLD_MARKER, extract_filename
from hunkpatch.patching.lines import LineSource
from hunkpatch.patching.patch_models import FileTarget
from hunkpatch.util.paths import ensure_dir

logger = logging.getLogger(__name__)

DEFAULT_MODE = 0o644
BACKUP_SUFFIX = ".orig"


class SectionState(StrEnum):
    SEEKING_OLD_MARKER = "seeking_old_marker"
    SEEKING_NEW_MARKER = "seeking_new_marker"
    READING_HUNKS = "reading_hunks"


def find_next_section(patch: LineSource, strip_level: int) -> str | None:
    """
    Advance `patch` past the next `---`/`+++` marker pair.

    Lines before the old-file marker (`diff` commands, `Only in` notes,
    blank lines) are skipped. Returns the stripped new-file name, or None
    when the stream ends before another section starts.

    Raises:
        InvalidPatchError: the old-file marker is not directly followed by a
            new-file marker.
    """

    state = SectionState.SEEKING_OLD_MARKER
    old_name = new_name = None

    while state is not SectionState.READING_HUNKS:
        line = patch.read()

        if state is SectionState.SEEKING_OLD_MARKER:
            if line is None:
                return None
            old_name = extract_filename(line, strip_level, OLD_MARKER)
            if old_name is not None:
                state = SectionState.SEEKING_NEW_MARKER
            continue

        if line is None:
            raise InvalidPatchError("invalid patch: unexpected end after '---' line")
        new_name = extract_filename(line, strip_level, NEW_MARKER)
        if new_name is None:
            raise InvalidPatchError(line=line)
        # a deletion names /dev/null as the new file; patch the old one
        if extract_filename(line, 0, NEW_MARKER) == DEV_NULL:
            new_name = old_name
        state = SectionState.READING_HUNKS

    logger.debug("Found file section for %s", new_name)
    return new_name


def open_target(
    name: str,
    options: PatchOptions,
    stack: ExitStack
) -> tuple[FileTarget, LineSource, BinaryIO]:
    """
    Prepare the source and destination streams for one file section.

    Only regular files are patched; any other existing path is rejected
    before anything is renamed. A missing target reads as empty and is
    created with mode 0644. An existing target is moved to `<target>.orig`
    and read from there, unless this is a dry run, in which case it is read
    in place and all output goes to the null device. Streams are registered
    on `stack` so the caller closes them on every exit path.
    """

    path = options.directory / name
    backup_path = None

    try:
        try:
            saved = path.stat()
        except FileNotFoundError:
            saved = None

        # only regular files are patched; never back up a directory
        if saved is not None and not stat.S_ISREG(saved.st_mode):
            kind = errno.EISDIR if stat.S_ISDIR(saved.st_mode) else errno.EINVAL
            raise OSError(kind, "not a regular file")

        if saved is None:
            if not options.dry_run:
                ensure_dir(path.parent)
            source = LineSource.empty()
            mode = DEFAULT_MODE
        elif not options.dry_run:
            backup_path = path.with_name(path.name + BACKUP_SUFFIX)
            os.replace(path, backup_path)
            source = LineSource(stack.enter_context(backup_path.open("rb")))
            mode = stat.S_IMODE(saved.st_mode)
        else:
            source = LineSource(stack.enter_context(path.open("rb")))
            mode = stat.S_IMODE(saved.st_mode)

        if options.dry_run:
            dest = stack.enter_context(open(os.devnull, "wb"))
        else:
            dest = stack.enter_context(path.open("wb"))
            os.chmod(path, mode)
    except OSError as exc:
        raise PatchIOError(path, exc) from exc

    target = FileTarget(
        name = name,
        path = path,
        backup_path = backup_path,
        existed = saved is not None,
    )
    logger.debug("Opened %s (backup=%s, dry_run=%s)", path, backup_path, options.dry_run)
    return target, source, dest
