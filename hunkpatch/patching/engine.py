import logging
from contextlib import ExitStack
from pathlib import Path
from typing import BinaryIO

import typer

from hunkpatch.config import PatchOptions
from hunkpatch.errors import PatchIOError
from hunkpatch.patching.finalize import finalize_target
from hunkpatch.patching.hunks import HunkEngine
from hunkpatch.patching.lines import LineSource
from hunkpatch.patching.patch_models import ApplyOutcome, RunSummary
from hunkpatch.patching.report import Reporter
from hunkpatch.patching.resolver import find_next_section, open_target

logger = logging.getLogger(__name__)


def apply_file_section(
    name: str,
    patch: LineSource,
    options: PatchOptions,
    reporter: Reporter
) -> ApplyOutcome:
    with ExitStack() as stack:
        target, source, dest = open_target(name, options, stack)
        reporter.patching_file(name)

        engine = HunkEngine(patch, source, dest, options, reporter, name=name)
        try:
            engine.run()
        except OSError as exc:
            raise PatchIOError(target.path, exc) from exc

    outcome = ApplyOutcome(
        path = target.path,
        hunk_count = engine.hunk_count,
        failed_hunk_count = engine.failed_hunk_count,
        produced_lines = engine.produced_lines,
        backup_path = target.backup_path,
    )
    return finalize_target(target, outcome, options, reporter)


def apply_patch_stream(
    patch_stream: BinaryIO,
    options: PatchOptions,
    reporter: Reporter | None = None
) -> RunSummary:
    """
    Apply every file section of a unified diff, in order, in one pass.

    Failed hunks are recorded in the returned summary; fatal problems
    (malformed markers, a source shorter than its context, I/O errors)
    raise `FatalPatchError` subclasses and stop the run.
    """

    reporter = reporter or Reporter()
    patch = LineSource(patch_stream)
    summary = RunSummary()

    while True:
        name = find_next_section(patch, options.strip_level)
        if name is None:
            break
        summary.files.append(apply_file_section(name, patch, options, reporter))

    logger.info(
        "Patched %d files, %d with failed hunks",
        len(summary.files), len(summary.failed_files),
    )
    return summary


def apply_patch_file(
    patch_path: Path | None,
    options: PatchOptions,
    reporter: Reporter | None = None
) -> RunSummary:
    """Apply the patch at `patch_path`; None or `-` reads standard input."""

    if patch_path is None or str(patch_path) == "-":
        return apply_patch_stream(typer.get_binary_stream("stdin"), options, reporter)

    try:
        patch_stream = open(patch_path, "rb")
    except OSError as exc:
        raise PatchIOError(patch_path, exc) from exc

    with patch_stream:
        return apply_patch_stream(patch_stream, options, reporter)
