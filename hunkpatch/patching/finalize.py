import logging

from hunkpatch.config import PatchOptions
from hunkpatch.errors import PatchIOError
from hunkpatch.patching.patch_models import ApplyOutcome, FileTarget
from hunkpatch.patching.report import Reporter

logger = logging.getLogger(__name__)


def finalize_target(
    target: FileTarget,
    outcome: ApplyOutcome,
    options: PatchOptions,
    reporter: Reporter
) -> ApplyOutcome:
    """
    Apply the backup/target retention policy once a section's streams are closed.

    | Result | Backup | Target |
    |--------|--------|--------|
    | any hunk failed | kept | kept with partial output |
    | clean, output produced | removed | kept |
    | clean, no output (not a dry run) | removed | removed |
    """

    if outcome.failed:
        reporter.file_failed(outcome.failed_hunk_count, outcome.hunk_count)
        if target.existed:
            logger.info(
                "Keeping %s and backup %s after %d failed hunks",
                target.path, target.backup_path, outcome.failed_hunk_count,
            )
        else:
            logger.info(
                "Keeping new file %s after %d failed hunks",
                target.path, outcome.failed_hunk_count,
            )
        return outcome

    try:
        if target.backup_path is not None:
            target.backup_path.unlink(missing_ok=True)
            outcome.backup_path = None

        if not options.dry_run and outcome.produced_lines == 0:
            target.path.unlink()
            outcome.deleted = True
            logger.info("Removed %s: patched result is empty", target.path)
    except OSError as exc:
        raise PatchIOError(target.path, exc) from exc

    return outcome
