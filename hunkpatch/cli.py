import logging
from pathlib import Path

import typer

from hunkpatch.config import PatchOptions, log_level_from_env
from hunkpatch.errors import FatalPatchError
from hunkpatch.logging import setup_logging
from hunkpatch.patching import Reporter, apply_patch_file

app = typer.Typer(add_completion=False)


@app.command()
def main(
    input: Path | None = typer.Option(None, "-i", "--input", help="Read the patch from FILE instead of stdin"),
    strip: int = typer.Option(1, "-p", "--strip", help="Strip N leading path components from file names"),
    reverse: bool = typer.Option(False, "-R", "--reverse", help="Apply the patch in reverse"),
    forward: bool = typer.Option(False, "-N", "--forward", help="Skip lines that look already applied"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Report results without changing any files"),
    directory: Path | None = typer.Option(None, "-d", "--directory", help="Resolve file names relative to DIR"),
    force: bool = typer.Option(False, "-f", "--force", hidden=True),
    remove_empty_files: bool = typer.Option(False, "-E", "--remove-empty-files", hidden=True),
    get: int | None = typer.Option(None, "-g", "--get", hidden=True),
    backup_if_mismatch: bool = typer.Option(False, "--backup-if-mismatch", hidden=True),
    no_backup_if_mismatch: bool = typer.Option(False, "--no-backup-if-mismatch", hidden=True),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log debug diagnostics to stderr"),
):
    """
    Apply a unified diff to the files it names.

    Exit status is 0 when every hunk applied, 1 when some hunks failed and
    2 on a fatal error.
    """

    # -f, -E, -g and the --[no-]backup-if-mismatch switches are accepted for
    # compatibility and have no effect
    setup_logging(logging.DEBUG if verbose else log_level_from_env())

    options = PatchOptions(
        strip_level = strip,
        reverse = reverse,
        skip_applied = forward,
        dry_run = dry_run,
        directory = directory if directory is not None else Path.cwd(),
    )

    try:
        summary = apply_patch_file(input, options, Reporter())
    except FatalPatchError as exc:
        typer.echo(f"hunkpatch: {exc}", err=True)
        raise typer.Exit(code=exc.exit_code)

    raise typer.Exit(code=summary.exit_status)
