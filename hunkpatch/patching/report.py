from typing import TextIO

import typer


class Reporter:
    """User-facing progress and failure messages, one line each."""

    def __init__(self, out: TextIO | None = None, err: TextIO | None = None):
        self.out = out
        self.err = err

    def patching_file(self, name: str) -> None:
        typer.echo(f"patching file {name}", file=self.out)

    def hunk_failed(self, number: int, offset: int) -> None:
        typer.echo(f"hunk #{number} FAILED at {offset}", file=self.err, err=True)

    def file_failed(self, failed: int, total: int) -> None:
        typer.echo(f"{failed} out of {total} hunk FAILED", file=self.err, err=True)
