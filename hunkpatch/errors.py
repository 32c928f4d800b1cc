from enum import StrEnum
from pathlib import Path


class PatchErrorType(StrEnum):
    INVALID_PATCH = "invalid_patch"
    BAD_SOURCE_FILE = "bad_source_file"
    IO_ERROR = "io_error"


class FatalPatchError(Exception):
    """Aborts the whole run; the CLI maps it to exit status 2."""

    exit_code = 2

    def __init__(
        self,
        error_type: PatchErrorType,
        message: str,
        details: dict | None = None
    ):
        super().__init__(message)
        self.error_type = error_type
        self.details = details or {}


class InvalidPatchError(FatalPatchError):
    def __init__(
        self,
        message: str = "invalid patch",
        line: bytes | None = None
    ):
        super().__init__(
            PatchErrorType.INVALID_PATCH,
            message,
            details = {
                "line": line
            }
        )


class BadSourceFileError(FatalPatchError):
    """Source is shorter than the unmodified context a hunk expects."""
    def __init__(
        self,
        path: str,
        missing_lines: int
    ):
        super().__init__(
            PatchErrorType.BAD_SOURCE_FILE,
            f"bad src file: {path}",
            details = {
                "path": path,
                "missing_lines": missing_lines
            }
        )


class PatchIOError(FatalPatchError):
    def __init__(
        self,
        path: Path,
        error: OSError
    ):
        super().__init__(
            PatchErrorType.IO_ERROR,
            f"{path}: {error.strerror or error}",
            details = {
                "path": str(path),
                "errno": error.errno
            }
        )
