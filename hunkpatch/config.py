import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

LOG_LEVEL_ENV = "HUNKPATCH_LOG_LEVEL"


class PatchOptions(BaseModel):
    """Run-wide settings, resolved once and read-only afterwards."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )

    strip_level: int = 1
    reverse: bool = False
    # -N: treat mismatching lines as already applied instead of failing
    skip_applied: bool = False
    dry_run: bool = False
    directory: Path = Field(default_factory=Path.cwd)

    @property
    def add_marker(self) -> bytes:
        return b"-" if self.reverse else b"+"

    @property
    def remove_marker(self) -> bytes:
        return b"+" if self.reverse else b"-"


def log_level_from_env(default: str = "WARNING") -> str:
    return os.getenv(LOG_LEVEL_ENV, default).upper()
