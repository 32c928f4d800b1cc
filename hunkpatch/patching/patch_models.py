from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class Hunk:
    src_start: int
    src_count: int
    dst_start: int
    dst_count: int

    def reversed(self) -> "Hunk":
        return Hunk(
            src_start = self.dst_start,
            src_count = self.dst_count,
            dst_start = self.src_start,
            dst_count = self.src_count,
        )


class EditKind(StrEnum):
    CONTEXT = "context"
    REMOVE = "remove"
    ADD = "add"


@dataclass(frozen=True)
class Edit:
    kind: EditKind
    payload: bytes
    line: bytes


@dataclass
class FileTarget:
    """An opened-for-patching file section: where output goes and what backs it."""
    name: str
    path: Path
    backup_path: Path | None
    existed: bool


class ApplyOutcome(BaseModel):
    path: Path
    hunk_count: int = 0
    failed_hunk_count: int = 0
    produced_lines: int = 0
    backup_path: Path | None = None
    deleted: bool = False

    @property
    def failed(self) -> bool:
        return self.failed_hunk_count > 0


class RunSummary(BaseModel):
    files: list[ApplyOutcome] = Field(default_factory=list)

    @property
    def failed_files(self) -> list[ApplyOutcome]:
        return [f for f in self.files if f.failed]

    @property
    def exit_status(self) -> int:
        return 1 if self.failed_files else 0
