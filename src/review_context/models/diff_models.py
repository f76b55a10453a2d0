"""Models for parsed unified diffs and their prompt-sized chunks."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class FileStatus(str, Enum):
    """Change status of a file in a diff."""

    ADDED = "A"
    MODIFIED = "M"
    DELETED = "D"
    RENAMED = "R"


class AddedLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    line_number: int  # 1-based, post-change file
    content: str


class Hunk(BaseModel):
    """A contiguous block of changes anchored in the target revision."""

    model_config = ConfigDict(frozen=True)

    file_path: str
    target_start: int
    target_end: int
    added_lines: list[AddedLine] = Field(default_factory=list)


class FileDiff(BaseModel):
    """All hunks of a single file in a diff."""

    model_config = ConfigDict(frozen=True)

    path: str  # new side, or old side when deleted
    old_path: str | None = None
    status: FileStatus = FileStatus.MODIFIED
    hunks: list[Hunk] = Field(default_factory=list)


class DiffSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    added: int = 0
    deleted: int = 0
    files_changed: int = 0


class ParsedDiff(BaseModel):
    """Structured form of a unified diff."""

    model_config = ConfigDict(frozen=True)

    files: list[FileDiff] = Field(default_factory=list)
    summary: DiffSummary = Field(default_factory=DiffSummary)

    @property
    def changed_paths(self) -> list[str]:
        return [f.path for f in self.files]

    def get_file(self, path: str) -> FileDiff | None:
        for file_diff in self.files:
            if file_diff.path == path:
                return file_diff
        return None


class DiffChunk(BaseModel):
    """A token-bounded group of hunks from one file."""

    model_config = ConfigDict(frozen=False)

    file_path: str
    hunk_indices: list[int] = Field(default_factory=list)  # indices into FileDiff.hunks
    token_estimate: int = 0


class PreviewLine(BaseModel):
    n: int
    c: str


class HunkSummary(BaseModel):
    target_start: int
    target_end: int
    added_count: int
    preview: list[PreviewLine] = Field(default_factory=list)


class ChunkSummary(BaseModel):
    """Compact, prompt-ready view of a chunk."""

    file_path: str
    hunks: list[HunkSummary] = Field(default_factory=list)
