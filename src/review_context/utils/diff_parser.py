"""Parser for git-style unified diffs."""

import logging
import re

from review_context.models.diff_models import (
    AddedLine,
    DiffSummary,
    FileDiff,
    FileStatus,
    Hunk,
    ParsedDiff,
)

logger = logging.getLogger(__name__)

DEV_NULL = "/dev/null"

HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
DIFF_GIT_RE = re.compile(r'^diff --git ("?a/.+?"?) ("?b/.+"?)$')


def _clean_path(raw: str) -> str:
    """Strip quotes, trailing timestamps and the a/ or b/ prefix."""
    path = raw.split("\t", 1)[0].strip()
    if len(path) >= 2 and path.startswith('"') and path.endswith('"'):
        path = path[1:-1]
    if path == DEV_NULL:
        return path
    if path.startswith(("a/", "b/")):
        path = path[2:]
    return path


def _starts_file_header(lines: list[str], index: int) -> bool:
    """True when lines[index] and the next line form a "--- " / "+++ " pair."""
    return (
        lines[index].startswith("--- ")
        and index + 1 < len(lines)
        and lines[index + 1].startswith("+++ ")
    )


class _FileState:
    """Mutable accumulator for the file currently being parsed."""

    def __init__(self, old_path: str | None = None, new_path: str | None = None):
        self.old_path = old_path
        self.new_path = new_path
        self.is_new = False
        self.is_deleted = False
        self.hunks: list[dict] = []

    def build(self) -> FileDiff | None:
        old_path = self.old_path
        new_path = self.new_path
        if old_path == DEV_NULL:
            self.is_new = True
            old_path = None
        if new_path == DEV_NULL:
            self.is_deleted = True
            new_path = None

        if self.is_deleted:
            path = old_path or new_path
            status = FileStatus.DELETED
        elif self.is_new:
            path = new_path or old_path
            status = FileStatus.ADDED
        else:
            path = new_path or old_path
            status = (
                FileStatus.RENAMED
                if old_path and new_path and old_path != new_path
                else FileStatus.MODIFIED
            )
        if not path:
            return None

        hunks = [
            Hunk(
                file_path=path,
                target_start=h["target_start"],
                target_end=h["target_end"],
                added_lines=h["added_lines"],
            )
            for h in self.hunks
        ]
        return FileDiff(path=path, old_path=old_path, status=status, hunks=hunks)


def parse_unified_diff(diff_text: str) -> ParsedDiff:
    """Parse unified diff text into per-file hunks with target line numbers.

    Added lines are numbered with a running counter over the post-change
    file: context and added lines advance it, deleted lines do not, and
    each hunk header resets it to the header's ``+start``. The number of
    body lines is taken from the hunk header so that removed lines which
    happen to look like file headers are still attributed correctly. A
    ``--- `` line directly followed by a ``+++ `` line always starts a new
    file, even inside a hunk whose header promised more lines.

    Lines that cannot be attributed to a hunk are ignored; an empty or
    malformed diff yields an empty (or partial) result instead of raising.

    Args:
        diff_text: Raw unified diff text.

    Returns:
        ParsedDiff with files in diff order and added/deleted totals.
    """
    files: list[FileDiff] = []
    current: _FileState | None = None
    hunk: dict | None = None
    old_remaining = 0
    new_remaining = 0
    target_line = 0
    added = 0
    deleted = 0

    def flush() -> None:
        nonlocal current, hunk
        if current is not None:
            file_diff = current.build()
            if file_diff is not None:
                files.append(file_diff)
            else:
                logger.debug("Dropping diff entry without a usable path")
        current = None
        hunk = None

    lines = diff_text.splitlines()
    for index, line in enumerate(lines):
        in_body = hunk is not None and (old_remaining > 0 or new_remaining > 0)
        if in_body and _starts_file_header(lines, index):
            # header counts overran the hunk; the next file starts here
            old_remaining = new_remaining = 0
            in_body = False

        if in_body:
            if line.startswith("\\"):
                continue  # "\ No newline at end of file"
            if line.startswith("+"):
                added += 1
                hunk["added_lines"].append(AddedLine(line_number=target_line, content=line[1:]))
                hunk["target_end"] = max(hunk["target_end"], target_line)
                target_line += 1
                new_remaining -= 1
                continue
            if line.startswith("-"):
                deleted += 1
                old_remaining -= 1
                continue
            if line.startswith(" ") or line == "":
                hunk["target_end"] = max(hunk["target_end"], target_line)
                target_line += 1
                old_remaining -= 1
                new_remaining -= 1
                continue
            # Anything else ends a truncated hunk; fall through to header handling.
            old_remaining = new_remaining = 0

        if line.startswith("diff --git "):
            flush()
            current = _FileState()
            match = DIFF_GIT_RE.match(line)
            if match:
                current.old_path = _clean_path(match.group(1))
                current.new_path = _clean_path(match.group(2))
            continue

        if line.startswith("--- "):
            if current is None or current.hunks:
                flush()
                current = _FileState()
            current.old_path = _clean_path(line[4:])
            continue

        if line.startswith("+++ "):
            if current is None:
                current = _FileState()
            current.new_path = _clean_path(line[4:])
            continue

        if current is not None and line.startswith("new file mode"):
            current.is_new = True
            continue

        if current is not None and line.startswith("deleted file mode"):
            current.is_deleted = True
            continue

        if current is not None and line.startswith("rename from "):
            current.old_path = line[len("rename from "):].strip()
            continue

        if current is not None and line.startswith("rename to "):
            current.new_path = line[len("rename to "):].strip()
            continue

        if line.startswith("@@"):
            match = HUNK_HEADER_RE.match(line)
            if current is None or match is None:
                hunk = None
                continue
            old_remaining = int(match.group(2)) if match.group(2) is not None else 1
            new_start = int(match.group(3))
            new_remaining = int(match.group(4)) if match.group(4) is not None else 1
            target_line = new_start
            hunk = {"target_start": new_start, "target_end": new_start, "added_lines": []}
            current.hunks.append(hunk)
            continue

        # index lines, mode changes, binary markers and stray text

    flush()

    return ParsedDiff(
        files=files,
        summary=DiffSummary(added=added, deleted=deleted, files_changed=len(files)),
    )
