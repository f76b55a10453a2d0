"""Reading repository files as line lists."""

import logging
import re
from pathlib import Path, PurePosixPath

logger = logging.getLogger(__name__)

LINE_SPLIT_RE = re.compile(r"\r?\n")


def normalize_repo_path(relative_path: str) -> str:
    """Canonical form of a repository-relative path, e.g. ``./src/a.ts`` -> ``src/a.ts``."""
    return PurePosixPath(relative_path).as_posix()


def resolve_in_repo(repo_path: str | Path, relative_path: str) -> Path | None:
    """Resolve ``relative_path`` under ``repo_path``; None if it escapes the root."""
    root = Path(repo_path).resolve()
    candidate = (root / relative_path).resolve()
    if not candidate.is_relative_to(root):
        return None
    return candidate


def read_lines(repo_path: str | Path, relative_path: str) -> list[str] | None:
    """Read a repository file and split it on ``\\r?\\n``.

    A trailing newline yields a final empty line, so the line count of
    ``"a\\nb\\n"`` is 3.

    Returns:
        The file's lines, or None when the file is missing, unreadable or
        outside the repository root.
    """
    path = resolve_in_repo(repo_path, relative_path)
    if path is None:
        logger.debug("Refusing to read %s outside %s", relative_path, repo_path)
        return None
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug("Could not read %s: %s", path, e)
        return None
    return LINE_SPLIT_RE.split(text)
