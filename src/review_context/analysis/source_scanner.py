"""Discovery of candidate source files under a repository root."""

from pathlib import Path

SUPPORTED_EXTENSIONS = frozenset({".ts", ".tsx", ".js", ".jsx"})

EXCLUDED_DIRS = frozenset({
    "node_modules",
    "dist",
    "build",
    "out",
    ".git",
    "coverage",
    "__snapshots__",
    "vendor",
})


def discover_source_files(
    repo_path: str | Path,
    extensions: frozenset[str] = SUPPORTED_EXTENSIONS,
    excluded_dirs: frozenset[str] = EXCLUDED_DIRS,
) -> list[Path]:
    """Walk the repository and return supported source files.

    Hidden entries, symlinks and excluded directories are skipped.
    Entries are visited in sorted order so results are stable between runs.

    Args:
        repo_path: Path to the repository root
        extensions: Allowed file suffixes
        excluded_dirs: Directory names that are never descended into

    Returns:
        List of absolute file paths in depth-first sorted order

    Raises:
        FileNotFoundError: If the repository root does not exist
    """
    root = Path(repo_path).resolve()
    if not root.is_dir():
        raise FileNotFoundError(f"Repository path not found: {repo_path}")

    results: list[Path] = []
    _walk(root, results, extensions, excluded_dirs)
    return results


def _walk(
    directory: Path,
    out: list[Path],
    extensions: frozenset[str],
    excluded_dirs: frozenset[str],
) -> None:
    try:
        entries = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError:
        return

    for entry in entries:
        if entry.name.startswith(".") or entry.name in excluded_dirs:
            continue
        # Skip symlinks to prevent path traversal
        if entry.is_symlink():
            continue
        if entry.is_dir():
            _walk(entry, out, extensions, excluded_dirs)
        elif entry.is_file() and entry.suffix in extensions:
            out.append(entry)
