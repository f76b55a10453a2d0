"""Code graph builder for JavaScript/TypeScript repositories."""

import logging
import os
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, NamedTuple, Optional

from review_context.analysis.source_scanner import EXCLUDED_DIRS, discover_source_files
from review_context.config import (
    DEFAULT_HOTSPOT_LIMIT,
    DEFAULT_MAX_WORKERS,
    DEFAULT_RELEVANCE_CHAR_BUDGET,
    ReviewContextSettings,
)
from review_context.exceptions import ConfigurationError, SourceFileError
from review_context.models.diff_models import ParsedDiff
from review_context.models.schemas import (
    CodeGraph,
    CodeGraphResult,
    FileMeta,
    GraphEdge,
    Hotspot,
    SymbolDef,
)
from review_context.utils.ast_parser import analyze_tree, parse_source

logger = logging.getLogger(__name__)

DEFINITION_OVERHEAD_CHARS = 50
SUMMARY_TEXT_CHARS = 160


class _ParsedFile(NamedTuple):
    relative_path: str
    definitions: list[SymbolDef]
    meta: FileMeta
    error: Optional[str]


class ImportResolver:
    """Maps relative import specifiers to files inside one repository.

    Existence checks are memoised per resolver; build one resolver per
    graph build so concurrent builds never share state.
    """

    CANDIDATE_SUFFIXES = ("", ".ts", ".tsx", ".js", ".jsx")
    INDEX_FILES = ("index.ts", "index.tsx", "index.js", "index.jsx")

    def __init__(self, repo_root: Path):
        self.repo_root = repo_root
        self._exists_cache: dict[Path, bool] = {}

    def resolve(self, from_file: Path, specifier: str) -> Optional[Path]:
        """Return the file ``specifier`` refers to, or None if it is external.

        Only ``./``, ``../`` and absolute specifiers are considered; bare
        package names never resolve. Candidates outside the repository
        root are rejected.
        """
        if not specifier.startswith((".", "/")):
            return None

        base = Path(os.path.normpath(from_file.parent / specifier))
        if not base.is_relative_to(self.repo_root):
            return None

        candidates = [Path(f"{base}{suffix}") for suffix in self.CANDIDATE_SUFFIXES]
        candidates.extend(base / index for index in self.INDEX_FILES)
        for candidate in candidates:
            if self._is_file(candidate):
                return candidate
        return None

    def _is_file(self, path: Path) -> bool:
        if path not in self._exists_cache:
            self._exists_cache[path] = path.is_file()
        return self._exists_cache[path]


class CodeGraphBuilder:
    """Builds per-file symbol tables and the import graph of a repository."""

    def __init__(
        self,
        relevance_char_budget: int = DEFAULT_RELEVANCE_CHAR_BUDGET,
        hotspot_limit: int = DEFAULT_HOTSPOT_LIMIT,
        max_workers: int = DEFAULT_MAX_WORKERS,
        exclude_dirs: frozenset[str] | None = None,
    ):
        """Initialize the builder.

        Args:
            relevance_char_budget: Character budget for each changed file's
                relevant definitions bundle
            hotspot_limit: Number of hotspots to report
            max_workers: Upper bound on parser threads
            exclude_dirs: Directory names to skip during discovery

        Raises:
            ConfigurationError: If any budget or limit is not positive
        """
        for name, value in (
            ("relevance_char_budget", relevance_char_budget),
            ("hotspot_limit", hotspot_limit),
            ("max_workers", max_workers),
        ):
            if value <= 0:
                raise ConfigurationError(f"{name} must be positive, got {value}")

        self.relevance_char_budget = relevance_char_budget
        self.hotspot_limit = hotspot_limit
        self.max_workers = max_workers
        self.exclude_dirs = exclude_dirs if exclude_dirs is not None else EXCLUDED_DIRS

    @classmethod
    def from_settings(cls, settings: ReviewContextSettings) -> "CodeGraphBuilder":
        return cls(
            relevance_char_budget=settings.relevance_char_budget,
            hotspot_limit=settings.hotspot_limit,
            max_workers=settings.max_workers,
        )

    @property
    def worker_count(self) -> int:
        return min(max(2, os.cpu_count() or 2), self.max_workers)

    def build(
        self,
        repo_path: str,
        changed_files: ParsedDiff | Iterable[str] = (),
    ) -> CodeGraphResult:
        """Parse the repository and assemble its code graph.

        Files are parsed concurrently; import resolution runs afterwards on
        the calling thread once every file has been parsed.

        Args:
            repo_path: Path to the repository root
            changed_files: Parsed diff or repository-relative paths whose
                relevant definitions should be bundled

        Returns:
            CodeGraphResult with graph, definitions, metadata and hotspots

        Raises:
            FileNotFoundError: If the repository root does not exist
        """
        root = Path(repo_path).resolve()
        if isinstance(changed_files, ParsedDiff):
            changed = set(changed_files.changed_paths)
        else:
            changed = set(changed_files)

        files = discover_source_files(root, excluded_dirs=self.exclude_dirs)
        logger.debug("Discovered %d source files under %s", len(files), root)

        with ThreadPoolExecutor(max_workers=self.worker_count) as executor:
            parsed = list(executor.map(lambda path: self._parse_one(root, path), files))

        nodes: list[str] = []
        definitions: dict[str, list[SymbolDef]] = {}
        file_meta: dict[str, FileMeta] = {}
        parse_errors: dict[str, str] = {}
        for result in parsed:
            nodes.append(result.relative_path)
            definitions[result.relative_path] = result.definitions
            file_meta[result.relative_path] = result.meta
            if result.error is not None:
                parse_errors[result.relative_path] = result.error

        graph = CodeGraph(nodes=nodes, edges=self._resolve_edges(root, file_meta, nodes))
        hotspots = rank_hotspots(graph, self.hotspot_limit)

        relevant = get_relevant_definitions_for_files(
            [node for node in graph.nodes if node in changed],
            graph,
            definitions,
            self.relevance_char_budget,
        )

        logger.info(
            "Built code graph: %d nodes, %d edges, %d parse errors",
            len(graph.nodes),
            len(graph.edges),
            len(parse_errors),
        )
        return CodeGraphResult(
            repo_path=str(root),
            graph=graph,
            definitions=definitions,
            file_meta=file_meta,
            relevant_definitions=relevant,
            hotspots=hotspots,
            parse_errors=parse_errors,
        )

    def _parse_one(self, root: Path, file_path: Path) -> _ParsedFile:
        """Parse a single file; failures yield an empty result, not an exception."""
        relative_path = file_path.relative_to(root).as_posix()
        try:
            definitions, meta = self._analyze_file(file_path, relative_path)
        except SourceFileError as e:
            logger.warning("Skipping %s: %s", relative_path, e)
            return _ParsedFile(relative_path, [], FileMeta(), str(e))
        return _ParsedFile(relative_path, definitions, meta, None)

    def _analyze_file(self, file_path: Path, relative_path: str) -> tuple[list[SymbolDef], FileMeta]:
        try:
            source_bytes = file_path.read_bytes()
        except OSError as e:
            raise SourceFileError(f"Failed to read: {e}") from e

        try:
            tree = parse_source(source_bytes, str(file_path))
        except ValueError as e:
            raise SourceFileError(f"Failed to parse: {e}") from e
        if tree.root_node.has_error:
            raise SourceFileError("Failed to parse: syntax error")

        return analyze_tree(tree, relative_path)

    def _resolve_edges(
        self,
        root: Path,
        file_meta: dict[str, FileMeta],
        nodes: list[str],
    ) -> list[GraphEdge]:
        """Resolve import specifiers into edges; appends resolved non-source targets to nodes."""
        resolver = ImportResolver(root)
        known = set(nodes)
        edges: list[GraphEdge] = []

        for relative_path in list(nodes):
            meta = file_meta.get(relative_path)
            if meta is None:
                continue
            from_file = root / relative_path
            for record in meta.imports:
                resolved = resolver.resolve(from_file, record.source)
                if resolved is None:
                    continue
                target = resolved.relative_to(root).as_posix()
                if target not in known:
                    known.add(target)
                    nodes.append(target)
                edges.append(GraphEdge(
                    source=relative_path,
                    target=target,
                    module_specifier=record.source,
                ))
        return edges


def rank_hotspots(graph: CodeGraph, limit: int = DEFAULT_HOTSPOT_LIMIT) -> list[Hotspot]:
    """Rank nodes by total degree, descending; equal degrees sort by path."""
    degree = graph.degrees()
    ranked = sorted(degree.items(), key=lambda item: (-item[1], item[0]))
    return [Hotspot(file=path, degree=value) for path, value in ranked[:limit]]


def limit_definitions(definitions: list[SymbolDef], char_budget: int) -> list[SymbolDef]:
    """Keep definitions in order until the next one would exceed the budget."""
    kept: list[SymbolDef] = []
    used = 0
    for definition in definitions:
        cost = len(definition.text) + len(definition.name) + DEFINITION_OVERHEAD_CHARS
        if used + cost > char_budget:
            break
        kept.append(definition)
        used += cost
    return kept


def get_relevant_definitions_for_files(
    files: Iterable[str],
    graph: CodeGraph,
    definitions: dict[str, list[SymbolDef]],
    char_budget: int = DEFAULT_RELEVANCE_CHAR_BUDGET,
) -> dict[str, list[SymbolDef]]:
    """Bundle each file's definitions with its neighbours' exported ones.

    Args:
        files: Repository-relative paths to bundle for
        graph: Code graph
        definitions: Definitions keyed by repository-relative path
        char_budget: Character budget per file

    Returns:
        Mapping of file path to trimmed definition list
    """
    if char_budget <= 0:
        raise ConfigurationError(f"char_budget must be positive, got {char_budget}")

    relevant: dict[str, list[SymbolDef]] = {}
    for file in files:
        bundle = list(definitions.get(file, []))
        for neighbor in graph.neighbors(file):
            bundle.extend(d for d in definitions.get(neighbor, []) if d.exported)
        relevant[file] = limit_definitions(bundle, char_budget)
    return relevant


def summarize_definitions(
    definitions: list[SymbolDef],
    max_items: int = 20,
    include_text: bool = False,
) -> list[dict[str, Any]]:
    """Slim definition summaries for prompt assembly."""
    summaries = []
    for definition in definitions[:max_items]:
        summary: dict[str, Any] = {
            "name": definition.name,
            "kind": definition.kind.value,
            "pos": {"line": definition.pos.line, "column": definition.pos.column},
        }
        if include_text:
            summary["text"] = definition.text[:SUMMARY_TEXT_CHARS]
        summaries.append(summary)
    return summaries
