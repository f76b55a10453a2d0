"""Source scanning and code graph construction."""

from review_context.analysis.code_graph import (
    CodeGraphBuilder,
    ImportResolver,
    get_relevant_definitions_for_files,
    limit_definitions,
    rank_hotspots,
    summarize_definitions,
)
from review_context.analysis.source_scanner import discover_source_files

__all__ = [
    "CodeGraphBuilder",
    "ImportResolver",
    "discover_source_files",
    "get_relevant_definitions_for_files",
    "limit_definitions",
    "rank_hotspots",
    "summarize_definitions",
]
