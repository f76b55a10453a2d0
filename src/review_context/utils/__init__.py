"""Utilities for diff parsing, chunking and source parsing."""

from review_context.utils.chunker import (
    chunk_parsed_diff,
    estimate_hunk_tokens,
    summarize_chunk_for_prompt,
)
from review_context.utils.diff_parser import parse_unified_diff

__all__ = [
    "chunk_parsed_diff",
    "estimate_hunk_tokens",
    "parse_unified_diff",
    "summarize_chunk_for_prompt",
]
