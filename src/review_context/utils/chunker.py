"""Packing of parsed diff hunks into prompt-sized chunks."""

import math

from review_context.config import DEFAULT_CHUNK_TOKEN_BUDGET
from review_context.exceptions import ConfigurationError
from review_context.models.diff_models import (
    ChunkSummary,
    DiffChunk,
    Hunk,
    HunkSummary,
    ParsedDiff,
    PreviewLine,
)

HUNK_BASE_TOKENS = 32
TOKENS_PER_LINE = 2
CHARS_PER_TOKEN = 4
MIN_HUNK_TOKENS = 80

PREVIEW_LINES = 8
PREVIEW_CHARS = 240


def estimate_hunk_tokens(hunk: Hunk) -> int:
    """Cheap, deterministic token estimate for one hunk (~4 chars/token)."""
    length_cost = sum(math.ceil(len(line.content) / CHARS_PER_TOKEN) for line in hunk.added_lines)
    base = HUNK_BASE_TOKENS + len(hunk.added_lines) * TOKENS_PER_LINE
    return max(MIN_HUNK_TOKENS, base + length_cost)


def chunk_parsed_diff(
    parsed: ParsedDiff,
    max_tokens_per_chunk: int = DEFAULT_CHUNK_TOKEN_BUDGET,
) -> list[DiffChunk]:
    """Group each file's hunks into chunks that fit a token budget.

    Chunks never span files and keep hunk order. A hunk whose estimate
    alone exceeds the budget still gets a chunk of its own.

    Args:
        parsed: Parsed diff.
        max_tokens_per_chunk: Positive token budget per chunk.

    Returns:
        Chunks in diff order.

    Raises:
        ConfigurationError: If the budget is not a positive integer.
    """
    if max_tokens_per_chunk <= 0:
        raise ConfigurationError(
            f"max_tokens_per_chunk must be positive, got {max_tokens_per_chunk}"
        )

    chunks: list[DiffChunk] = []
    for file_diff in parsed.files:
        current: DiffChunk | None = None
        for index, hunk in enumerate(file_diff.hunks):
            estimate = estimate_hunk_tokens(hunk)
            if current is None or current.token_estimate + estimate > max_tokens_per_chunk:
                if current is not None:
                    chunks.append(current)
                current = DiffChunk(file_path=file_diff.path)
            current.hunk_indices.append(index)
            current.token_estimate += estimate
        if current is not None:
            chunks.append(current)
    return chunks


def summarize_chunk_for_prompt(parsed: ParsedDiff, chunk: DiffChunk) -> ChunkSummary:
    """Return a compact per-hunk view of a chunk for prompt assembly."""
    file_diff = parsed.get_file(chunk.file_path)
    if file_diff is None:
        return ChunkSummary(file_path=chunk.file_path)

    summaries = []
    for index in chunk.hunk_indices:
        hunk = file_diff.hunks[index]
        summaries.append(HunkSummary(
            target_start=hunk.target_start,
            target_end=hunk.target_end,
            added_count=len(hunk.added_lines),
            preview=[
                PreviewLine(n=line.line_number, c=line.content[:PREVIEW_CHARS])
                for line in hunk.added_lines[:PREVIEW_LINES]
            ],
        ))
    return ChunkSummary(file_path=file_diff.path, hunks=summaries)
