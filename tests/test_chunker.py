"""
Unit tests for diff chunking and chunk summaries.
"""

import pytest

from review_context.exceptions import ConfigurationError
from review_context.models import AddedLine, DiffSummary, FileDiff, Hunk, ParsedDiff
from review_context.utils.chunker import (
    chunk_parsed_diff,
    estimate_hunk_tokens,
    summarize_chunk_for_prompt,
)


def make_hunk(path: str, start: int, lines: list[str]) -> Hunk:
    """Build a hunk whose lines are all additions starting at start."""
    added = [AddedLine(line_number=start + i, content=c) for i, c in enumerate(lines)]
    return Hunk(
        file_path=path,
        target_start=start,
        target_end=start + max(len(lines) - 1, 0),
        added_lines=added,
    )


def make_diff(files: dict[str, list[Hunk]]) -> ParsedDiff:
    """Wrap per-file hunks into a ParsedDiff."""
    file_diffs = [FileDiff(path=path, hunks=hunks) for path, hunks in files.items()]
    added = sum(len(h.added_lines) for hunks in files.values() for h in hunks)
    return ParsedDiff(
        files=file_diffs,
        summary=DiffSummary(added=added, files_changed=len(file_diffs)),
    )


class TestEstimateHunkTokens:
    """Test the per-hunk token estimate."""

    def test_small_hunk_has_floor(self):
        """A tiny hunk still costs the minimum estimate."""
        assert estimate_hunk_tokens(make_hunk("a.ts", 1, ["x"])) == 80

    def test_empty_hunk_has_floor(self):
        """A hunk without added lines costs the minimum estimate."""
        assert estimate_hunk_tokens(make_hunk("a.ts", 1, [])) == 80

    def test_large_hunk(self):
        """32 base + 2 per line + ceil(len/4) per line."""
        hunk = make_hunk("a.ts", 1, ["x" * 40] * 10)
        assert estimate_hunk_tokens(hunk) == 32 + 20 + 100

    def test_rounds_up_per_line(self):
        """Each line's token estimate is rounded up."""
        hunk = make_hunk("a.ts", 1, ["x" * 41] * 10)
        assert estimate_hunk_tokens(hunk) == 32 + 20 + 110


class TestChunkParsedDiff:
    """Test grouping hunks into token-bounded chunks."""

    def test_every_hunk_appears_once_in_order(self):
        """Chunking is lossless and keeps hunk order per file."""
        diff = make_diff({
            "a.ts": [make_hunk("a.ts", i * 10 + 1, ["line"]) for i in range(5)],
            "b.ts": [make_hunk("b.ts", 1, ["other"])],
        })
        chunks = chunk_parsed_diff(diff, max_tokens_per_chunk=200)

        for file_diff in diff.files:
            indices = [i for c in chunks if c.file_path == file_diff.path for i in c.hunk_indices]
            assert indices == list(range(len(file_diff.hunks)))

    def test_chunks_never_span_files(self):
        """Hunks from different files never share a chunk."""
        diff = make_diff({
            "a.ts": [make_hunk("a.ts", 1, ["x"])],
            "b.ts": [make_hunk("b.ts", 1, ["y"])],
        })
        chunks = chunk_parsed_diff(diff, max_tokens_per_chunk=10_000)
        assert [c.file_path for c in chunks] == ["a.ts", "b.ts"]

    def test_budget_splits_chunks(self):
        """Two 80-token hunks fit in 160 but not in 159."""
        diff = make_diff({"a.ts": [make_hunk("a.ts", 1, ["x"]), make_hunk("a.ts", 10, ["y"])]})

        together = chunk_parsed_diff(diff, max_tokens_per_chunk=160)
        assert [c.hunk_indices for c in together] == [[0, 1]]
        assert together[0].token_estimate == 160

        split = chunk_parsed_diff(diff, max_tokens_per_chunk=159)
        assert [c.hunk_indices for c in split] == [[0], [1]]

    def test_within_budget_unless_single_hunk(self):
        """Only single-hunk chunks may exceed the budget."""
        diff = make_diff({"a.ts": [make_hunk("a.ts", i * 50 + 1, ["z" * 30] * (i + 1)) for i in range(6)]})
        for chunk in chunk_parsed_diff(diff, max_tokens_per_chunk=150):
            assert chunk.token_estimate <= 150 or len(chunk.hunk_indices) == 1

    def test_oversized_hunk_gets_own_chunk(self):
        """A hunk larger than the budget is chunked alone."""
        big = make_hunk("a.ts", 1, ["x" * 400] * 20)
        diff = make_diff({"a.ts": [make_hunk("a.ts", 100, ["y"]), big, make_hunk("a.ts", 200, ["z"])]})

        chunks = chunk_parsed_diff(diff, max_tokens_per_chunk=200)
        assert [c.hunk_indices for c in chunks] == [[0], [1], [2]]
        assert chunks[1].token_estimate > 200

    def test_empty_diff(self):
        """An empty diff produces no chunks."""
        assert chunk_parsed_diff(ParsedDiff()) == []

    def test_file_without_hunks_yields_no_chunk(self):
        """Files without hunks contribute nothing."""
        assert chunk_parsed_diff(make_diff({"a.ts": []})) == []

    @pytest.mark.parametrize("budget", [0, -1])
    def test_non_positive_budget_raises(self, budget):
        """A zero or negative budget is rejected."""
        with pytest.raises(ConfigurationError):
            chunk_parsed_diff(make_diff({"a.ts": [make_hunk("a.ts", 1, ["x"])]}), budget)


class TestSummarizeChunk:
    """Test the compact chunk view."""

    def test_preview_is_capped(self):
        """The per-file preview keeps only the first few lines."""
        hunk = make_hunk("a.ts", 5, [f"line {i}" + "x" * 300 for i in range(12)])
        diff = make_diff({"a.ts": [hunk]})
        chunk = chunk_parsed_diff(diff)[0]

        summary = summarize_chunk_for_prompt(diff, chunk)
        assert summary.file_path == "a.ts"
        assert len(summary.hunks) == 1

        hunk_summary = summary.hunks[0]
        assert hunk_summary.target_start == 5
        assert hunk_summary.target_end == 16
        assert hunk_summary.added_count == 12
        assert len(hunk_summary.preview) == 8
        assert hunk_summary.preview[0].n == 5
        assert all(len(p.c) <= 240 for p in hunk_summary.preview)

    def test_unknown_file_gives_empty_summary(self):
        """Summarizing a file not in the diff gives an empty summary."""
        diff = make_diff({"a.ts": [make_hunk("a.ts", 1, ["x"])]})
        chunk = chunk_parsed_diff(diff)[0].model_copy(update={"file_path": "missing.ts"})
        summary = summarize_chunk_for_prompt(diff, chunk)
        assert summary.hunks == []
