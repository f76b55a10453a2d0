"""Fuzzy location matching for generated review comments."""

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from review_context.config import DEFAULT_MAX_CONTEXT_MATCHES, DEFAULT_MIN_CONFIDENCE
from review_context.models.report_models import (
    CommentLocation,
    ContextMatch,
    EnhancedComment,
    FuzzyMatchResult,
    MisplacedComment,
    ReviewComment,
    SuggestedLocation,
)
from review_context.utils.file_lines import normalize_repo_path, read_lines
from review_context.verification.similarity import best_similarity, token_sort_ratio

logger = logging.getLogger(__name__)

MISPLACED_LINE_DELTA = 5


class FuzzyMatchOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_confidence: float = Field(default=DEFAULT_MIN_CONFIDENCE, gt=0.0, le=1.0)
    max_context_matches: int = Field(default=DEFAULT_MAX_CONTEXT_MATCHES, gt=0)
    include_context: bool = True


class FuzzyCodeMatcher:
    """Finds where in the loaded files a comment's rationale most likely points."""

    def __init__(self, options: FuzzyMatchOptions | None = None):
        self.options = options or FuzzyMatchOptions()
        self._file_contents: dict[str, list[str]] = {}

    @property
    def loaded_files(self) -> list[str]:
        return list(self._file_contents)

    def load_files(self, repo_path: str | Path, files: list[str]) -> None:
        """Load file contents for matching, in the given order.

        Unreadable files are skipped with a warning.
        """
        for file in map(normalize_repo_path, files):
            if file in self._file_contents:
                continue
            lines = read_lines(repo_path, file)
            if lines is None:
                logger.warning("Failed to load file %s for fuzzy matching", file)
                continue
            self._file_contents[file] = lines

    def find_comment_location(self, comment: ReviewComment) -> FuzzyMatchResult:
        """Score every loaded line against the comment's rationale."""
        matches: list[ContextMatch] = []
        for file, lines in self._file_contents.items():
            for index, content in enumerate(lines):
                score = best_similarity(comment.rationale, content)
                if score >= self.options.min_confidence:
                    matches.append(ContextMatch(file=file, line=index + 1, content=content, score=score))

        # sort is stable: ties keep load order, then line order
        matches.sort(key=lambda m: m.score, reverse=True)
        top = matches[:self.options.max_context_matches]

        best = top[0] if top else None
        confidence = best.score if best else 0.0
        suggested = None
        if best is not None and confidence >= self.options.min_confidence:
            suggested = SuggestedLocation(file=best.file, line=best.line, confidence=confidence)

        return FuzzyMatchResult(
            comment=comment,
            confidence=confidence,
            suggested_location=suggested,
            context_matches=top if self.options.include_context else [],
        )

    def check_misplaced(self, comment: ReviewComment) -> MisplacedComment | None:
        """Return a misplacement record when the best match lies elsewhere."""
        match = self.find_comment_location(comment)
        suggested = match.suggested_location
        if suggested is None:
            return None
        same_file = suggested.file == normalize_repo_path(comment.file)
        if same_file and abs(suggested.line - comment.line) <= MISPLACED_LINE_DELTA:
            return None

        evidence = [
            f'{m.file}:{m.line} ({round(m.score * 100)}% match): "{m.content.strip()}"'
            for m in match.context_matches
            if m.score >= self.options.min_confidence
        ]
        return MisplacedComment(
            comment=comment,
            original_location=CommentLocation(file=comment.file, line=comment.line),
            suggested_location=suggested,
            context_evidence=evidence,
        )

    def find_misplaced_comments(self, comments: list[ReviewComment]) -> list[MisplacedComment]:
        """Find comments whose best match is in another file or more than 5 lines away."""
        misplaced = []
        for comment in comments:
            record = self.check_misplaced(comment)
            if record is not None:
                misplaced.append(record)
        return misplaced

    def enhance_comment(self, comment: ReviewComment) -> EnhancedComment | None:
        """Relocate a comment to its best match, or None if nothing clears the threshold."""
        match = self.find_comment_location(comment)
        suggested = match.suggested_location
        if suggested is None:
            return None
        return EnhancedComment(
            comment=comment.model_copy(update={"file": suggested.file, "line": suggested.line}),
            original_location=CommentLocation(file=comment.file, line=comment.line),
            confidence=suggested.confidence,
        )

    def enhance_comment_locations(self, comments: list[ReviewComment]) -> list[ReviewComment]:
        """Return comments with locations rewritten where a confident match exists."""
        enhanced = []
        for comment in comments:
            record = self.enhance_comment(comment)
            enhanced.append(record.comment if record is not None else comment)
        return enhanced

    def get_similarity(self, text1: str, text2: str) -> float:
        return best_similarity(text1, text2)

    def find_best_line_in_file(
        self,
        file: str,
        search_text: str,
        min_score: float = 0.6,
    ) -> list[ContextMatch]:
        """Lines of ``file`` scoring at least ``min_score`` on token-sort similarity, best first."""
        lines = self._file_contents.get(normalize_repo_path(file))
        if lines is None:
            return []

        matches = []
        for index, content in enumerate(lines):
            score = token_sort_ratio(search_text, content)
            if score >= min_score:
                matches.append(ContextMatch(file=file, line=index + 1, content=content, score=score))
        matches.sort(key=lambda m: m.score, reverse=True)
        return matches
