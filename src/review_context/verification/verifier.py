"""Verification of generated review comments against the repository."""

import logging
import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from review_context.config import (
    DEFAULT_DUPLICATE_LINE_WINDOW,
    DEFAULT_MIN_SUGGESTION_CHARS,
    ReviewContextSettings,
)
from review_context.models.report_models import (
    DropReason,
    DroppedComment,
    ReviewComment,
    VerificationResult,
)
from review_context.utils.file_lines import normalize_repo_path, read_lines
from review_context.verification.fuzzy_matcher import FuzzyCodeMatcher, FuzzyMatchOptions
from review_context.verification.similarity import best_similarity, token_overlap_similarity

logger = logging.getLogger(__name__)

GENERIC_SUGGESTION_PATTERNS = [
    r"consider refactoring",
    r"improve readability",
    r"add tests?",
]

DUPLICATE_THRESHOLD = 0.9
FUZZY_DUPLICATE_THRESHOLD = 0.85


class VerifyOptions(BaseModel):
    """Inputs and thresholds for one verification pass."""

    model_config = ConfigDict(frozen=True)

    repo_path: str
    definitions_by_file: dict[str, list[str]] = Field(default_factory=dict)
    min_suggestion_chars: int = Field(default=DEFAULT_MIN_SUGGESTION_CHARS, ge=0)
    generic_suggestion_patterns: list[str] = Field(
        default_factory=lambda: list(GENERIC_SUGGESTION_PATTERNS)
    )
    duplicate_line_window: int = Field(default=DEFAULT_DUPLICATE_LINE_WINDOW, ge=0)
    fuzzy: Optional[FuzzyMatchOptions] = None  # None disables fuzzy mode
    enhance: bool = False
    candidate_files: list[str] = Field(default_factory=list)  # extra files to search when relocating


class CommentVerifier:
    """Partitions review comments into kept and dropped, with reasons.

    Comments are processed in input order. Every check runs independently
    and failures accumulate as reason codes; the fuzzy duplicate check only
    runs for comments that passed everything else. In fuzzy mode each
    comment is also checked for misplacement, and in enhance mode kept
    comments are moved to their best-matching line.
    """

    def __init__(self, options: VerifyOptions):
        self.options = options
        self._generic_patterns = [
            re.compile(pattern, re.IGNORECASE) for pattern in options.generic_suggestion_patterns
        ]
        self._definitions: dict[str, list[str]] = {}
        for file, names in options.definitions_by_file.items():
            self._definitions.setdefault(normalize_repo_path(file), []).extend(names)
        self._symbol_patterns: dict[str, list[re.Pattern[str]]] = {}

    @classmethod
    def from_settings(
        cls,
        settings: ReviewContextSettings,
        repo_path: str,
        definitions_by_file: dict[str, list[str]] | None = None,
        candidate_files: list[str] | None = None,
    ) -> "CommentVerifier":
        fuzzy = None
        if settings.fuzzy_enabled:
            fuzzy = FuzzyMatchOptions(
                min_confidence=settings.fuzzy_min_confidence,
                max_context_matches=settings.fuzzy_max_context_matches,
            )
        return cls(VerifyOptions(
            repo_path=repo_path,
            definitions_by_file=definitions_by_file or {},
            min_suggestion_chars=settings.min_suggestion_chars,
            duplicate_line_window=settings.duplicate_line_window,
            fuzzy=fuzzy,
            enhance=settings.fuzzy_enhance,
            candidate_files=candidate_files or [],
        ))

    def verify(self, comments: list[ReviewComment]) -> VerificationResult:
        """Run every check over ``comments`` and return the partition."""
        line_counts: dict[str, Optional[int]] = {}
        matcher = self._build_matcher(comments)

        result = VerificationResult()
        for comment in comments:
            reasons = self._check(comment, result.kept, line_counts)
            if not reasons and matcher is not None and self._is_fuzzy_duplicate(comment, result.kept):
                reasons.append(DropReason.FUZZY_DUPLICATE.value)

            if reasons:
                result.dropped.append(DroppedComment(comment=comment, reasons=reasons))
            else:
                result.kept.append(comment)

        if matcher is not None:
            result.misplaced = matcher.find_misplaced_comments(comments)
            if self.options.enhance:
                self._enhance(matcher, result)

        logger.info(
            "Verified %d comments: %d kept, %d dropped, %d misplaced",
            len(comments),
            len(result.kept),
            len(result.dropped),
            len(result.misplaced),
        )
        return result

    def _build_matcher(self, comments: list[ReviewComment]) -> Optional[FuzzyCodeMatcher]:
        if self.options.fuzzy is None:
            return None
        files: list[str] = []
        for file in [*self.options.candidate_files, *(c.file for c in comments)]:
            file = normalize_repo_path(file)
            if file not in files:
                files.append(file)
        matcher = FuzzyCodeMatcher(self.options.fuzzy)
        matcher.load_files(self.options.repo_path, files)
        return matcher

    def _check(
        self,
        comment: ReviewComment,
        kept: list[ReviewComment],
        line_counts: dict[str, Optional[int]],
    ) -> list[str]:
        reasons: list[str] = []
        if not self._location_exists(comment, line_counts):
            reasons.append(DropReason.INVALID_LOCATION.value)
        if not self._has_substantive_suggestion(comment):
            reasons.append(DropReason.WEAK_SUGGESTION.value)
        if not self._references_known_symbols(comment):
            reasons.append(DropReason.NO_KNOWN_SYMBOLS.value)
        if self._is_duplicate(comment, kept):
            reasons.append(DropReason.DUPLICATE.value)
        return reasons

    def _location_exists(self, comment: ReviewComment, line_counts: dict[str, Optional[int]]) -> bool:
        file = normalize_repo_path(comment.file)
        if file not in line_counts:
            lines = read_lines(self.options.repo_path, file)
            line_counts[file] = len(lines) if lines is not None else None
        count = line_counts[file]
        return count is not None and 1 <= comment.line <= count

    def _has_substantive_suggestion(self, comment: ReviewComment) -> bool:
        suggestion = comment.suggestion.strip()
        if len(suggestion) < self.options.min_suggestion_chars:
            return False
        return not any(pattern.search(suggestion) for pattern in self._generic_patterns)

    def _references_known_symbols(self, comment: ReviewComment) -> bool:
        patterns = self._patterns_for(normalize_repo_path(comment.file))
        if not patterns:
            return True  # nothing known about this file
        content = f"{comment.rationale}\n{comment.suggestion}"
        return any(pattern.search(content) for pattern in patterns)

    def _patterns_for(self, file: str) -> list[re.Pattern[str]]:
        if file not in self._symbol_patterns:
            names = [n for n in self._definitions.get(file, []) if n]
            self._symbol_patterns[file] = [
                re.compile(rf"(?<![A-Za-z0-9_]){re.escape(name)}(?![A-Za-z0-9_])")
                for name in names
            ]
        return self._symbol_patterns[file]

    def _is_duplicate(self, comment: ReviewComment, kept: list[ReviewComment]) -> bool:
        window = self.options.duplicate_line_window
        file = normalize_repo_path(comment.file)
        return any(
            normalize_repo_path(k.file) == file
            and abs(k.line - comment.line) <= window
            and token_overlap_similarity(k.rationale, comment.rationale) > DUPLICATE_THRESHOLD
            for k in kept
        )

    def _is_fuzzy_duplicate(self, comment: ReviewComment, kept: list[ReviewComment]) -> bool:
        return any(
            best_similarity(k.rationale, comment.rationale) > FUZZY_DUPLICATE_THRESHOLD
            for k in kept
        )

    def _enhance(self, matcher: FuzzyCodeMatcher, result: VerificationResult) -> None:
        relocated = []
        for comment in result.kept:
            record = matcher.enhance_comment(comment)
            if record is not None and (
                record.comment.file != normalize_repo_path(comment.file)
                or record.comment.line != comment.line
            ):
                result.enhanced.append(record)
                relocated.append(record.comment)
            else:
                relocated.append(comment)
        result.kept = relocated


def verify_comments(comments: list[ReviewComment], options: VerifyOptions) -> VerificationResult:
    """Convenience wrapper around ``CommentVerifier(options).verify(comments)``."""
    return CommentVerifier(options).verify(comments)
