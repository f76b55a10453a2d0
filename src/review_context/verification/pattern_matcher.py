"""Categorisation of review comments by common review patterns."""

import re

from pydantic import BaseModel, Field

from review_context.models.report_models import ReviewComment, Severity
from review_context.verification.similarity import token_sort_ratio

PATTERN_MIN_SCORE = 0.6
SUGGESTION_MIN_SCORE = 0.3
EXAMPLE_MENTIONED_SCORE = 0.5
LOCATION_MATCH_MIN_SCORE = 0.4
LOCATION_VALID_SCORE = 0.5
MAX_KEY_TERMS = 10

COMMON_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of",
    "with", "by", "is", "are", "was", "were", "be", "been", "have", "has", "had",
    "do", "does", "did", "will", "would", "could", "should", "may", "might",
    "can", "this", "that", "these", "those", "i", "you", "he", "she", "it",
    "we", "they", "me", "him", "her", "us", "them", "my", "your", "his", "its",
    "our", "their", "mine", "yours", "hers", "ours", "theirs",
})


class CodePattern(BaseModel):
    pattern: str
    description: str
    severity: Severity
    examples: list[str] = Field(default_factory=list)


class PatternMatch(BaseModel):
    pattern: CodePattern
    comment: ReviewComment
    confidence: float


class LineMatch(BaseModel):
    line: int
    content: str
    score: float
    reason: str


class PatternSuggestion(BaseModel):
    pattern: CodePattern
    confidence: float
    suggestions: list[str] = Field(default_factory=list)


class LocationCheck(BaseModel):
    is_valid: bool
    confidence: float
    suggestions: list[str] = Field(default_factory=list)


DEFAULT_PATTERNS = [
    CodePattern(
        pattern="error handling",
        description="Missing or inadequate error handling",
        severity=Severity.MAJOR,
        examples=["try-catch blocks", "error logging", "graceful degradation"],
    ),
    CodePattern(
        pattern="null check",
        description="Missing null/undefined checks",
        severity=Severity.MAJOR,
        examples=["null guard", "optional chaining", "default values"],
    ),
    CodePattern(
        pattern="type safety",
        description="Type safety issues or missing type annotations",
        severity=Severity.MINOR,
        examples=["any type", "type assertions", "interface compliance"],
    ),
    CodePattern(
        pattern="performance",
        description="Performance optimization opportunities",
        severity=Severity.MINOR,
        examples=["loop optimization", "memory usage", "algorithm efficiency"],
    ),
    CodePattern(
        pattern="security",
        description="Security vulnerabilities or best practices",
        severity=Severity.CRITICAL,
        examples=["input validation", "authentication", "authorization"],
    ),
    CodePattern(
        pattern="readability",
        description="Code readability and maintainability",
        severity=Severity.NIT,
        examples=["variable naming", "function length", "code organization"],
    ),
    CodePattern(
        pattern="testing",
        description="Missing or inadequate tests",
        severity=Severity.MINOR,
        examples=["unit tests", "integration tests", "test coverage"],
    ),
    CodePattern(
        pattern="documentation",
        description="Missing or unclear documentation",
        severity=Severity.NIT,
        examples=["JSDoc comments", "README updates", "API documentation"],
    ),
]


def extract_key_terms(text: str) -> list[str]:
    """Up to ten lower-cased words longer than two characters, minus stop words."""
    words = re.sub(r"[^\w\s]", " ", text.lower()).split()
    return [w for w in words if len(w) > 2 and w not in COMMON_WORDS][:MAX_KEY_TERMS]


class CodePatternMatcher:
    """Matches comments to review categories and to the lines they discuss."""

    def __init__(self, patterns: list[CodePattern] | None = None):
        self.patterns: list[CodePattern] = list(patterns if patterns is not None else DEFAULT_PATTERNS)

    def add_pattern(self, pattern: CodePattern) -> None:
        self.patterns.append(pattern)

    def find_best_pattern(self, comment: ReviewComment) -> PatternMatch | None:
        """Best category for a comment, weighting rationale 0.7 and suggestion 0.3."""
        best: PatternMatch | None = None
        best_score = 0.0
        for pattern in self.patterns:
            score = (
                token_sort_ratio(comment.rationale, pattern.pattern) * 0.7
                + token_sort_ratio(comment.suggestion, pattern.pattern) * 0.3
            )
            if score > best_score and score >= PATTERN_MIN_SCORE:
                best_score = score
                best = PatternMatch(pattern=pattern, comment=comment, confidence=score)
        return best

    def match_comment_to_code(
        self,
        comment: ReviewComment,
        file_lines: list[str],
        min_score: float = PATTERN_MIN_SCORE,
    ) -> list[LineMatch]:
        """Score each line against the comment's key terms and rationale, best first."""
        terms = extract_key_terms(f"{comment.rationale} {comment.suggestion}")
        matches = []
        for index, content in enumerate(file_lines):
            best_score = 0.0
            reason = ""
            for term in terms:
                score = token_sort_ratio(term, content)
                if score > best_score:
                    best_score = score
                    reason = f'Matches term: "{term}"'

            rationale_score = token_sort_ratio(comment.rationale, content)
            if rationale_score > best_score:
                best_score = rationale_score
                reason = "Matches comment rationale"

            if best_score >= min_score:
                matches.append(LineMatch(line=index + 1, content=content, score=best_score, reason=reason))
        matches.sort(key=lambda m: m.score, reverse=True)
        return matches

    def get_pattern_suggestions(self, comment: ReviewComment) -> list[PatternSuggestion]:
        """Example fixes from related categories that the suggestion does not mention yet."""
        suggestions = []
        for pattern in self.patterns:
            confidence = token_sort_ratio(comment.rationale, pattern.pattern)
            if confidence < SUGGESTION_MIN_SCORE:
                continue
            missing = [
                example for example in pattern.examples
                if token_sort_ratio(comment.suggestion, example) < EXAMPLE_MENTIONED_SCORE
            ]
            if missing:
                suggestions.append(PatternSuggestion(pattern=pattern, confidence=confidence, suggestions=missing))
        suggestions.sort(key=lambda s: s.confidence, reverse=True)
        return suggestions

    def validate_comment_location(
        self,
        comment: ReviewComment,
        file_lines: list[str],
        target_line: int,
    ) -> LocationCheck:
        """Check whether ``target_line`` plausibly matches what the comment discusses."""
        matches = self.match_comment_to_code(comment, file_lines, LOCATION_MATCH_MIN_SCORE)
        target_score = max((m.score for m in matches if m.line == target_line), default=0.0)
        is_valid = target_score >= LOCATION_VALID_SCORE

        suggestions = []
        if not is_valid and matches:
            best = matches[0]
            suggestions.append(
                f'Consider line {best.line}: "{best.content.strip()}" ({round(best.score * 100)}% match)'
            )
        return LocationCheck(is_valid=is_valid, confidence=target_score, suggestions=suggestions)
