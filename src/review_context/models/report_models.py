"""Review comment and verification report models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Severity(str, Enum):
    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"
    NIT = "nit"


class DropReason(str, Enum):
    INVALID_LOCATION = "invalid-file-or-line"
    WEAK_SUGGESTION = "suggestion-too-weak"
    NO_KNOWN_SYMBOLS = "no-known-symbols-referenced"
    DUPLICATE = "duplicate-comment"
    FUZZY_DUPLICATE = "fuzzy-duplicate"


class ReviewComment(BaseModel):
    """A generated review comment anchored to a file and line."""

    model_config = ConfigDict(frozen=True)

    file: str = Field(min_length=1)
    line: int = Field(gt=0)
    severity: Severity
    smell: str
    rationale: str
    suggestion: str


class CommentLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    file: str
    line: int


class SuggestedLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    file: str
    line: int
    confidence: float  # 0..1


class ContextMatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    file: str
    line: int
    content: str
    score: float  # 0..1


class FuzzyMatchResult(BaseModel):
    comment: ReviewComment
    confidence: float = 0.0
    suggested_location: SuggestedLocation | None = None
    context_matches: list[ContextMatch] = Field(default_factory=list)


class MisplacedComment(BaseModel):
    comment: ReviewComment
    original_location: CommentLocation
    suggested_location: SuggestedLocation
    context_evidence: list[str] = Field(default_factory=list)


class EnhancedComment(BaseModel):
    """A kept comment rewritten to its best-matching location."""

    comment: ReviewComment  # relocated copy
    original_location: CommentLocation
    confidence: float


class DroppedComment(BaseModel):
    comment: ReviewComment
    reasons: list[str] = Field(default_factory=list)  # DropReason values


class VerificationResult(BaseModel):
    model_config = ConfigDict(frozen=False)

    kept: list[ReviewComment] = Field(default_factory=list)
    dropped: list[DroppedComment] = Field(default_factory=list)
    enhanced: list[EnhancedComment] = Field(default_factory=list)
    misplaced: list[MisplacedComment] = Field(default_factory=list)
