"""Data models for review context assembly and verification."""

from review_context.models.diff_models import (
    AddedLine,
    ChunkSummary,
    DiffChunk,
    DiffSummary,
    FileDiff,
    FileStatus,
    Hunk,
    HunkSummary,
    ParsedDiff,
    PreviewLine,
)
from review_context.models.report_models import (
    CommentLocation,
    ContextMatch,
    DropReason,
    DroppedComment,
    EnhancedComment,
    FuzzyMatchResult,
    MisplacedComment,
    ReviewComment,
    Severity,
    SuggestedLocation,
    VerificationResult,
)
from review_context.models.schemas import (
    CodeGraph,
    CodeGraphResult,
    ExportRecord,
    FileMeta,
    GraphEdge,
    Hotspot,
    ImportRecord,
    SymbolDef,
    SymbolKind,
    SymbolPosition,
)

__all__ = [
    "AddedLine",
    "ChunkSummary",
    "CodeGraph",
    "CodeGraphResult",
    "CommentLocation",
    "ContextMatch",
    "DiffChunk",
    "DiffSummary",
    "DropReason",
    "DroppedComment",
    "EnhancedComment",
    "ExportRecord",
    "FileDiff",
    "FileMeta",
    "FileStatus",
    "FuzzyMatchResult",
    "GraphEdge",
    "Hotspot",
    "Hunk",
    "HunkSummary",
    "ImportRecord",
    "MisplacedComment",
    "ParsedDiff",
    "PreviewLine",
    "ReviewComment",
    "Severity",
    "SuggestedLocation",
    "SymbolDef",
    "SymbolKind",
    "SymbolPosition",
    "VerificationResult",
]
