"""Context assembly and comment verification for AI-assisted code review."""

from review_context.analysis import CodeGraphBuilder
from review_context.config import ReviewContextSettings
from review_context.exceptions import ConfigurationError, ReviewContextError, SourceFileError
from review_context.utils import chunk_parsed_diff, parse_unified_diff
from review_context.verification import CommentVerifier, VerifyOptions, verify_comments

__all__ = [
    "CodeGraphBuilder",
    "CommentVerifier",
    "ConfigurationError",
    "ReviewContextError",
    "ReviewContextSettings",
    "SourceFileError",
    "VerifyOptions",
    "chunk_parsed_diff",
    "parse_unified_diff",
    "verify_comments",
]
