"""Verification and fuzzy matching of generated review comments."""

from review_context.verification.comment_parser import (
    coerce_comments,
    filter_to_changed_files,
    parse_review_comments,
)
from review_context.verification.fuzzy_matcher import FuzzyCodeMatcher, FuzzyMatchOptions
from review_context.verification.pattern_matcher import CodePattern, CodePatternMatcher
from review_context.verification.verifier import CommentVerifier, VerifyOptions, verify_comments

__all__ = [
    "CodePattern",
    "CodePatternMatcher",
    "CommentVerifier",
    "FuzzyCodeMatcher",
    "FuzzyMatchOptions",
    "VerifyOptions",
    "coerce_comments",
    "filter_to_changed_files",
    "parse_review_comments",
    "verify_comments",
]
