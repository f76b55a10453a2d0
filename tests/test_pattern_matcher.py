"""
Tests for review pattern categorisation.
"""

from review_context.models import Severity
from review_context.verification.pattern_matcher import (
    DEFAULT_PATTERNS,
    CodePattern,
    CodePatternMatcher,
    extract_key_terms,
)


class TestExtractKeyTerms:
    """Test key term extraction."""

    def test_stop_words_and_short_words_removed(self):
        """Stop words and short words are not key terms."""
        assert extract_key_terms("The user is null and this will crash!") == ["user", "null", "crash"]

    def test_at_most_ten_terms(self):
        """No more than ten terms are returned."""
        text = " ".join(f"word{i}" for i in range(20))
        assert len(extract_key_terms(text)) == 10


class TestFindBestPattern:
    """Test category assignment."""

    def test_matching_category(self, make_comment):
        """A comment is matched to the pattern of its category."""
        comment = make_comment(rationale="null check", suggestion="null check")
        match = CodePatternMatcher().find_best_pattern(comment)
        assert match.pattern.pattern == "null check"
        assert match.confidence == 1.0

    def test_no_category(self, make_comment):
        """A comment in no known category matches nothing."""
        comment = make_comment(rationale="qqq", suggestion="zzz")
        assert CodePatternMatcher().find_best_pattern(comment) is None

    def test_custom_pattern(self, make_comment):
        """Custom patterns take part in matching."""
        matcher = CodePatternMatcher(patterns=[])
        assert matcher.find_best_pattern(make_comment(rationale="race condition")) is None

        matcher.add_pattern(CodePattern(
            pattern="race condition",
            description="Unsynchronised shared state",
            severity=Severity.CRITICAL,
        ))
        match = matcher.find_best_pattern(make_comment(rationale="race condition", suggestion="race condition"))
        assert match.pattern.severity == Severity.CRITICAL

    def test_defaults_are_not_shared(self):
        """Matchers do not share a mutable pattern list."""
        matcher = CodePatternMatcher()
        matcher.add_pattern(CodePattern(pattern="x", description="x", severity=Severity.NIT))
        assert len(DEFAULT_PATTERNS) == 8


class TestPatternSuggestions:
    """Test suggestion of code examples for a comment."""

    def test_mentioned_examples_are_excluded(self, make_comment):
        """Examples the comment already mentions are not suggested."""
        comment = make_comment(rationale="security", suggestion="Add input validation for the id")
        suggestions = CodePatternMatcher().get_pattern_suggestions(comment)
        top = suggestions[0]
        assert top.pattern.pattern == "security"
        assert top.confidence == 1.0
        assert "input validation" not in top.suggestions
        assert "authorization" in top.suggestions


class TestLocationValidation:
    """Test matching comments to file lines."""

    LINES = [
        "const a = 1;",
        "missing null check on user",
        "",
    ]

    def test_match_comment_to_code(self, make_comment):
        """The best code line for a comment is found."""
        comment = make_comment(rationale="missing null check on user", suggestion="Guard against a null user")
        matches = CodePatternMatcher().match_comment_to_code(comment, self.LINES)
        assert matches[0].line == 2
        assert matches[0].score == 1.0
        assert matches[0].reason == "Matches comment rationale"

    def test_valid_location(self, make_comment):
        """A comment pointing at relevant code is valid."""
        comment = make_comment(rationale="missing null check on user")
        check = CodePatternMatcher().validate_comment_location(comment, self.LINES, 2)
        assert check.is_valid
        assert check.suggestions == []

    def test_invalid_location_points_at_best_line(self, make_comment):
        """An invalid location suggests the best line instead."""
        comment = make_comment(rationale="missing null check on user")
        check = CodePatternMatcher().validate_comment_location(comment, self.LINES, 3)
        assert not check.is_valid
        assert check.confidence == 0.0
        assert check.suggestions[0].startswith('Consider line 2: "missing null check on user"')
