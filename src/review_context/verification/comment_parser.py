"""Schema-checked intake of generated review comments."""

import json
import logging
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from review_context.models.report_models import ReviewComment

logger = logging.getLogger(__name__)


def coerce_comments(items: Iterable[Any]) -> list[ReviewComment]:
    """Validate raw items, keeping only those that match the comment schema."""
    comments = []
    skipped = 0
    for item in items:
        if isinstance(item, ReviewComment):
            comments.append(item)
            continue
        try:
            comments.append(ReviewComment.model_validate(item))
        except ValidationError:
            skipped += 1
    if skipped:
        logger.debug("Skipped %d malformed review comments", skipped)
    return comments


def parse_review_comments(content: str) -> list[ReviewComment]:
    """Parse model output into review comments.

    Accepts a JSON array of comments or an object with a ``comments``
    array. Anything else, including invalid JSON, yields an empty list.
    """
    try:
        parsed = json.loads(content)
    except (json.JSONDecodeError, TypeError):
        return []

    items = parsed if isinstance(parsed, list) else None
    if isinstance(parsed, dict):
        items = parsed.get("comments")
    if not isinstance(items, list):
        return []
    return coerce_comments(items)


def filter_to_changed_files(
    comments: list[ReviewComment],
    changed_files: Iterable[str],
) -> list[ReviewComment]:
    """Keep only comments that target a file touched by the diff."""
    changed = set(changed_files)
    return [c for c in comments if c.file in changed]
