"""Compaction of recorded actions in assistant messages."""

import re

from .constants import ACTION_TAG

FILE_ACTION_PATTERN = re.compile(
    rf"(<{ACTION_TAG}[^>]*type=\"file\"[^>]*>)([\s\S]*?)(</{ACTION_TAG}>)"
)


def simplify_actions(content: str) -> str:
    """Drop file bodies from file actions, keeping the tags that name the files."""
    return FILE_ACTION_PATTERN.sub(
        lambda match: f"{match.group(1)}\n          ...\n        {match.group(3)}", content
    )
