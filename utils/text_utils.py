"""
Text utilities for operator-entered product text.

Used by the draft normalizer and the CSV importer.
"""

import re
from typing import Optional

_WHITESPACE = re.compile(r"\s+")


def split_delimited(text: Optional[str], delimiter: str) -> list[str]:
    """
    Split delimited text into clean entries.

    - "a, b,,c " with "," → ["a", "b", "c"]
    - "x\\n\\n  y" with "\\n" → ["x", "y"]

    Each entry is trimmed, empty entries are dropped, order is preserved.

    Args:
        text: Raw text (may be None or empty)
        delimiter: Separator to split on

    Returns:
        List of entries (empty list for empty input)
    """
    if not text:
        return []

    return [part.strip() for part in text.split(delimiter) if part.strip()]


def normalize_column_name(name: str) -> str:
    """
    Normalize a CSV header cell for lookup.

    "Min Order Qty" → "minorderqty", " ImageURLs " → "imageurls"
    """
    return _WHITESPACE.sub("", name).casefold()


def display_title(title: Optional[str], fallback: str = "Untitled product") -> str:
    """Title for log headlines."""
    return title.strip() if title and title.strip() else fallback
