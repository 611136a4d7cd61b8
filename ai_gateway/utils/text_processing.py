"""Text processing utilities."""

import re


def normalize_text(text: str) -> str:
    """
    Normalize a query before classification.

    Args:
        text: Raw query text

    Returns:
        Trimmed, case-folded text with collapsed whitespace
    """
    # Remove extra whitespace
    text = re.sub(r"\s+", " ", text or "")
    return text.strip().casefold()
