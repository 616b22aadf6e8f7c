"""
Link extraction for email snippets.
"""

import re
from typing import List, Optional

URL_PATTERN = re.compile(r"https?://\S+")


def extract_links(text: Optional[str]) -> List[str]:
    """
    Extract http(s) URLs from free text.

    Each match runs from the scheme to the next whitespace character.
    Links are returned in order of appearance and duplicates are kept,
    so every occurrence is checked and reported.

    Args:
        text: Text to scan, may be empty or None

    Returns:
        List of candidate URLs
    """
    if not text:
        return []
    return URL_PATTERN.findall(text)
