"""URL discovery in free-form quote text."""

import re

# Scheme, then everything up to whitespace or a delimiter that cannot appear unescaped in a URL.
LINK_PATTERN = re.compile(r"https?://[^\s<>\"{}|\\^`\[\]]+")


def extract_links(text: str | None) -> list[str]:
    """
    Return every http(s) URL in ``text`` in order of appearance.

    Duplicates are kept. No reachability or structure checks beyond the pattern.
    """
    if not text:
        return []
    return LINK_PATTERN.findall(text)
