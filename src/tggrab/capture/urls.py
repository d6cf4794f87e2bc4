"""URL extraction from captured message text."""

import re

URL_PATTERN = re.compile(r"\bhttps?://\S+", re.IGNORECASE)

# Sentence and markup punctuation that sticks to the end of a link
TRAILING_PUNCTUATION = "),."


def extract_urls(text: str) -> list[str]:
    """
    Find http(s) URLs in text.

    A URL runs from the scheme to the next whitespace; any trailing
    ``)``, ``,`` and ``.`` characters are then stripped.

    Args:
        text: Message text to scan

    Returns:
        URLs in order of appearance (empty list if none)

    Example:
        >>> extract_urls("see https://example.com/path?q=1.")
        ['https://example.com/path?q=1']
    """
    if not text:
        return []
    return [match.rstrip(TRAILING_PUNCTUATION) for match in URL_PATTERN.findall(text)]
