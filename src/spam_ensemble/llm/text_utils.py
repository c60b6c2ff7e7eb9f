"""
Text processing utilities for the LLM layer.

Prepares subject and body text for the text classifier prompt.
"""

import re

_SENTENCE_END_RE = re.compile(r'[.!?](?:\s|$)')
_BLANK_LINES_RE = re.compile(r'\n\s*\n+')


def truncate_at_sentence_boundary(text: str, max_chars: int) -> str:
    """
    Truncate text at the last sentence boundary before max_chars.

    Falls back to the last word boundary when it keeps at least 80% of the
    limit, and to a hard cut otherwise.

    Examples:
        >>> truncate_at_sentence_boundary("Hello. World. Test.", 15)
        'Hello. World.'
        >>> truncate_at_sentence_boundary("No period here", 10)
        'No period'
    """
    if len(text) <= max_chars:
        return text

    segment = text[:max_chars]
    matches = list(_SENTENCE_END_RE.finditer(segment))
    if matches:
        cutoff = matches[-1].end()
        if segment[cutoff - 1:cutoff].isspace():
            cutoff -= 1
        return text[:cutoff]

    last_space = segment.rfind(' ')
    if last_space > max_chars * 0.8:
        return text[:last_space]

    return text[:max_chars]


def normalize_whitespace(text: str) -> str:
    """Collapse runs of blank lines and strip surrounding whitespace."""
    return _BLANK_LINES_RE.sub("\n\n", text).strip()
