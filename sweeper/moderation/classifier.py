"""Lexical spam classifier.

A comment is spam when either:
- its text is not already in NFKD form (look-alike / stylized characters), or
- it contains a blacklisted phrase and no whitelisted phrase.

Matching is case-insensitive substring containment, so partial-word hits
("slot" inside "slots") are expected.
"""

import unicodedata
from collections.abc import Iterable


NORMALIZATION_FORM = "NFKD"


def has_compatibility_characters(text: str) -> bool:
    """Check whether the text changes under compatibility decomposition."""
    return unicodedata.normalize(NORMALIZATION_FORM, text) != text


def contains_any(text: str, phrases: Iterable[str]) -> bool:
    """Case-insensitive substring test against any of the phrases."""
    lowered = text.lower()
    return any(phrase.lower() in lowered for phrase in phrases)


def classify(text: str, blacklist: Iterable[str], whitelist: Iterable[str]) -> bool:
    """Return True when the comment text should be treated as spam.

    The normalization check short-circuits keyword matching and cannot be
    overridden by the whitelist.
    """
    if has_compatibility_characters(text):
        return True

    return contains_any(text, blacklist) and not contains_any(text, whitelist)
