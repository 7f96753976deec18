"""Text normalization and tokenization for bilingual (English/Chinese) matching."""

import re
from collections.abc import Set

# Anything that is not a letter or digit. CJK ideographs count as letters for \w.
_NON_WORD = re.compile(r"[\W_]+")

_IDEOGRAPH = re.compile(r"[\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufaff\U00020000-\U0002ebef]")

MIN_TOKEN_LENGTH = 3
MIN_IDEOGRAPHIC_TOKEN_LENGTH = 1


def normalize(text: str) -> str:
    """Casefold, turn punctuation into spaces and collapse whitespace."""
    return " ".join(_NON_WORD.sub(" ", text.casefold()).split())


def has_ideograph(text: str) -> bool:
    """Return True if the text contains at least one CJK ideograph."""
    return _IDEOGRAPH.search(text) is not None


def _min_length(token: str) -> int:
    return MIN_IDEOGRAPHIC_TOKEN_LENGTH if has_ideograph(token) else MIN_TOKEN_LENGTH


def tokenize(text: str, stopwords: Set[str] = frozenset()) -> set[str]:
    """Split text into a deduplicated, stopword-filtered token set.

    When the normalized text has more than one word, the whole normalized
    phrase is added as an extra compound token so multi-word tags and
    synonyms can match exactly.
    """
    normalized = normalize(text)
    if not normalized:
        return set()

    raw_tokens = normalized.split(" ")
    tokens = {
        token
        for token in raw_tokens
        if token and token not in stopwords and len(token) >= _min_length(token)
    }
    if len(raw_tokens) > 1:
        tokens.add(normalized)
    return tokens
