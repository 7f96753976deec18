"""Synonym expansion of query tokens via fixed concept groups."""

from collections.abc import Set
from dataclasses import dataclass

from clinic_kb.search.lexicon import Lexicon
from clinic_kb.search.text import has_ideograph


@dataclass(frozen=True)
class ExpandedQuery:
    """Query tokens after synonym expansion.

    ``words`` holds every token split on spaces and is only used for title
    overlap, so a two-word concept still matches single-word title tokens.
    """

    tokens: frozenset[str]
    words: frozenset[str]
    has_domain_term: bool


def _member_present(member: str, tokens: Set[str]) -> bool:
    if member in tokens:
        return True
    # Chinese questions are not space-delimited, so look inside each token.
    return has_ideograph(member) and any(member in token for token in tokens)


def expand_tokens(tokens: Set[str], lexicon: Lexicon) -> ExpandedQuery:
    """Add every member of each synonym group that the tokens touch.

    Single pass: members pulled in by one group never trigger another group.
    """
    expanded = set(tokens)
    for group in lexicon.synonym_groups:
        if any(_member_present(member, tokens) for member in group):
            expanded |= group

    words: set[str] = set()
    for token in expanded:
        words.update(token.split(" "))

    domain_terms = lexicon.domain_terms
    return ExpandedQuery(
        tokens=frozenset(expanded),
        words=frozenset(words),
        has_domain_term=any(token in domain_terms for token in expanded),
    )
