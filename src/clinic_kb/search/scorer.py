"""Lexical scoring of corpus entries against an expanded query.

Scoring is gated and priority-ordered rather than additive:

1. An entry must be topically relevant first (the domain gate): a tag match,
   a title-word overlap, or a recognised dental term in the query. Entries
   that fail the gate score zero no matter what else matches.
2. Among gated entries the strongest signal wins: tag match (1.0), then
   title overlap (0.9), then body-token matches (capped by BODY_MATCH_CAP).
3. Results retrieved from the fallback locale are discounted by
   CROSS_LOCALE_PENALTY.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from clinic_kb.models.entry import KBEntry
from clinic_kb.models.search import ScoredEntry
from clinic_kb.search.lexicon import Lexicon
from clinic_kb.search.synonyms import ExpandedQuery
from clinic_kb.search.text import normalize, tokenize

logger = logging.getLogger(__name__)

TAG_MATCH_SCORE = 1.0
TITLE_OVERLAP_SCORE = 0.9
BODY_MATCH_WEIGHT = 0.1
# Body-only matches never produce a positive score while this stays at zero.
BODY_MATCH_CAP = 0.0

CROSS_LOCALE_PENALTY = 0.85
TIE_EPSILON = 1e-4

REASON_TAG_EXACT = "tag-exact"
REASON_TAG_PARTIAL = "tag-partial"
REASON_TITLE_OVERLAP = "title-overlap"
REASON_BODY_MATCH = "body-match"
REASON_DENTAL_TERM = "dental-term"
REASON_CROSS_LOCALE = "cross-locale-penalty"


@dataclass(frozen=True)
class CandidateTrace:
    """Diagnostic snapshot of one candidate evaluation."""

    entry_id: str
    title: str
    score: float
    reasons: tuple[str, ...]
    tokens: frozenset[str]
    tag_overlap: int
    title_overlap: int
    domain_gate: bool


CandidateHook = Callable[[CandidateTrace], None]


def log_candidate(trace: CandidateTrace) -> None:
    """Candidate hook that writes each evaluation to the debug log."""
    logger.debug(
        "candidate %s %r score=%.4f reasons=%s tag=%d title=%d gate=%s tokens=%s",
        trace.entry_id,
        trace.title,
        trace.score,
        ",".join(trace.reasons) or "-",
        trace.tag_overlap,
        trace.title_overlap,
        trace.domain_gate,
        sorted(trace.tokens),
    )


def _tag_match(entry_tags: Iterable[str], tokens: frozenset[str]) -> str | None:
    """Return the tag reason for the first matching tag, exact before partial."""
    tags = [t for t in (normalize(tag) for tag in entry_tags) if t]
    for tag in tags:
        if tag in tokens:
            return REASON_TAG_EXACT
    for tag in tags:
        for token in tokens:
            if tag in token or token in tag:
                return REASON_TAG_PARTIAL
    return None


class _BestScore:
    """Running best score with epsilon tie-breaking and reason merging."""

    def __init__(self) -> None:
        self.score = 0.0
        self.reasons: list[str] = []

    def offer(self, score: float, reason: str) -> None:
        if score <= 0:
            return
        if score > self.score + TIE_EPSILON:
            self.score = score
            self.reasons = [reason]
        elif abs(score - self.score) <= TIE_EPSILON and reason not in self.reasons:
            self.reasons.append(reason)


def score_entry(
    entry: KBEntry,
    query: ExpandedQuery,
    lexicon: Lexicon,
    *,
    penalty: float = 1.0,
    tag_filter: frozenset[str] | None = None,
    on_candidate: CandidateHook | None = None,
) -> ScoredEntry | None:
    """Score one entry. Returns None when the entry earns no positive score."""
    if tag_filter and not any(normalize(tag) in tag_filter for tag in entry.tags):
        return None

    tag_reason = _tag_match(entry.tags, query.tokens)
    tag_overlap = 1 if tag_reason else 0
    title_tokens = tokenize(entry.title, lexicon.stopwords)
    title_overlap = sum(1 for token in title_tokens if token in query.words)
    domain_gate = tag_overlap > 0 or title_overlap > 0 or query.has_domain_term

    best = _BestScore()
    if domain_gate:
        if tag_reason:
            best.offer(TAG_MATCH_SCORE, tag_reason)
        if title_overlap > 0:
            best.offer(TITLE_OVERLAP_SCORE, REASON_TITLE_OVERLAP)
        if BODY_MATCH_CAP > 0:
            body_tokens = tokenize(entry.content_text, lexicon.stopwords)
            body_matches = len(body_tokens & query.tokens)
            if body_matches:
                best.offer(
                    min(body_matches * BODY_MATCH_WEIGHT, BODY_MATCH_CAP), REASON_BODY_MATCH
                )

    score = best.score
    reasons = list(best.reasons)
    if score > 0 and query.has_domain_term:
        reasons.append(REASON_DENTAL_TERM)
    if score > 0 and penalty != 1.0:
        score *= penalty
        reasons.append(REASON_CROSS_LOCALE)

    if on_candidate is not None:
        on_candidate(
            CandidateTrace(
                entry_id=entry.id,
                title=entry.title,
                score=score,
                reasons=tuple(reasons),
                tokens=query.tokens,
                tag_overlap=tag_overlap,
                title_overlap=title_overlap,
                domain_gate=domain_gate,
            )
        )

    if score <= 0:
        return None
    return ScoredEntry(
        entry=entry,
        score=score,
        reasons=reasons,
        tag_overlap=tag_overlap,
        title_overlap=title_overlap,
        domain_gate=domain_gate,
    )


def score_corpus(
    entries: Iterable[KBEntry],
    query: ExpandedQuery,
    lexicon: Lexicon,
    *,
    penalty: float = 1.0,
    tag_filter: frozenset[str] | None = None,
    on_candidate: CandidateHook | None = None,
) -> list[ScoredEntry]:
    """Score every entry in a corpus, keeping only positive scores."""
    scored: list[ScoredEntry] = []
    for entry in entries:
        result = score_entry(
            entry,
            query,
            lexicon,
            penalty=penalty,
            tag_filter=tag_filter,
            on_candidate=on_candidate,
        )
        if result is not None:
            scored.append(result)
    return scored
