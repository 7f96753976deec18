"""Bilingual search with primary-locale quality bar and cross-locale fallback."""

import logging

from clinic_kb.corpus.loader import CorpusLoader
from clinic_kb.models.entry import KBEntry, Locale
from clinic_kb.models.search import ScoredEntry, SearchHit, SearchQuery, SearchResult
from clinic_kb.search.ledger import ReasonLedger
from clinic_kb.search.lexicon import DEFAULT_LEXICON, Lexicon
from clinic_kb.search.ranking import select_top
from clinic_kb.search.scorer import CROSS_LOCALE_PENALTY, CandidateHook, score_corpus
from clinic_kb.search.synonyms import ExpandedQuery, expand_tokens
from clinic_kb.search.text import normalize, tokenize

logger = logging.getLogger(__name__)

# Minimum top score for primary-locale results to be returned without fallback.
MIN_SCORE = 0.7


class SearchEngine:
    """Answers free-text questions from the two locale corpora.

    The requested locale is searched first and its results are only accepted
    when the best one reaches MIN_SCORE. Otherwise the other locale is
    searched with every score discounted by CROSS_LOCALE_PENALTY, and any
    positive hit there is accepted.
    """

    def __init__(
        self,
        loader: CorpusLoader,
        lexicon: Lexicon = DEFAULT_LEXICON,
        on_candidate: CandidateHook | None = None,
    ):
        """Initialize with a corpus loader, lexicon and optional diagnostic hook."""
        self.loader = loader
        self.lexicon = lexicon
        self.on_candidate = on_candidate
        self.ledger = ReasonLedger()

    async def load_corpus(self, locale: Locale | str) -> tuple[KBEntry, ...]:
        """Load (or return the cached) corpus for a locale."""
        return await self.loader.load_corpus(locale)

    async def reload_corpus(self, locale: Locale | str) -> tuple[KBEntry, ...]:
        """Discard the cached corpus for a locale and load it again."""
        return await self.loader.reload_corpus(locale)

    async def search(
        self,
        locale: Locale | str,
        query_text: str,
        tags: list[str] | None = None,
        limit: int | None = None,
    ) -> SearchResult:
        """Search the knowledge base. Corpus load failures propagate."""
        query = SearchQuery(query=query_text, locale=locale, tags=tags, limit=limit)
        return await self.run(query)

    async def run(self, query: SearchQuery) -> SearchResult:
        """Execute a prepared SearchQuery."""
        primary = query.locale
        if not normalize(query.query):
            self.ledger.clear()
            return SearchResult(locales_tried=[primary])

        expanded = expand_tokens(tokenize(query.query, self.lexicon.stopwords), self.lexicon)
        tag_filter = _normalize_filter(query.tags)

        primary_hits = select_top(
            await self._score_locale(primary, expanded, tag_filter, penalty=1.0),
            query.limit,
        )
        if primary_hits and primary_hits[0].score >= MIN_SCORE:
            # Never hand back a primary hit below the quality bar
            accepted = [item for item in primary_hits if item.score >= MIN_SCORE]
            return self._finish(accepted, [primary])

        fallback = primary.other
        logger.debug(
            "No %s result reached %.2f for %r; trying %s",
            primary.value,
            MIN_SCORE,
            query.query,
            fallback.value,
        )
        fallback_hits = select_top(
            await self._score_locale(fallback, expanded, tag_filter, penalty=CROSS_LOCALE_PENALTY),
            query.limit,
        )
        return self._finish(fallback_hits, [primary, fallback])

    async def _score_locale(
        self,
        locale: Locale,
        expanded: ExpandedQuery,
        tag_filter: frozenset[str] | None,
        penalty: float,
    ) -> list[ScoredEntry]:
        entries = await self.loader.load_corpus(locale)
        return score_corpus(
            entries,
            expanded,
            self.lexicon,
            penalty=penalty,
            tag_filter=tag_filter,
            on_candidate=self.on_candidate,
        )

    def _finish(self, ranked: list[ScoredEntry], locales_tried: list[Locale]) -> SearchResult:
        hits = [
            SearchHit(entry=item.entry, score=item.score, reasons=list(item.reasons))
            for item in ranked
        ]
        if hits:
            self.ledger.record(hits)
        else:
            self.ledger.clear()
        return SearchResult(
            hits=hits,
            max_score=hits[0].score if hits else 0.0,
            locales_tried=locales_tried,
        )


def _normalize_filter(tags: list[str] | None) -> frozenset[str] | None:
    if not tags:
        return None
    normalized = frozenset(t for t in (normalize(tag) for tag in tags) if t)
    return normalized or None
