"""Deduplication and top-N selection of scored entries."""

from collections.abc import Iterable

from clinic_kb.models.search import ScoredEntry

HARD_CAP = 3
DEFAULT_LIMIT = 3


def effective_limit(limit: int | None) -> int:
    """Clamp a requested limit into [1, HARD_CAP]."""
    if limit is None:
        limit = DEFAULT_LIMIT
    return max(1, min(limit, HARD_CAP))


def select_top(scored: Iterable[ScoredEntry], limit: int | None = None) -> list[ScoredEntry]:
    """Keep the best instance per entry id, sort by score and truncate.

    Ties keep the instance encountered first, and the sort is stable so equal
    scores stay in input order.
    """
    best: dict[str, ScoredEntry] = {}
    for item in scored:
        current = best.get(item.entry.id)
        if current is None or item.score > current.score:
            best[item.entry.id] = item

    ranked = sorted(best.values(), key=lambda item: item.score, reverse=True)
    return ranked[: effective_limit(limit)]
