"""Diagnostic record of why each hit of the most recent search matched."""

from collections.abc import Iterable

from clinic_kb.models.search import SearchHit


class ReasonLedger:
    """Maps entry id to reason labels for the last search.

    Last-call-wins and shared by every caller of one engine; it is for
    debugging only. Each SearchHit carries its own reasons for callers that
    need them reliably.
    """

    def __init__(self) -> None:
        self._reasons: dict[str, tuple[str, ...]] = {}

    def record(self, hits: Iterable[SearchHit]) -> None:
        """Replace the ledger with the reasons of the given hits."""
        self._reasons = {hit.entry.id: tuple(hit.reasons) for hit in hits}

    def clear(self) -> None:
        self._reasons = {}

    def reasons_for(self, entry_id: str) -> tuple[str, ...] | None:
        """Reasons recorded for an entry id, or None if it was not a hit."""
        return self._reasons.get(entry_id)

    def snapshot(self) -> dict[str, tuple[str, ...]]:
        return dict(self._reasons)

    def __len__(self) -> int:
        return len(self._reasons)
