"""Search-related models."""

from pydantic import BaseModel, Field

from clinic_kb.models.entry import KBEntry, Locale


class SearchQuery(BaseModel):
    """Parameters for a knowledge base search."""

    query: str
    locale: Locale
    tags: list[str] | None = None
    limit: int | None = None


class ScoredEntry(BaseModel):
    """An entry scored against one query, with the signals behind the score."""

    entry: KBEntry
    score: float = Field(ge=0.0, le=1.0)
    reasons: list[str] = Field(default_factory=list)
    tag_overlap: int = 0
    title_overlap: int = 0
    domain_gate: bool = False


class SearchHit(BaseModel):
    """A single returned hit with its score and the reasons that produced it."""

    entry: KBEntry
    score: float
    reasons: list[str] = Field(default_factory=list)


class SearchResult(BaseModel):
    """Ranked hits plus the locales that were searched to find them."""

    hits: list[SearchHit] = Field(default_factory=list)
    max_score: float = 0.0
    locales_tried: list[Locale] = Field(default_factory=list)

    @property
    def entries(self) -> list[KBEntry]:
        """The hit entries in rank order."""
        return [hit.entry for hit in self.hits]
