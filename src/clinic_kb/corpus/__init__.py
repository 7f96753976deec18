"""Locale corpus loading and caching."""

from clinic_kb.corpus.loader import CorpusLoader, CorpusLoadError

__all__ = ["CorpusLoadError", "CorpusLoader"]
