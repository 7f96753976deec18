"""Bilingual lexical search and ranking."""

from clinic_kb.search.engine import MIN_SCORE, SearchEngine

__all__ = ["MIN_SCORE", "SearchEngine"]
