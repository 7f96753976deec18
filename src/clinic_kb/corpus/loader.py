"""Per-locale corpus loading with a shared, failure-tolerant cache."""

import asyncio
import functools
import json
import logging
from pathlib import Path

import httpx
from pydantic import ValidationError

from clinic_kb.config import get_corpus_source, get_http_timeout, is_http_source
from clinic_kb.models.entry import KBEntry, Locale

logger = logging.getLogger(__name__)


class CorpusLoadError(RuntimeError):
    """A locale corpus could not be fetched or parsed."""


class CorpusLoader:
    """Loads `<locale>.json` corpora from a directory or http(s) base URL.

    Each locale is loaded at most once; concurrent callers share the in-flight
    load. Failed loads are not cached, so the next call tries again.
    """

    def __init__(self, source: str | None = None, http_client: httpx.AsyncClient | None = None):
        """Initialize with a corpus source (default KB_CORPUS_SOURCE) and optional HTTP client."""
        self.source = source if source is not None else get_corpus_source()
        self._http = http_client
        self._cache: dict[Locale, asyncio.Task[tuple[KBEntry, ...]]] = {}

    async def load_corpus(self, locale: Locale | str) -> tuple[KBEntry, ...]:
        """Return the entries for a locale, loading them on first use."""
        locale = Locale(locale)
        task = self._cache.get(locale)
        if task is None:
            task = asyncio.ensure_future(self._load(locale))
            task.add_done_callback(functools.partial(self._forget_failed, locale))
            self._cache[locale] = task
        # Shield so one caller's cancellation does not cancel the shared load
        return await asyncio.shield(task)

    def _forget_failed(self, locale: Locale, task: asyncio.Task[tuple[KBEntry, ...]]) -> None:
        if not task.cancelled() and task.exception() is None:
            return
        if self._cache.get(locale) is task:
            del self._cache[locale]

    async def reload_corpus(self, locale: Locale | str) -> tuple[KBEntry, ...]:
        """Drop any cached corpus for the locale and load it again."""
        locale = Locale(locale)
        self._cache.pop(locale, None)
        logger.info("Reloading %s corpus", locale.value)
        return await self.load_corpus(locale)

    def is_cached(self, locale: Locale | str) -> bool:
        """Return True if the locale has a completed, successful load."""
        task = self._cache.get(Locale(locale))
        if task is None or not task.done() or task.cancelled():
            return False
        return task.exception() is None

    async def _load(self, locale: Locale) -> tuple[KBEntry, ...]:
        raw = await self._read(locale)
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorpusLoadError(f"Corpus for locale {locale} is not valid JSON") from e
        if not isinstance(data, list):
            raise CorpusLoadError(f"Corpus for locale {locale} must be a JSON array")

        entries = tuple(parse_entries(data, locale))
        logger.info(
            "Loaded %d %s entries from %s (%d skipped)",
            len(entries),
            locale.value,
            self.source,
            len(data) - len(entries),
        )
        return entries

    async def _read(self, locale: Locale) -> str:
        if is_http_source(self.source):
            url = f"{self.source}/{locale.value}.json"
            try:
                client = self._get_client()
                resp = await client.get(url, timeout=get_http_timeout())
                resp.raise_for_status()
                return resp.text
            except httpx.HTTPError as e:
                logger.warning("Failed to fetch corpus from %s", url)
                raise CorpusLoadError(f"Failed to load KB for locale {locale}") from e

        path = Path(self.source) / f"{locale.value}.json"
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning("Failed to read corpus file %s", path)
            raise CorpusLoadError(f"Failed to load KB for locale {locale}") from e

    def _get_client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient()
        return self._http

    async def close(self) -> None:
        """Close the HTTP client if open."""
        if self._http is not None:
            await self._http.aclose()
            self._http = None


def parse_entries(records: list[object], locale: Locale) -> list[KBEntry]:
    """Validate raw records, skipping malformed ones and other-locale ones."""
    entries: list[KBEntry] = []
    for index, record in enumerate(records):
        try:
            entry = KBEntry.model_validate(record)
        except ValidationError as e:
            record_id = record.get("id") if isinstance(record, dict) else None
            logger.warning(
                "Skipping malformed %s entry #%d (id=%s): %d error(s)",
                locale.value,
                index,
                record_id,
                e.error_count(),
            )
            continue
        if entry.locale != locale:
            logger.debug("Skipping %s: locale %s in %s corpus", entry.id, entry.locale, locale)
            continue
        entries.append(entry)
    return entries
