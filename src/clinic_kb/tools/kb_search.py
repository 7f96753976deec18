"""kb_search and kb_reload MCP tools — bilingual FAQ lookup."""

import logging
from typing import Annotated

from fastmcp import FastMCP
from fastmcp.server.context import Context
from pydantic import Field

from clinic_kb.config import get_default_locale
from clinic_kb.corpus.loader import CorpusLoadError
from clinic_kb.models.entry import Locale
from clinic_kb.search.engine import SearchEngine
from clinic_kb.search.ranking import DEFAULT_LIMIT, HARD_CAP
from clinic_kb.tools.formatters import format_search_result

logger = logging.getLogger(__name__)


async def run_search(
    engine: SearchEngine,
    query: str,
    locale: Locale | None = None,
    tags: list[str] | None = None,
    limit: int = DEFAULT_LIMIT,
) -> str:
    """Search and format the result, reporting corpus failures as text."""
    locale = locale or Locale(get_default_locale())
    try:
        result = await engine.search(locale, query, tags=tags, limit=limit)
    except CorpusLoadError as e:
        logger.warning("Search failed for query: %s", query, exc_info=True)
        return f"Error: {e}"
    return format_search_result(result)


async def run_reload(engine: SearchEngine, locale: Locale) -> str:
    """Reload one locale corpus and report the entry count."""
    try:
        entries = await engine.reload_corpus(locale)
    except CorpusLoadError as e:
        logger.warning("Reload failed for locale: %s", locale, exc_info=True)
        return f"Error: {e}"
    return f"Reloaded {len(entries)} {locale.value} entries."


def register_kb_search(mcp: FastMCP) -> None:
    """Register the kb_search tool with the MCP server."""

    @mcp.tool()
    async def kb_search(
        query: Annotated[str, Field(description="The visitor's question, in English or Chinese")],
        locale: Annotated[
            Locale | None,
            Field(description="Locale to search first (en or zh); defaults to KB_DEFAULT_LOCALE"),
        ] = None,
        tags: Annotated[
            list[str] | None, Field(description="Only consider entries with one of these tags")
        ] = None,
        limit: Annotated[
            int, Field(description=f"Maximum results to return (1-{HARD_CAP})", ge=1)
        ] = DEFAULT_LIMIT,
        ctx: Context | None = None,
    ) -> str:
        """Find the clinic FAQ entries that best answer a question.

        Searches the requested locale first. When nothing there is a confident
        match, the other locale is searched and its scores are discounted.
        Each hit lists the signals it matched on (tag, title, dental term).
        """
        if ctx is None:
            raise RuntimeError("Context not injected")
        engine = ctx.lifespan_context["engine"]
        return await run_search(engine, query, locale=locale, tags=tags, limit=limit)


def register_kb_reload(mcp: FastMCP) -> None:
    """Register the kb_reload tool with the MCP server."""

    @mcp.tool()
    async def kb_reload(
        locale: Annotated[Locale, Field(description="Locale corpus to reload (en or zh)")],
        ctx: Context | None = None,
    ) -> str:
        """Reload a locale's knowledge base after its source file has changed."""
        if ctx is None:
            raise RuntimeError("Context not injected")
        engine = ctx.lifespan_context["engine"]
        return await run_reload(engine, locale)
