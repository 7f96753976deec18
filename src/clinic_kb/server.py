"""FastMCP server with lifespan management and tool registration."""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP

from clinic_kb.config import (
    get_corpus_source,
    get_lexicon_path,
    get_log_level,
    is_debug_scoring,
    is_warm_cache,
)
from clinic_kb.corpus.loader import CorpusLoader, CorpusLoadError
from clinic_kb.models.entry import Locale
from clinic_kb.search.engine import SearchEngine
from clinic_kb.search.lexicon import load_lexicon
from clinic_kb.search.scorer import log_candidate
from clinic_kb.tools.kb_search import register_kb_reload, register_kb_search


def create_engine(loader: CorpusLoader) -> SearchEngine:
    """Build a search engine from configuration."""
    lexicon = load_lexicon(get_lexicon_path())
    on_candidate = log_candidate if is_debug_scoring() else None
    return SearchEngine(loader, lexicon=lexicon, on_candidate=on_candidate)


async def warm_cache(engine: SearchEngine) -> None:
    """Load every locale corpus up front. Failures are logged and retried on first search."""
    logger = logging.getLogger(__name__)
    for locale in Locale:
        try:
            await engine.load_corpus(locale)
        except CorpusLoadError:
            logger.warning("Could not preload %s corpus — will retry on demand", locale.value)


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
    """Manage corpus loader and search engine lifecycle."""
    # Configure logging to stderr (stdout is MCP stdio transport)
    logging.basicConfig(
        level=getattr(logging, get_log_level()),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    logger = logging.getLogger(__name__)

    source = get_corpus_source()
    logger.info("Serving knowledge base from %s", source)
    loader = CorpusLoader(source)
    engine = create_engine(loader)

    if is_debug_scoring():
        logger.info("Scoring diagnostics enabled")
    if is_warm_cache():
        await warm_cache(engine)

    try:
        yield {"loader": loader, "engine": engine}
    finally:
        await loader.close()
        logger.info("Corpus loader closed")


_INSTRUCTIONS = """\
This server answers visitor questions from the clinic's bilingual FAQ \
knowledge base (English and Chinese).

- kb_search: Find the entries that best answer a question. Pass the visitor's \
locale; if nothing in that language is a confident match the other language \
is searched and its scores are discounted. Reply with "no information \
available" when there are no results.
- kb_reload: Reload a locale's entries after the knowledge base files change.
"""


def create_server() -> FastMCP:
    """Create and configure the MCP server with all tools."""
    mcp = FastMCP(
        "clinic-kb",
        instructions=_INSTRUCTIONS,
        lifespan=lifespan,
    )

    register_kb_search(mcp)
    register_kb_reload(mcp)

    return mcp
