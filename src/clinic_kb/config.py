"""Environment-variable-based configuration."""

import os
from pathlib import Path


def get_corpus_source() -> str:
    """Return the corpus location from KB_CORPUS_SOURCE (directory or http(s) base URL)."""
    raw = os.environ.get("KB_CORPUS_SOURCE", "~/.local/share/clinic_kb/kb")
    if is_http_source(raw):
        return raw.rstrip("/")
    return str(Path(raw).expanduser())


def is_http_source(source: str) -> bool:
    """Return True if the corpus source is an http(s) URL."""
    return source.startswith(("http://", "https://"))


def get_default_locale() -> str:
    """Return the locale used when a caller does not name one, from KB_DEFAULT_LOCALE."""
    return os.environ.get("KB_DEFAULT_LOCALE", "en")


def get_http_timeout() -> float:
    """Return the corpus fetch timeout in seconds from KB_HTTP_TIMEOUT."""
    return float(os.environ.get("KB_HTTP_TIMEOUT", "10.0"))


def get_lexicon_path() -> Path | None:
    """Return the optional lexicon override file from KB_LEXICON_PATH."""
    raw = os.environ.get("KB_LEXICON_PATH")
    if not raw:
        return None
    return Path(raw).expanduser()


def is_debug_scoring() -> bool:
    """Return True if KB_DEBUG_SCORING is set to TRUE."""
    return os.environ.get("KB_DEBUG_SCORING", "").upper() == "TRUE"


def is_warm_cache() -> bool:
    """Return True unless KB_WARM_CACHE is set to FALSE."""
    return os.environ.get("KB_WARM_CACHE", "TRUE").upper() != "FALSE"


def get_log_level() -> str:
    """Return the logging level from KB_LOG_LEVEL."""
    return os.environ.get("KB_LOG_LEVEL", "WARNING")
