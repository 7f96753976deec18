"""Compact output formatters for MCP tool responses."""

from clinic_kb.models.search import SearchHit, SearchResult


def format_hit_header(hit: SearchHit) -> str:
    """Format: [kb-implant-cost] en | Dental implant pricing (90%)."""
    entry = hit.entry
    return f"[{entry.id}] {entry.locale.value} | {entry.title} ({hit.score:.0%})"


def format_hit_meta(hit: SearchHit) -> str:
    """Format: #tag1 #tag2 | matched: tag-exact, dental-term."""
    parts: list[str] = []
    if hit.entry.tags:
        parts.append(" ".join(f"#{t}" for t in hit.entry.tags))
    if hit.reasons:
        parts.append("matched: " + ", ".join(hit.reasons))
    return " | ".join(parts)


def format_hit(hit: SearchHit) -> str:
    """Header + excerpt + meta. The body is left for the reply adapter."""
    lines = [format_hit_header(hit)]
    if hit.entry.excerpt:
        lines.append(f"  {hit.entry.excerpt}")
    meta = format_hit_meta(hit)
    if meta:
        lines.append(f"  {meta}")
    return "\n".join(lines)


def format_search_result(result: SearchResult) -> str:
    """Count + locales searched + hits joined by blank lines."""
    tried = " -> ".join(locale.value for locale in result.locales_tried)
    if not result.hits:
        return f"No results found. (searched: {tried})"

    lines = [
        f"{len(result.hits)} result(s), best {result.max_score:.0%}",
        f"Searched: {tried}",
        "",
        "\n\n".join(format_hit(hit) for hit in result.hits),
    ]
    return "\n".join(lines)
