"""Outbound search-engine redirection."""
from typing import Optional
from urllib.parse import quote

ENGINES = {
    "google": "https://www.google.com/search?q={query}",
    "bing": "https://www.bing.com/search?q={query}",
    "baidu": "https://www.baidu.com/s?wd={query}",
}
DEFAULT_ENGINE = "google"


def build_search_url(query: str, engine: str = DEFAULT_ENGINE, site: Optional[str] = None) -> str:
    """
    Build the engine URL for a query.

    When site is given the query is scoped with ``site:<host>``.
    Raises ValueError for an empty query or an unknown engine.
    """
    query = (query or "").strip()
    if not query:
        raise ValueError("empty query")
    template = ENGINES.get((engine or DEFAULT_ENGINE).lower())
    if template is None:
        raise ValueError(f"unknown engine: {engine}")
    if site:
        query = f"site:{site} {query}"
    return template.format(query=quote(query, safe=""))
