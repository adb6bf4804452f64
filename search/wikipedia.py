"""Wikipedia title search: the stricter fallback validation source."""

import logging
import re
from typing import List, Optional

from config import settings

from .base import SearchProvider, SearchResult, SearchUnavailable
from .matching import SUBSTRING_MATCH, best_match

logger = logging.getLogger(__name__)

_TAG = re.compile(r"<[^>]+>")


class WikipediaSearchProvider(SearchProvider):
    """Full-text search over Wikipedia. Only exact or substring title matches count.

    Full-text search returns loosely related pages for almost any query, so
    word-overlap and partial matches are not trusted here.
    """

    name = "wikipedia"

    def __init__(self, api_url: Optional[str] = None, timeout: Optional[float] = None):
        self.api_url = api_url or settings.wikipedia_api_url
        self.timeout = timeout or settings.search_timeout_seconds

    def search(self, query: str, limit: int = 5) -> List[SearchResult]:
        import requests

        params = {
            "action": "query",
            "list": "search",
            "srsearch": query,
            "srlimit": limit,
            "format": "json",
        }
        try:
            r = requests.get(
                self.api_url,
                params=params,
                headers={"User-Agent": settings.search_user_agent},
                timeout=self.timeout,
            )
            r.raise_for_status()
            data = r.json()
        except (requests.RequestException, ValueError) as e:
            raise SearchUnavailable(f"Wikipedia search failed for '{query}': {e}") from e

        hits = (data.get("query") or {}).get("search", []) or []
        return [
            SearchResult(
                title=hit.get("title", ""),
                snippet=_TAG.sub("", hit.get("snippet", "") or ""),
                url="https://en.wikipedia.org/wiki/" + hit.get("title", "").replace(" ", "_"),
            )
            for hit in hits
            if isinstance(hit, dict) and hit.get("title")
        ]

    def validate_topic(self, name: str) -> float:
        results = self.search(name, limit=settings.search_result_limit)
        score = max((best_match(name, r.labels) for r in results), default=0.0)
        if score < SUBSTRING_MATCH:
            score = 0.0
        logger.debug("Wikipedia confidence for '%s': %.2f", name, score)
        return score
