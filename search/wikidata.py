"""Wikidata entity search: the primary validation source."""

import logging
from typing import List, Optional

from config import settings

from .base import SearchProvider, SearchResult, SearchUnavailable
from .matching import best_match

logger = logging.getLogger(__name__)


class WikidataSearchProvider(SearchProvider):
    """Searches Wikidata entity labels and aliases via `wbsearchentities`."""

    name = "wikidata"

    def __init__(
        self,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        language: str = "en",
    ):
        self.api_url = api_url or settings.wikidata_api_url
        self.timeout = timeout or settings.search_timeout_seconds
        self.language = language

    def search(self, query: str, limit: int = 5) -> List[SearchResult]:
        import requests

        params = {
            "action": "wbsearchentities",
            "search": query,
            "language": self.language,
            "uselang": self.language,
            "type": "item",
            "format": "json",
            "limit": limit,
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
            raise SearchUnavailable(f"Wikidata search failed for '{query}': {e}") from e

        results = []
        for item in data.get("search", []) or []:
            if not isinstance(item, dict):
                continue
            aliases = [a for a in item.get("aliases", []) or [] if isinstance(a, str)]
            match = item.get("match") or {}
            if match.get("type") == "alias" and match.get("text"):
                aliases.append(match["text"])
            results.append(SearchResult(
                title=item.get("label") or item.get("id", ""),
                snippet=item.get("description", "") or "",
                url=item.get("concepturi"),
                aliases=aliases,
            ))
        return results

    def validate_topic(self, name: str) -> float:
        results = self.search(name, limit=settings.search_result_limit)
        score = max((best_match(name, r.labels) for r in results), default=0.0)
        logger.debug("Wikidata confidence for '%s': %.2f", name, score)
        return score
