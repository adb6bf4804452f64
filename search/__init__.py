"""Search grounding: checking suggested topics against real knowledge bases."""

from .base import SearchProvider, SearchResult, SearchUnavailable
from .matching import best_match, match_score
from .wikidata import WikidataSearchProvider
from .wikipedia import WikipediaSearchProvider
from .validator import NullValidator, TopicValidator

__all__ = [
    "SearchProvider",
    "SearchResult",
    "SearchUnavailable",
    "best_match",
    "match_score",
    "WikidataSearchProvider",
    "WikipediaSearchProvider",
    "NullValidator",
    "TopicValidator",
]
