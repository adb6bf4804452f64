"""Topic validation: primary source first, stricter secondary as fallback."""

import logging
from typing import List, Optional

from contracts.scoring import MEDIUM_CONFIDENCE_THRESHOLD, NOT_VALIDATED

from .base import SearchResult, SearchUnavailable
from .wikidata import WikidataSearchProvider
from .wikipedia import WikipediaSearchProvider

logger = logging.getLogger(__name__)


class TopicValidator:
    """Grounds topic names against real knowledge bases.

    `validate_topic` never raises. When no source can be reached the name is
    reported as not validated (-1.0) rather than as unknown (0.0).
    """

    def __init__(self, primary=None, secondary=None, result_limit: int = 5):
        self.primary = primary if primary is not None else WikidataSearchProvider()
        self.secondary = secondary if secondary is not None else WikipediaSearchProvider()
        self.result_limit = result_limit

    def validate_topic(self, name: str) -> float:
        primary_score: Optional[float] = None
        try:
            primary_score = self.primary.validate_topic(name)
        except SearchUnavailable as e:
            logger.warning("%s", e)

        if primary_score is not None and primary_score >= MEDIUM_CONFIDENCE_THRESHOLD:
            return primary_score
        if self.secondary is None:
            return primary_score if primary_score is not None else NOT_VALIDATED

        try:
            secondary_score = self.secondary.validate_topic(name)
        except SearchUnavailable as e:
            logger.warning("%s", e)
            return primary_score if primary_score is not None else NOT_VALIDATED
        return max(secondary_score, primary_score or 0.0)

    def search(self, query: str) -> List[SearchResult]:
        """Search the primary source, falling back to the secondary. Empty on failure."""
        for provider in (self.primary, self.secondary):
            if provider is None:
                continue
            try:
                results = provider.search(query, limit=self.result_limit)
            except SearchUnavailable as e:
                logger.warning("%s", e)
                continue
            if results:
                return results
        return []


class NullValidator:
    """Used with --no-search: nothing is validated, nothing is searched."""

    def validate_topic(self, name: str) -> float:
        return NOT_VALIDATED

    def search(self, query: str) -> List[SearchResult]:
        return []
