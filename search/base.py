"""Search provider interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from pydantic import BaseModel, Field


class SearchResult(BaseModel):
    """One hit from a knowledge-base search."""
    title: str
    snippet: str = ""
    url: Optional[str] = None
    aliases: List[str] = Field(default_factory=list)

    @property
    def labels(self) -> List[str]:
        return [self.title, *self.aliases]


class SearchUnavailable(Exception):
    """The search service could not be reached or returned garbage."""


class SearchProvider(ABC):
    """A knowledge base that can be searched by topic name."""

    name: str = "search"

    @abstractmethod
    def search(self, query: str, limit: int = 5) -> List[SearchResult]:
        """Return hits for `query`.

        Raises:
            SearchUnavailable: If the service could not be queried
        """
        pass

    @abstractmethod
    def validate_topic(self, name: str) -> float:
        """Confidence in [0, 1] that `name` is a real, known subject.

        Raises:
            SearchUnavailable: If the service could not be queried
        """
        pass
