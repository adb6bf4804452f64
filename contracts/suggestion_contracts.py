"""Candidate contracts: topic and relationship suggestions before curation.

Suggestions are immutable. Anything that changes a score (for example search
validation) produces a new suggestion with the same identity fields.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from .scoring import (
    DEFAULT_CONFIDENCE,
    HIGH_CONFIDENCE_THRESHOLD,
    LOW_CONFIDENCE_THRESHOLD,
    MEDIUM_CONFIDENCE_THRESHOLD,
    NOT_VALIDATED,
    is_auto_reject_candidate,
    is_validated,
    meets_autonomous_threshold,
    quality_score,
)
from .topic_contracts import ComplexityLevel, ContentType, RelationshipType, normalize_name


def _in_unit_range(value: Any) -> bool:
    return isinstance(value, (int, float)) and 0.0 <= value <= 1.0


class TopicSuggestion(BaseModel):
    """A topic proposed by the suggestion source, not yet curated."""

    model_config = {"frozen": True}

    name: str = Field(..., description="Proposed topic name")
    description: str = ""
    category: str = ""
    content_type: ContentType = ContentType.CONCEPT
    complexity: ComplexityLevel = ComplexityLevel.INTERMEDIATE
    word_count: int = 0
    relevance: float = Field(DEFAULT_CONFIDENCE, description="Semantic fit to the domain, 0-1")
    search_confidence: float = Field(NOT_VALIDATED, description="Search grounding 0-1, or -1 if not validated")
    rationale: str = ""
    source_context: str = ""

    @model_validator(mode="before")
    @classmethod
    def normalize_fields(cls, data: Any) -> Any:
        """Replace missing or out-of-range values with defaults."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for key in ("description", "category", "rationale", "source_context"):
            if data.get(key) is None:
                data[key] = ""
        if data.get("content_type") is None:
            data["content_type"] = ContentType.CONCEPT
        if data.get("complexity") is None:
            data["complexity"] = ComplexityLevel.INTERMEDIATE
        if not _in_unit_range(data.get("relevance", DEFAULT_CONFIDENCE)):
            data["relevance"] = DEFAULT_CONFIDENCE
        if not _in_unit_range(data.get("search_confidence", NOT_VALIDATED)):
            data["search_confidence"] = NOT_VALIDATED
        word_count = data.get("word_count")
        if not isinstance(word_count, int) or word_count <= 0:
            data["word_count"] = ComplexityLevel(data["complexity"]).default_words
        return data

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be blank")
        return v

    def with_search_confidence(self, confidence: float) -> "TopicSuggestion":
        """Copy of this suggestion carrying a search confidence."""
        data = self.model_dump()
        data["search_confidence"] = confidence
        return TopicSuggestion.model_validate(data)

    @property
    def normalized_name(self) -> str:
        return normalize_name(self.name)

    @property
    def has_search_confidence(self) -> bool:
        return is_validated(self.search_confidence)

    @property
    def quality_score(self) -> float:
        return quality_score(self.relevance, self.search_confidence)

    def meets_autonomous_threshold(self, threshold: float) -> bool:
        return meets_autonomous_threshold(self.relevance, self.search_confidence, threshold)

    def is_auto_reject_candidate(self) -> bool:
        return is_auto_reject_candidate(self.relevance, self.search_confidence)

    @property
    def confidence_indicator(self) -> str:
        if not self.has_search_confidence:
            return "not validated"
        if self.search_confidence >= HIGH_CONFIDENCE_THRESHOLD:
            return "high confidence"
        if self.search_confidence >= MEDIUM_CONFIDENCE_THRESHOLD:
            return "medium confidence"
        if self.search_confidence >= LOW_CONFIDENCE_THRESHOLD:
            return "low confidence"
        return "not found in search"

    @property
    def relevance_bar(self) -> str:
        bars = int(self.relevance * 10)
        return "█" * bars + "░" * (10 - bars)

    @property
    def summary(self) -> str:
        return (
            f"{self.name} ({self.content_type.display_name}, "
            f"{self.complexity.display_name}, ~{self.word_count} words)"
        )


class RelationshipSuggestion(BaseModel):
    """A relationship between two topic names, proposed but not curated."""

    model_config = {"frozen": True}

    source_name: str
    target_name: str
    type: RelationshipType
    confidence: float = DEFAULT_CONFIDENCE
    rationale: str = ""

    @model_validator(mode="before")
    @classmethod
    def normalize_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if not _in_unit_range(data.get("confidence", DEFAULT_CONFIDENCE)):
            data["confidence"] = DEFAULT_CONFIDENCE
        if data.get("rationale") is None:
            data["rationale"] = ""
        return data

    @model_validator(mode="after")
    def not_self_referential(self) -> "RelationshipSuggestion":
        if normalize_name(self.source_name) == normalize_name(self.target_name):
            raise ValueError("Cannot create self-referential relationship")
        return self

    def describe(self) -> str:
        return f'"{self.source_name}" {self.type.display_name.lower()} "{self.target_name}"'

    def display(self) -> str:
        if self.confidence >= HIGH_CONFIDENCE_THRESHOLD:
            marker = "●"
        elif self.confidence >= MEDIUM_CONFIDENCE_THRESHOLD:
            marker = "◐"
        else:
            marker = "○"
        return f"{marker} {self.source_name} --[{self.type.name}]--> {self.target_name}"

    @property
    def is_high_confidence(self) -> bool:
        return self.confidence >= HIGH_CONFIDENCE_THRESHOLD

    def implies_ordering(self) -> bool:
        return self.type.implies_ordering()
