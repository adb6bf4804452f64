"""Topic graph contracts: topics, relationships and scope boundaries."""

import re
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field, field_validator


def slugify(name: str) -> str:
    """Derive a stable topic identifier from a display name."""
    slug = re.sub(r"[^a-z0-9]+", "-", name.strip().lower()).strip("-")
    return slug or "topic"


def normalize_name(name: str) -> str:
    """Case-insensitive comparison key for topic names."""
    return " ".join(name.split()).casefold()


class TopicStatus(str, Enum):
    """Lifecycle status of a topic."""
    PROPOSED = "proposed"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    DEFERRED = "deferred"
    GENERATED = "generated"


class ContentType(str, Enum):
    """Kind of article a topic will become."""
    CONCEPT = "concept"
    TUTORIAL = "tutorial"
    REFERENCE = "reference"
    HOW_TO = "how_to"
    COMPARISON = "comparison"
    TROUBLESHOOTING = "troubleshooting"
    OVERVIEW = "overview"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", "-").title()


class ComplexityLevel(str, Enum):
    """Reader level a topic is written for, with its word-count band."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @property
    def rank(self) -> int:
        return _COMPLEXITY_RANK[self]

    @property
    def min_words(self) -> int:
        return _COMPLEXITY_WORDS[self][0]

    @property
    def default_words(self) -> int:
        return _COMPLEXITY_WORDS[self][1]

    @property
    def max_words(self) -> int:
        return _COMPLEXITY_WORDS[self][2]

    @property
    def display_name(self) -> str:
        return self.value.title()


_COMPLEXITY_RANK = {
    ComplexityLevel.BEGINNER: 0,
    ComplexityLevel.INTERMEDIATE: 1,
    ComplexityLevel.ADVANCED: 2,
}

# (min, default, max) words
_COMPLEXITY_WORDS = {
    ComplexityLevel.BEGINNER: (400, 600, 900),
    ComplexityLevel.INTERMEDIATE: (800, 1000, 1500),
    ComplexityLevel.ADVANCED: (1200, 1500, 2500),
}


class Priority(str, Enum):
    """Generation priority tier. Lower tier generates first."""
    MUST_HAVE = "must_have"
    SHOULD_HAVE = "should_have"
    NICE_TO_HAVE = "nice_to_have"
    BACKLOG = "backlog"

    @property
    def tier(self) -> int:
        return list(Priority).index(self)

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()


class RelationshipType(str, Enum):
    """Directed relationship kinds between two topics."""
    PREREQUISITE_OF = "prerequisite_of"
    PART_OF = "part_of"
    RELATED_TO = "related_to"
    EXAMPLE_OF = "example_of"
    CONTRASTS_WITH = "contrasts_with"
    IMPLEMENTS = "implements"
    SUPERSEDES = "supersedes"
    PAIRS_WITH = "pairs_with"

    def implies_ordering(self) -> bool:
        """True when the source must be generated before the target."""
        return self in ORDERING_TYPES

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()


ORDERING_TYPES = frozenset({
    RelationshipType.PREREQUISITE_OF,
    RelationshipType.IMPLEMENTS,
    RelationshipType.SUPERSEDES,
})


class RelationshipStatus(str, Enum):
    """Curation status of a relationship."""
    PROPOSED = "proposed"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


class Topic(BaseModel):
    """A unit of wiki content: candidate or accepted."""

    model_config = {"frozen": True}

    id: str = Field(..., description="Stable identifier derived from the name")
    name: str = Field(..., min_length=1)
    description: str = ""
    status: TopicStatus = TopicStatus.PROPOSED
    content_type: ContentType = ContentType.CONCEPT
    complexity: ComplexityLevel = ComplexityLevel.INTERMEDIATE
    estimated_words: int = Field(default=1000, ge=0)
    priority: Priority = Priority.SHOULD_HAVE
    category: str = ""
    is_landing_page: bool = False
    emphasize: Tuple[str, ...] = ()
    skip: Tuple[str, ...] = ()
    added_reason: str = ""

    @classmethod
    def create(cls, name: str, **fields: Any) -> "Topic":
        """Build a topic whose id is derived from its name."""
        fields.setdefault("id", slugify(name))
        if "complexity" in fields and "estimated_words" not in fields:
            fields["estimated_words"] = ComplexityLevel(fields["complexity"]).default_words
        return cls(name=name.strip(), **fields)

    @property
    def is_accepted(self) -> bool:
        return self.status == TopicStatus.ACCEPTED

    @property
    def normalized_name(self) -> str:
        return normalize_name(self.name)


class TopicRelationship(BaseModel):
    """A directed, typed edge between two topic ids."""

    model_config = {"frozen": True}

    source_id: str
    target_id: str
    type: RelationshipType
    status: RelationshipStatus = RelationshipStatus.PROPOSED

    @field_validator("target_id")
    @classmethod
    def not_self_referential(cls, v: str, info) -> str:
        if info.data.get("source_id") == v:
            raise ValueError("relationship source and target must differ")
        return v

    @property
    def key(self) -> Tuple[str, str, RelationshipType]:
        return (self.source_id, self.target_id, self.type)

    @property
    def is_confirmed(self) -> bool:
        return self.status == RelationshipStatus.CONFIRMED


class ScopeConfiguration(BaseModel):
    """Boundaries used when building prompts. Replaced wholesale, never edited."""

    model_config = {"frozen": True}

    assumed_knowledge: Tuple[str, ...] = ()
    out_of_scope: Tuple[str, ...] = ()
    focus_areas: Tuple[str, ...] = ()
    audience_description: str = ""
    domain_description: str = ""
    preferred_language: Optional[str] = None
    intent: Optional[str] = None

    @field_validator("assumed_knowledge", "out_of_scope", "focus_areas", mode="before")
    @classmethod
    def dedupe_entries(cls, v: Any) -> Any:
        if v is None:
            return ()
        if isinstance(v, (list, tuple, set, frozenset)):
            seen: Dict[str, str] = {}
            for item in v:
                text = str(item).strip()
                if text and text.casefold() not in seen:
                    seen[text.casefold()] = text
            values = list(seen.values())
            return tuple(sorted(values) if isinstance(v, (set, frozenset)) else values)
        return v

    def with_changes(self, **changes: Any) -> "ScopeConfiguration":
        """Return a new scope with the given fields replaced."""
        data = self.model_dump()
        data.update(changes)
        return ScopeConfiguration.model_validate(data)

    def is_empty(self) -> bool:
        return not (
            self.assumed_knowledge or self.out_of_scope or self.focus_areas
            or self.audience_description or self.preferred_language or self.intent
        )

    def to_prompt_format(self) -> str:
        """Render the scope as a prompt section."""
        lines = []
        if self.domain_description:
            lines.append(f"Domain purpose: {self.domain_description}")
        if self.audience_description:
            lines.append(f"Target audience: {self.audience_description}")
        if self.assumed_knowledge:
            lines.append("Assumed reader knowledge (do not cover): " + ", ".join(self.assumed_knowledge))
        if self.out_of_scope:
            lines.append("Out of scope (exclude): " + ", ".join(self.out_of_scope))
        if self.focus_areas:
            lines.append("Focus areas (prioritize): " + ", ".join(self.focus_areas))
        if self.preferred_language:
            lines.append(f"Preferred language/tooling: {self.preferred_language}")
        if self.intent:
            lines.append(f"Intent: {self.intent}")
        return "\n".join(lines) + ("\n" if lines else "")
