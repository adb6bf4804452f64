"""Cost profile contracts: how much exploration a discovery run may spend."""

from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Optional
from enum import Enum

from .scoring import DEFAULT_ACCEPT_THRESHOLD
from .topic_contracts import ComplexityLevel


class RelationshipDepth(str, Enum):
    """How many relationships to look for between accepted topics."""
    CORE = "core"  # Prerequisites and part-of only
    IMPORTANT = "important"  # Adds examples, implementations, contrasts
    ALL = "all"  # Every relationship type


class CostProfile(BaseModel):
    """A named preset bounding rounds, fan-out and depth of a discovery run."""

    model_config = {"frozen": True}

    name: str = Field(..., min_length=1, description="Profile name, matched case-insensitively")
    max_expansion_rounds: int = Field(..., ge=1)
    topics_per_round: int = Field(..., ge=1, description="Accepted topics expanded per round")
    suggestions_per_topic: int = Field(..., ge=1)
    max_complexity: ComplexityLevel = ComplexityLevel.ADVANCED
    word_count_multiplier: float = Field(1.0, gt=0)
    skip_gap_analysis: bool = False
    relationship_depth: RelationshipDepth = RelationshipDepth.IMPORTANT
    autonomous_threshold: float = Field(DEFAULT_ACCEPT_THRESHOLD, gt=0, le=1)
    description: str = ""

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        return v.strip().upper()

    @property
    def estimated_max_topics(self) -> int:
        """Upper bound on suggestions examined across all rounds."""
        return self.max_expansion_rounds * self.topics_per_round * self.suggestions_per_topic

    def allows_complexity(self, complexity: ComplexityLevel) -> bool:
        return complexity.rank <= self.max_complexity.rank

    def cap_complexity(self, complexity: ComplexityLevel) -> ComplexityLevel:
        return complexity if self.allows_complexity(complexity) else self.max_complexity

    def summary(self) -> str:
        return (
            f"{self.name}: {self.max_expansion_rounds} round(s), "
            f"{self.topics_per_round} topics/round, "
            f"{self.suggestions_per_topic} suggestions/topic, "
            f"max {self.max_complexity.display_name}"
        )


MINIMAL = CostProfile(
    name="MINIMAL",
    max_expansion_rounds=1,
    topics_per_round=2,
    suggestions_per_topic=3,
    max_complexity=ComplexityLevel.INTERMEDIATE,
    word_count_multiplier=0.6,
    skip_gap_analysis=True,
    relationship_depth=RelationshipDepth.CORE,
    autonomous_threshold=0.80,
    description="Quick sketch of a domain with the fewest reasoning calls",
)

BALANCED = CostProfile(
    name="BALANCED",
    max_expansion_rounds=3,
    topics_per_round=4,
    suggestions_per_topic=5,
    max_complexity=ComplexityLevel.ADVANCED,
    word_count_multiplier=1.0,
    skip_gap_analysis=False,
    relationship_depth=RelationshipDepth.IMPORTANT,
    autonomous_threshold=0.75,
    description="Reasonable coverage at moderate cost",
)

COMPREHENSIVE = CostProfile(
    name="COMPREHENSIVE",
    max_expansion_rounds=5,
    topics_per_round=6,
    suggestions_per_topic=7,
    max_complexity=ComplexityLevel.ADVANCED,
    word_count_multiplier=1.3,
    skip_gap_analysis=False,
    relationship_depth=RelationshipDepth.ALL,
    autonomous_threshold=0.70,
    description="Thorough exploration for large knowledge bases",
)

BUILTIN_PROFILES = ("MINIMAL", "BALANCED", "COMPREHENSIVE")

_PROFILES: Dict[str, CostProfile] = {p.name: p for p in (MINIMAL, BALANCED, COMPREHENSIVE)}


def register_cost_profile(profile: CostProfile) -> None:
    """Make a custom profile selectable by name. Built-in presets cannot be replaced."""
    if profile.name in BUILTIN_PROFILES:
        raise ValueError(f"Cannot replace built-in cost profile: {profile.name}")
    _PROFILES[profile.name] = profile


def get_cost_profile(name: Optional[str]) -> Optional[CostProfile]:
    """Look up a profile by name, case-insensitively. None if unknown."""
    if not name:
        return None
    return _PROFILES.get(name.strip().upper())


def list_cost_profiles() -> List[CostProfile]:
    return list(_PROFILES.values())
