"""Pydantic contracts for the Topic Universe planner.

Everything handed between the session, the curator, the agents and the
orchestrators is typed through these contracts.
"""

from .topic_contracts import (
    TopicStatus,
    ContentType,
    ComplexityLevel,
    Priority,
    RelationshipType,
    RelationshipStatus,
    ORDERING_TYPES,
    Topic,
    TopicRelationship,
    ScopeConfiguration,
    slugify,
    normalize_name,
)

from .suggestion_contracts import (
    TopicSuggestion,
    RelationshipSuggestion,
)

from .profile_contracts import (
    RelationshipDepth,
    CostProfile,
    MINIMAL,
    BALANCED,
    COMPREHENSIVE,
    register_cost_profile,
    get_cost_profile,
    list_cost_profiles,
)

from .curation_contracts import (
    CurationAction,
    CurationDecision,
)

from .gap_contracts import (
    GapSeverity,
    GapType,
    Gap,
    GapAnalysisResult,
    GapOutcome,
)

from .ordering import GenerationPlan, compute_generation_order
from .universe_contracts import (
    BacklogOrigin,
    BacklogItem,
    TopicUniverse,
)

__all__ = [
    # Topics
    "TopicStatus",
    "ContentType",
    "ComplexityLevel",
    "Priority",
    "RelationshipType",
    "RelationshipStatus",
    "ORDERING_TYPES",
    "Topic",
    "TopicRelationship",
    "ScopeConfiguration",
    "slugify",
    "normalize_name",
    # Suggestions
    "TopicSuggestion",
    "RelationshipSuggestion",
    # Cost profiles
    "RelationshipDepth",
    "CostProfile",
    "MINIMAL",
    "BALANCED",
    "COMPREHENSIVE",
    "register_cost_profile",
    "get_cost_profile",
    "list_cost_profiles",
    # Curation
    "CurationAction",
    "CurationDecision",
    # Gaps
    "GapSeverity",
    "GapType",
    "Gap",
    "GapAnalysisResult",
    "GapOutcome",
    # Universe
    "BacklogOrigin",
    "BacklogItem",
    "GenerationPlan",
    "compute_generation_order",
    "TopicUniverse",
]
