"""Agent implementations for the Topic Universe planner.

Each agent wraps one kind of reasoning call in the discovery workflow.
"""

from .base_agent import BaseAgent
from .topic_expander import TopicExpander
from .relationship_suggester import RelationshipSuggester
from .gap_analyzer import GapAnalyzer
from .scope_inferrer import InferredScope, ScopeInferrer

__all__ = [
    # Base
    "BaseAgent",
    # Specialized agents
    "TopicExpander",
    "RelationshipSuggester",
    "GapAnalyzer",
    "ScopeInferrer",
    "InferredScope",
]
