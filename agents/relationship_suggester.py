"""Relationship Suggester - proposes typed edges between accepted topics."""

from typing import List

from agents.base_agent import BaseAgent
from contracts import RelationshipDepth, RelationshipSuggestion
from discovery.parsing import parse_relationship_suggestions
from discovery.prompts import RELATIONSHIP_TYPES_BY_DEPTH, relationship_prompt
from discovery.session import DiscoverySession


class RelationshipSuggester(BaseAgent):
    """Finds relationships among the accepted topics, limited by the profile's depth."""

    SYSTEM_PROMPT = """You are an expert knowledge architect mapping how wiki articles depend on each other.
Only propose relationships you are confident about, and rate each between 0 and 1.
A prerequisite relationship means the source must be understood before the target.
Always respond with valid JSON in the specified format."""

    def __init__(self, reasoning):
        super().__init__(reasoning, role="relationship_suggester")

    def get_task_description(self) -> str:
        return "Suggest typed relationships between accepted topics"

    def analyze_all_relationships(self, session: DiscoverySession) -> List[RelationshipSuggestion]:
        topics = session.accepted_topics()
        if len(topics) < 2:
            return []
        depth = session.cost_profile.relationship_depth
        response = self._ask(relationship_prompt(session.domain_name, topics, depth, session.scope))
        if response is None:
            return []
        allowed = set(RELATIONSHIP_TYPES_BY_DEPTH[depth])
        suggestions = parse_relationship_suggestions(response)
        if depth == RelationshipDepth.ALL:
            return suggestions
        return [s for s in suggestions if s.type in allowed]
