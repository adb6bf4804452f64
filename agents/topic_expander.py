"""Topic Expander - proposes new topics around an accepted one.

One search call gathers grounding context, one reasoning call proposes
suggestions, then each suggestion is validated with one search lookup.
"""

import logging
from typing import List, Optional

from agents.base_agent import BaseAgent
from contracts import CostProfile, Topic, TopicSuggestion, normalize_name
from discovery.parsing import parse_topic_suggestions
from discovery.prioritization import calibrated_words
from discovery.prompts import topic_expansion_prompt
from discovery.session import DiscoverySession

logger = logging.getLogger(__name__)


class TopicExpander(BaseAgent):
    """Expands one topic into search-validated suggestions."""

    SYSTEM_PROMPT = """You are an expert knowledge architect planning a comprehensive technical wiki.
Suggest distinct, well-scoped article topics that a reader of the seed topic would need next.
Respect the scope guidance. Never repeat an existing topic under a different name.
Rate each suggestion's relevance to the domain between 0 and 1.
Always respond with valid JSON in the specified format."""

    def __init__(self, reasoning, validator):
        super().__init__(reasoning, role="topic_expander")
        self.validator = validator

    def get_task_description(self) -> str:
        return "Suggest and search-validate related topics for an accepted topic"

    def _search_context(self, topic: Topic):
        results = self.validator.search(topic.name)
        if not results:
            return "", []
        summary = results[0].snippet
        related = [r.title for r in results[1:] if normalize_name(r.title) != topic.normalized_name]
        return summary, related

    def _fit_to_profile(self, suggestion: TopicSuggestion, profile: CostProfile) -> TopicSuggestion:
        complexity = profile.cap_complexity(suggestion.complexity)
        words = calibrated_words(complexity, profile.word_count_multiplier)
        if complexity == suggestion.complexity and words == suggestion.word_count:
            return suggestion
        data = suggestion.model_dump()
        data.update(complexity=complexity, word_count=words)
        return TopicSuggestion.model_validate(data)

    def expand(
        self,
        topic: Topic,
        session: DiscoverySession,
        count: Optional[int] = None,
    ) -> List[TopicSuggestion]:
        """Suggestions for `topic`, excluding names the session already knows."""
        profile = session.cost_profile
        count = count or profile.suggestions_per_topic
        summary, related = self._search_context(topic)

        known = {t.normalized_name for t in session.all_topics()}
        prompt = topic_expansion_prompt(
            domain_name=session.domain_name,
            topic=topic,
            existing_names=[t.name for t in session.all_topics()],
            scope=session.scope,
            count=count,
            max_complexity=profile.max_complexity,
            search_summary=summary,
            related_titles=related,
        )
        response = self._ask(prompt)
        if response is None:
            return []

        suggestions = []
        for suggestion in parse_topic_suggestions(response, source_context=topic.name):
            if suggestion.normalized_name in known:
                continue
            known.add(suggestion.normalized_name)
            confidence = self.validator.validate_topic(suggestion.name)
            suggestion = suggestion.with_search_confidence(confidence)
            suggestions.append(self._fit_to_profile(suggestion, profile))
            if len(suggestions) >= count:
                break
        logger.debug("Expanded '%s' into %d suggestion(s)", topic.name, len(suggestions))
        return suggestions
