"""Curation decision engine.

Deterministic rules settle the clear cases; only what is left goes to the
reasoning source. Rules, in order, first match wins:

1. quality score >= threshold and search confidence >= 0.3: ACCEPT
2. quality score < 0.4, or searched and confidence < 0.2: REJECT
3. name already accepted, rejected or deferred: REJECT
4. accepted count at the maximum: REJECT
5. ask the reasoning source; if that fails, DEFER
"""

import logging
from typing import List, Optional

from contracts import CurationDecision, RelationshipSuggestion, TopicSuggestion
from contracts.scoring import (
    DEFAULT_ACCEPT_THRESHOLD,
    HIGH_CONFIDENCE_THRESHOLD,
    RELATIONSHIP_REJECT_THRESHOLD,
)

from .context import AutonomousContext
from .parsing import parse_batch_decisions, parse_curation_decision
from .prompts import batch_curation_prompt, curation_prompt

logger = logging.getLogger(__name__)

REASONING_UNAVAILABLE = "reasoning unavailable"


class Curator:
    """Decides what happens to each suggestion in autonomous mode.

    `reasoning` is any object with `generate(prompt) -> str`. Every provider in
    `providers` qualifies.
    """

    def __init__(self, reasoning):
        self.reasoning = reasoning

    def _apply_rules(
        self,
        suggestion: TopicSuggestion,
        context: AutonomousContext,
        threshold: float,
    ) -> Optional[CurationDecision]:
        score = suggestion.quality_score
        if suggestion.meets_autonomous_threshold(threshold):
            return CurationDecision.accept(f"High confidence: score {score:.2f}")
        if suggestion.is_auto_reject_candidate():
            return CurationDecision.reject(
                f"Low quality: score {score:.2f}, confidence {suggestion.search_confidence:.2f}"
            )
        if context.is_already_processed(suggestion.name):
            return CurationDecision.reject("Duplicate: already processed")
        if context.has_maximum_topics():
            return CurationDecision.reject("Capacity reached: at maximum topic count")
        return None

    def curate_topic(
        self,
        suggestion: TopicSuggestion,
        context: AutonomousContext,
        threshold: float = DEFAULT_ACCEPT_THRESHOLD,
    ) -> CurationDecision:
        decision = self._apply_rules(suggestion, context, threshold)
        if decision is not None:
            return decision
        return self._curate_with_reasoning(suggestion, context)

    def curate_topic_batch(
        self,
        suggestions: List[TopicSuggestion],
        context: AutonomousContext,
        threshold: float = DEFAULT_ACCEPT_THRESHOLD,
    ) -> List[CurationDecision]:
        """Curate many suggestions with at most one reasoning call.

        Returns one decision per suggestion, in input order.
        """
        decisions: List[Optional[CurationDecision]] = []
        borderline: List[TopicSuggestion] = []
        for suggestion in suggestions:
            decision = self._apply_rules(suggestion, context, threshold)
            if decision is None:
                borderline.append(suggestion)
            decisions.append(decision)

        if borderline:
            remaining = iter(self._curate_batch_with_reasoning(borderline, context))
            decisions = [d if d is not None else next(remaining) for d in decisions]
        return decisions

    def curate_relationship(
        self,
        suggestion: RelationshipSuggestion,
        context: Optional[AutonomousContext] = None,
    ) -> CurationDecision:
        confidence = suggestion.confidence
        if confidence >= HIGH_CONFIDENCE_THRESHOLD:
            return CurationDecision.accept(f"High confidence: {confidence:.2f}", confidence)
        if confidence < RELATIONSHIP_REJECT_THRESHOLD:
            return CurationDecision.reject(f"Low confidence: {confidence:.2f}", confidence)
        return CurationDecision.accept(f"Medium confidence, borderline: {confidence:.2f}", confidence)

    def _curate_with_reasoning(self, suggestion: TopicSuggestion, context: AutonomousContext) -> CurationDecision:
        try:
            response = self.reasoning.generate(curation_prompt(suggestion, context.to_prompt_format()))
        except Exception as e:
            logger.warning("Reasoning call failed for topic '%s': %s", suggestion.name, e)
            return CurationDecision.defer(REASONING_UNAVAILABLE)

        result = parse_curation_decision(response)
        if not result.ok:
            logger.warning("Unusable curation response for '%s': %s", suggestion.name, result.error)
            return CurationDecision.defer(REASONING_UNAVAILABLE)
        return result.data

    def _curate_batch_with_reasoning(
        self,
        suggestions: List[TopicSuggestion],
        context: AutonomousContext,
    ) -> List[CurationDecision]:
        try:
            response = self.reasoning.generate(batch_curation_prompt(suggestions, context.to_prompt_format()))
        except Exception as e:
            logger.warning("Batch reasoning call failed for %d topics: %s", len(suggestions), e)
            return [CurationDecision.defer(REASONING_UNAVAILABLE) for _ in suggestions]
        return parse_batch_decisions(response, len(suggestions))
