"""Rule-based prioritization and depth calibration. No reasoning calls."""

import logging
from collections import Counter
from typing import Dict, List, Tuple

from contracts import ComplexityLevel, CostProfile, Priority, RelationshipType, Topic, normalize_name

from .session import DiscoverySession

logger = logging.getLogger(__name__)

# A topic this many other topics depend on must be written first
HEAVY_PREREQUISITE_COUNT = 3

MIN_CALIBRATED_WORDS = 200


def resolve_priority(topic: Topic, prerequisite_counts: Dict[str, int], seed_keys: set) -> Priority:
    """First match wins: landing page, heavy prerequisite, seed, already must-have."""
    if topic.is_landing_page:
        return Priority.MUST_HAVE
    if prerequisite_counts.get(topic.id, 0) >= HEAVY_PREREQUISITE_COUNT:
        return Priority.MUST_HAVE
    if topic.normalized_name in seed_keys:
        return Priority.MUST_HAVE
    if topic.priority == Priority.MUST_HAVE:
        return Priority.MUST_HAVE
    return Priority.SHOULD_HAVE


def prioritize(session: DiscoverySession) -> int:
    """Assign priorities to all accepted topics. Returns how many changed."""
    prerequisite_counts = Counter(
        r.source_id for r in session.confirmed_relationships()
        if r.type == RelationshipType.PREREQUISITE_OF
    )
    seed_keys = {normalize_name(n) for n in session.seed_names}

    changed = 0
    for topic in session.accepted_topics():
        if session.update_topic_priority(topic.id, resolve_priority(topic, prerequisite_counts, seed_keys)):
            changed += 1
    logger.debug("Prioritization changed %d topic(s)", changed)
    return changed


def calibrated_words(complexity: ComplexityLevel, multiplier: float) -> int:
    """Default words for a complexity scaled by the profile, rounded to 50."""
    words = int(round(complexity.default_words * multiplier / 50.0)) * 50
    return max(MIN_CALIBRATED_WORDS, words)


def propose_depth(topic: Topic, profile: CostProfile) -> Tuple[ComplexityLevel, int]:
    if topic.is_landing_page:
        return topic.complexity, topic.estimated_words
    complexity = profile.cap_complexity(topic.complexity)
    return complexity, calibrated_words(complexity, profile.word_count_multiplier)


def depth_proposals(session: DiscoverySession, profile: CostProfile) -> List[Tuple[Topic, ComplexityLevel, int]]:
    """Topics whose depth would change, with the proposed complexity and words."""
    proposals = []
    for topic in session.accepted_topics():
        complexity, words = propose_depth(topic, profile)
        if (complexity, words) != (topic.complexity, topic.estimated_words):
            proposals.append((topic, complexity, words))
    return proposals


def calibrate_depth(session: DiscoverySession, profile: CostProfile) -> int:
    """Fit every accepted topic to the profile's depth limits. Returns how many changed."""
    changed = 0
    for topic, complexity, words in depth_proposals(session, profile):
        if session.update_topic_depth(topic.id, complexity, words):
            changed += 1
    return changed
