"""Scoring constants and pure functions for curation decisions.

Every threshold used by the autonomous curator lives here so the interactive
and autonomous modes classify suggestions identically.
"""

# Combined score weights. Relevance captures domain fit that search
# coverage cannot, so it carries more weight.
RELEVANCE_WEIGHT = 0.6
SEARCH_CONFIDENCE_WEIGHT = 0.4

# Multiplier for suggestions without search validation.
NON_VALIDATED_PENALTY = 0.7

# Autonomous decision thresholds
ACCEPT_SEARCH_THRESHOLD = 0.3
AUTO_REJECT_SCORE_THRESHOLD = 0.4
AUTO_REJECT_SEARCH_THRESHOLD = 0.2
DEFAULT_ACCEPT_THRESHOLD = 0.75

# Confidence bands (topics and relationships)
HIGH_CONFIDENCE_THRESHOLD = 0.8
MEDIUM_CONFIDENCE_THRESHOLD = 0.5
LOW_CONFIDENCE_THRESHOLD = 0.3

# Relationship detection is noisier than topic detection
RELATIONSHIP_REJECT_THRESHOLD = 0.4

DEFAULT_CONFIDENCE = 0.5

# Sentinel: the topic was never checked against a search source
NOT_VALIDATED = -1.0


def is_validated(search_confidence: float) -> bool:
    """True when a search confidence is a real score, not the sentinel."""
    return search_confidence >= 0


def quality_score(relevance: float, search_confidence: float) -> float:
    """Combine relevance and search confidence into a score in [0, 1].

    Unvalidated suggestions are scored on relevance alone with a penalty,
    which discourages hallucinated topics without discarding them.
    """
    if not is_validated(search_confidence):
        return relevance * NON_VALIDATED_PENALTY
    return relevance * RELEVANCE_WEIGHT + search_confidence * SEARCH_CONFIDENCE_WEIGHT


def meets_autonomous_threshold(relevance: float, search_confidence: float, threshold: float) -> bool:
    """High enough quality and real search presence to accept without review."""
    return (
        quality_score(relevance, search_confidence) >= threshold
        and search_confidence >= ACCEPT_SEARCH_THRESHOLD
    )


def is_auto_reject_candidate(relevance: float, search_confidence: float) -> bool:
    """Clearly low quality, or searched for and barely found."""
    if quality_score(relevance, search_confidence) < AUTO_REJECT_SCORE_THRESHOLD:
        return True
    return is_validated(search_confidence) and search_confidence < AUTO_REJECT_SEARCH_THRESHOLD


def confidence_band(confidence: float) -> str:
    """Classify a confidence value as high, medium, low or none."""
    if confidence >= HIGH_CONFIDENCE_THRESHOLD:
        return "high"
    if confidence >= MEDIUM_CONFIDENCE_THRESHOLD:
        return "medium"
    if confidence >= LOW_CONFIDENCE_THRESHOLD:
        return "low"
    return "none"
