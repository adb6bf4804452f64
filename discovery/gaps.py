"""Applying a gap report to a session.

Missing a prerequisite costs more than carrying an extra topic, so the policy
is asymmetric:

- CRITICAL with a suggested topic: add the topic (or ask first, interactively)
- CRITICAL without a suggestion, and every MODERATE gap: keep in the backlog
- MINOR: acknowledge and drop
"""

import logging
from typing import Callable, Optional

from contracts import (
    ContentType,
    Gap,
    GapAnalysisResult,
    GapOutcome,
    GapSeverity,
    GapType,
    Priority,
    Topic,
)

from .session import DiscoverySession

logger = logging.getLogger(__name__)

# Gap types whose fix is usually an introductory article
_FOUNDATIONAL = {GapType.MISSING_PREREQUISITE, GapType.MISSING_FUNDAMENTAL}


def topic_for_gap(gap: Gap) -> Topic:
    """The topic that would close a gap with a suggested name."""
    content_type = ContentType.COMPARISON if gap.type == GapType.MISSING_COMPARISON else ContentType.CONCEPT
    fields = dict(
        description=gap.description,
        content_type=content_type,
        priority=Priority.SHOULD_HAVE,
        added_reason=f"Gap analysis: {gap.type.name}",
    )
    if gap.type in _FOUNDATIONAL:
        fields["complexity"] = "beginner"
    return Topic.create(gap.suggested_topic_name, **fields)


def apply_gap_report(
    session: DiscoverySession,
    report: GapAnalysisResult,
    confirm: Optional[Callable[[Gap], bool]] = None,
) -> GapOutcome:
    """Apply a report to the session.

    With `confirm` left as None the run is autonomous and critical gaps with a
    suggestion are filled without asking. Otherwise `confirm(gap)` decides.
    """
    outcome = GapOutcome()
    for gap in report.gaps:
        if gap.severity == GapSeverity.CRITICAL:
            outcome.critical += 1
            if gap.has_suggestion and (confirm is None or confirm(gap)):
                if session.address_gap_with_topic(gap.description, topic_for_gap(gap)):
                    outcome.addressed.append(gap.suggested_topic_name)
                continue
            session.add_gaps([gap.description])
            outcome.flagged.append(gap.description)
        elif gap.severity == GapSeverity.MODERATE:
            outcome.moderate += 1
            session.add_gaps([gap.description])
            outcome.flagged.append(gap.description)
        else:
            outcome.minor += 1
            session.ignore_gap(gap.description)

    logger.debug(
        "Gap report applied: %d critical, %d moderate, %d minor, %d topics added",
        outcome.critical, outcome.moderate, outcome.minor, len(outcome.addressed),
    )
    return outcome
