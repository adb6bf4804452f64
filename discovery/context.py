"""Read-only snapshot of a session, handed to the curator."""

from typing import FrozenSet, Optional

from pydantic import BaseModel, Field

from contracts import CostProfile, ScopeConfiguration, normalize_name

from .session import DiscoverySession
from .stopping import StoppingCriteria

MAX_LISTED_TOPICS = 20


class AutonomousContext(BaseModel):
    """What the curator knows about the run when it makes a decision."""

    model_config = {"frozen": True}

    domain_name: str
    user_description: str = ""
    scope: Optional[ScopeConfiguration] = None
    accepted_topic_names: FrozenSet[str] = frozenset()
    rejected_topic_names: FrozenSet[str] = frozenset()
    deferred_topic_names: FrozenSet[str] = frozenset()
    cost_profile: Optional[CostProfile] = None
    current_topic_count: int = 0
    target_min_topics: int = Field(8, ge=0)
    target_max_topics: int = Field(40, ge=0)
    current_phase: str = ""
    current_round: int = 0
    max_rounds: int = 0

    @classmethod
    def from_session(
        cls,
        session: DiscoverySession,
        criteria: StoppingCriteria,
        user_description: str = "",
        current_round: int = 0,
    ) -> "AutonomousContext":
        return cls(
            domain_name=session.domain_name,
            user_description=user_description or session.domain_description,
            scope=session.scope,
            accepted_topic_names=frozenset(session.accepted_topic_names()),
            rejected_topic_names=frozenset(session.rejected_topic_names()),
            deferred_topic_names=frozenset(session.deferred_topic_names()),
            cost_profile=session.cost_profile,
            current_topic_count=session.accepted_count,
            target_min_topics=criteria.min_topics,
            target_max_topics=criteria.max_topics,
            current_phase=session.phase.name,
            current_round=current_round,
            max_rounds=criteria.max_expansion_rounds,
        )

    def with_round(self, current_round: int) -> "AutonomousContext":
        return self.model_copy(update={"current_round": current_round})

    def has_minimum_topics(self) -> bool:
        return self.current_topic_count >= self.target_min_topics

    def has_maximum_topics(self) -> bool:
        return self.current_topic_count >= self.target_max_topics

    def remaining_capacity(self) -> int:
        return max(0, self.target_max_topics - self.current_topic_count)

    def is_already_processed(self, topic_name: str) -> bool:
        """True if the name was accepted, rejected or deferred earlier."""
        key = normalize_name(topic_name)
        names = self.accepted_topic_names | self.rejected_topic_names | self.deferred_topic_names
        return any(normalize_name(n) == key for n in names)

    def to_prompt_format(self) -> str:
        lines = ["## Current Discovery Context", "", f"**Domain:** {self.domain_name}"]
        if self.user_description.strip():
            lines.append(f"**User Goal:** {self.user_description}")
        lines += [
            "",
            "**Progress:**",
            f"- Current phase: {self.current_phase}",
            f"- Round: {self.current_round} of {self.max_rounds}",
            f"- Topics accepted: {self.current_topic_count} "
            f"(target: {self.target_min_topics}-{self.target_max_topics})",
            "",
        ]
        if self.accepted_topic_names:
            names = sorted(self.accepted_topic_names)
            lines.append("**Accepted Topics:**")
            lines += [f"- {name}" for name in names[:MAX_LISTED_TOPICS]]
            if len(names) > MAX_LISTED_TOPICS:
                lines.append(f"- ... and {len(names) - MAX_LISTED_TOPICS} more")
            lines.append("")
        if self.scope is not None and not self.scope.is_empty():
            lines.append("**Scope:**")
            lines.append(self.scope.to_prompt_format())
        return "\n".join(lines) + "\n"

    def summary(self) -> str:
        return (
            f"[Round {self.current_round}/{self.max_rounds}] {self.current_topic_count} topics accepted "
            f"(target: {self.target_min_topics}-{self.target_max_topics})"
        )
