"""Stopping criteria for autonomous expansion.

Pure predicates over running counters. The driving loop in the autonomous
orchestrator decides how to combine them.
"""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from contracts import CostProfile


class StoppingCriteria(BaseModel):
    """When autonomous topic expansion should end."""

    model_config = {"frozen": True}

    min_topics: int = Field(8, description="Minimum accepted topics before convergence may stop the loop")
    max_topics: int = Field(40, description="Hard cap on accepted topics")
    max_expansion_rounds: int = 3
    max_consecutive_low_quality_rounds: int = 3
    convergence_threshold: float = Field(0.5, description="High-quality ratio below which a round has converged")
    require_gap_satisfaction: bool = True

    @model_validator(mode="before")
    @classmethod
    def clamp_values(cls, data: Any) -> Any:
        """Replace out-of-range knobs with safe defaults instead of failing."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        min_topics = data.get("min_topics", 8)
        if min_topics < 1:
            min_topics = 3
            data["min_topics"] = min_topics
        if data.get("max_topics", 40) < min_topics:
            data["max_topics"] = min_topics * 5
        if data.get("max_expansion_rounds", 3) < 1:
            data["max_expansion_rounds"] = 3
        if data.get("max_consecutive_low_quality_rounds", 3) < 1:
            data["max_consecutive_low_quality_rounds"] = 3
        threshold = data.get("convergence_threshold", 0.5)
        if threshold <= 0 or threshold > 1:
            data["convergence_threshold"] = 0.5
        return data

    @classmethod
    def from_cost_profile(cls, profile: CostProfile) -> "StoppingCriteria":
        name = profile.name.upper()
        if name == "MINIMAL":
            return cls(
                min_topics=3,
                max_topics=15,
                max_expansion_rounds=1,
                max_consecutive_low_quality_rounds=2,
                convergence_threshold=0.6,
                require_gap_satisfaction=False,
            )
        if name == "COMPREHENSIVE":
            return cls(
                min_topics=20,
                max_topics=150,
                max_expansion_rounds=5,
                max_consecutive_low_quality_rounds=3,
                convergence_threshold=0.4,
                require_gap_satisfaction=True,
            )
        rounds = 3 if name == "BALANCED" else profile.max_expansion_rounds
        return cls(
            min_topics=8,
            max_topics=40,
            max_expansion_rounds=rounds,
            max_consecutive_low_quality_rounds=3,
            convergence_threshold=0.5,
            require_gap_satisfaction=True,
        )

    def should_stop_by_count(self, topic_count: int) -> bool:
        return topic_count >= self.max_topics

    def has_minimum_topics(self, topic_count: int) -> bool:
        return topic_count >= self.min_topics

    def has_converged(self, high_quality_count: int, total_count: int) -> bool:
        """A round converged when few of its suggestions were high quality.

        An empty round counts as converged: there is nothing left to explore.
        """
        if total_count == 0:
            return True
        return high_quality_count / total_count < self.convergence_threshold

    def should_stop_by_low_quality(self, consecutive_rounds: int) -> bool:
        return consecutive_rounds >= self.max_consecutive_low_quality_rounds

    def should_stop_by_rounds(self, current_round: int) -> bool:
        return current_round >= self.max_expansion_rounds

    def description(self) -> str:
        return (
            f"Stop when: {self.min_topics}-{self.max_topics} topics, "
            f"max {self.max_expansion_rounds} rounds, "
            f"convergence < {self.convergence_threshold * 100:.0f}%"
        )
