"""Configuration for a fully autonomous discovery run."""

from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from contracts import BALANCED, CostProfile

from .stopping import StoppingCriteria

DEFAULT_CONFIDENCE_THRESHOLD = 0.75


class AutonomousConfig(BaseModel):
    """Everything an autonomous run needs besides its collaborators."""

    model_config = {"frozen": True}

    domain_name: str = Field(..., description="Domain the wiki covers")
    user_description: str = ""
    seed_topics: List[str] = Field(default_factory=list)
    cost_profile: CostProfile = BALANCED
    output_path: Optional[Path] = None
    confidence_threshold: Optional[float] = Field(None, description="Accept threshold; defaults to the profile's")
    confirm_before_proceeding: bool = False
    dry_run: bool = False
    verbose: bool = False
    stopping_criteria: Optional[StoppingCriteria] = None

    @field_validator("domain_name")
    @classmethod
    def domain_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("domain_name cannot be blank")
        return v

    @field_validator("seed_topics", mode="before")
    @classmethod
    def clean_seeds(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, (list, tuple)):
            return [str(s).strip() for s in v if s is not None and str(s).strip()]
        return v

    @model_validator(mode="before")
    @classmethod
    def fill_defaults(cls, data: Any) -> Any:
        """Derive the threshold and stopping criteria from the cost profile."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("cost_profile") is None:
            data["cost_profile"] = BALANCED
        if data.get("user_description") is None:
            data["user_description"] = ""
        profile = data["cost_profile"]
        if isinstance(profile, dict):
            profile = CostProfile.model_validate(profile)

        threshold = data.get("confidence_threshold")
        if threshold is None:
            data["confidence_threshold"] = profile.autonomous_threshold
        elif threshold <= 0 or threshold > 1:
            data["confidence_threshold"] = DEFAULT_CONFIDENCE_THRESHOLD
        if data.get("stopping_criteria") is None:
            data["stopping_criteria"] = StoppingCriteria.from_cost_profile(profile)
        return data

    @property
    def has_description(self) -> bool:
        return bool(self.user_description.strip())

    @property
    def has_seed_topics(self) -> bool:
        return bool(self.seed_topics)

    @property
    def threshold(self) -> float:
        return self.confidence_threshold

    @property
    def criteria(self) -> StoppingCriteria:
        return self.stopping_criteria

    def summary(self) -> str:
        lines = [f"Domain: {self.domain_name}"]
        if self.has_description:
            lines.append(f"Description: {self.user_description}")
        if self.has_seed_topics:
            lines.append("Seeds: " + ", ".join(self.seed_topics))
        lines.append(f"Cost Profile: {self.cost_profile.name}")
        lines.append(f"Confidence Threshold: {self.confidence_threshold * 100:.0f}%")
        lines.append("Mode: " + ("Confirm before proceeding" if self.confirm_before_proceeding else "Fully autonomous"))
        if self.dry_run:
            lines.append("Dry run: nothing will be saved")
        return "\n".join(lines)
