"""Curation contracts: the closed set of decisions a curator can make."""

from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, Optional
from enum import Enum


class CurationAction(str, Enum):
    """Every action the decision table dispatches on."""
    ACCEPT = "accept"
    REJECT = "reject"
    DEFER = "defer"
    MODIFY = "modify"
    CONFIRM = "confirm"  # Relationships
    TYPE_CHANGE = "type_change"  # Relationships


class CurationDecision(BaseModel):
    """A decision about one suggestion, with the reason behind it."""

    model_config = {"frozen": True}

    action: CurationAction
    reasoning: str = Field("", description="Why this decision was made")
    confidence: float = Field(1.0, description="Confidence in the decision, 0-1")
    modifications: Dict[str, Any] = Field(default_factory=dict, description="Field overrides for MODIFY")

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, v: Any) -> Any:
        if not isinstance(v, (int, float)) or v != v:
            return 0.5
        return max(0.0, min(1.0, float(v)))

    @classmethod
    def accept(cls, reasoning: str, confidence: float = 1.0) -> "CurationDecision":
        return cls(action=CurationAction.ACCEPT, reasoning=reasoning, confidence=confidence)

    @classmethod
    def reject(cls, reasoning: str, confidence: float = 1.0) -> "CurationDecision":
        return cls(action=CurationAction.REJECT, reasoning=reasoning, confidence=confidence)

    @classmethod
    def defer(cls, reasoning: str, confidence: float = 0.5) -> "CurationDecision":
        return cls(action=CurationAction.DEFER, reasoning=reasoning, confidence=confidence)

    @classmethod
    def modify(
        cls,
        reasoning: str,
        modifications: Dict[str, Any],
        confidence: float = 0.8,
    ) -> "CurationDecision":
        return cls(
            action=CurationAction.MODIFY,
            reasoning=reasoning,
            confidence=confidence,
            modifications=dict(modifications),
        )

    @property
    def is_accept(self) -> bool:
        return self.action in (CurationAction.ACCEPT, CurationAction.CONFIRM)

    @property
    def is_reject(self) -> bool:
        return self.action == CurationAction.REJECT

    @property
    def is_defer(self) -> bool:
        return self.action == CurationAction.DEFER

    @property
    def is_modify(self) -> bool:
        return self.action == CurationAction.MODIFY

    def modification(self, key: str, default: Optional[Any] = None) -> Any:
        return self.modifications.get(key, default)
