"""Gap analysis contracts: coverage deficiencies in a topic set."""

from pydantic import BaseModel, Field, field_validator
from typing import Any, List, Optional
from enum import Enum


class GapSeverity(str, Enum):
    """How urgently a gap needs filling."""
    CRITICAL = "critical"  # Readers cannot follow the wiki without it
    MODERATE = "moderate"  # Noticeable, kept in the backlog
    MINOR = "minor"  # Acknowledged only


class GapType(str, Enum):
    """Kind of coverage deficiency."""
    MISSING_PREREQUISITE = "missing_prerequisite"
    MISSING_FUNDAMENTAL = "missing_fundamental"
    COVERAGE_GAP = "coverage_gap"
    DEPTH_IMBALANCE = "depth_imbalance"
    ORPHANED_TOPIC = "orphaned_topic"
    MISSING_COMPARISON = "missing_comparison"

    @classmethod
    def parse(cls, value: Any) -> "GapType":
        """Lenient lookup; anything unrecognized is a plain coverage gap."""
        if isinstance(value, GapType):
            return value
        key = str(value or "").strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return cls(key)
        except ValueError:
            return cls.COVERAGE_GAP


class Gap(BaseModel):
    """One gap reported by the analyzer."""

    model_config = {"frozen": True}

    type: GapType = GapType.COVERAGE_GAP
    description: str = Field(..., min_length=1)
    severity: GapSeverity = GapSeverity.MODERATE
    suggested_topic_name: Optional[str] = Field(None, description="Topic that would close the gap")

    @field_validator("type", mode="before")
    @classmethod
    def lenient_type(cls, v: Any) -> GapType:
        return GapType.parse(v)

    @field_validator("suggested_topic_name", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def has_suggestion(self) -> bool:
        return self.suggested_topic_name is not None

    def display(self) -> str:
        text = f"[{self.severity.name}] {self.type.name}: {self.description}"
        if self.suggested_topic_name:
            text += f" -> {self.suggested_topic_name}"
        return text


class GapAnalysisResult(BaseModel):
    """A full gap report for the current topic set."""
    gaps: List[Gap] = Field(default_factory=list)
    coverage_summary: str = ""

    def by_severity(self, severity: GapSeverity) -> List[Gap]:
        return [g for g in self.gaps if g.severity == severity]

    @property
    def critical_gaps(self) -> List[Gap]:
        return self.by_severity(GapSeverity.CRITICAL)

    @property
    def moderate_gaps(self) -> List[Gap]:
        return self.by_severity(GapSeverity.MODERATE)

    @property
    def minor_gaps(self) -> List[Gap]:
        return self.by_severity(GapSeverity.MINOR)

    def has_gaps(self) -> bool:
        return bool(self.gaps)


class GapOutcome(BaseModel):
    """What applying a gap report did to the session."""
    critical: int = 0
    moderate: int = 0
    minor: int = 0
    addressed: List[str] = Field(default_factory=list, description="Names of topics added for gaps")
    flagged: List[str] = Field(default_factory=list, description="Gap descriptions left in the backlog")

    @property
    def total(self) -> int:
        return self.critical + self.moderate + self.minor
