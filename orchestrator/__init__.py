"""Orchestrators that drive a discovery session in each mode."""

from .progress import ProgressEvent, ProgressReporter
from .curation_commands import (
    CurationCommand,
    CurationResult,
    SimpleCurationCommand,
    ModifyTopicCommand,
    ChangeRelationshipTypeCommand,
    apply_decision,
)
from .autonomous_session import AutonomousDiscoverySession
from .interactive_session import InteractiveDiscoverySession

__all__ = [
    "ProgressEvent",
    "ProgressReporter",
    "CurationCommand",
    "CurationResult",
    "SimpleCurationCommand",
    "ModifyTopicCommand",
    "ChangeRelationshipTypeCommand",
    "apply_decision",
    "AutonomousDiscoverySession",
    "InteractiveDiscoverySession",
]
