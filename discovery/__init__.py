"""Discovery engine: session state machine, curation and post-processing."""

from .errors import DiscoveryError, PhaseTransitionError
from .parsing import ParseResult, extract_json
from .session import DiscoveryPhase, DiscoverySession, DroppedItem
from .stopping import StoppingCriteria
from .context import AutonomousContext
from .curator import Curator
from .gaps import apply_gap_report
from .prioritization import calibrate_depth, prioritize
from .autonomous_config import AutonomousConfig

__all__ = [
    "DiscoveryError",
    "PhaseTransitionError",
    "ParseResult",
    "extract_json",
    "DiscoveryPhase",
    "DiscoverySession",
    "DroppedItem",
    "StoppingCriteria",
    "AutonomousContext",
    "Curator",
    "apply_gap_report",
    "calibrate_depth",
    "prioritize",
    "AutonomousConfig",
]
