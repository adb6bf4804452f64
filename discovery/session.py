"""Discovery session: the state machine that builds a topic universe.

The session owns every topic and relationship produced during discovery.
Callers never edit topics directly; they go through the operations below,
each of which keeps two invariants:

- accepted topic names are unique, compared case-insensitively
- confirmed (source, target, type) relationship triples are unique

Operations return True when they changed state. Suggestions that would break
an invariant are dropped and recorded in `dropped` rather than raised, since
the suggestion source is not a trusted caller.
"""

import logging
import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel

from contracts import (
    BALANCED,
    BacklogItem,
    BacklogOrigin,
    ComplexityLevel,
    ContentType,
    CostProfile,
    Priority,
    RelationshipStatus,
    RelationshipSuggestion,
    RelationshipType,
    ScopeConfiguration,
    Topic,
    TopicRelationship,
    TopicStatus,
    TopicSuggestion,
    TopicUniverse,
    normalize_name,
    slugify,
)

from .errors import PhaseTransitionError

logger = logging.getLogger(__name__)


class DiscoveryPhase(str, Enum):
    """Ordered phases of a discovery session."""
    SEED_INPUT = "seed_input"
    SCOPE_SETUP = "scope_setup"
    TOPIC_EXPANSION = "topic_expansion"
    RELATIONSHIP_MAPPING = "relationship_mapping"
    GAP_ANALYSIS = "gap_analysis"
    DEPTH_CALIBRATION = "depth_calibration"
    PRIORITIZATION = "prioritization"
    REVIEW = "review"
    COMPLETE = "complete"

    @property
    def index(self) -> int:
        return list(DiscoveryPhase).index(self)

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()


class DroppedItem(BaseModel):
    """A suggestion the session refused, with the reason."""
    kind: str  # "topic", "relationship" or "gap"
    name: str
    reason: str


# Overrides accepted by modify_and_accept_topic, mapped to suggestion fields
_SUGGESTION_OVERRIDES = {
    "name": "name",
    "description": "description",
    "category": "category",
    "content_type": "content_type",
    "complexity": "complexity",
    "word_count": "word_count",
    "estimated_words": "word_count",
}


class DiscoverySession:
    """Mutable state of one discovery run, passed explicitly to every collaborator."""

    def __init__(
        self,
        domain_name: str,
        cost_profile: Optional[CostProfile] = None,
        domain_description: str = "",
    ):
        if not domain_name or not domain_name.strip():
            raise ValueError("domain_name cannot be blank")
        self.domain_name = domain_name.strip()
        self.domain_description = domain_description
        self.cost_profile = cost_profile or BALANCED
        self.scope = ScopeConfiguration()
        self.phase = DiscoveryPhase.SEED_INPUT
        self.universe_id = uuid.uuid4().hex[:12]
        self.created_at = datetime.now()

        self._topics: Dict[str, Topic] = {}
        self._relationships: List[TopicRelationship] = []
        self._backlog: List[BacklogItem] = []
        self._seed_names: List[str] = []

        self.identified_gaps: List[str] = []
        self.addressed_gaps: Dict[str, str] = {}
        self.ignored_gaps: List[str] = []
        self.dropped: List[DroppedItem] = []

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def _is_skipped(self, phase: DiscoveryPhase) -> bool:
        return phase == DiscoveryPhase.GAP_ANALYSIS and self.cost_profile.skip_gap_analysis

    def _next_phase(self, phase: DiscoveryPhase) -> DiscoveryPhase:
        phases = list(DiscoveryPhase)
        nxt = phases[phase.index + 1]
        if self._is_skipped(nxt):
            nxt = phases[nxt.index + 1]
        return nxt

    def advance(self) -> DiscoveryPhase:
        """Move forward exactly one phase (skipping gap analysis if the profile says so)."""
        if self.phase == DiscoveryPhase.COMPLETE:
            raise PhaseTransitionError(self.phase, reason="session is already complete")
        previous = self.phase
        self.phase = self._next_phase(self.phase)
        logger.debug("Session %s: %s -> %s", self.universe_id, previous.name, self.phase.name)
        return self.phase

    def advance_to(self, target: DiscoveryPhase) -> DiscoveryPhase:
        """Advance until `target` is reached. Going backwards is not allowed."""
        if target.index < self.phase.index:
            raise PhaseTransitionError(self.phase, target, "phases only move forward")
        if self._is_skipped(target):
            raise PhaseTransitionError(self.phase, target, "phase is skipped by the cost profile")
        while self.phase != target:
            self.advance()
        return self.phase

    @property
    def is_complete(self) -> bool:
        return self.phase == DiscoveryPhase.COMPLETE

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def configure_scope(self, scope: ScopeConfiguration) -> bool:
        if scope == self.scope:
            return False
        self.scope = scope
        return True

    def set_domain_description(self, description: str) -> bool:
        description = (description or "").strip()
        if description == self.domain_description:
            return False
        self.domain_description = description
        return True

    def set_cost_profile(self, profile: CostProfile) -> bool:
        if profile == self.cost_profile:
            return False
        self.cost_profile = profile
        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _drop(self, kind: str, name: str, reason: str) -> bool:
        self.dropped.append(DroppedItem(kind=kind, name=name, reason=reason))
        logger.debug("Dropped %s %r: %s", kind, name, reason)
        return False

    def _unique_id(self, name: str) -> str:
        base = slugify(name)
        candidate = base
        suffix = 2
        while candidate in self._topics:
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    def _put(self, topic: Topic) -> Topic:
        self._topics[topic.id] = topic
        return topic

    def _remove_backlog(self, title: str, origin: BacklogOrigin) -> None:
        key = normalize_name(title)
        self._backlog = [
            b for b in self._backlog
            if not (b.origin == origin and normalize_name(b.title) == key)
        ]

    def _topic_fields(self, suggestion: TopicSuggestion) -> Dict[str, Any]:
        return {
            "name": suggestion.name,
            "description": suggestion.description,
            "category": suggestion.category,
            "content_type": suggestion.content_type,
            "complexity": suggestion.complexity,
            "estimated_words": suggestion.word_count,
            "added_reason": suggestion.rationale,
        }

    def _set_status(self, topic: Topic, status: TopicStatus, **changes: Any) -> Topic:
        if topic.status == TopicStatus.DEFERRED and status != TopicStatus.DEFERRED:
            self._remove_backlog(topic.name, BacklogOrigin.DEFERRED)
        return self._put(topic.model_copy(update={"status": status, **changes}))

    def _record(self, suggestion: TopicSuggestion, status: TopicStatus, **extra: Any) -> Topic:
        """Store a suggestion under `status`, reusing any existing entry for its name."""
        fields = self._topic_fields(suggestion)
        fields.update(extra)
        existing = self.find_topic_by_name(suggestion.name)
        if existing is not None:
            return self._set_status(existing, status, **fields)
        return self._put(Topic.create(id=self._unique_id(suggestion.name), status=status, **fields))

    # ------------------------------------------------------------------
    # Topics
    # ------------------------------------------------------------------

    def add_seed_topic(self, name: str, description: str = "") -> bool:
        """Accept a user-supplied topic directly, bypassing curation."""
        name = (name or "").strip()
        if not name:
            return self._drop("topic", name, "blank seed name")
        if normalize_name(name) not in {normalize_name(s) for s in self._seed_names}:
            self._seed_names.append(name)

        existing = self.find_topic_by_name(name)
        if existing is not None:
            if existing.is_accepted:
                return False
            self._set_status(existing, TopicStatus.ACCEPTED, priority=Priority.MUST_HAVE, added_reason="Seed topic")
            return True
        self._put(Topic.create(
            name,
            id=self._unique_id(name),
            description=description,
            status=TopicStatus.ACCEPTED,
            priority=Priority.MUST_HAVE,
            added_reason="Seed topic",
        ))
        return True

    def add_landing_page(self, name: str, description: str = "") -> bool:
        """Accept the overview page every other topic hangs off."""
        name = (name or "").strip()
        if not name:
            return self._drop("topic", name, "blank landing page name")
        if self.landing_page() is not None:
            return self._drop("topic", name, "landing page already exists")

        fields = dict(
            description=description,
            status=TopicStatus.ACCEPTED,
            priority=Priority.MUST_HAVE,
            content_type=ContentType.OVERVIEW,
            complexity=ComplexityLevel.BEGINNER,
            is_landing_page=True,
            added_reason="Landing page",
        )
        existing = self.find_topic_by_name(name)
        if existing is not None:
            self._set_status(existing, **fields)
            return True
        self._put(Topic.create(name, id=self._unique_id(name), **fields))
        return True

    def accept_topic_suggestion(self, suggestion: TopicSuggestion) -> bool:
        existing = self.find_topic_by_name(suggestion.name)
        if existing is not None and existing.is_accepted:
            return False
        self._record(suggestion, TopicStatus.ACCEPTED)
        return True

    def reject_topic_suggestion(self, suggestion: TopicSuggestion) -> bool:
        existing = self.find_topic_by_name(suggestion.name)
        if existing is not None and existing.status in (TopicStatus.ACCEPTED, TopicStatus.REJECTED):
            return False
        self._record(suggestion, TopicStatus.REJECTED)
        return True

    def defer_topic_suggestion(self, suggestion: TopicSuggestion) -> bool:
        existing = self.find_topic_by_name(suggestion.name)
        if existing is not None and existing.status in (TopicStatus.ACCEPTED, TopicStatus.DEFERRED):
            return False
        self._record(suggestion, TopicStatus.DEFERRED)
        self._backlog.append(BacklogItem(
            title=suggestion.name,
            description=suggestion.description,
            origin=BacklogOrigin.DEFERRED,
        ))
        return True

    def modify_and_accept_topic(self, suggestion: TopicSuggestion, overrides: Dict[str, Any]) -> bool:
        """Accept a suggestion after applying field overrides (name, complexity, ...)."""
        overrides = overrides or {}
        data = suggestion.model_dump()
        topic_extra: Dict[str, Any] = {}
        for key, value in overrides.items():
            if value is None or value == "":
                continue
            if key in _SUGGESTION_OVERRIDES:
                data[_SUGGESTION_OVERRIDES[key]] = value
            elif key == "priority":
                topic_extra["priority"] = Priority(value)
            else:
                logger.debug("Ignoring unknown override %r", key)
        if "complexity" in overrides and not any(k in overrides for k in ("word_count", "estimated_words")):
            data["word_count"] = 0
        modified = TopicSuggestion.model_validate(data)

        existing = self.find_topic_by_name(modified.name)
        if existing is not None and existing.is_accepted:
            return False
        self._record(modified, TopicStatus.ACCEPTED, **topic_extra)
        return True

    def update_topic_priority(self, topic_id: str, priority: Priority) -> bool:
        topic = self._topics.get(topic_id)
        if topic is None or topic.priority == priority:
            return False
        self._put(topic.model_copy(update={"priority": priority}))
        return True

    def update_topic_depth(self, topic_id: str, complexity: ComplexityLevel, estimated_words: int) -> bool:
        topic = self._topics.get(topic_id)
        if topic is None:
            return False
        if topic.complexity == complexity and topic.estimated_words == estimated_words:
            return False
        self._put(topic.model_copy(update={"complexity": complexity, "estimated_words": max(0, estimated_words)}))
        return True

    # ------------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------------

    def _resolve(self, name: str) -> Optional[Topic]:
        key = normalize_name(name)
        for topic in self._topics.values():
            if topic.status != TopicStatus.REJECTED and topic.normalized_name == key:
                return topic
        return None

    def _resolve_endpoints(self, suggestion: RelationshipSuggestion, rel_type: RelationshipType):
        source = self._resolve(suggestion.source_name)
        target = self._resolve(suggestion.target_name)
        label = suggestion.describe()
        if source is None or target is None:
            missing = suggestion.source_name if source is None else suggestion.target_name
            self._drop("relationship", label, f"unknown topic: {missing}")
            return None
        if source.id == target.id:
            self._drop("relationship", label, "self-referential relationship")
            return None
        return source.id, target.id, rel_type

    def _find_relationship(self, key) -> Optional[int]:
        for index, rel in enumerate(self._relationships):
            if rel.key == key:
                return index
        return None

    def confirm_relationship(self, suggestion: RelationshipSuggestion) -> bool:
        return self._confirm(suggestion, suggestion.type)

    def change_relationship_type(self, suggestion: RelationshipSuggestion, new_type: RelationshipType) -> bool:
        """Confirm the relationship under a different type."""
        return self._confirm(suggestion, new_type)

    def _confirm(self, suggestion: RelationshipSuggestion, rel_type: RelationshipType) -> bool:
        key = self._resolve_endpoints(suggestion, rel_type)
        if key is None:
            return False
        index = self._find_relationship(key)
        confirmed = TopicRelationship(
            source_id=key[0], target_id=key[1], type=rel_type, status=RelationshipStatus.CONFIRMED,
        )
        if index is None:
            self._relationships.append(confirmed)
            return True
        if self._relationships[index].is_confirmed:
            return self._drop("relationship", suggestion.describe(), "duplicate relationship")
        self._relationships[index] = confirmed
        return True

    def reject_relationship(self, suggestion: RelationshipSuggestion) -> bool:
        key = self._resolve_endpoints(suggestion, suggestion.type)
        if key is None:
            return False
        if self._find_relationship(key) is not None:
            return False
        self._relationships.append(TopicRelationship(
            source_id=key[0], target_id=key[1], type=suggestion.type, status=RelationshipStatus.REJECTED,
        ))
        return True

    # ------------------------------------------------------------------
    # Gaps
    # ------------------------------------------------------------------

    def _known_gap(self, description: str) -> bool:
        key = normalize_name(description)
        return any(normalize_name(g) == key for g in self.identified_gaps)

    def add_gaps(self, descriptions: Iterable[str]) -> bool:
        """Record outstanding gaps and keep them in the backlog."""
        changed = False
        for description in descriptions:
            description = (description or "").strip()
            if not description or self._known_gap(description):
                continue
            self.identified_gaps.append(description)
            self._backlog.append(BacklogItem(title=description, origin=BacklogOrigin.GAP))
            changed = True
        return changed

    def address_gap_with_topic(self, gap_description: str, topic: Topic) -> bool:
        """Close a gap by accepting a topic for it."""
        if not self._known_gap(gap_description):
            self.identified_gaps.append(gap_description)
        existing = self.find_topic_by_name(topic.name)
        if existing is not None and existing.is_accepted:
            self.addressed_gaps[gap_description] = existing.name
            self._remove_backlog(gap_description, BacklogOrigin.GAP)
            return False

        fields = topic.model_dump(exclude={"id", "status"})
        if existing is not None:
            self._set_status(existing, TopicStatus.ACCEPTED, **fields)
        else:
            self._put(topic.model_copy(update={"id": self._unique_id(topic.name), "status": TopicStatus.ACCEPTED}))
        self.addressed_gaps[gap_description] = topic.name
        self._remove_backlog(gap_description, BacklogOrigin.GAP)
        return True

    def ignore_gap(self, description: str) -> bool:
        key = normalize_name(description)
        if any(normalize_name(g) == key for g in self.ignored_gaps):
            return False
        self.ignored_gaps.append(description)
        return True

    def outstanding_gaps(self) -> List[str]:
        ignored = {normalize_name(g) for g in self.ignored_gaps}
        addressed = {normalize_name(g) for g in self.addressed_gaps}
        return [
            g for g in self.identified_gaps
            if normalize_name(g) not in ignored and normalize_name(g) not in addressed
        ]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_topic_by_name(self, name: str) -> Optional[Topic]:
        key = normalize_name(name)
        return next((t for t in self._topics.values() if t.normalized_name == key), None)

    def get_topic(self, topic_id: str) -> Optional[Topic]:
        return self._topics.get(topic_id)

    def all_topics(self) -> List[Topic]:
        return list(self._topics.values())

    def _names_with_status(self, status: TopicStatus) -> List[str]:
        return [t.name for t in self._topics.values() if t.status == status]

    def accepted_topics(self) -> List[Topic]:
        return [t for t in self._topics.values() if t.is_accepted]

    def accepted_topic_names(self) -> List[str]:
        return self._names_with_status(TopicStatus.ACCEPTED)

    def rejected_topic_names(self) -> List[str]:
        return self._names_with_status(TopicStatus.REJECTED)

    def deferred_topic_names(self) -> List[str]:
        return self._names_with_status(TopicStatus.DEFERRED)

    @property
    def accepted_count(self) -> int:
        return len(self.accepted_topics())

    @property
    def seed_names(self) -> List[str]:
        return list(self._seed_names)

    @property
    def relationships(self) -> List[TopicRelationship]:
        return list(self._relationships)

    def confirmed_relationships(self) -> List[TopicRelationship]:
        return [r for r in self._relationships if r.is_confirmed]

    @property
    def backlog(self) -> List[BacklogItem]:
        return list(self._backlog)

    def landing_page(self) -> Optional[Topic]:
        return next((t for t in self.accepted_topics() if t.is_landing_page), None)

    def build_universe(self) -> TopicUniverse:
        """Snapshot the current state. Safe to call at any phase."""
        return TopicUniverse(
            id=self.universe_id,
            name=self.domain_name,
            description=self.domain_description,
            topics=list(self._topics.values()),
            relationships=list(self._relationships),
            scope=self.scope,
            backlog=list(self._backlog),
            created_at=self.created_at,
        )

    def summary(self) -> str:
        return (
            f"{self.domain_name} [{self.phase.display_name}]: "
            f"{self.accepted_count} accepted, {len(self.rejected_topic_names())} rejected, "
            f"{len(self.deferred_topic_names())} deferred, "
            f"{len(self.confirmed_relationships())} relationships"
        )
