"""The Topic Universe: the finished plan produced by a discovery session."""

import uuid
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .ordering import GenerationPlan, compute_generation_order
from .topic_contracts import RelationshipStatus, ScopeConfiguration, Topic, TopicRelationship, TopicStatus


class BacklogOrigin(str, Enum):
    """Why an item ended up in the backlog."""
    DEFERRED = "deferred"
    GAP = "gap"


class BacklogItem(BaseModel):
    """A deferred topic or an unresolved gap kept for later."""

    model_config = {"frozen": True}

    title: str
    description: str = ""
    origin: BacklogOrigin = BacklogOrigin.DEFERRED


class TopicUniverse(BaseModel):
    """Snapshot of a planned wiki: topics, relationships, scope and backlog."""
    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    name: str = Field(..., min_length=1, description="Domain name")
    description: str = ""
    topics: List[Topic] = Field(default_factory=list)
    relationships: List[TopicRelationship] = Field(default_factory=list)
    scope: ScopeConfiguration = Field(default_factory=ScopeConfiguration)
    backlog: List[BacklogItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)

    def accepted_topics(self) -> List[Topic]:
        return [t for t in self.topics if t.status == TopicStatus.ACCEPTED]

    def confirmed_relationships(self) -> List[TopicRelationship]:
        return [r for r in self.relationships if r.status == RelationshipStatus.CONFIRMED]

    @property
    def accepted_count(self) -> int:
        return len(self.accepted_topics())

    @property
    def estimated_word_count(self) -> int:
        return sum(t.estimated_words for t in self.accepted_topics())

    def landing_page(self) -> Optional[Topic]:
        return next((t for t in self.accepted_topics() if t.is_landing_page), None)

    def get_topic(self, topic_id: str) -> Optional[Topic]:
        return next((t for t in self.topics if t.id == topic_id), None)

    def generation_plan(self) -> GenerationPlan:
        """Accepted topics in authoring order, with cycle diagnostics."""
        return compute_generation_order(self.topics, self.relationships)

    def generation_order(self) -> List[Topic]:
        return self.generation_plan().topics

    def summary(self) -> str:
        return (
            f"{self.name}: {self.accepted_count} topics, "
            f"{len(self.confirmed_relationships())} relationships, "
            f"~{self.estimated_word_count:,} words, {len(self.backlog)} backlog items"
        )
