"""Generation order: which accepted topic should be written first.

Sources of ordering relationships (prerequisite, implements, supersedes) come
before their targets. Suggestion sources are unreliable and the graph may have
cycles, so strongly connected components are condensed first. Each cycle is
emitted as a block ordered by priority then insertion, and reported.
"""

import logging
from typing import List, Sequence

import networkx as nx
from pydantic import BaseModel, Field

from .topic_contracts import Topic, TopicRelationship, TopicStatus

logger = logging.getLogger(__name__)


class GenerationPlan(BaseModel):
    """Ordered accepted topics plus anything the ordering had to compromise on."""
    topics: List[Topic] = Field(default_factory=list)
    cycle_topic_ids: List[str] = Field(default_factory=list, description="Topics ordered by fallback")
    warnings: List[str] = Field(default_factory=list)

    @property
    def has_cycles(self) -> bool:
        return bool(self.cycle_topic_ids)

    def topic_ids(self) -> List[str]:
        return [t.id for t in self.topics]


def ordering_graph(topics: Sequence[Topic], relationships: Sequence[TopicRelationship]) -> nx.DiGraph:
    """Directed graph of accepted topic ids and their confirmed ordering edges."""
    graph = nx.DiGraph()
    graph.add_nodes_from(t.id for t in topics if t.status == TopicStatus.ACCEPTED)
    for rel in relationships:
        if not rel.is_confirmed or not rel.type.implies_ordering():
            continue
        if rel.source_id in graph and rel.target_id in graph:
            graph.add_edge(rel.source_id, rel.target_id)
    return graph


def compute_generation_order(
    topics: Sequence[Topic],
    relationships: Sequence[TopicRelationship],
) -> GenerationPlan:
    """Order accepted topics so ordering-type edges point forward.

    Ties are broken by priority tier, then by insertion order.
    """
    accepted = [t for t in topics if t.status == TopicStatus.ACCEPTED]
    position = {t.id: i for i, t in enumerate(accepted)}
    by_id = {t.id: t for t in accepted}

    def rank(topic_id: str):
        return (by_id[topic_id].priority.tier, position[topic_id])

    graph = ordering_graph(accepted, relationships)
    condensed = nx.condensation(graph)
    members = {c: sorted(data["members"], key=rank) for c, data in condensed.nodes(data=True)}

    ordered: List[Topic] = []
    cycle_ids: List[str] = []
    warnings: List[str] = []
    for component in nx.lexicographical_topological_sort(condensed, key=lambda c: rank(members[c][0])):
        block = members[component]
        if len(block) > 1:
            cycle_ids.extend(block)
            names = ", ".join(by_id[m].name for m in block)
            message = f"Cycle among ordering relationships; ordered by priority instead: {names}"
            warnings.append(message)
            logger.warning(message)
        ordered.extend(by_id[m] for m in block)

    return GenerationPlan(topics=ordered, cycle_topic_ids=cycle_ids, warnings=warnings)
