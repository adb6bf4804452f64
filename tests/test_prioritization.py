"""Tests for prioritization, depth calibration and generation order."""

from contracts import (
    BALANCED,
    COMPREHENSIVE,
    MINIMAL,
    ComplexityLevel,
    Priority,
    RelationshipStatus,
    RelationshipSuggestion,
    RelationshipType,
    Topic,
    TopicRelationship,
    TopicStatus,
    TopicSuggestion,
    TopicUniverse,
    compute_generation_order,
)
from discovery import DiscoverySession, calibrate_depth, prioritize
from discovery.prioritization import calibrated_words, depth_proposals


def accepted(name, priority=Priority.SHOULD_HAVE):
    return Topic.create(name, status=TopicStatus.ACCEPTED, priority=priority)


def edge(source, target, rel_type=RelationshipType.PREREQUISITE_OF, status=RelationshipStatus.CONFIRMED):
    return TopicRelationship(source_id=source.id, target_id=target.id, type=rel_type, status=status)


class TestCalibratedWords:
    """Test word-count calibration."""

    def test_rounding(self):
        assert calibrated_words(ComplexityLevel.INTERMEDIATE, 0.6) == 600
        assert calibrated_words(ComplexityLevel.BEGINNER, 0.6) == 350
        assert calibrated_words(ComplexityLevel.ADVANCED, 1.3) == 1950

    def test_minimum(self):
        assert calibrated_words(ComplexityLevel.BEGINNER, 0.1) == 200


class TestDepthCalibration:
    """Test calibrate_depth."""

    def test_minimal_caps_complexity(self):
        session = DiscoverySession("Apache Kafka", cost_profile=MINIMAL)
        session.add_landing_page("Apache Kafka")
        session.accept_topic_suggestion(TopicSuggestion(name="Exactly Once", complexity=ComplexityLevel.ADVANCED))
        assert calibrate_depth(session, MINIMAL) == 1
        topic = session.find_topic_by_name("Exactly Once")
        assert topic.complexity == ComplexityLevel.INTERMEDIATE
        assert topic.estimated_words == 600
        assert session.landing_page().estimated_words == 600

    def test_balanced_leaves_defaults_alone(self):
        session = DiscoverySession("Apache Kafka")
        session.accept_topic_suggestion(TopicSuggestion(name="Partitions"))
        assert depth_proposals(session, BALANCED) == []
        assert calibrate_depth(session, BALANCED) == 0

    def test_comprehensive_expands(self):
        session = DiscoverySession("Apache Kafka")
        session.accept_topic_suggestion(TopicSuggestion(name="Partitions"))
        calibrate_depth(session, COMPREHENSIVE)
        assert session.find_topic_by_name("Partitions").estimated_words == 1300


class TestPrioritize:
    """Test rule-based prioritization."""

    def test_rules(self):
        session = DiscoverySession("Apache Kafka")
        session.add_landing_page("Apache Kafka")
        session.add_seed_topic("Topics")
        for name in ["Logs", "Partitions", "Replication", "Consumers", "Extras"]:
            session.accept_topic_suggestion(TopicSuggestion(name=name))
        for target in ["Partitions", "Replication", "Consumers"]:
            session.confirm_relationship(RelationshipSuggestion(
                source_name="Logs", target_name=target, type=RelationshipType.PREREQUISITE_OF,
            ))

        changed = prioritize(session)

        priority = {t.name: t.priority for t in session.accepted_topics()}
        assert priority["Apache Kafka"] == Priority.MUST_HAVE
        assert priority["Topics"] == Priority.MUST_HAVE
        assert priority["Logs"] == Priority.MUST_HAVE
        assert priority["Extras"] == Priority.SHOULD_HAVE
        assert changed == 1

    def test_idempotent(self):
        session = DiscoverySession("Apache Kafka")
        session.accept_topic_suggestion(TopicSuggestion(name="Partitions"))
        prioritize(session)
        assert prioritize(session) == 0


class TestGenerationOrder:
    """Test compute_generation_order."""

    def test_prerequisites_come_first(self):
        logs, partitions, consumers = accepted("Logs"), accepted("Partitions"), accepted("Consumers")
        plan = compute_generation_order(
            [consumers, partitions, logs],
            [edge(logs, partitions), edge(partitions, consumers)],
        )
        assert [t.name for t in plan.topics] == ["Logs", "Partitions", "Consumers"]
        assert not plan.has_cycles
        assert plan.warnings == []

    def test_priority_breaks_ties(self):
        a = accepted("Nice", Priority.NICE_TO_HAVE)
        b = accepted("Must", Priority.MUST_HAVE)
        c = accepted("Should")
        plan = compute_generation_order([a, b, c], [])
        assert plan.topic_ids() == [b.id, c.id, a.id]

    def test_non_ordering_and_unconfirmed_edges_are_ignored(self):
        a, b = accepted("A"), accepted("B")
        plan = compute_generation_order([a, b], [
            edge(b, a, RelationshipType.RELATED_TO),
            edge(b, a, status=RelationshipStatus.REJECTED),
        ])
        assert [t.name for t in plan.topics] == ["A", "B"]

    def test_unaccepted_topics_are_left_out(self):
        a = accepted("A")
        rejected = Topic.create("B", status=TopicStatus.REJECTED)
        assert compute_generation_order([a, rejected], []).topic_ids() == [a.id]

    def test_cycle_is_reported_and_kept(self):
        a = accepted("A")
        b = accepted("B", Priority.MUST_HAVE)
        c = accepted("C")
        plan = compute_generation_order([a, b, c], [edge(a, b), edge(b, a), edge(a, c)])
        assert [t.name for t in plan.topics] == ["B", "A", "C"]
        assert plan.has_cycles
        assert plan.warnings == ["Cycle among ordering relationships; ordered by priority instead: B, A"]

    def test_universe_plan(self):
        intro = accepted("Intro", Priority.MUST_HAVE)
        advanced = accepted("Advanced")
        dropped = Topic.create("Dropped", status=TopicStatus.REJECTED)
        universe = TopicUniverse(
            name="Kafka",
            topics=[advanced, intro, dropped],
            relationships=[edge(intro, advanced)],
        )
        assert [t.name for t in universe.generation_plan().topics] == ["Intro", "Advanced"]
