"""Tests for the autonomous discovery orchestrator.

The agents are replaced with mocks; the curator, session and command table
run for real.
"""

import io
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from agents import InferredScope
from contracts import (
    BALANCED,
    MINIMAL,
    Gap,
    GapAnalysisResult,
    GapSeverity,
    GapType,
    RelationshipSuggestion,
    RelationshipType,
    ScopeConfiguration,
    TopicStatus,
    TopicSuggestion,
)
from discovery import AutonomousConfig, DiscoveryPhase, StoppingCriteria
from orchestrator import AutonomousDiscoverySession, ProgressReporter


def reporter():
    return ProgressReporter(console=Console(file=io.StringIO(), width=120), verbose=True)


def good(name):
    return TopicSuggestion(name=name, relevance=0.9, search_confidence=0.9)


def poor(name):
    return TopicSuggestion(name=name, relevance=0.5)


def make_run(config, seeds=("Topics", "Partitions"), expand=None, relationships=(), gaps=None, confirm=None):
    reasoning = MagicMock()
    run = AutonomousDiscoverySession(config, reasoning, MagicMock(), reporter=reporter(), confirm=confirm)
    run.scope_inferrer = MagicMock()
    run.scope_inferrer.infer.return_value = InferredScope(
        scope=ScopeConfiguration(audience_description="Backend developers"),
        seeds=list(seeds),
    )
    run.expander = MagicMock()
    run.expander.expand.side_effect = expand or (lambda topic, session: [])
    run.suggester = MagicMock()
    run.suggester.analyze_all_relationships.return_value = list(relationships)
    run.gap_analyzer = MagicMock()
    run.gap_analyzer.analyze.return_value = gaps or GapAnalysisResult()
    return run


class TestFullRun:
    """Test a complete autonomous run."""

    def test_minimal_profile_run(self):
        config = AutonomousConfig(domain_name="Apache Kafka", seed_topics=["Topics", "Partitions"], cost_profile=MINIMAL)
        run = make_run(
            config,
            expand=lambda topic, session: [good(f"{topic.name} Internals"), poor(f"{topic.name} Trivia")],
            relationships=[
                RelationshipSuggestion(source_name="Topics", target_name="Partitions",
                                       type=RelationshipType.PREREQUISITE_OF, confidence=0.9),
                RelationshipSuggestion(source_name="Topics Internals", target_name="Topics",
                                       type=RelationshipType.PART_OF, confidence=0.6),
                RelationshipSuggestion(source_name="Partitions", target_name="Apache Kafka",
                                       type=RelationshipType.PART_OF, confidence=0.3),
            ],
        )

        universe = run.run()

        assert universe is not None
        assert run.session.phase == DiscoveryPhase.COMPLETE
        assert sorted(t.name for t in universe.accepted_topics()) == [
            "Apache Kafka", "Apache Kafka Internals", "Partitions", "Topics", "Topics Internals",
        ]
        rejected = [t.name for t in universe.topics if t.status == TopicStatus.REJECTED]
        assert sorted(rejected) == ["Apache Kafka Trivia", "Topics Trivia"]
        assert len(universe.confirmed_relationships()) == 2
        assert universe.landing_page().name == "Apache Kafka"
        assert universe.scope.audience_description == "Backend developers"

        # MINIMAL: one round, no gap analysis
        assert run.expander.expand.call_count == 2
        run.gap_analyzer.analyze.assert_not_called()

        events = run.reporter
        assert [e.message for e in events.events_of("phase_started")] == [
            "Inferring scope from description",
            "Expanding topics",
            "Mapping relationships",
            "Calibrating depth and prioritizing",
            "Finalizing universe",
        ]
        assert events.events_of("round_complete")[0].data == {"added": 2, "total": 5}
        assert events.events_of("relationships_confirmed")[0].data == {"high": 1, "borderline": 1}
        assert len(events.events_of("topic_rejected")) == 2

    def test_seed_matching_domain_is_not_duplicated(self):
        config = AutonomousConfig(domain_name="Apache Kafka", cost_profile=MINIMAL)
        universe = make_run(config, seeds=["apache kafka", "Topics"]).run()
        assert sorted(t.name for t in universe.accepted_topics()) == ["Apache Kafka", "Topics"]

    def test_gap_analysis_and_dry_run(self):
        config = AutonomousConfig(domain_name="Apache Kafka", cost_profile=BALANCED, dry_run=True)
        report = GapAnalysisResult(gaps=[Gap(
            type=GapType.MISSING_PREREQUISITE, description="No commit log intro",
            severity=GapSeverity.CRITICAL, suggested_topic_name="Commit Logs",
        )])
        run = make_run(config, gaps=report)

        assert run.run() is None
        assert run.session.phase == DiscoveryPhase.REVIEW
        assert run.session.find_topic_by_name("Commit Logs").is_accepted
        assert run.reporter.events_of("gaps_found")[0].data["addressed"] == 1
        assert run.reporter.events_of("dry_run")[0].data == {"topics": 4, "relationships": 0}
        assert run.reporter.events_of("convergence")[0].message == "No more topics to expand"


class TestStoppingRules:
    """Test how expansion ends."""

    def test_stops_at_maximum_topics(self):
        config = AutonomousConfig(
            domain_name="Apache Kafka",
            stopping_criteria=StoppingCriteria(min_topics=1, max_topics=4, max_expansion_rounds=3),
        )
        run = make_run(config, expand=lambda topic, session: [good(f"{topic.name} {i}") for i in range(3)])
        universe = run.run()
        assert universe.accepted_count == 4
        assert run.expander.expand.call_count == 1
        assert run.reporter.events_of("convergence")[-1].message == "Maximum topic count reached"

    def test_stops_after_low_quality_rounds(self):
        config = AutonomousConfig(
            domain_name="Apache Kafka",
            stopping_criteria=StoppingCriteria(
                min_topics=1, max_topics=40, max_expansion_rounds=5, max_consecutive_low_quality_rounds=2,
            ),
        )
        run = make_run(
            config,
            seeds=["A", "B", "C", "D"],
            expand=lambda topic, session: [poor(f"{topic.name} Trivia")],
        )
        run.run()
        assert len(run.reporter.events_of("round_complete")) == 2
        assert run.reporter.events_of("convergence")[-1].message == "Multiple low-quality rounds"

    def test_round_limit(self):
        config = AutonomousConfig(domain_name="Apache Kafka", cost_profile=MINIMAL)
        run = make_run(config, expand=lambda topic, session: [good(f"{topic.name} More")])
        run.run()
        assert len(run.reporter.events_of("round_complete")) == 1


class TestScope:
    """Test scope inference and confirmation."""

    def test_cancelled_by_user(self):
        config = AutonomousConfig(domain_name="Apache Kafka", confirm_before_proceeding=True)
        confirm = MagicMock(return_value=False)
        run = make_run(config, confirm=confirm)
        assert run.run() is None
        confirm.assert_called_once()
        run.expander.expand.assert_not_called()
        assert run.reporter.events_of("info")[-1].message == "Cancelled by user."
        assert run.reporter.events_of("scope")[0].data["seeds"] == ["Topics", "Partitions"]

    def test_confirmed_run_proceeds(self):
        config = AutonomousConfig(domain_name="Apache Kafka", cost_profile=MINIMAL, confirm_before_proceeding=True)
        assert make_run(config, confirm=lambda: True).run() is not None

    def test_inference_failure_uses_fallback_scope(self):
        config = AutonomousConfig(domain_name="Apache Kafka", cost_profile=MINIMAL, dry_run=True)
        reasoning = MagicMock()
        reasoning.generate.side_effect = RuntimeError("provider down")
        run = AutonomousDiscoverySession(config, reasoning, MagicMock(), reporter=reporter())
        run.expander = MagicMock()
        run.expander.expand.return_value = []
        run.suggester = MagicMock()
        run.suggester.analyze_all_relationships.return_value = []

        run.run()

        assert run.reporter.events_of("warning")[0].message == "Fallback: using minimal scope due to inference failure"
        assert sorted(run.session.accepted_topic_names()) == [
            "Apache Kafka", "Apache Kafka Fundamentals", "Apache Kafka Overview",
        ]
