"""Tests for the interactive discovery session.

Answers are fed through an input stream in the order the prompts appear.
"""

import io
from unittest.mock import MagicMock

from rich.console import Console

from contracts import (
    BALANCED,
    MINIMAL,
    ComplexityLevel,
    Gap,
    GapAnalysisResult,
    GapSeverity,
    GapType,
    RelationshipSuggestion,
    RelationshipType,
    TopicStatus,
    TopicSuggestion,
)
from discovery import DiscoveryPhase
from orchestrator import InteractiveDiscoverySession

SCOPE_DEFAULTS = ["", "", "", "", ""]


def make_session(answers, expand=None, relationships=(), gaps=None, **kwargs):
    output = io.StringIO()
    kwargs.setdefault("domain_name", "Apache Kafka")
    kwargs.setdefault("description", "Event streaming for backend developers")
    kwargs.setdefault("seeds", ("Topics",))
    kwargs.setdefault("cost_profile", MINIMAL)
    interactive = InteractiveDiscoverySession(
        MagicMock(),
        MagicMock(),
        console=Console(file=output, width=120),
        stream=io.StringIO("".join(f"{a}\n" for a in answers)),
        **kwargs,
    )
    interactive.expander = MagicMock()
    interactive.expander.expand.side_effect = expand or (lambda topic, session: [])
    interactive.suggester = MagicMock()
    interactive.suggester.analyze_all_relationships.return_value = list(relationships)
    interactive.gap_analyzer = MagicMock()
    interactive.gap_analyzer.analyze.return_value = gaps or GapAnalysisResult()
    return interactive, output


class TestInteractiveRun:
    """Test a complete interactive run."""

    def test_full_run(self):
        suggestions = {
            "Apache Kafka": [TopicSuggestion(name="Partitions"), TopicSuggestion(name="Zookeeper")],
            "Topics": [TopicSuggestion(name="Retention"), TopicSuggestion(name="Compaction")],
        }
        relationships = [
            RelationshipSuggestion(source_name="Topics", target_name="Partitions",
                                   type=RelationshipType.PREREQUISITE_OF, confidence=0.9),
            RelationshipSuggestion(source_name="Partitions", target_name="Apache Kafka",
                                   type=RelationshipType.RELATED_TO, confidence=0.6),
        ]
        answers = [
            "",                      # seed topics: keep "Topics"
            "Backend developers",    # audience
            "HTTP, JSON",            # assumed knowledge
            "", "", "",              # out of scope, focus areas, language
            "a", "r",                # Partitions, Zookeeper
            "d", "s",                # Retention, then skip Compaction
            "c",                     # Topics -> Partitions
            "t", "part_of",          # Partitions -> Apache Kafka, retyped
            "y",                     # apply depth calibration
            "y",                     # save
        ]
        interactive, output = make_session(
            answers, expand=lambda topic, session: suggestions[topic.name], relationships=relationships,
        )

        universe = interactive.run()

        assert universe is not None
        assert interactive.session.phase == DiscoveryPhase.COMPLETE
        assert sorted(t.name for t in universe.accepted_topics()) == ["Apache Kafka", "Partitions", "Topics"]
        status = {t.name: t.status for t in universe.topics}
        assert status["Zookeeper"] == TopicStatus.REJECTED
        assert status["Retention"] == TopicStatus.DEFERRED
        assert "Compaction" not in status
        assert [b.title for b in universe.backlog] == ["Retention"]

        types = sorted(r.type.value for r in universe.confirmed_relationships())
        assert types == ["part_of", "prerequisite_of"]

        assert universe.scope.audience_description == "Backend developers"
        assert universe.scope.assumed_knowledge == ("HTTP", "JSON")
        assert universe.get_topic("topics").estimated_words == 600
        assert [t.name for t in universe.generation_order()][:2] == ["Apache Kafka", "Topics"]
        assert "Skipped by cost profile" in output.getvalue()

    def test_modify_suggestion(self):
        answers = SCOPE_DEFAULTS + [""] + [
            "m", "Kafka Partitions", "", "advanced", "", "",
            "n",                     # skip depth calibration
            "y",
        ]
        interactive, _ = make_session(
            answers,
            seeds=(),
            expand=lambda topic, session: [TopicSuggestion(name="Partitions")],
        )
        universe = interactive.run()
        topic = next(t for t in universe.topics if t.name == "Kafka Partitions")
        assert topic.is_accepted
        assert topic.complexity == ComplexityLevel.ADVANCED
        assert topic.estimated_words == 1500

    def test_unknown_menu_key_asks_again(self):
        relationships = [
            RelationshipSuggestion(source_name="Partitions", target_name="Apache Kafka",
                                   type=RelationshipType.RELATED_TO, confidence=0.6),
        ]
        answers = SCOPE_DEFAULTS + [""] + [
            "x", "r",                # typo, then reject Partitions
            "z", "r",                # typo, then reject the relationship
            "y", "y",
        ]
        interactive, output = make_session(
            answers,
            seeds=(),
            expand=lambda topic, session: [TopicSuggestion(name="Partitions")],
            relationships=relationships,
        )
        universe = interactive.run()
        assert universe is not None
        assert interactive.session.find_topic_by_name("Partitions").status == TopicStatus.REJECTED
        assert universe.confirmed_relationships() == []
        assert output.getvalue().count("Unknown choice") == 2


class TestInteractiveExits:
    """Test the ways a run ends without a universe."""

    def test_quit_abandons(self):
        answers = [""] + SCOPE_DEFAULTS + ["q"]
        interactive, output = make_session(
            answers, expand=lambda topic, session: [TopicSuggestion(name="Partitions")],
        )
        assert interactive.run() is None
        assert "Discovery abandoned." in output.getvalue()
        assert interactive.session.find_topic_by_name("Partitions") is None

    def test_blank_domain_abandons(self):
        interactive, output = make_session([""], domain_name=None)
        assert interactive.run() is None
        assert interactive.session is None
        assert "Discovery abandoned." in output.getvalue()

    def test_declined_save(self):
        answers = [""] + SCOPE_DEFAULTS + ["n", "n"]
        interactive, _ = make_session(answers)
        assert interactive.run() is None
        assert interactive.session.phase == DiscoveryPhase.REVIEW
        assert interactive.session.find_topic_by_name("Topics").estimated_words == 1000


class TestInteractiveGaps:
    """Test gap handling with confirmation."""

    def test_critical_gap_asks_before_adding(self):
        report = GapAnalysisResult(gaps=[
            Gap(type=GapType.MISSING_PREREQUISITE, description="No commit log intro",
                severity=GapSeverity.CRITICAL, suggested_topic_name="Commit Logs"),
            Gap(description="Thin security coverage", severity=GapSeverity.MODERATE),
        ])
        answers = [""] + SCOPE_DEFAULTS + [
            "n",                     # no second expansion round
            "y",                     # add Commit Logs
            "y",                     # save
        ]
        interactive, output = make_session(answers, cost_profile=BALANCED, gaps=report)
        universe = interactive.run()

        assert universe.get_topic("commit-logs").is_accepted
        assert interactive.session.outstanding_gaps() == ["Thin security coverage"]
        assert "1 gaps left in the backlog" in output.getvalue()
        assert interactive.reporter.events_of("gaps_found")[0].data["addressed"] == 1

    def test_domain_and_description_prompts(self):
        answers = ["Apache Kafka", "For platform teams", "Brokers, Topics"] + SCOPE_DEFAULTS + ["n", "y"]
        interactive, _ = make_session(answers, domain_name=None, description="", seeds=())
        universe = interactive.run()
        assert universe.name == "Apache Kafka"
        assert universe.description == "For platform teams"
        assert sorted(t.name for t in universe.accepted_topics()) == ["Apache Kafka", "Brokers", "Topics"]
