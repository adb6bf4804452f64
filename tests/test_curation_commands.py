"""Tests for the curation command table."""

from unittest.mock import MagicMock

import pytest

from contracts import (
    ComplexityLevel,
    CurationAction,
    CurationDecision,
    RelationshipSuggestion,
    RelationshipType,
    TopicStatus,
    TopicSuggestion,
)
from discovery import DiscoverySession
from orchestrator import ChangeRelationshipTypeCommand, ModifyTopicCommand, SimpleCurationCommand, apply_decision
from orchestrator.curation_commands import TOPIC_KEYS, command_for


@pytest.fixture
def session():
    s = DiscoverySession("Apache Kafka")
    s.add_landing_page("Apache Kafka")
    s.add_seed_topic("Topics")
    return s


def scripted(answers):
    """An ask() that returns answers by label prefix, else the default."""
    def ask(label, default=""):
        for prefix, answer in answers.items():
            if label.startswith(prefix):
                return answer
        return default
    return ask


class TestCommandTable:
    """Test command lookup."""

    def test_topic_and_relationship_tables(self):
        topic = TopicSuggestion(name="Partitions")
        relationship = RelationshipSuggestion(source_name="A", target_name="B", type=RelationshipType.PART_OF)
        assert isinstance(command_for(topic, CurationAction.MODIFY), ModifyTopicCommand)
        assert isinstance(command_for(relationship, CurationAction.TYPE_CHANGE), ChangeRelationshipTypeCommand)
        assert command_for(relationship, CurationAction.ACCEPT) is command_for(relationship, CurationAction.CONFIRM)
        assert command_for(topic, CurationAction.CONFIRM) is None

    def test_keys(self):
        assert TOPIC_KEYS["d"] == CurationAction.DEFER


class TestTopicCommands:
    """Test topic decisions."""

    def test_accept(self, session):
        result = apply_decision(session, TopicSuggestion(name="Partitions"), CurationDecision.accept("ok"))
        assert result.changed
        assert result.message == "Accepted"
        assert session.find_topic_by_name("Partitions").is_accepted

    def test_defer(self, session):
        result = apply_decision(session, TopicSuggestion(name="Tiered Storage"), CurationDecision.defer("later"))
        assert result.message == "Deferred to backlog"
        assert session.find_topic_by_name("Tiered Storage").status == TopicStatus.DEFERRED

    def test_reject_already_accepted_is_unchanged(self, session):
        result = apply_decision(session, TopicSuggestion(name="Topics"), CurationDecision.reject("no"))
        assert not result.changed

    def test_modify_from_decision(self, session):
        decision = CurationDecision.modify("rename", {"name": "Kafka Partitions"})
        result = apply_decision(session, TopicSuggestion(name="Partitions"), decision)
        assert result.message == "Modified and accepted"
        assert session.find_topic_by_name("Kafka Partitions").is_accepted

    def test_modify_interactively(self, session):
        ask = scripted({"New name": "Kafka Partitions", "Complexity": "advanced"})
        decision = CurationDecision(action=CurationAction.MODIFY)
        apply_decision(session, TopicSuggestion(name="Partitions", description="How data is split"), decision, ask=ask)
        topic = session.find_topic_by_name("Kafka Partitions")
        assert topic.complexity == ComplexityLevel.ADVANCED
        assert topic.estimated_words == 1500
        assert topic.description == "How data is split"

    def test_modify_keeping_defaults_accepts_unchanged(self, session):
        ask = MagicMock(side_effect=lambda label, default="": default)
        decision = CurationDecision(action=CurationAction.MODIFY)
        assert apply_decision(session, TopicSuggestion(name="Partitions"), decision, ask=ask).changed
        assert ask.call_count == 5
        assert session.find_topic_by_name("Partitions").estimated_words == 1000

    def test_simple_command(self, session):
        mutation = MagicMock(return_value=True)
        command = SimpleCurationCommand(CurationAction.ACCEPT, "Done", mutation)
        item = TopicSuggestion(name="X")
        result = command.execute(item, session)
        mutation.assert_called_once_with(session, item)
        assert result.changed


class TestRelationshipCommands:
    """Test relationship decisions."""

    def _suggestion(self):
        return RelationshipSuggestion(
            source_name="Topics", target_name="Apache Kafka", type=RelationshipType.RELATED_TO, confidence=0.7,
        )

    def test_confirm(self, session):
        result = apply_decision(session, self._suggestion(), CurationDecision(action=CurationAction.CONFIRM))
        assert result.message == "Confirmed"
        assert len(session.confirmed_relationships()) == 1

    def test_curator_accept_confirms(self, session):
        apply_decision(session, self._suggestion(), CurationDecision.accept("High confidence: 0.90"))
        assert len(session.confirmed_relationships()) == 1

    def test_type_change_from_decision(self, session):
        decision = CurationDecision(action=CurationAction.TYPE_CHANGE, modifications={"type": "part_of"})
        result = apply_decision(session, self._suggestion(), decision)
        assert result.message == "Confirmed as Part Of"
        assert session.confirmed_relationships()[0].type == RelationshipType.PART_OF

    def test_type_change_interactively(self, session):
        decision = CurationDecision(action=CurationAction.TYPE_CHANGE)
        apply_decision(session, self._suggestion(), decision, ask=scripted({"New type": "PREREQUISITE_OF"}))
        assert session.confirmed_relationships()[0].type == RelationshipType.PREREQUISITE_OF

    def test_unsupported_action(self, session):
        result = apply_decision(session, self._suggestion(), CurationDecision.defer("later"))
        assert result.message == "Unsupported action"
        assert not result.changed
        assert session.relationships == []
