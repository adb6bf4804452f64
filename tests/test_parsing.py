"""Tests for lenient response parsing."""

from contracts import (
    ComplexityLevel,
    ContentType,
    CurationAction,
    GapSeverity,
    GapType,
    RelationshipType,
)
from discovery.parsing import (
    as_str_list,
    extract_json,
    extract_list,
    parse_batch_decisions,
    parse_curation_decision,
    parse_enum,
    parse_gap_report,
    parse_relationship_suggestions,
    parse_topic_suggestions,
)


class TestExtractJson:
    """Test JSON extraction from messy responses."""

    def test_plain_json(self):
        result = extract_json('{"a": 1}')
        assert result.ok
        assert result.data == {"a": 1}

    def test_fenced_json(self):
        result = extract_json('Here you go:\n```json\n[1, 2]\n```\nThanks')
        assert result.data == [1, 2]

    def test_json_inside_prose(self):
        result = extract_json('Sure! {"suggestions": []} Hope that helps.')
        assert result.data == {"suggestions": []}

    def test_bracketed_prose_before_json(self):
        result = extract_json(
            'Considering the accepted topics [Kafka, Streams], my answer: {"action": "ACCEPT", "reasoning": "fits"}'
        )
        assert result.ok
        assert result.data == {"action": "ACCEPT", "reasoning": "fits"}

    def test_first_document_wins(self):
        result = extract_json('Options {a, b}: [{"name": "Partitions"}] and later {"ignored": true}')
        assert result.data == [{"name": "Partitions"}]

    def test_curation_decision_after_bracketed_prose(self):
        result = parse_curation_decision('Given [Brokers] is covered: {"action": "REJECT", "reasoning": "dup"}')
        assert result.ok
        assert result.data.action == CurationAction.REJECT

    def test_empty_response(self):
        result = extract_json("   ")
        assert not result.ok
        assert result.error == "empty response"

    def test_no_json(self):
        assert not extract_json("I cannot help with that").ok

    def test_broken_json(self):
        result = extract_json('{"a": [1, 2}')
        assert not result.ok
        assert result.error.startswith("invalid JSON")

    def test_extract_list_under_key(self):
        result = extract_list('{"topics": [{"name": "A"}]}', "suggestions", "topics")
        assert result.ok
        assert result.data == [{"name": "A"}]

    def test_extract_list_wrong_shape(self):
        assert not extract_list('{"topics": "none"}', "topics").ok


class TestHelpers:
    """Test value coercion helpers."""

    def test_parse_enum_by_value_or_name(self):
        assert parse_enum(ComplexityLevel, "ADVANCED", ComplexityLevel.BEGINNER) == ComplexityLevel.ADVANCED
        assert parse_enum(RelationshipType, "prerequisite-of", None) == RelationshipType.PREREQUISITE_OF
        assert parse_enum(ComplexityLevel, "expert", ComplexityLevel.INTERMEDIATE) == ComplexityLevel.INTERMEDIATE
        assert parse_enum(ComplexityLevel, None, ComplexityLevel.BEGINNER) == ComplexityLevel.BEGINNER

    def test_as_str_list(self):
        assert as_str_list("a, b ,,c") == ["a", "b", "c"]
        assert as_str_list(["x", None, " "]) == ["x"]
        assert as_str_list(3) == []


class TestTopicSuggestions:
    """Test parse_topic_suggestions."""

    def test_parses_and_defaults(self):
        response = """```json
        {"suggestions": [
            {"name": "Consumer Groups", "description": "Scaling reads", "contentType": "CONCEPT",
             "complexity": "BEGINNER", "wordCount": 700, "relevance": 0.9, "rationale": "core"},
            {"name": "Log Compaction", "complexity": "wizard", "relevance": "high"},
            {"name": ""},
            "not a dict"
        ]}
        ```"""
        suggestions = parse_topic_suggestions(response, source_context="Apache Kafka")
        assert [s.name for s in suggestions] == ["Consumer Groups", "Log Compaction"]
        first, second = suggestions
        assert first.complexity == ComplexityLevel.BEGINNER
        assert first.word_count == 700
        assert first.source_context == "Apache Kafka"
        assert second.complexity == ComplexityLevel.INTERMEDIATE
        assert second.relevance == 0.5
        assert second.word_count == 1000
        assert second.content_type == ContentType.CONCEPT

    def test_garbage_yields_empty_list(self):
        assert parse_topic_suggestions("no idea") == []


class TestRelationshipSuggestions:
    """Test parse_relationship_suggestions."""

    def test_skips_unknown_types_and_self_references(self):
        response = """[
            {"source": "Topics", "target": "Partitions", "type": "PREREQUISITE_OF", "confidence": 0.9},
            {"source": "Topics", "target": "Brokers", "type": "LOVES"},
            {"source": "Topics", "target": "topics", "type": "RELATED_TO"},
            {"sourceTopic": "Streams", "targetTopic": "Kafka", "relationshipType": "part_of"}
        ]"""
        suggestions = parse_relationship_suggestions(response)
        assert len(suggestions) == 2
        assert suggestions[0].type == RelationshipType.PREREQUISITE_OF
        assert suggestions[1].type == RelationshipType.PART_OF
        assert suggestions[1].confidence == 0.5


class TestGapReport:
    """Test parse_gap_report."""

    def test_parses_gaps(self):
        response = """{"gaps": [
            {"type": "MISSING_PREREQUISITE", "description": "No intro to logs", "severity": "CRITICAL",
             "suggestedTopic": "Commit Logs"},
            {"type": "SOMETHING_ELSE", "description": "Thin ops coverage"},
            {"type": "ORPHAN_TOPIC", "description": ""}
        ], "coverageSummary": "Mostly fine"}"""
        report = parse_gap_report(response)
        assert report.coverage_summary == "Mostly fine"
        assert len(report.gaps) == 2
        assert report.gaps[0].severity == GapSeverity.CRITICAL
        assert report.gaps[0].suggested_topic_name == "Commit Logs"
        assert report.gaps[1].type == GapType.COVERAGE_GAP
        assert report.gaps[1].severity == GapSeverity.MODERATE

    def test_malformed_report_is_empty(self):
        report = parse_gap_report("oops")
        assert report.gaps == []


class TestCurationDecisions:
    """Test decision parsing."""

    def test_single_decision(self):
        result = parse_curation_decision('{"action": "REJECT", "reasoning": "Off topic"}')
        assert result.ok
        assert result.data.action == CurationAction.REJECT
        assert result.data.reasoning == "Off topic"

    def test_unknown_action_defers(self):
        result = parse_curation_decision('{"action": "PONDER"}')
        assert result.data.action == CurationAction.DEFER
        assert result.data.reasoning == "AI decision"

    def test_batch_is_padded(self):
        decisions = parse_batch_decisions('[{"action": "ACCEPT", "reasoning": "Fits"}, 5]', 3)
        assert [d.action for d in decisions] == [CurationAction.ACCEPT, CurationAction.DEFER, CurationAction.DEFER]
        assert decisions[2].reasoning == "No decision provided"

    def test_batch_is_truncated(self):
        decisions = parse_batch_decisions('{"decisions": [{"action": "ACCEPT"}, {"action": "REJECT"}]}', 1)
        assert len(decisions) == 1

    def test_unparseable_batch_defers_everything(self):
        decisions = parse_batch_decisions("nope", 2)
        assert all(d.action == CurationAction.DEFER for d in decisions)
