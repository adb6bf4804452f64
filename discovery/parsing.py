"""Lenient parsing of reasoning-source responses.

Responses may wrap JSON in markdown fences or surround it with prose. Every
function here returns a ParseResult or a defaulted value; none of them raise
on malformed input.
"""

import json
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from contracts import (
    ComplexityLevel,
    ContentType,
    CurationAction,
    CurationDecision,
    Gap,
    GapAnalysisResult,
    GapSeverity,
    RelationshipSuggestion,
    RelationshipType,
    TopicSuggestion,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


class ParseResult(BaseModel):
    """Outcome of extracting JSON from a response."""
    ok: bool
    data: Any = None
    error: Optional[str] = None

    @classmethod
    def success(cls, data: Any) -> "ParseResult":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, error: str) -> "ParseResult":
        return cls(ok=False, error=error)


def _strip_code_fence(text: str) -> str:
    if "```json" in text:
        start = text.find("```json") + 7
        end = text.find("```", start)
        return text[start:end if end != -1 else len(text)].strip()
    if "```" in text:
        start = text.find("```") + 3
        end = text.find("```", start)
        return text[start:end if end != -1 else len(text)].strip()
    return text


_DECODER = json.JSONDecoder()


def _first_embedded_json(text: str) -> ParseResult:
    """Decode the first JSON object or array embedded in prose.

    Every `{` or `[` is tried in order, so bracketed prose before the
    document ("the topics [Kafka, Streams]") is skipped.
    """
    error = "no JSON found in response"
    for i, char in enumerate(text):
        if char not in "{[":
            continue
        try:
            data, _ = _DECODER.raw_decode(text, i)
        except json.JSONDecodeError as e:
            error = f"invalid JSON: {e}"
            continue
        return ParseResult.success(data)
    return ParseResult.failure(error)


def extract_json(response_text: Optional[str]) -> ParseResult:
    """Pull the first JSON document out of a response."""
    if not response_text or not response_text.strip():
        return ParseResult.failure("empty response")

    text = _strip_code_fence(response_text.strip())
    try:
        return ParseResult.success(json.loads(text))
    except json.JSONDecodeError:
        pass
    return _first_embedded_json(text)


def extract_list(response_text: Optional[str], *keys: str) -> ParseResult:
    """Extract a list either at the top level or under the first matching key."""
    result = extract_json(response_text)
    if not result.ok:
        return result
    data = result.data
    if isinstance(data, dict):
        data = _get(data, *keys)
    if not isinstance(data, list):
        return ParseResult.failure(f"expected a list under one of {keys}")
    return ParseResult.success(data)


def parse_enum(enum_cls: Type[E], value: Any, default: E) -> E:
    """Match an enum by value or name, tolerating case, spaces and dashes."""
    if isinstance(value, enum_cls):
        return value
    if value is None:
        return default
    key = str(value).strip().lower().replace("-", "_").replace(" ", "_")
    for member in enum_cls:
        if member.value == key or member.name.lower() == key:
            return member
    return default


def as_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def as_str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value).strip()


def as_str_list(value: Any) -> List[str]:
    if isinstance(value, str):
        return [v.strip() for v in value.split(",") if v.strip()]
    if isinstance(value, list):
        return [str(v).strip() for v in value if v is not None and str(v).strip()]
    return []


def _get(item: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in item and item[key] is not None:
            return item[key]
    return None


def parse_topic_suggestions(response_text: Optional[str], source_context: str = "") -> List[TopicSuggestion]:
    """Parse a list of topic suggestions, skipping unusable entries."""
    result = extract_list(response_text, "suggestions", "topics")
    if not result.ok:
        logger.warning("Could not parse topic suggestions: %s", result.error)
        return []

    suggestions = []
    for item in result.data:
        if not isinstance(item, dict):
            continue
        try:
            suggestions.append(TopicSuggestion(
                name=as_str(item.get("name")),
                description=as_str(item.get("description")),
                category=as_str(item.get("category")),
                content_type=parse_enum(ContentType, _get(item, "contentType", "content_type"), ContentType.CONCEPT),
                complexity=parse_enum(ComplexityLevel, item.get("complexity"), ComplexityLevel.INTERMEDIATE),
                word_count=as_int(_get(item, "wordCount", "word_count"), 0),
                relevance=as_float(_get(item, "relevance", "relevanceScore"), 0.5),
                rationale=as_str(item.get("rationale")),
                source_context=source_context,
            ))
        except ValidationError as e:
            logger.debug("Skipping invalid topic suggestion %r: %s", item, e)
    return suggestions


def parse_relationship_suggestions(response_text: Optional[str]) -> List[RelationshipSuggestion]:
    """Parse relationship suggestions; unknown types and self-references are skipped."""
    result = extract_list(response_text, "relationships")
    if not result.ok:
        logger.warning("Could not parse relationship suggestions: %s", result.error)
        return []

    suggestions = []
    for item in result.data:
        if not isinstance(item, dict):
            continue
        rel_type = parse_enum(RelationshipType, _get(item, "type", "relationshipType"), None)
        if rel_type is None:
            continue
        try:
            suggestions.append(RelationshipSuggestion(
                source_name=as_str(_get(item, "source", "sourceTopic", "source_name")),
                target_name=as_str(_get(item, "target", "targetTopic", "target_name")),
                type=rel_type,
                confidence=as_float(item.get("confidence"), 0.5),
                rationale=as_str(item.get("rationale")),
            ))
        except ValidationError as e:
            logger.debug("Skipping invalid relationship suggestion %r: %s", item, e)
    return suggestions


def parse_gap_report(response_text: Optional[str]) -> GapAnalysisResult:
    """Parse a gap report. A malformed report is an empty one."""
    result = extract_json(response_text)
    if not result.ok:
        logger.warning("Could not parse gap report: %s", result.error)
        return GapAnalysisResult()

    data = result.data
    items = data.get("gaps", []) if isinstance(data, dict) else data
    summary = as_str(_get(data, "coverageSummary", "coverage_summary")) if isinstance(data, dict) else ""

    gaps = []
    for item in items if isinstance(items, list) else []:
        if not isinstance(item, dict):
            continue
        try:
            gaps.append(Gap(
                type=_get(item, "type", "gapType"),
                description=as_str(item.get("description")),
                severity=parse_enum(GapSeverity, item.get("severity"), GapSeverity.MODERATE),
                suggested_topic_name=_get(item, "suggestedTopic", "suggested_topic_name", "suggestedTopicName"),
            ))
        except ValidationError as e:
            logger.debug("Skipping invalid gap %r: %s", item, e)
    return GapAnalysisResult(gaps=gaps, coverage_summary=summary)


def decision_from_action(action: Any, reasoning: str) -> CurationDecision:
    """Map a reasoning-source action string to a topic decision. Unknown means DEFER."""
    parsed = parse_enum(CurationAction, action, CurationAction.DEFER)
    if parsed == CurationAction.ACCEPT:
        return CurationDecision.accept(reasoning)
    if parsed == CurationAction.REJECT:
        return CurationDecision.reject(reasoning)
    return CurationDecision.defer(reasoning)


def parse_curation_decision(response_text: Optional[str]) -> ParseResult:
    """Parse a single {"action", "reasoning"} decision."""
    result = extract_json(response_text)
    if not result.ok:
        return result
    if not isinstance(result.data, dict):
        return ParseResult.failure("expected a JSON object")
    reasoning = as_str(result.data.get("reasoning"), "AI decision") or "AI decision"
    return ParseResult.success(decision_from_action(result.data.get("action"), reasoning))


def parse_batch_decisions(response_text: Optional[str], expected_count: int) -> List[CurationDecision]:
    """Parse a batch of decisions, padding short or malformed replies with DEFER."""
    decisions: List[CurationDecision] = []
    result = extract_list(response_text, "decisions")
    if result.ok:
        for item in result.data[:expected_count]:
            if isinstance(item, dict):
                reasoning = as_str(item.get("reasoning"), "AI decision") or "AI decision"
                decisions.append(decision_from_action(item.get("action"), reasoning))
            else:
                decisions.append(CurationDecision.defer("No decision provided"))
    else:
        logger.warning("Could not parse batch curation response: %s", result.error)

    while len(decisions) < expected_count:
        decisions.append(CurationDecision.defer("No decision provided"))
    return decisions
