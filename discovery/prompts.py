"""Prompt text for the reasoning source.

Prompts are assembled from small sections so the scope guidance, the existing
topic list and the response format are identical across agents.
"""

from typing import Iterable, List, Optional, Sequence

from contracts import (
    ComplexityLevel,
    RelationshipDepth,
    RelationshipType,
    ScopeConfiguration,
    Topic,
    TopicSuggestion,
)

CURATION_SYSTEM_PROMPT = """You are a content curator for a technical wiki. Your job is to decide whether
to include suggested topics in the wiki based on relevance, quality, and scope.

For each topic, you must decide:
- ACCEPT: Include this topic in the wiki
- REJECT: Do not include this topic
- DEFER: Save for later consideration (borderline cases)

Consider:
1. Is this topic relevant to the domain?
2. Is it within scope (not excluded, matches focus areas)?
3. Is it distinct from existing topics (not a duplicate)?
4. Does it add value to the wiki structure?

Always respond with valid JSON in the specified format."""

SUGGESTION_FORMAT = """Respond with JSON in this format:
```json
{
  "suggestions": [
    {
      "name": "Topic Name",
      "description": "Brief description of what this topic covers",
      "category": "prerequisite|component|related|application|advanced",
      "contentType": "CONCEPT|TUTORIAL|REFERENCE|HOW_TO|COMPARISON|TROUBLESHOOTING",
      "complexity": "BEGINNER|INTERMEDIATE|ADVANCED",
      "relevance": 0.85,
      "rationale": "Why this topic is important for the wiki"
    }
  ]
}
```
"""

RELATIONSHIP_TYPES_BY_DEPTH = {
    RelationshipDepth.CORE: (RelationshipType.PREREQUISITE_OF, RelationshipType.PART_OF),
    RelationshipDepth.IMPORTANT: (
        RelationshipType.PREREQUISITE_OF,
        RelationshipType.PART_OF,
        RelationshipType.EXAMPLE_OF,
        RelationshipType.IMPLEMENTS,
        RelationshipType.CONTRASTS_WITH,
    ),
    RelationshipDepth.ALL: tuple(RelationshipType),
}


class PromptBuilder:
    """Composable prompt sections."""

    def __init__(self):
        self._parts: List[str] = []

    def section(self, title: str, body: str) -> "PromptBuilder":
        self._parts.append(f"## {title}\n{body.rstrip()}\n\n")
        return self

    def domain(self, name: str, description: str = "") -> "PromptBuilder":
        body = f"Name: {name}\n"
        if description and description.strip():
            body += f"Description: {description.strip()}\n"
        return self.section("Domain", body)

    def scope(self, scope: Optional[ScopeConfiguration]) -> "PromptBuilder":
        if scope is None or scope.is_empty():
            return self
        return self.section("Scope Guidance", scope.to_prompt_format())

    def existing_topics(self, names: Iterable[str]) -> "PromptBuilder":
        names = sorted(set(names))
        if not names:
            return self
        return self.section("Existing Topics (do not suggest duplicates)", ", ".join(names))

    def raw(self, text: str) -> "PromptBuilder":
        self._parts.append(text.rstrip() + "\n\n")
        return self

    def build(self) -> str:
        return "".join(self._parts).rstrip() + "\n"


def topic_expansion_prompt(
    domain_name: str,
    topic: Topic,
    existing_names: Iterable[str],
    scope: Optional[ScopeConfiguration],
    count: int,
    max_complexity: ComplexityLevel,
    search_summary: str = "",
    related_titles: Sequence[str] = (),
) -> str:
    seed = f"Topic: {topic.name}\n"
    if topic.description:
        seed += f"Description: {topic.description}\n"
    if search_summary:
        seed += f"Summary from search: {search_summary}\n"
    if related_titles:
        seed += "Related topics from search: " + ", ".join(list(related_titles)[:15]) + "\n"

    task = (
        f"Analyze the seed topic and suggest up to {count} related topics that would help create a "
        "comprehensive wiki.\nFocus on topics that directly support understanding or applying the seed topic.\n"
        f"Do not suggest topics above {max_complexity.name} complexity.\n"
    )
    if related_titles:
        task += (
            "Prefer topics that appear in the \"Related topics from search\" list or are closely related "
            "to them, so suggestions stay grounded in real knowledge.\n"
        )
    return (
        PromptBuilder()
        .section("Domain Context", f"Domain: {domain_name}")
        .section("Seed Topic to Expand", seed)
        .existing_topics(existing_names)
        .scope(scope)
        .section("Task", task)
        .raw(SUGGESTION_FORMAT)
        .build()
    )


def relationship_prompt(
    domain_name: str,
    topics: Sequence[Topic],
    depth: RelationshipDepth,
    scope: Optional[ScopeConfiguration] = None,
) -> str:
    listing = "\n".join(f"- {t.name}: {t.description}" if t.description else f"- {t.name}" for t in topics)
    types = RELATIONSHIP_TYPES_BY_DEPTH[depth]
    task = (
        "Identify directed relationships between the topics above. Use only these types: "
        + ", ".join(t.name for t in types)
        + ".\nPREREQUISITE_OF means the source must be read before the target. "
        "Use exact topic names from the list.\n"
    )
    fmt = """Respond with JSON in this format:
```json
{
  "relationships": [
    {"source": "Topic A", "target": "Topic B", "type": "PREREQUISITE_OF", "confidence": 0.9, "rationale": "Why"}
  ]
}
```"""
    return (
        PromptBuilder()
        .section("Domain Context", f"Domain: {domain_name}")
        .section("Topics", listing)
        .scope(scope)
        .section("Task", task)
        .raw(fmt)
        .build()
    )


def gap_analysis_prompt(
    domain_name: str,
    topics: Sequence[Topic],
    relationship_lines: Sequence[str],
    scope: Optional[ScopeConfiguration] = None,
) -> str:
    listing = "\n".join(
        f"- {t.name} ({t.content_type.display_name}, {t.complexity.display_name})" for t in topics
    )
    task = (
        "Compare the topics against what a complete wiki on this domain needs. Report missing "
        "prerequisites, missing fundamentals, coverage gaps, depth imbalances, orphaned topics and "
        "missing comparisons. Rate each gap CRITICAL, MODERATE or MINOR and suggest a topic name "
        "when one topic would close it.\n"
    )
    fmt = """Respond with JSON in this format:
```json
{
  "gaps": [
    {"type": "MISSING_PREREQUISITE", "description": "What is missing", "severity": "CRITICAL", "suggestedTopic": "Topic Name"}
  ],
  "coverageSummary": "One paragraph on overall coverage"
}
```"""
    builder = (
        PromptBuilder()
        .section("Domain Context", f"Domain: {domain_name}")
        .section("Current Topics", listing)
    )
    if relationship_lines:
        builder.section("Relationships", "\n".join(relationship_lines))
    return builder.scope(scope).section("Task", task).raw(fmt).build()


def scope_inference_prompt(domain_name: str, description: str, seeds: Sequence[str]) -> str:
    body = f"Name: {domain_name}\n"
    if description:
        body += f"User description: {description}\n"
    if seeds:
        body += "User-provided seed topics: " + ", ".join(seeds) + "\n"
    task = (
        "Infer the audience, assumed knowledge, exclusions and focus areas for a wiki on this domain, "
        "and propose 3-6 seed topics if the user gave none.\n"
    )
    fmt = """Respond with JSON in this format:
```json
{
  "domainDescription": "One sentence on what the wiki covers",
  "audienceDescription": "Who will read it",
  "audienceLevel": "BEGINNER|INTERMEDIATE|ADVANCED",
  "assumedKnowledge": ["..."],
  "outOfScope": ["..."],
  "focusAreas": ["..."],
  "suggestedSeeds": ["..."],
  "preferredLanguage": "optional language or tooling",
  "reasoning": "Why this scope fits"
}
```"""
    return PromptBuilder().section("Domain", body).section("Task", task).raw(fmt).build()


def curation_prompt(suggestion: TopicSuggestion, context_text: str) -> str:
    body = (
        f"**Name:** {suggestion.name}\n"
        f"**Description:** {suggestion.description}\n"
        f"**Category:** {suggestion.category}\n"
        f"**Relevance Score:** {suggestion.relevance:.2f}\n"
        f"**Search Confidence:** {suggestion.search_confidence:.2f}\n"
        f"**Rationale:** {suggestion.rationale}\n"
    )
    fmt = """Respond with JSON:
```json
{
  "action": "ACCEPT|REJECT|DEFER",
  "reasoning": "Brief explanation"
}
```"""
    return (
        PromptBuilder()
        .raw(CURATION_SYSTEM_PROMPT)
        .raw("---")
        .raw("## Topic Curation Request")
        .raw(context_text)
        .section("Topic to Evaluate", body)
        .section("Your Decision", fmt)
        .build()
    )


def batch_curation_prompt(suggestions: Sequence[TopicSuggestion], context_text: str) -> str:
    listing = "\n".join(
        f"{i}. **{s.name}** (relevance: {s.relevance:.2f}, search: {s.search_confidence:.2f})\n   {s.description}\n"
        for i, s in enumerate(suggestions, start=1)
    )
    fmt = """Respond with JSON, one decision per topic, in the same order:
```json
{
  "decisions": [
    {"action": "ACCEPT|REJECT|DEFER", "reasoning": "Brief explanation"}
  ]
}
```"""
    return (
        PromptBuilder()
        .raw(CURATION_SYSTEM_PROMPT)
        .raw("---")
        .raw("## Batch Topic Curation Request")
        .raw(context_text)
        .section("Topics to Evaluate", listing)
        .section("Your Decisions", fmt)
        .build()
    )
