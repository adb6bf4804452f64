"""Scope Inferrer - derives audience and boundaries from a domain name.

Used by autonomous mode in place of the interactive scope questions. Any
failure degrades to a minimal scope so the run can continue.
"""

import logging
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from agents.base_agent import BaseAgent
from contracts import ComplexityLevel, ScopeConfiguration, normalize_name
from discovery.parsing import as_str, as_str_list, extract_json, parse_enum
from discovery.prompts import scope_inference_prompt

logger = logging.getLogger(__name__)


class InferredScope(BaseModel):
    """Scope plus the seed topics the run should start from."""
    scope: ScopeConfiguration
    seeds: List[str] = Field(default_factory=list)
    audience_level: ComplexityLevel = ComplexityLevel.INTERMEDIATE
    reasoning: str = ""
    is_fallback: bool = False

    @classmethod
    def minimal(cls, domain_name: str, provided_seeds: Optional[Sequence[str]] = None) -> "InferredScope":
        seeds = list(provided_seeds or []) or [f"{domain_name} Overview", f"{domain_name} Fundamentals"]
        return cls(
            scope=ScopeConfiguration(
                domain_description=f"A comprehensive guide to {domain_name}",
                audience_description="Technical audience",
            ),
            seeds=seeds,
            reasoning="Fallback: using minimal scope due to inference failure",
            is_fallback=True,
        )


def _merge_seeds(provided: Sequence[str], suggested: Sequence[str]) -> List[str]:
    seeds: List[str] = []
    seen = set()
    for seed in [*provided, *suggested]:
        key = normalize_name(seed)
        if seed.strip() and key not in seen:
            seen.add(key)
            seeds.append(seed.strip())
    return seeds


class ScopeInferrer(BaseAgent):
    """Infers a ScopeConfiguration and seed topics for an autonomous run."""

    SYSTEM_PROMPT = """You are an expert knowledge architect helping to plan a comprehensive wiki.
Your task is to analyze a domain and user description to infer the scope boundaries
for the wiki content.

You must determine:
1. TARGET AUDIENCE - Who will read this wiki? What's their experience level?
2. ASSUMED KNOWLEDGE - What concepts should readers already understand?
3. OUT OF SCOPE - What topics should be explicitly excluded?
4. FOCUS AREAS - What aspects should be emphasized?
5. SEED TOPICS - 3-5 foundational topics to start content generation

Be specific and practical. Always respond with valid JSON in the specified format."""

    def __init__(self, reasoning):
        super().__init__(reasoning, role="scope_inferrer")

    def get_task_description(self) -> str:
        return "Infer audience, boundaries and seed topics for a domain"

    def infer(
        self,
        domain_name: str,
        description: str = "",
        provided_seeds: Optional[Sequence[str]] = None,
    ) -> InferredScope:
        provided = [s for s in (provided_seeds or []) if s and s.strip()]
        response = self._ask(scope_inference_prompt(domain_name, description, provided))
        if response is None:
            return InferredScope.minimal(domain_name, provided)

        result = extract_json(response)
        if not result.ok or not isinstance(result.data, dict):
            logger.warning("Scope inference response unusable (%s); using minimal scope", result.error)
            return InferredScope.minimal(domain_name, provided)

        data = result.data
        seeds = _merge_seeds(provided, as_str_list(data.get("suggestedSeeds")))
        if not seeds:
            seeds = [f"{domain_name} Overview", f"{domain_name} Fundamentals"]

        scope = ScopeConfiguration(
            assumed_knowledge=as_str_list(data.get("assumedKnowledge")),
            out_of_scope=as_str_list(data.get("outOfScope")),
            focus_areas=as_str_list(data.get("focusAreas")),
            audience_description=as_str(data.get("audienceDescription")) or "General technical audience",
            domain_description=(
                as_str(data.get("domainDescription")) or description or f"A comprehensive guide to {domain_name}"
            ),
            preferred_language=as_str(data.get("preferredLanguage")) or None,
        )
        return InferredScope(
            scope=scope,
            seeds=seeds,
            audience_level=parse_enum(ComplexityLevel, data.get("audienceLevel"), ComplexityLevel.INTERMEDIATE),
            reasoning=as_str(data.get("reasoning")),
        )
