"""Gap Analyzer - compares the accepted topics against expected domain coverage."""

from agents.base_agent import BaseAgent
from contracts import GapAnalysisResult
from discovery.parsing import parse_gap_report
from discovery.prompts import gap_analysis_prompt
from discovery.session import DiscoverySession


class GapAnalyzer(BaseAgent):
    """Produces a gap report. A failed call yields an empty report."""

    SYSTEM_PROMPT = """You are a senior technical editor auditing the outline of a wiki before writing begins.
Find what a reader would miss: prerequisites that are assumed but never taught, fundamentals
that are absent, areas covered too thinly or too deeply, topics with no connections, and
alternatives that deserve a comparison. Mark a gap CRITICAL only if readers cannot follow
the wiki without it.
Always respond with valid JSON in the specified format."""

    def __init__(self, reasoning):
        super().__init__(reasoning, role="gap_analyzer")

    def get_task_description(self) -> str:
        return "Identify coverage gaps in the accepted topics"

    def analyze(self, session: DiscoverySession) -> GapAnalysisResult:
        topics = session.accepted_topics()
        if not topics:
            return GapAnalysisResult()
        names = {t.id: t.name for t in session.all_topics()}
        lines = [
            f"- {names.get(r.source_id, r.source_id)} {r.type.name} {names.get(r.target_id, r.target_id)}"
            for r in session.confirmed_relationships()
        ]
        response = self._ask(gap_analysis_prompt(session.domain_name, topics, lines, session.scope))
        if response is None:
            return GapAnalysisResult()
        return parse_gap_report(response)
