"""Interactive discovery - the user curates every suggestion at the console.

Eight steps: seed input, scope setup, topic expansion, relationship mapping,
gap analysis, depth calibration, prioritization, review. Entering Q at a
topic menu abandons the run.
"""

import logging
from typing import List, Optional, Sequence, Set, TextIO

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt
from rich.table import Table

from agents import GapAnalyzer, RelationshipSuggester, TopicExpander
from config import settings
from contracts import (
    BALANCED,
    CostProfile,
    CurationDecision,
    Gap,
    ScopeConfiguration,
    Topic,
    TopicSuggestion,
    TopicUniverse,
    get_cost_profile,
    list_cost_profiles,
)
from discovery import (
    DiscoveryPhase,
    DiscoverySession,
    apply_gap_report,
    calibrate_depth,
    prioritize,
)
from discovery.parsing import as_str_list
from discovery.prioritization import depth_proposals
from orchestrator.curation_commands import (
    RELATIONSHIP_KEYS,
    RELATIONSHIP_MENU,
    TOPIC_KEYS,
    TOPIC_MENU,
    apply_decision,
)
from orchestrator.progress import ProgressReporter

logger = logging.getLogger(__name__)


class _Quit(Exception):
    """Raised inside a step when the user asks to quit."""


class InteractiveDiscoverySession:
    """Console-driven discovery.

    Args:
        reasoning: Reasoning source for the agents
        validator: Search validator used to ground suggestions
        domain_name: Domain to plan; asked for when not given
        description: Optional domain description
        seeds: Initial seed topics
        cost_profile: Profile to use; asked for when not given
        console: Rich console for output and prompts
        stream: Input stream for prompts (stdin when None)
    """

    def __init__(
        self,
        reasoning,
        validator,
        domain_name: Optional[str] = None,
        description: str = "",
        seeds: Sequence[str] = (),
        cost_profile: Optional[CostProfile] = None,
        console: Optional[Console] = None,
        stream: Optional[TextIO] = None,
        verbose: bool = False,
    ):
        self.console = console or Console()
        self.stream = stream
        self.reporter = ProgressReporter(console=self.console, verbose=verbose, total_steps=8)
        self.expander = TopicExpander(reasoning, validator)
        self.suggester = RelationshipSuggester(reasoning)
        self.gap_analyzer = GapAnalyzer(reasoning)

        self.domain_name = domain_name
        self.description = description
        self.seeds = list(seeds)
        self.cost_profile = cost_profile
        self.session: Optional[DiscoverySession] = None
        self._expanded: Set[str] = set()

    # ------------------------------------------------------------------
    # Input helpers
    # ------------------------------------------------------------------

    def ask(self, label: str, default: str = "") -> str:
        """Prompt for text. An empty answer returns `default`."""
        answer = Prompt.ask(f"  {escape(label)}", default=default, console=self.console, stream=self.stream)
        return (answer or "").strip() or default

    def confirm(self, label: str, default: bool = True) -> bool:
        return Confirm.ask(f"  {escape(label)}", default=default, console=self.console, stream=self.stream)

    def _ask_key(self, menu: str, keys: Sequence[str], default: str) -> str:
        """Prompt with a one-letter menu until a listed key is given."""
        while True:
            key = self.ask(menu, default).lower()[:1]
            if key in keys:
                return key
            self.console.print(f"  [yellow]Unknown choice {escape(repr(key))}; use one of {', '.join(keys)}[/yellow]")

    def _ask_list(self, label: str, current: Sequence[str] = ()) -> List[str]:
        return as_str_list(self.ask(f"{label} (comma-separated)", ", ".join(current)))

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self) -> Optional[TopicUniverse]:
        """Run all eight steps. Returns None if the user quits or declines to save."""
        try:
            self._seed_input()
            self._scope_setup()
            self._topic_expansion()
            self._relationship_mapping()
            self._gap_analysis()
            self._depth_calibration()
            self._prioritization()
            return self._review()
        except _Quit:
            self.console.print("\n[yellow]Discovery abandoned.[/yellow]")
            return None

    def _choose_profile(self) -> CostProfile:
        names = [p.name for p in list_cost_profiles()]
        for profile in list_cost_profiles():
            self.console.print(f"  [bold]{profile.name:14}[/bold] {profile.summary()}")
        default = settings.default_cost_profile.upper()
        if default not in names:
            default = BALANCED.name
        answer = Prompt.ask(
            "  Cost profile", choices=names, default=default, console=self.console, stream=self.stream
        )
        return get_cost_profile(answer) or BALANCED

    def _seed_input(self) -> None:
        self.reporter.phase_started("Seed input")
        if not self.domain_name:
            self.domain_name = self.ask("Domain name")
            if not self.domain_name:
                raise _Quit()
        if not self.description:
            self.description = self.ask("Describe the wiki (optional)")
        self.seeds = self._ask_list("Seed topics", self.seeds)
        if self.cost_profile is None:
            self.cost_profile = self._choose_profile()

        session = DiscoverySession(self.domain_name, cost_profile=self.cost_profile, domain_description=self.description)
        session.add_landing_page(self.domain_name, f"Overview of {self.domain_name}")
        for seed in self.seeds:
            session.add_seed_topic(seed, f"Seed topic: {seed}")
        session.advance_to(DiscoveryPhase.SCOPE_SETUP)
        self.session = session
        self.console.print(f"  [green]{session.accepted_count} starting topics[/green]")

    def _scope_setup(self) -> None:
        self.reporter.phase_started("Scope setup")
        scope = ScopeConfiguration(
            domain_description=self.description,
            audience_description=self.ask("Target audience", "General technical audience"),
            assumed_knowledge=self._ask_list("Assumed knowledge"),
            out_of_scope=self._ask_list("Out of scope"),
            focus_areas=self._ask_list("Focus areas"),
            preferred_language=self.ask("Preferred language or tooling (optional)") or None,
        )
        self.session.configure_scope(scope)
        self.session.advance_to(DiscoveryPhase.TOPIC_EXPANSION)

    # ------------------------------------------------------------------
    # Topic expansion
    # ------------------------------------------------------------------

    def _topics_to_expand(self) -> List[Topic]:
        pending = [t for t in self.session.accepted_topics() if t.id not in self._expanded]
        return pending[: self.session.cost_profile.topics_per_round]

    def _show_suggestion(self, index: int, total: int, suggestion: TopicSuggestion) -> None:
        self.console.print(f"\n  [bold]({index}/{total}) {escape(suggestion.name)}[/bold]")
        if suggestion.description:
            self.console.print(f"    {escape(suggestion.description)}")
        self.console.print(
            f"    [dim]{suggestion.content_type.display_name}, {suggestion.complexity.display_name}, "
            f"~{suggestion.word_count} words[/dim]"
        )
        self.console.print(f"    Relevance {suggestion.relevance_bar} {suggestion.relevance:.0%}  ({suggestion.confidence_indicator})")

    def _curate_suggestions(self, suggestions: List[TopicSuggestion]) -> None:
        for index, suggestion in enumerate(suggestions, start=1):
            self._show_suggestion(index, len(suggestions), suggestion)
            key = self._ask_key(TOPIC_MENU, [*TOPIC_KEYS, "s", "q"], "a")
            if key == "q":
                raise _Quit()
            if key == "s":
                self.console.print(f"  [dim]Skipped {len(suggestions) - index + 1} suggestion(s)[/dim]")
                return
            action = TOPIC_KEYS[key]
            result = apply_decision(self.session, suggestion, CurationDecision(action=action), ask=self.ask)
            self.console.print(f"  [green]{result.message}[/green]" if result.changed else "  [dim]No change[/dim]")

    def _topic_expansion(self) -> None:
        self.reporter.phase_started("Topic expansion")
        profile = self.session.cost_profile
        for round_number in range(1, profile.max_expansion_rounds + 1):
            batch = self._topics_to_expand()
            if not batch:
                self.reporter.convergence("No more topics to expand")
                return
            before = self.session.accepted_count
            for topic in batch:
                self._expanded.add(topic.id)
                self.console.print(f"\n[bold cyan]Expanding:[/bold cyan] {escape(topic.name)}")
                suggestions = self.expander.expand(topic, self.session)
                if not suggestions:
                    self.console.print("  [dim]No new suggestions[/dim]")
                    continue
                self._curate_suggestions(suggestions)
            self.reporter.round_complete(
                round_number,
                profile.max_expansion_rounds,
                self.session.accepted_count - before,
                self.session.accepted_count,
            )
            if round_number < profile.max_expansion_rounds and not self.confirm("Run another expansion round?"):
                return

    # ------------------------------------------------------------------
    # Relationships and gaps
    # ------------------------------------------------------------------

    def _relationship_mapping(self) -> None:
        self.reporter.phase_started("Relationship mapping")
        self.session.advance_to(DiscoveryPhase.RELATIONSHIP_MAPPING)
        suggestions = self.suggester.analyze_all_relationships(self.session)
        if not suggestions:
            self.console.print("  [dim]No relationships suggested[/dim]")
            return
        for index, suggestion in enumerate(suggestions, start=1):
            self.console.print(f"\n  ({index}/{len(suggestions)}) {escape(suggestion.display())}")
            key = self._ask_key(RELATIONSHIP_MENU, list(RELATIONSHIP_KEYS), "c")
            action = RELATIONSHIP_KEYS[key]
            result = apply_decision(self.session, suggestion, CurationDecision(action=action), ask=self.ask)
            self.console.print(f"  [green]{result.message}[/green]" if result.changed else "  [dim]No change[/dim]")
        self.console.print(f"  {len(self.session.confirmed_relationships())} relationships confirmed")

    def _confirm_gap(self, gap: Gap) -> bool:
        return self.confirm(f"Add '{gap.suggested_topic_name}' to close: {gap.description}?")

    def _gap_analysis(self) -> None:
        self.reporter.phase_started("Gap analysis")
        if self.session.cost_profile.skip_gap_analysis:
            self.console.print("  [dim]Skipped by cost profile[/dim]")
            return
        self.session.advance_to(DiscoveryPhase.GAP_ANALYSIS)
        report = self.gap_analyzer.analyze(self.session)
        if report.coverage_summary:
            self.console.print(f"  {escape(report.coverage_summary)}")
        for gap in report.gaps:
            self.console.print(f"  {escape(gap.display())}")
        outcome = apply_gap_report(self.session, report, confirm=self._confirm_gap)
        self.reporter.gaps_found(outcome)

    # ------------------------------------------------------------------
    # Depth, priority, review
    # ------------------------------------------------------------------

    def _depth_calibration(self) -> None:
        self.reporter.phase_started("Depth calibration")
        self.session.advance_to(DiscoveryPhase.DEPTH_CALIBRATION)
        proposals = depth_proposals(self.session, self.session.cost_profile)
        if not proposals:
            self.console.print("  [dim]All topics already fit the cost profile[/dim]")
            return
        table = Table(show_header=True, header_style="bold")
        table.add_column("Topic")
        table.add_column("Complexity")
        table.add_column("Words", justify="right")
        for topic, complexity, words in proposals:
            table.add_row(
                escape(topic.name),
                f"{topic.complexity.display_name} -> {complexity.display_name}",
                f"{topic.estimated_words} -> {words}",
            )
        self.console.print(table)
        if self.confirm("Apply depth calibration?"):
            changed = calibrate_depth(self.session, self.session.cost_profile)
            self.console.print(f"  [green]{changed} topics calibrated[/green]")

    def _prioritization(self) -> None:
        self.reporter.phase_started("Prioritization")
        self.session.advance_to(DiscoveryPhase.PRIORITIZATION)
        changed = prioritize(self.session)
        plan = self.session.build_universe().generation_plan()
        table = Table(title="Generation order", show_header=True, header_style="bold")
        table.add_column("#", justify="right")
        table.add_column("Topic")
        table.add_column("Priority")
        for position, topic in enumerate(plan.topics, start=1):
            table.add_row(str(position), escape(topic.name), topic.priority.display_name)
        self.console.print(table)
        self.console.print(f"  [dim]{changed} priorities updated[/dim]")
        for warning in plan.warnings:
            self.reporter.warning(warning)

    def _review(self) -> Optional[TopicUniverse]:
        self.reporter.phase_started("Review")
        self.session.advance_to(DiscoveryPhase.REVIEW)
        universe = self.session.build_universe()
        self.console.print(f"  {escape(universe.summary())}")
        outstanding = self.session.outstanding_gaps()
        if outstanding:
            self.console.print(f"  [yellow]{len(outstanding)} gaps left in the backlog[/yellow]")
        if not self.confirm("Save this topic universe?"):
            return None
        self.session.advance_to(DiscoveryPhase.COMPLETE)
        return self.session.build_universe()
