"""Progress reporting for discovery runs.

Every event is recorded as a ProgressEvent so callers and tests can inspect
what happened; rendering to the console depends on verbose/quiet.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from contracts import GapOutcome, ScopeConfiguration, TopicSuggestion, TopicUniverse


class ProgressEvent(BaseModel):
    """One reported event."""
    kind: str
    message: str
    data: Dict[str, Any] = Field(default_factory=dict)


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


class ProgressReporter:
    """Records and renders discovery progress.

    Args:
        console: Rich console to render to (a fresh one by default)
        verbose: Also show reasons for rejections and deferrals
        quiet: Only show warnings, errors and the final summary
        total_steps: Number of numbered steps announced by phase_started
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        verbose: bool = False,
        quiet: bool = False,
        total_steps: int = 6,
    ):
        self.console = console or Console()
        self.verbose = verbose
        self.quiet = quiet
        self.total_steps = total_steps
        self.current_step = 0
        self.events: List[ProgressEvent] = []

    def _record(self, kind: str, message: str, **data: Any) -> ProgressEvent:
        event = ProgressEvent(kind=kind, message=message, data=data)
        self.events.append(event)
        return event

    def _print(self, *args: Any, **kwargs: Any) -> None:
        if not self.quiet:
            self.console.print(*args, **kwargs)

    def events_of(self, kind: str) -> List[ProgressEvent]:
        return [e for e in self.events if e.kind == kind]

    # Run framing

    def banner(self, title: str, lines: Dict[str, str]) -> None:
        self._record("banner", title, **lines)
        body = "\n".join(f"[dim]{k}:[/dim] {escape(str(v))}" for k, v in lines.items() if v)
        self._print(Panel.fit(f"[bold blue]{title}[/bold blue]\n\n{body}", border_style="blue"))

    def phase_started(self, name: str) -> None:
        self.current_step += 1
        self._record("phase_started", name, step=self.current_step, total=self.total_steps)
        self._print(f"\n[bold][{self.current_step}/{self.total_steps}] {name}...[/bold]")

    def show_scope(self, domain_name: str, scope: ScopeConfiguration, seeds: List[str]) -> None:
        self._record("scope", f"Scope for {domain_name}", seeds=list(seeds))
        lines = [f"[bold]Domain:[/bold] {escape(domain_name)}"]
        if scope.audience_description:
            lines.append(f"[dim]Audience:[/dim] {escape(scope.audience_description)}")
        if scope.assumed_knowledge:
            lines.append(f"[dim]Assumes:[/dim]  {escape(', '.join(scope.assumed_knowledge))}")
        if scope.focus_areas:
            lines.append(f"[dim]Focus:[/dim]    {escape(', '.join(scope.focus_areas))}")
        if scope.out_of_scope:
            lines.append(f"[dim]Excludes:[/dim] {escape(', '.join(scope.out_of_scope))}")
        if seeds:
            lines.append("[bold]Seed topics:[/bold]")
            lines.extend(f"  {i}. {escape(seed)}" for i, seed in enumerate(seeds, start=1))
        self._print(Panel("\n".join(lines), title="Discovery Plan", border_style="cyan"))

    # Curation

    def topic_accepted(self, suggestion: TopicSuggestion, reason: str = "") -> None:
        self._record("topic_accepted", suggestion.name, reason=reason, score=suggestion.quality_score)
        self._print(f"  [green]+[/green] {escape(suggestion.name)} ({suggestion.confidence_indicator})")
        if self.verbose and reason:
            self._print(f"    [dim]Reason: {escape(_truncate(reason, 60))}[/dim]")

    def topic_rejected(self, suggestion: TopicSuggestion, reason: str = "") -> None:
        self._record("topic_rejected", suggestion.name, reason=reason)
        if self.verbose:
            self._print(f"  [red]-[/red] {escape(suggestion.name)} [dim](rejected: {escape(_truncate(reason, 40))})[/dim]")

    def topic_deferred(self, suggestion: TopicSuggestion, reason: str = "") -> None:
        self._record("topic_deferred", suggestion.name, reason=reason)
        if self.verbose:
            self._print(f"  [yellow]~[/yellow] {escape(suggestion.name)} [dim](deferred)[/dim]")

    def round_complete(self, round_number: int, max_rounds: int, added: int, total: int) -> None:
        self._record("round_complete", f"Round {round_number}", added=added, total=total)
        self._print(f"  Round {round_number}/{max_rounds} complete: +{added} topics (total: {total})")

    def convergence(self, reason: str) -> None:
        self._record("convergence", reason)
        self._print(f"\n  [cyan]Convergence:[/cyan] {escape(reason)}")

    def relationships_confirmed(self, high_confidence: int, borderline: int) -> None:
        total = high_confidence + borderline
        self._record("relationships_confirmed", f"{total} relationships", high=high_confidence, borderline=borderline)
        self._print(f"  {total} relationships confirmed ({high_confidence} high confidence, {borderline} borderline)")

    def gaps_found(self, outcome: GapOutcome) -> None:
        self._record(
            "gaps_found",
            f"{outcome.total} gaps",
            critical=outcome.critical,
            moderate=outcome.moderate,
            minor=outcome.minor,
            addressed=len(outcome.addressed),
        )
        self._print(
            f"  Gaps found: {outcome.critical} critical, {outcome.moderate} moderate, "
            f"{outcome.minor} minor ({len(outcome.addressed)} addressed)"
        )

    def info(self, message: str) -> None:
        self._record("info", message)
        self._print(f"  {escape(message)}")

    def warning(self, message: str) -> None:
        self._record("warning", message)
        self.console.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def error(self, message: str) -> None:
        self._record("error", message)
        self.console.print(f"[red]Error:[/red] {escape(message)}")

    # Outcome

    def dry_run_complete(self, topic_count: int, relationship_count: int) -> None:
        self._record("dry_run", "Dry run complete", topics=topic_count, relationships=relationship_count)
        self.console.print(
            Panel.fit(
                "[bold]DRY RUN COMPLETE[/bold] - nothing saved\n\n"
                f"Would have created: {topic_count} topics, {relationship_count} relationships",
                border_style="yellow",
            )
        )

    def final_summary(self, universe: TopicUniverse, saved_path: Optional[str] = None) -> None:
        self._record(
            "final_summary",
            universe.name,
            topics=universe.accepted_count,
            relationships=len(universe.confirmed_relationships()),
            path=saved_path,
        )
        lines = [
            f"[green]Topics:[/green]        {universe.accepted_count}",
            f"[green]Relationships:[/green] {len(universe.confirmed_relationships())}",
            f"[green]Est. words:[/green]    {universe.estimated_word_count:,}",
            f"[green]Backlog:[/green]       {len(universe.backlog)}",
        ]
        if saved_path:
            lines.append(f"\n[bold]Saved to:[/bold] {saved_path}")
        self.console.print(Panel("\n".join(lines), title=f"Topic Universe: {escape(universe.name)}", border_style="green"))
