#!/usr/bin/env python3
"""Topic Universe Planner CLI - plan the structure of a wiki before writing it.

Usage:
    # Interactive: curate every suggestion yourself
    python main.py --domain "Apache Kafka"

    # Autonomous: let the curator decide
    python main.py --domain "Apache Kafka" --autonomous --cost-profile minimal \\
        --description "For backend developers new to event streaming"

    # Inspect saved universes
    python main.py --list
    python main.py --show 3f2a9c1b7d4e
    python main.py --export 3f2a9c1b7d4e ./kafka-universe.json
"""

import logging
import sys
from typing import Optional, Tuple

try:
    import click
    from rich.console import Console
    from rich.logging import RichHandler
    from rich.markup import escape
    from rich.table import Table
except ImportError:
    print("Missing dependencies. Run: pip install click rich")
    sys.exit(1)

from config import settings
from contracts import TopicUniverse, get_cost_profile, list_cost_profiles
from discovery import AutonomousConfig
from orchestrator import AutonomousDiscoverySession, InteractiveDiscoverySession, ProgressReporter
from providers import get_provider, list_providers as get_available_providers
from search import NullValidator, TopicValidator, WikidataSearchProvider, WikipediaSearchProvider
from storage import PersistenceError, TopicUniverseRepository


console = Console()

PROFILE_NAMES = [p.name.lower() for p in list_cost_profiles()]


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )


def build_validator(no_search: bool):
    if no_search:
        return NullValidator()
    return TopicValidator(
        primary=WikidataSearchProvider(),
        secondary=WikipediaSearchProvider(),
        result_limit=settings.search_result_limit,
    )


def show_universe(universe: TopicUniverse) -> None:
    """Print a saved universe in generation order."""
    console.print(f"\n[bold]{escape(universe.name)}[/bold] [dim]({universe.id})[/dim]")
    if universe.description:
        console.print(f"[dim]{escape(universe.description)}[/dim]")
    plan = universe.generation_plan()
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Topic")
    table.add_column("Type")
    table.add_column("Complexity")
    table.add_column("Priority")
    table.add_column("Words", justify="right")
    for position, topic in enumerate(plan.topics, start=1):
        table.add_row(
            str(position),
            escape(topic.name),
            topic.content_type.display_name,
            topic.complexity.display_name,
            topic.priority.display_name,
            f"{topic.estimated_words:,}",
        )
    console.print(table)
    console.print(escape(universe.summary()))
    for warning in plan.warnings:
        console.print(f"[yellow]Warning:[/yellow] {escape(warning)}")


def list_universes(repository: TopicUniverseRepository) -> None:
    universes = repository.list_all()
    if not universes:
        console.print(f"[dim]No saved universes in {repository.directory}[/dim]")
        return
    table = Table(show_header=True, header_style="bold")
    table.add_column("ID")
    table.add_column("Domain")
    table.add_column("Topics", justify="right")
    table.add_column("Created")
    for universe in universes:
        table.add_row(
            universe.id,
            escape(universe.name),
            str(universe.accepted_count),
            universe.created_at.strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


@click.command()
@click.option("--domain", "-d", help="Domain the wiki covers")
@click.option("--description", default="", help="What the wiki is for and who reads it")
@click.option("--seed", "-s", "seeds", multiple=True, help="Seed topic (repeatable)")
@click.option(
    "--cost-profile",
    type=click.Choice(PROFILE_NAMES, case_sensitive=False),
    default=None,
    help=f"Cost profile (default: {settings.default_cost_profile.lower()})",
)
@click.option("--autonomous", "-a", is_flag=True, help="Let the curator make every decision")
@click.option("--confidence", type=float, default=None, help="Autonomous accept threshold, 0-1")
@click.option("--confirm", is_flag=True, help="Autonomous: confirm the inferred scope before running")
@click.option("--dry-run", is_flag=True, help="Autonomous: run everything but save nothing")
@click.option(
    "--provider", "-p",
    type=click.Choice(["anthropic", "openai", "gemini", "deepseek", "ollama", "litellm"]),
    default=None,
    help=f"LLM provider (default: {settings.default_provider})",
)
@click.option("--model", default=None, help="Model name (e.g., gpt-4o, gemini-2.5-pro, mistral)")
@click.option("--no-search", is_flag=True, help="Skip search grounding (suggestions stay unvalidated)")
@click.option("--output", "-o", "output_path", default=None, help="Write the universe to this file as well")
@click.option("--list", "list_saved", is_flag=True, help="List saved universes")
@click.option("--show", "show_id", default=None, help="Show a saved universe")
@click.option("--export", "export_args", nargs=2, default=None, help="Export a saved universe: ID PATH")
@click.option("--list-providers", is_flag=True, help="List available LLM providers and exit")
@click.option("--verbose", "-v", is_flag=True, help="Show curation reasons and debug logging")
@click.option("--quiet", "-q", is_flag=True, help="Only show warnings, errors and the result")
def main(
    domain: Optional[str],
    description: str,
    seeds: Tuple[str, ...],
    cost_profile: Optional[str],
    autonomous: bool,
    confidence: Optional[float],
    confirm: bool,
    dry_run: bool,
    provider: Optional[str],
    model: Optional[str],
    no_search: bool,
    output_path: Optional[str],
    list_saved: bool,
    show_id: Optional[str],
    export_args: Optional[Tuple[str, str]],
    list_providers: bool,
    verbose: bool,
    quiet: bool,
):
    """Topic Universe Planner - discover, curate and order the topics of a wiki."""
    configure_logging(verbose)
    repository = TopicUniverseRepository()

    if list_providers:
        console.print("[bold]Available LLM Providers:[/bold]\n")
        for name, available in get_available_providers().items():
            status = "[green]available[/green]" if available else "[dim]not configured[/dim]"
            console.print(f"  {name:12} {status}")
        console.print("\n[dim]Set API keys via environment variables:[/dim]")
        console.print("  ANTHROPIC_API_KEY, OPENAI_API_KEY, GOOGLE_API_KEY, DEEPSEEK_API_KEY")
        return

    try:
        if list_saved:
            list_universes(repository)
            return
        if show_id:
            universe = repository.load(show_id)
            if universe is None:
                console.print(f"[red]Error:[/red] No universe with id {show_id}")
                sys.exit(1)
            show_universe(universe)
            return
        if export_args:
            universe_id, path = export_args
            universe = repository.load(universe_id)
            if universe is None:
                console.print(f"[red]Error:[/red] No universe with id {universe_id}")
                sys.exit(1)
            saved = repository.save_to_path(universe, path)
            console.print(f"[green]Exported[/green] {escape(universe.name)} to {saved}")
            return
    except PersistenceError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    profile = get_cost_profile(cost_profile) if cost_profile else None
    try:
        reasoning = get_provider(provider, model)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    validator = build_validator(no_search)

    if autonomous:
        if not domain:
            console.print("[red]Error: --domain is required in autonomous mode[/red]")
            sys.exit(1)
        threshold = confidence
        if threshold is None and settings.default_confidence_threshold > 0:
            threshold = settings.default_confidence_threshold
        config = AutonomousConfig(
            domain_name=domain,
            user_description=description,
            seed_topics=list(seeds),
            cost_profile=profile or get_cost_profile(settings.default_cost_profile),
            output_path=output_path,
            confidence_threshold=threshold,
            confirm_before_proceeding=confirm,
            dry_run=dry_run,
            verbose=verbose,
        )
        reporter = ProgressReporter(console=console, verbose=verbose, quiet=quiet, total_steps=6)
        universe = AutonomousDiscoverySession(config, reasoning, validator, reporter=reporter).run()
    else:
        reporter = ProgressReporter(console=console, verbose=verbose, quiet=quiet, total_steps=8)
        universe = InteractiveDiscoverySession(
            reasoning,
            validator,
            domain_name=domain,
            description=description,
            seeds=seeds,
            cost_profile=profile,
            console=console,
            verbose=verbose,
        ).run()

    if universe is None:
        return

    try:
        saved = repository.save(universe)
        if output_path:
            saved = repository.save_to_path(universe, output_path)
    except PersistenceError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    reporter.final_summary(universe, str(saved))
    usage = reasoning.usage
    if usage.calls:
        console.print(
            f"[dim]{usage.calls} reasoning calls, {usage.input_tokens:,} input / "
            f"{usage.output_tokens:,} output tokens[/dim]"
        )


if __name__ == "__main__":
    main()
