"""Autonomous discovery - builds a Topic Universe with no human curation.

The run has six reported steps:
1. Infer scope and seed topics from the domain (optionally confirmed by the user)
2. Expand topics in rounds until a stopping rule fires
3. Map relationships between accepted topics
4. Analyze coverage gaps (skipped by profiles that disable it)
5. Calibrate depth and prioritize
6. Finalize the universe
"""

import logging
from typing import Callable, List, Optional, Set

from rich.prompt import Confirm

from agents import GapAnalyzer, InferredScope, RelationshipSuggester, ScopeInferrer, TopicExpander
from contracts import CurationAction, Topic, TopicUniverse, normalize_name
from contracts.scoring import HIGH_CONFIDENCE_THRESHOLD
from discovery import (
    AutonomousConfig,
    AutonomousContext,
    Curator,
    DiscoveryPhase,
    DiscoverySession,
    apply_gap_report,
    calibrate_depth,
    prioritize,
)
from orchestrator.curation_commands import apply_decision
from orchestrator.progress import ProgressReporter

logger = logging.getLogger(__name__)


class AutonomousDiscoverySession:
    """Runs discovery end to end with the Curator making every decision.

    Args:
        config: Run configuration
        reasoning: Reasoning source shared by the agents and the curator
        validator: Search validator used to ground suggestions
        reporter: Progress reporter (one rendering to a fresh console by default)
        confirm: Called once when config.confirm_before_proceeding is set;
            returning False cancels the run
    """

    def __init__(
        self,
        config: AutonomousConfig,
        reasoning,
        validator,
        reporter: Optional[ProgressReporter] = None,
        confirm: Optional[Callable[[], bool]] = None,
    ):
        self.config = config
        self.reporter = reporter or ProgressReporter(verbose=config.verbose, total_steps=6)
        self.confirm = confirm or self._confirm_on_console
        self.scope_inferrer = ScopeInferrer(reasoning)
        self.expander = TopicExpander(reasoning, validator)
        self.suggester = RelationshipSuggester(reasoning)
        self.gap_analyzer = GapAnalyzer(reasoning)
        self.curator = Curator(reasoning)

        self.session: Optional[DiscoverySession] = None
        self._expanded: Set[str] = set()
        self._low_quality_rounds = 0

    def _confirm_on_console(self) -> bool:
        return Confirm.ask("Proceed with autonomous discovery?", default=True, console=self.reporter.console)

    def run(self) -> Optional[TopicUniverse]:
        """Run all six steps.

        Returns:
            The finished universe, or None if the user cancelled or this is a dry run.
        """
        config = self.config
        self.reporter.banner("Autonomous Discovery", {
            "Domain": config.domain_name,
            "Description": config.user_description,
            "Seeds": ", ".join(config.seed_topics),
            "Cost profile": config.cost_profile.name,
            "Confidence": f"{config.threshold:.0%}",
        })

        self.reporter.phase_started("Inferring scope from description")
        inferred = self.scope_inferrer.infer(config.domain_name, config.user_description, config.seed_topics)
        if inferred.is_fallback:
            self.reporter.warning(inferred.reasoning)
        if config.confirm_before_proceeding:
            self.reporter.show_scope(config.domain_name, inferred.scope, inferred.seeds)
            if not self.confirm():
                self.reporter.info("Cancelled by user.")
                return None

        self._initialize_session(inferred)

        self.reporter.phase_started("Expanding topics")
        self._run_topic_expansion()

        self.reporter.phase_started("Mapping relationships")
        self._run_relationship_mapping()

        if not config.cost_profile.skip_gap_analysis:
            self.reporter.phase_started("Analyzing gaps")
            self._run_gap_analysis()

        self.reporter.phase_started("Calibrating depth and prioritizing")
        self._run_prioritization()

        self.reporter.phase_started("Finalizing universe")
        return self._finalize()

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _initialize_session(self, inferred: InferredScope) -> None:
        config = self.config
        session = DiscoverySession(
            config.domain_name,
            cost_profile=config.cost_profile,
            domain_description=inferred.scope.domain_description or config.user_description,
        )
        session.advance_to(DiscoveryPhase.SCOPE_SETUP)
        session.configure_scope(inferred.scope)
        session.add_landing_page(config.domain_name, f"Overview of {config.domain_name}")
        domain_key = normalize_name(config.domain_name)
        for seed in inferred.seeds:
            if normalize_name(seed) != domain_key:
                session.add_seed_topic(seed, f"Seed topic: {seed}")
        session.advance_to(DiscoveryPhase.TOPIC_EXPANSION)
        self.session = session

    def _topics_to_expand(self) -> List[Topic]:
        pending = [t for t in self.session.accepted_topics() if t.id not in self._expanded]
        return pending[: self.config.cost_profile.topics_per_round]

    def _should_stop(self, round_number: int) -> bool:
        criteria = self.config.criteria
        count = self.session.accepted_count
        if criteria.should_stop_by_rounds(round_number) or criteria.should_stop_by_count(count):
            return True
        if not criteria.has_minimum_topics(count):
            return False
        return criteria.should_stop_by_low_quality(self._low_quality_rounds)

    def _run_topic_expansion(self) -> None:
        config = self.config
        criteria = config.criteria
        session = self.session
        round_number = 0

        while not self._should_stop(round_number):
            round_number += 1
            batch = self._topics_to_expand()
            if not batch:
                self.reporter.convergence("No more topics to expand")
                break

            before = session.accepted_count
            high_quality = 0
            seen = 0
            at_capacity = False
            for topic in batch:
                self._expanded.add(topic.id)
                suggestions = self.expander.expand(topic, session)
                seen += len(suggestions)
                context = AutonomousContext.from_session(
                    session, criteria, config.user_description, current_round=round_number
                )
                decisions = self.curator.curate_topic_batch(suggestions, context, config.threshold)
                for suggestion, decision in zip(suggestions, decisions):
                    if suggestion.quality_score >= config.threshold:
                        high_quality += 1
                    apply_decision(session, suggestion, decision)
                    self._report_topic(suggestion, decision)
                    if criteria.should_stop_by_count(session.accepted_count):
                        at_capacity = True
                        break
                if at_capacity:
                    break

            self.reporter.round_complete(
                round_number, criteria.max_expansion_rounds, session.accepted_count - before, session.accepted_count
            )
            if at_capacity:
                self.reporter.convergence("Maximum topic count reached")
                break

            if criteria.has_converged(high_quality, seen):
                self._low_quality_rounds += 1
                if (
                    criteria.has_minimum_topics(session.accepted_count)
                    and criteria.should_stop_by_low_quality(self._low_quality_rounds)
                ):
                    self.reporter.convergence("Multiple low-quality rounds")
                    break
            else:
                self._low_quality_rounds = 0

        logger.debug("Topic expansion finished after %d round(s)", round_number)

    def _report_topic(self, suggestion, decision) -> None:
        if decision.action in (CurationAction.ACCEPT, CurationAction.MODIFY):
            self.reporter.topic_accepted(suggestion, decision.reasoning)
        elif decision.is_reject:
            self.reporter.topic_rejected(suggestion, decision.reasoning)
        else:
            self.reporter.topic_deferred(suggestion, decision.reasoning)

    def _run_relationship_mapping(self) -> None:
        session = self.session
        session.advance_to(DiscoveryPhase.RELATIONSHIP_MAPPING)
        high_confidence = 0
        borderline = 0
        for suggestion in self.suggester.analyze_all_relationships(session):
            decision = self.curator.curate_relationship(suggestion)
            result = apply_decision(session, suggestion, decision)
            if decision.is_accept and result.changed:
                if suggestion.confidence >= HIGH_CONFIDENCE_THRESHOLD:
                    high_confidence += 1
                else:
                    borderline += 1
        self.reporter.relationships_confirmed(high_confidence, borderline)

    def _run_gap_analysis(self) -> None:
        self.session.advance_to(DiscoveryPhase.GAP_ANALYSIS)
        report = self.gap_analyzer.analyze(self.session)
        outcome = apply_gap_report(self.session, report)
        self.reporter.gaps_found(outcome)

    def _run_prioritization(self) -> None:
        session = self.session
        session.advance_to(DiscoveryPhase.DEPTH_CALIBRATION)
        calibrated = calibrate_depth(session, self.config.cost_profile)
        session.advance_to(DiscoveryPhase.PRIORITIZATION)
        changed = prioritize(session)
        self.reporter.info(f"{calibrated} topics calibrated, {changed} priorities updated")

    def _finalize(self) -> Optional[TopicUniverse]:
        session = self.session
        session.advance_to(DiscoveryPhase.REVIEW)
        universe = session.build_universe()
        for warning in universe.generation_plan().warnings:
            self.reporter.warning(warning)

        if self.config.dry_run:
            self.reporter.dry_run_complete(universe.accepted_count, len(universe.confirmed_relationships()))
            return None
        session.advance_to(DiscoveryPhase.COMPLETE)
        return session.build_universe()
