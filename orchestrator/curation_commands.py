"""Curation command table shared by both discovery modes.

A CurationDecision (from the Curator or from the keyboard) is turned into a
session mutation by looking its action up in one table per suggestion kind.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Union

from pydantic import BaseModel

from contracts import (
    ComplexityLevel,
    ContentType,
    CurationAction,
    CurationDecision,
    RelationshipSuggestion,
    RelationshipType,
    TopicSuggestion,
)
from discovery.parsing import as_int, parse_enum
from discovery.session import DiscoverySession

logger = logging.getLogger(__name__)

# ask(label, default) -> answer
AskFn = Callable[[str, str], str]

TOPIC_MENU = "[A]ccept  [R]eject  [D]efer  [M]odify  [S]kip rest  [Q]uit"
RELATIONSHIP_MENU = "[C]onfirm  [R]eject  [T]ype change"

TOPIC_KEYS = {
    "a": CurationAction.ACCEPT,
    "r": CurationAction.REJECT,
    "d": CurationAction.DEFER,
    "m": CurationAction.MODIFY,
}
RELATIONSHIP_KEYS = {
    "c": CurationAction.CONFIRM,
    "r": CurationAction.REJECT,
    "t": CurationAction.TYPE_CHANGE,
}


class CurationResult(BaseModel):
    """Outcome of executing one command."""
    action: CurationAction
    message: str
    changed: bool = False


class CurationCommand(ABC):
    """One curation action applied to one suggestion."""

    action: CurationAction

    @abstractmethod
    def execute(
        self,
        item: Any,
        session: DiscoverySession,
        decision: Optional[CurationDecision] = None,
        ask: Optional[AskFn] = None,
    ) -> CurationResult:
        pass


class SimpleCurationCommand(CurationCommand):
    """A command that is a single session mutation.

    Args:
        action: The action this command handles
        message: Message reported after execution
        mutation: Session method taking the suggestion, e.g. DiscoverySession.accept_topic_suggestion
    """

    def __init__(self, action: CurationAction, message: str, mutation: Callable[[DiscoverySession, Any], bool]):
        self.action = action
        self.message = message
        self.mutation = mutation

    def execute(self, item, session, decision=None, ask=None) -> CurationResult:
        changed = self.mutation(session, item)
        return CurationResult(action=self.action, message=self.message, changed=changed)


class ModifyTopicCommand(CurationCommand):
    """Accept a topic after changing some of its fields.

    Overrides come from the decision's modifications when present, otherwise
    each editable field is asked for interactively.
    """

    action = CurationAction.MODIFY

    def _ask_overrides(self, suggestion: TopicSuggestion, ask: AskFn) -> Dict[str, Any]:
        overrides: Dict[str, Any] = {}
        name = ask("New name", suggestion.name).strip()
        if name and name != suggestion.name:
            overrides["name"] = name
        description = ask("New description", suggestion.description).strip()
        if description and description != suggestion.description:
            overrides["description"] = description
        complexity = ask("Complexity (beginner/intermediate/advanced)", suggestion.complexity.value)
        level = parse_enum(ComplexityLevel, complexity, suggestion.complexity)
        if level != suggestion.complexity:
            overrides["complexity"] = level
        content_type = ask("Content type", suggestion.content_type.value)
        kind = parse_enum(ContentType, content_type, suggestion.content_type)
        if kind != suggestion.content_type:
            overrides["content_type"] = kind
        words = as_int(ask("Word count", str(suggestion.word_count)), suggestion.word_count)
        if words > 0 and words != suggestion.word_count:
            overrides["word_count"] = words
        return overrides

    def execute(self, item, session, decision=None, ask=None) -> CurationResult:
        if decision is not None and decision.modifications:
            overrides = dict(decision.modifications)
        elif ask is not None:
            overrides = self._ask_overrides(item, ask)
        else:
            overrides = {}
        changed = session.modify_and_accept_topic(item, overrides)
        return CurationResult(action=self.action, message="Modified and accepted", changed=changed)


class ChangeRelationshipTypeCommand(CurationCommand):
    """Confirm a relationship under a different type."""

    action = CurationAction.TYPE_CHANGE

    def execute(self, item, session, decision=None, ask=None) -> CurationResult:
        raw = decision.modification("type") if decision is not None else None
        if raw is None and ask is not None:
            choices = ", ".join(t.name for t in RelationshipType)
            raw = ask(f"New type ({choices})", item.type.name)
        new_type = parse_enum(RelationshipType, raw, item.type)
        changed = session.change_relationship_type(item, new_type)
        return CurationResult(
            action=self.action,
            message=f"Confirmed as {new_type.display_name}",
            changed=changed,
        )


TOPIC_COMMANDS: Dict[CurationAction, CurationCommand] = {
    CurationAction.ACCEPT: SimpleCurationCommand(
        CurationAction.ACCEPT, "Accepted", DiscoverySession.accept_topic_suggestion
    ),
    CurationAction.REJECT: SimpleCurationCommand(
        CurationAction.REJECT, "Rejected", DiscoverySession.reject_topic_suggestion
    ),
    CurationAction.DEFER: SimpleCurationCommand(
        CurationAction.DEFER, "Deferred to backlog", DiscoverySession.defer_topic_suggestion
    ),
    CurationAction.MODIFY: ModifyTopicCommand(),
}

_CONFIRM = SimpleCurationCommand(CurationAction.CONFIRM, "Confirmed", DiscoverySession.confirm_relationship)

RELATIONSHIP_COMMANDS: Dict[CurationAction, CurationCommand] = {
    CurationAction.CONFIRM: _CONFIRM,
    CurationAction.ACCEPT: _CONFIRM,
    CurationAction.REJECT: SimpleCurationCommand(
        CurationAction.REJECT, "Rejected", DiscoverySession.reject_relationship
    ),
    CurationAction.TYPE_CHANGE: ChangeRelationshipTypeCommand(),
}


def command_for(item: Union[TopicSuggestion, RelationshipSuggestion], action: CurationAction) -> Optional[CurationCommand]:
    table = TOPIC_COMMANDS if isinstance(item, TopicSuggestion) else RELATIONSHIP_COMMANDS
    return table.get(action)


def apply_decision(
    session: DiscoverySession,
    item: Union[TopicSuggestion, RelationshipSuggestion],
    decision: CurationDecision,
    ask: Optional[AskFn] = None,
) -> CurationResult:
    """Execute the command registered for the decision's action."""
    command = command_for(item, decision.action)
    if command is None:
        logger.warning("No %s command for %s; leaving it unchanged", type(item).__name__, decision.action.value)
        return CurationResult(action=decision.action, message="Unsupported action", changed=False)
    return command.execute(item, session, decision=decision, ask=ask)
