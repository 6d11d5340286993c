"""
AST assembly for parsed states.

The grammar hands over one ``RawState`` per state: its header (name plus
markers) and its body items in source order, with nested states already
assembled. This module turns it into a ``StateNode``: structural type,
transition map, child map and default child.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..ir import StateNode, StateType, Transition, TransitionValue
from ..lexer import Token
from ..mappings import merge_transitions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StateHeader:
    """State name with its trailing markers, e.g. ``ast&*``."""

    name: str
    token: Token
    parallel: bool = False
    final: bool = False
    initial: bool = False


@dataclass(frozen=True)
class TransitionEntry:
    """One transition line; ``event`` is ``""`` for a transient transition."""

    event: str
    transition: Transition


@dataclass(frozen=True)
class RawState:
    header: StateHeader
    body: Sequence[TransitionEntry | StateNode] = field(default_factory=tuple)


def classify(header: StateHeader, child_count: int) -> StateType:
    """Final beats parallel; otherwise children make a state compound."""
    if header.final:
        return StateType.FINAL
    if header.parallel:
        return StateType.PARALLEL
    if child_count > 0:
        return StateType.COMPOUND
    return StateType.ATOMIC


def build_transitions(entries: Sequence[TransitionEntry]) -> dict[str, TransitionValue] | None:
    """Key transitions by event; None when the state declares none."""
    if not entries:
        return None
    return merge_transitions([{entry.event: entry.transition} for entry in entries])


def build_states(name: str, children: Sequence[StateNode]) -> dict[str, StateNode] | None:
    if not children:
        return None
    states: dict[str, StateNode] = {}
    for child in children:
        if child.id in states:
            logger.warning("State %r declares child %r more than once; keeping the last", name, child.id)
        states[child.id] = child
    return states


def with_initial_state(node: StateNode) -> StateNode:
    """
    Return ``node`` with ``initial`` set to its default child.

    A child marked initial wins; without one the first child in source order
    is the default. Nodes without children are returned unchanged, so they
    carry no ``initial`` at all.
    """
    if not node.states:
        return node

    marked = [name for name, child in node.states.items() if child.is_initial]
    if len(marked) > 1:
        logger.warning(
            "State %r marks %d children as initial (%s); using %r",
            node.id,
            len(marked),
            ", ".join(marked),
            marked[-1],
        )
    initial = marked[-1] if marked else next(iter(node.states))
    return node.model_copy(update={"initial": initial})


def assemble_state(raw: RawState) -> StateNode:
    entries = [item for item in raw.body if isinstance(item, TransitionEntry)]
    children = [item for item in raw.body if isinstance(item, StateNode)]

    node = StateNode(
        id=raw.header.name,
        type=classify(raw.header, len(children)),
        is_initial=True if raw.header.initial else None,
        states=build_states(raw.header.name, children),
        on=build_transitions(entries),
    )
    return with_initial_state(node)


def as_root(node: StateNode) -> StateNode:
    """The outermost state is the machine itself: it is nobody's default child."""
    if node.is_initial is None:
        return node
    return node.model_copy(update={"is_initial": None})


def wrap_root(states: Sequence[StateNode], root_id: str) -> StateNode:
    """
    Build the machine root from the top-level states.

    A single top-level state is the root. Several top-level states become
    the children of a synthetic compound root named ``root_id``.
    """
    if len(states) == 1:
        return as_root(states[0])

    root = StateNode(
        id=root_id,
        type=StateType.COMPOUND,
        states=build_states(root_id, states),
    )
    return with_initial_state(root)
