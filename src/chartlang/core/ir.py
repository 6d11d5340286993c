"""
Statechart configuration types produced by the chartlang parser.

The tree mirrors the statechart configuration format consumed by statechart
runtimes::

    {
      "id": "fetch",
      "type": "compound",
      "initial": "idle",
      "states": {
        "idle": {"id": "idle", "type": "atomic", "on": {"FETCH": {"target": "loading"}}},
        ...
      }
    }

Optional fields are ``None`` in the models and are left out entirely by
``to_dict()``; they are never serialized as ``null``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .errors import GrammarError
from .mappings import TRANSIENT_EVENT, omit


class StateType(str, Enum):
    """Structural type of a state node."""

    ATOMIC = "atomic"  # no children
    COMPOUND = "compound"  # exactly one child active
    PARALLEL = "parallel"  # all children active
    FINAL = "final"


def _omit_absent(data: dict[str, Any]) -> dict[str, Any]:
    """Drop the keys whose value is None."""
    return omit([key for key, value in data.items() if value is None], data)


class Transition(BaseModel):
    """
    A single transition.

    Attributes:
        target: Sibling id, dotted path (``parent.child``) or ``#``-rooted reference
        cond: Guard condition name
        actions: Action names, in declaration order
    """

    target: str
    cond: str | None = None
    actions: list[str] | None = None

    model_config = ConfigDict(frozen=True)

    def to_dict(self) -> dict[str, Any]:
        return _omit_absent(
            {
                "target": self.target,
                "cond": self.cond,
                "actions": list(self.actions) if self.actions is not None else None,
            }
        )


TransitionValue = Transition | list[Transition]


class StateNode(BaseModel):
    """
    A state of the statechart, possibly with nested states.

    Attributes:
        id: State name, unique among its siblings
        type: Structural type
        initial: Id of the default child; set iff ``states`` is non-empty
        is_initial: True when marked as its parent's default child
        states: Child states keyed by id, in source order
        on: Transitions keyed by event; ``""`` holds the transient list
    """

    id: str
    type: StateType
    initial: str | None = None
    is_initial: bool | None = Field(default=None, alias="isInitial")
    states: dict[str, StateNode] | None = None
    on: dict[str, TransitionValue] | None = None

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @property
    def ok(self) -> bool:
        return True

    @property
    def transient_transitions(self) -> list[Transition]:
        """Eventless transitions, in declaration order."""
        if not self.on or TRANSIENT_EVENT not in self.on:
            return []
        value = self.on[TRANSIENT_EVENT]
        return list(value) if isinstance(value, list) else [value]

    def find(self, path: str) -> StateNode | None:
        """
        Look up a descendant by dotted path relative to this node.

        ``find("loading.retry")`` returns the ``retry`` child of ``loading``.
        """
        node: StateNode | None = self
        for part in path.split("."):
            if node is None or not node.states:
                return None
            node = node.states.get(part)
        return node

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize to the statechart configuration shape.

        Keys appear in the order ``id, type, initial, isInitial, states, on``
        and absent optional fields are omitted.
        """
        on: dict[str, Any] | None = None
        if self.on is not None:
            on = {}
            for event, value in self.on.items():
                if isinstance(value, list):
                    on[event] = [transition.to_dict() for transition in value]
                else:
                    on[event] = value.to_dict()

        states: dict[str, Any] | None = None
        if self.states is not None:
            states = {name: child.to_dict() for name, child in self.states.items()}

        return _omit_absent(
            {
                "id": self.id,
                "type": self.type.value,
                "initial": self.initial,
                "isInitial": self.is_initial,
                "states": states,
                "on": on,
            }
        )


@dataclass(frozen=True)
class ParseFailure:
    """
    Result of a parse that could not match the input.

    Returned instead of raised so callers can choose between treating the
    input as fatal and reporting a diagnostic.
    """

    error: GrammarError

    @property
    def ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return self.error.format()

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error.to_dict()}
