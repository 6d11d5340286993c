"""
Grammar rules for the chartlang notation.

    identifier      := IDENTIFIER
    condition       := CONDITION
    action          := ACTION
    transition      := [identifier] ARROW identifier [condition] {action}
    markers         := [PARALLEL_STATE] [FINAL_STATE] [INITIAL_STATE]
    state           := state_with_body | state_name_only
    state_with_body := identifier markers INDENT {transition | state} DEDENT
    state_name_only := identifier markers
    statechart      := [INDENT] state {state} [DEDENT] <end of input>

A transition without an event name is transient and must carry a condition.
All tokens of a transition sit on one line, so a bare name followed by a
line starting with ``->`` is a state and then a transient transition.
Each rule is a function ``(stream, pos) -> Success | Failure``; see
``combinators`` for the calling convention.
"""

from __future__ import annotations

from ..errors import GrammarError
from ..ir import Transition
from ..lexer import TokenType
from ..mappings import TRANSIENT_EVENT
from .assembler import RawState, StateHeader, TransitionEntry, assemble_state
from .combinators import (
    Failure,
    Result,
    Rule,
    Success,
    TokenStream,
    end_of_input,
    expect,
    many,
    named,
    one_of,
    optional,
    rule_name,
)

identifier = expect(TokenType.IDENTIFIER, lambda token: token.text)
condition = expect(TokenType.CONDITION, lambda token: token.text)
action = expect(TokenType.ACTION, lambda token: token.text)
arrow = expect(TokenType.TRANSITION_ARROW)
indent = expect(TokenType.INDENT)
dedent = expect(TokenType.DEDENT)
parallel_marker = expect(TokenType.PARALLEL_STATE)
final_marker = expect(TokenType.FINAL_STATE)
initial_marker = expect(TokenType.INITIAL_STATE)


def same_line(rule: Rule, line: int) -> Rule:
    """
    ``rule`` restricted to a token on ``line``.

    A token on another line is a plain mismatch and is not recorded as the
    furthest failure: layout decides where a statement ends, not a bad token.
    """

    def on_line(stream: TokenStream, pos: int) -> Result:
        token = stream.at(pos)
        if token is not None and token.line != line:
            message = f"Expected {rule_name(rule)} on line {line}, found {token.describe()} on line {token.line}"
            return Failure(
                GrammarError(message, expected=rule_name(rule), found=token, line=token.line, col=token.col),
                pos,
            )
        return rule(stream, pos)

    on_line.rule_name = rule_name(rule)  # type: ignore[attr-defined]
    on_line.__name__ = rule_name(rule)
    return on_line


def transition(stream: TokenStream, pos: int) -> Result:
    """``OPEN -> opened; isUnlocked > ring``, or ``-> done; finished``, on one line."""
    first = stream.at(pos)
    line = first.line if first is not None else 0

    event = optional(identifier)(stream, pos)
    event_name = event.value[0] if event.value else TRANSIENT_EVENT

    # "b" alone on its line, followed by "-> c; ok", is a state and a transient transition
    result = same_line(arrow, line)(stream, event.pos)
    if isinstance(result, Failure):
        return result

    target = same_line(identifier, line)(stream, result.pos)
    if isinstance(target, Failure):
        return target

    next_token = stream.at(target.pos)
    has_guard = next_token is not None and next_token.type == TokenType.CONDITION and next_token.line == line
    if not event_name and not has_guard:
        # An unguarded transient transition could never be told apart
        return stream.fail(
            target.pos,
            f"Transient transition to {target.value!r} needs a condition, "
            f"found {next_token.describe() if next_token else 'end of input'}",
            TokenType.CONDITION.value,
        )
    guard = optional(same_line(condition, line))(stream, target.pos)

    actions = many(same_line(action, line))(stream, guard.pos)

    entry = TransitionEntry(
        event=event_name,
        transition=Transition(
            target=target.value,
            cond=guard.value[0] if guard.value else None,
            actions=actions.value or None,
        ),
    )
    return Success(entry, actions.pos)


def state_header(stream: TokenStream, pos: int) -> Result:
    token = stream.at(pos)
    name = identifier(stream, pos)
    if isinstance(name, Failure):
        return name

    parallel = optional(parallel_marker)(stream, name.pos)
    final = optional(final_marker)(stream, parallel.pos)
    initial = optional(initial_marker)(stream, final.pos)

    header = StateHeader(
        name=name.value,
        token=token,
        parallel=bool(parallel.value),
        final=bool(final.value),
        initial=bool(initial.value),
    )
    return Success(header, initial.pos)


def state_with_body(stream: TokenStream, pos: int) -> Result:
    """A state followed by an indented block of transitions and nested states."""
    header = state_header(stream, pos)
    if isinstance(header, Failure):
        return header

    opened = indent(stream, header.pos)
    if isinstance(opened, Failure):
        return opened

    body = many(statement)(stream, opened.pos)

    # Each INDENT is closed by exactly one DEDENT
    closed = dedent(stream, body.pos)
    if isinstance(closed, Failure):
        return closed

    return Success(RawState(header=header.value, body=tuple(body.value)), closed.pos)


def state_name_only(stream: TokenStream, pos: int) -> Result:
    header = state_header(stream, pos)
    if isinstance(header, Failure):
        return header
    return Success(RawState(header=header.value), header.pos)


# Longer match first
_state_forms = one_of(state_with_body, state_name_only)


def state(stream: TokenStream, pos: int) -> Result:
    result = _state_forms(stream, pos)
    if isinstance(result, Failure):
        return result
    return Success(assemble_state(result.value), result.pos)


# A line starting with "name ->" is a transition, anything else a nested state
statement = named("statement", one_of(transition, state))


def statechart(stream: TokenStream, pos: int = 0) -> Result:
    """
    Top-level rule: one or more states covering the whole input.

    The value is the list of assembled top-level states.
    """
    lead = optional(indent)(stream, pos)

    first = state(stream, lead.pos)
    if isinstance(first, Failure):
        return first
    rest = many(state)(stream, first.pos)
    pos = rest.pos

    if lead.value:
        closed = dedent(stream, pos)
        if isinstance(closed, Failure):
            return closed
        pos = closed.pos

    end = end_of_input(stream, pos)
    if isinstance(end, Failure):
        return end
    return Success([first.value, *rest.value], pos)
