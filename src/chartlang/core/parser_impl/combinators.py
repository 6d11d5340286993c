"""
Backtracking parser combinators.

A rule is a callable ``rule(stream, pos)`` returning either ``Success`` (a
value plus the position to resume from) or ``Failure`` (a ``GrammarError``
plus the position where matching broke down). Positions are plain values,
so backtracking is just "carry on from the position you saved"; no rule ever
has to undo anything.

Nothing in this module knows about statecharts.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from ..errors import GrammarError, NoAlternativeError
from ..lexer import Token, TokenType

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T
    pos: int

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """
    A failed match.

    ``pos`` is the furthest position the rule reached before giving up; it
    is used to pick the most informative error among alternatives.
    """

    error: GrammarError
    pos: int

    @property
    def ok(self) -> bool:
        return False


Result = Union[Success[Any], Failure]
Rule = Callable[["TokenStream", int], Result]


class TokenStream:
    """
    Read-only cursor target over the grammatical tokens.

    COMMENT and NEWLINE tokens are dropped on construction: they only drive
    the lexer's indentation logic.
    """

    IGNORED = (TokenType.COMMENT, TokenType.NEWLINE)

    def __init__(self, tokens: list[Token]):
        self.tokens = [token for token in tokens if token.type not in self.IGNORED]
        # Furthest primitive failure seen so far, for error reporting only
        self.furthest: Failure | None = None

    def __len__(self) -> int:
        return len(self.tokens)

    def at(self, pos: int) -> Token | None:
        """Token at ``pos``, or None past the end."""
        if pos >= len(self.tokens):
            return None
        return self.tokens[pos]

    def at_end(self, pos: int) -> bool:
        return pos >= len(self.tokens)

    def fail(self, pos: int, message: str, expected: str = "") -> Failure:
        """Build a Failure located at the token found at ``pos``."""
        token = self.at(pos)
        if token is None:
            failure = Failure(GrammarError(message, expected=expected), pos)
        else:
            failure = Failure(
                GrammarError(message, expected=expected, found=token, line=token.line, col=token.col),
                pos,
            )
        if self.furthest is None or pos > self.furthest.pos:
            self.furthest = failure
        return failure


def rule_name(rule: Rule) -> str:
    return getattr(rule, "rule_name", None) or getattr(rule, "__name__", repr(rule))


def named(name: str, rule: Rule) -> Rule:
    """Give ``rule`` a readable name for error messages."""

    def wrapper(stream: TokenStream, pos: int) -> Result:
        return rule(stream, pos)

    wrapper.rule_name = name  # type: ignore[attr-defined]
    wrapper.__name__ = name
    return wrapper


def expect(
    token_type: TokenType,
    derive: Callable[[Token], Any] | None = None,
) -> Rule:
    """
    Primitive consumer for one terminal token type.

    On a match the token is consumed and ``derive(token)`` (the token itself
    when ``derive`` is None) becomes the value.
    """

    def consume(stream: TokenStream, pos: int) -> Result:
        token = stream.at(pos)
        if token is None:
            return stream.fail(pos, f"Expected {token_type.value}, found end of input", token_type.value)
        if token.type != token_type:
            return stream.fail(
                pos, f"Expected {token_type.value}, found {token.describe()}", token_type.value
            )
        return Success(derive(token) if derive else token, pos + 1)

    consume.rule_name = token_type.value.lower()  # type: ignore[attr-defined]
    consume.__name__ = token_type.value.lower()
    return consume


def one_of(*rules: Rule) -> Rule:
    """
    Ordered choice: the first rule that matches at the current position wins.

    Every alternative starts from the same saved position. When all of them
    fail, the failure lists the rule names that were tried and keeps each
    alternative's own error.
    """
    names = tuple(rule_name(rule) for rule in rules)

    def choice(stream: TokenStream, pos: int) -> Result:
        causes: list[GrammarError] = []
        reached: list[int] = []
        for rule in rules:
            result = rule(stream, pos)
            if isinstance(result, Success):
                return result
            causes.append(result.error)
            reached.append(result.pos)

        token = stream.at(pos)
        error = NoAlternativeError(
            f"matched none of the rules: {' | '.join(names)}",
            expected=" | ".join(names),
            found=token,
            line=token.line if token else 0,
            col=token.col if token else 0,
            alternatives=names,
            causes=tuple(causes),
            positions=tuple(reached),
        )
        return Failure(error, max(reached, default=pos))

    choice.rule_name = " | ".join(names)  # type: ignore[attr-defined]
    choice.__name__ = "one_of"
    return choice


def optional(rule: Rule) -> Rule:
    """Zero or one: ``[value]`` on a match, ``[]`` otherwise. Never fails."""

    def maybe(stream: TokenStream, pos: int) -> Result:
        result = rule(stream, pos)
        if isinstance(result, Success):
            return Success([result.value], result.pos)
        return Success([], pos)

    maybe.rule_name = f"[{rule_name(rule)}]"  # type: ignore[attr-defined]
    maybe.__name__ = "optional"
    return maybe


def many(rule: Rule) -> Rule:
    """
    Zero or more: collect matches until the first failure or end of stream.

    Never fails. A match that consumes nothing ends the repetition, since
    repeating it could never make progress.
    """

    def repeat(stream: TokenStream, pos: int) -> Result:
        values = []
        while not stream.at_end(pos):
            result = rule(stream, pos)
            if isinstance(result, Failure) or result.pos == pos:
                break
            values.append(result.value)
            pos = result.pos
        return Success(values, pos)

    repeat.rule_name = f"{{{rule_name(rule)}}}"  # type: ignore[attr-defined]
    repeat.__name__ = "many"
    return repeat


def end_of_input(stream: TokenStream, pos: int) -> Result:
    """Match only when every token has been consumed."""
    token = stream.at(pos)
    if token is None:
        return Success(None, pos)
    return stream.fail(pos, f"Expected end of input, found {token.describe()}", "end of input")
