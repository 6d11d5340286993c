"""
Error types for chartlang lexing, parsing and configuration.

Lexer and configuration failures are raised as exceptions. Grammar failures
are plain values (``GrammarError``) because the parser uses them to drive
backtracking; only the one that survives every alternative is reported.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .lexer import Token


class ChartlangError(Exception):
    """Base exception for all chartlang errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class InvalidIndentationError(ChartlangError):
    """
    Raised by the lexer when a dedent does not land on an open block.

    Example::

        a
          b
              c
            d     <- width 4 was never opened
    """

    def __init__(
        self,
        message: str,
        width: int,
        stack: list[int],
        context: Optional["ErrorContext"] = None,
    ):
        self.width = width
        self.stack = list(stack)
        super().__init__(message, context)


class ConfigError(ChartlangError):
    """Raised when chartlang.toml holds values that cannot be used."""

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        source_name: Optional name of the source (usually a file path)
        snippet: Optional source text around the error location
    """

    line: int
    column: int
    source_name: str | None = None
    snippet: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "door.chart:10:5"
        """
        location = f"{self.line}:{self.column}"
        if self.source_name:
            location = f"{self.source_name}:{location}"

        if self.snippet:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Format code snippet with line numbers and error marker."""
        if not self.snippet:
            return ""

        lines = self.snippet.split("\n")
        formatted = []

        # Snippets start two lines above the error line
        start_line = max(1, self.line - 2)

        for i, line in enumerate(lines):
            line_num = start_line + i
            prefix = f"{line_num:4d} | "
            formatted.append(prefix + line)

            if line_num == self.line:
                marker_pos = len(prefix) + self.column - 1
                formatted.append(" " * marker_pos + "^^^")

        return "\n".join(formatted)


def make_snippet(text: str, line: int, radius: int = 2) -> str:
    """Return the lines of ``text`` within ``radius`` of ``line`` (1-indexed)."""
    lines = text.split("\n")
    start = max(1, line - radius)
    end = min(len(lines), line + radius)
    return "\n".join(lines[start - 1 : end])


def make_indentation_error(
    width: int,
    stack: list[int],
    line: int,
    text: str | None = None,
) -> InvalidIndentationError:
    """
    Helper to create an InvalidIndentationError with context.

    Args:
        width: Indentation width found on the offending line
        stack: Indent stack at the time of the failure
        line: Line number (1-indexed)
        text: Optional full source, used to attach a snippet

    Returns:
        InvalidIndentationError with context attached
    """
    snippet = make_snippet(text, line) if text is not None else None
    context = ErrorContext(line=line, column=width + 1, snippet=snippet)
    return InvalidIndentationError(
        f"Invalid indentation: width {width} does not match any open block {stack}",
        width=width,
        stack=stack,
        context=context,
    )


@dataclass(frozen=True)
class GrammarError:
    """
    A grammar failure: the token at some position was not what a rule needed.

    Attributes:
        message: Human-readable description
        expected: What the failing rule wanted (a token type or rule name)
        found: The offending token, or None at end of input
        line: Line of the offending token (0 when unknown)
        col: Column of the offending token (0 when unknown)
    """

    message: str
    expected: str = ""
    found: Optional["Token"] = None
    line: int = 0
    col: int = 0

    def format(self) -> str:
        """Render as ``line:col: message`` when the location is known."""
        if self.line:
            return f"{self.line}:{self.col}: {self.message}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"message": self.message, "expected": self.expected}
        if self.found is not None:
            data["found"] = self.found.to_dict()
        if self.line:
            data["line"] = self.line
            data["col"] = self.col
        return data

    def __str__(self) -> str:
        return self.format()


@dataclass(frozen=True)
class NoAlternativeError(GrammarError):
    """
    Every alternative of a choice failed.

    ``causes`` keeps each alternative's own failure, in the order tried, and
    ``positions`` the stream position each one reached.
    """

    alternatives: tuple[str, ...] = ()
    causes: tuple[GrammarError, ...] = field(default=(), compare=False)
    positions: tuple[int, ...] = field(default=(), compare=False)

    def deepest(self) -> GrammarError:
        """Return the underlying failure that got furthest into the input."""
        if not self.causes:
            return self
        best_index = max(range(len(self.causes)), key=lambda i: self.positions[i])
        best = self.causes[best_index]
        if isinstance(best, NoAlternativeError):
            return best.deepest()
        return best

    def format(self) -> str:
        """Base message followed by the alternative that got furthest."""
        text = super().format()
        closest = self.deepest()
        if closest is self:
            return text
        return f"{text}; closest: {closest.format()}"

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["alternatives"] = list(self.alternatives)
        return data
