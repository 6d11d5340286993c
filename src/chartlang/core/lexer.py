"""
Lexer/Tokenizer for the chartlang notation.

Converts raw statechart text into a flat stream of tokens with source
location tracking. Handles indentation-based blocks (Python-style) by
synthesizing INDENT/DEDENT tokens from an indent stack.

Example input::

    door
      closed*
        OPEN -> opened
      opened
        CLOSE -> closed; isUnlocked > logClose
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .errors import make_indentation_error

logger = logging.getLogger(__name__)

IDENTIFIER_CHARS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_.")
LINE_TERMINATORS = ("\n", "\r")
INLINE_WHITESPACE = (" ", "\t", "\r")
ROOT_MARKER = "#"


class TokenType(Enum):
    """Token types in the chartlang notation."""

    IDENTIFIER = "IDENTIFIER"
    TRANSITION_ARROW = "TRANSITION_ARROW"  # ->
    PARALLEL_STATE = "PARALLEL_STATE"  # &
    FINAL_STATE = "FINAL_STATE"  # $
    INITIAL_STATE = "INITIAL_STATE"  # *
    CONDITION = "CONDITION"  # ; guard
    ACTION = "ACTION"  # > action
    COMMENT = "COMMENT"  # # ...

    # Layout
    NEWLINE = "NEWLINE"
    INDENT = "INDENT"
    DEDENT = "DEDENT"

    UNKNOWN = "UNKNOWN"


# Markers that lex as a single character with no text
SINGLE_CHAR_TOKENS = {
    "&": TokenType.PARALLEL_STATE,
    "$": TokenType.FINAL_STATE,
    "*": TokenType.INITIAL_STATE,
}

# Characters introducing an annotation whose text is the next identifier
ANNOTATION_TOKENS = {
    ";": TokenType.CONDITION,
    ">": TokenType.ACTION,
}


@dataclass(frozen=True)
class Token:
    """
    A single token of the notation.

    Attributes:
        type: Type of token
        line: Line number (1-indexed)
        col: Column number (1-indexed)
        text: Lexeme for identifiers, annotations, comments and unknown input
    """

    type: TokenType
    line: int
    col: int
    text: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return ``{type, line, col[, text]}``; ``text`` is left out when absent."""
        data: dict[str, Any] = {"type": self.type.value, "line": self.line, "col": self.col}
        if self.text is not None:
            data["text"] = self.text
        return data

    def describe(self) -> str:
        """Short form used in error messages, e.g. ``IDENTIFIER 'idle'``."""
        if self.text is not None:
            return f"{self.type.value} {self.text!r}"
        return self.type.value

    def __repr__(self) -> str:
        return f"Token({self.type.value}, {self.text!r}, {self.line}:{self.col})"


class Lexer:
    """
    Lexer for chartlang.

    Converts source text into a stream of tokens with indentation tracking.
    One instance tokenizes one text; the indent stack is never shared.
    """

    def __init__(self, text: str):
        """
        Initialize lexer.

        Args:
            text: Source text to tokenize
        """
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: list[Token] = []
        self.indent_stack = [0]  # Stack of indentation levels

    def current_char(self) -> str | None:
        """Get current character or None if at end."""
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def peek_char(self, offset: int = 1) -> str | None:
        """Peek ahead at character."""
        pos = self.pos + offset
        if pos >= len(self.text):
            return None
        return self.text[pos]

    def advance(self) -> None:
        """Move to next character, updating line/column."""
        if self.pos < len(self.text):
            if self.text[self.pos] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def emit(self, token_type: TokenType, line: int, col: int, text: str | None = None) -> None:
        self.tokens.append(Token(token_type, line, col, text))

    def skip_whitespace(self) -> None:
        """Skip spaces, tabs and carriage returns (never newlines)."""
        while self.current_char() in INLINE_WHITESPACE:
            self.advance()

    def is_blank_rest_of_line(self, start: int) -> bool:
        """Check whether the line from ``start`` holds only whitespace or a comment."""
        pos = start
        while pos < len(self.text) and self.text[pos] in INLINE_WHITESPACE:
            pos += 1
        return pos >= len(self.text) or self.text[pos] in ("\n", ROOT_MARKER)

    def read_identifier(self) -> str:
        """Read a run of identifier characters (letters, digits, ``_`` and ``.``)."""
        chars = []
        current = self.current_char()
        while current is not None and current in IDENTIFIER_CHARS:
            chars.append(current)
            self.advance()
            current = self.current_char()
        return "".join(chars)

    def read_comment(self) -> str:
        """Read from ``#`` up to, but not including, the line terminator."""
        chars = []
        current = self.current_char()
        while current is not None and current not in LINE_TERMINATORS:
            chars.append(current)
            self.advance()
            current = self.current_char()
        return "".join(chars)

    def read_annotation(self) -> str | None:
        """
        Read the identifier following ``;`` or ``>``.

        Separator characters between the marker and the identifier are
        skipped. Returns None, leaving the position untouched, when the line
        ends before an identifier starts.
        """
        offset = 1
        while True:
            char = self.peek_char(offset)
            if char is None or char in LINE_TERMINATORS:
                return None
            if char in IDENTIFIER_CHARS:
                break
            offset += 1

        for _ in range(offset):
            self.advance()
        return self.read_identifier()

    def handle_indentation(self) -> None:
        """
        Measure the indentation of the line starting at the cursor.

        Only spaces count towards the width; a tab ends the measurement and
        is later skipped as ordinary whitespace. Blank and comment-only lines
        leave the indent stack alone.
        """
        width = 0
        while self.current_char() == " ":
            width += 1
            self.advance()

        if self.is_blank_rest_of_line(self.pos):
            return

        current_indent = self.indent_stack[-1]

        if width > current_indent:
            self.indent_stack.append(width)
            self.emit(TokenType.INDENT, self.line, 1)

        elif width < current_indent:
            if width not in self.indent_stack:
                raise make_indentation_error(width, self.indent_stack, self.line, self.text)

            while self.indent_stack[-1] > width:
                self.indent_stack.pop()
                self.emit(TokenType.DEDENT, self.line, 1)

    def previous_on_line(self) -> Token | None:
        """Return the last token emitted on the current line, if any."""
        if self.tokens and self.tokens[-1].line == self.line:
            last = self.tokens[-1]
            if last.type not in (TokenType.NEWLINE, TokenType.INDENT, TokenType.DEDENT):
                return last
        return None

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire source text.

        Returns:
            List of tokens including NEWLINE, COMMENT, INDENT and DEDENT

        Raises:
            InvalidIndentationError: If a dedent matches no open block
        """
        # Before the first token and right after every NEWLINE
        at_line_start = True

        while self.pos < len(self.text):
            if at_line_start:
                self.handle_indentation()
                at_line_start = False

            self.skip_whitespace()

            ch = self.current_char()
            if ch is None:
                break

            token_line = self.line
            token_col = self.column

            if ch == "\n":
                self.advance()
                self.emit(TokenType.NEWLINE, token_line, token_col)
                at_line_start = True

            elif ch == ROOT_MARKER:
                previous = self.previous_on_line()
                next_char = self.peek_char()
                if (
                    previous is not None
                    and previous.type == TokenType.TRANSITION_ARROW
                    and next_char is not None
                    and next_char in IDENTIFIER_CHARS
                ):
                    # Cross-tree target such as "#machine.idle"
                    self.advance()
                    value = ROOT_MARKER + self.read_identifier()
                    self.emit(TokenType.IDENTIFIER, token_line, token_col, value)
                else:
                    self.emit(TokenType.COMMENT, token_line, token_col, self.read_comment())

            elif ch in SINGLE_CHAR_TOKENS:
                self.advance()
                self.emit(SINGLE_CHAR_TOKENS[ch], token_line, token_col)

            elif ch in ANNOTATION_TOKENS:
                value = self.read_annotation()
                if value is None:
                    self.advance()
                    self.emit(TokenType.UNKNOWN, token_line, token_col, ch)
                else:
                    self.emit(ANNOTATION_TOKENS[ch], token_line, token_col, value)

            elif ch == "-" and self.peek_char() == ">":
                self.advance()
                self.advance()
                self.emit(TokenType.TRANSITION_ARROW, token_line, token_col)

            elif ch in IDENTIFIER_CHARS:
                self.emit(TokenType.IDENTIFIER, token_line, token_col, self.read_identifier())

            else:
                self.advance()
                self.emit(TokenType.UNKNOWN, token_line, token_col, ch)

        # Close every block still open
        while len(self.indent_stack) > 1:
            self.indent_stack.pop()
            self.emit(TokenType.DEDENT, self.line, self.column)

        return self.tokens


def tokenize(text: str) -> list[Token]:
    """
    Convenience function to tokenize chartlang text.

    Args:
        text: Source text

    Returns:
        List of tokens

    Raises:
        InvalidIndentationError: If a dedent matches no open block
    """
    tokens = Lexer(text).tokenize()
    logger.debug("Tokenized %d characters into %d tokens", len(text), len(tokens))
    return tokens
