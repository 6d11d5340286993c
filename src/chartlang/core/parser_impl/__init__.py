"""
chartlang parser package.

The parser is a backtracking recursive-descent parser built from small
combinators:

- combinators: grammar-agnostic choice / optional / repetition over a token stream
- grammar: the statechart rules (transition, state, statechart)
- assembler: turns each parsed state into a ``StateNode``

Usage:
    from chartlang.core.parser_impl import parse

    result = parse(text)
    if result.ok:
        config = result.to_dict()

Cost: alternatives are resolved by trial parses, so input that is ambiguous
for a long stretch (for example a deeply nested block whose closing DEDENT is
missing, which makes every enclosing ``state_with_body`` fail and be retried
as ``state_name_only``) is parsed in super-linear time in the number of
tokens. Well-formed input only backtracks over one state header or one
leading identifier at a time.
"""

from __future__ import annotations

import logging

from ..ir import ParseFailure, StateNode
from ..lexer import tokenize
from .assembler import wrap_root
from .combinators import Failure, TokenStream
from .grammar import statechart

logger = logging.getLogger(__name__)

DEFAULT_ROOT_ID = "machine"


def parse(text: str, *, root_id: str = DEFAULT_ROOT_ID) -> StateNode | ParseFailure:
    """
    Parse chartlang text into a statechart configuration tree.

    Args:
        text: Source text
        root_id: Id of the synthetic root used when the text declares more
            than one top-level state

    Returns:
        The root ``StateNode``, or a ``ParseFailure`` describing the first
        structural error

    Raises:
        InvalidIndentationError: If the text is not consistently indented
    """
    stream = TokenStream(tokenize(text))
    result = statechart(stream, 0)

    if isinstance(result, Failure):
        error = result.error
        furthest = stream.furthest
        if furthest is not None and furthest.pos > result.pos:
            error = furthest.error
        logger.debug("Parse failed: %s", error.format())
        return ParseFailure(error=error)

    root = wrap_root(result.value, root_id)
    logger.debug("Parsed statechart %r with %d top-level states", root.id, len(result.value))
    return root


__all__ = ["DEFAULT_ROOT_ID", "parse"]
