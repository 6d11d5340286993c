"""
chartlang - an indentation-based notation for hierarchical statecharts.

Compiles text such as::

    fetch
      idle
        FETCH -> loading
      loading
        RESOLVE -> success
        REJECT -> failure
      success$
      failure
        RETRY -> loading

into a nested statechart configuration (states, transitions, guards,
actions and initial states).
"""

from __future__ import annotations

from ._version import get_version
from .core import ir
from .core.errors import ChartlangError, ConfigError, GrammarError, InvalidIndentationError
from .core.ir import ParseFailure, StateNode, StateType, Transition
from .core.lexer import Token, TokenType, tokenize
from .core.parser_impl import parse
from .core.serialize import to_json, to_yaml

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "parse",
    "tokenize",
    "to_json",
    "to_yaml",
    "Token",
    "TokenType",
    "StateNode",
    "StateType",
    "Transition",
    "ParseFailure",
    "ChartlangError",
    "ConfigError",
    "GrammarError",
    "InvalidIndentationError",
]
