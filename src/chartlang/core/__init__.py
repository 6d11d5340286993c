"""Core chartlang functionality: lexer, parser, output model, configuration."""

from . import ir
from .errors import (
    ChartlangError,
    ConfigError,
    ErrorContext,
    GrammarError,
    InvalidIndentationError,
    NoAlternativeError,
)
from .lexer import Token, TokenType, tokenize
from .manifest import ChartlangConfig, find_config, load_config
from .mappings import merge_transitions, omit
from .parser_impl import parse
from .serialize import dump, to_json, to_yaml

__all__ = [
    "ir",
    "ChartlangError",
    "ConfigError",
    "ErrorContext",
    "GrammarError",
    "InvalidIndentationError",
    "NoAlternativeError",
    "Token",
    "TokenType",
    "tokenize",
    "parse",
    "merge_transitions",
    "omit",
    "ChartlangConfig",
    "find_config",
    "load_config",
    "dump",
    "to_json",
    "to_yaml",
]
