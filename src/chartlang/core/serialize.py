"""
Serialization of parse results to JSON and YAML.

Both formats keep the key order of ``to_dict()`` (source order for states
and events).
"""

from __future__ import annotations

import json
from typing import Any, Protocol

import yaml


class SupportsToDict(Protocol):
    def to_dict(self) -> dict[str, Any]: ...


def to_json(result: SupportsToDict, indent: int = 2) -> str:
    """Convert a StateNode or ParseFailure to a JSON string."""
    return json.dumps(result.to_dict(), indent=indent or None, ensure_ascii=False)


def to_yaml(result: SupportsToDict, indent: int = 2) -> str:
    """Convert a StateNode or ParseFailure to a YAML string."""
    return yaml.safe_dump(
        result.to_dict(),
        default_flow_style=False,
        sort_keys=False,
        indent=max(indent, 2),
        allow_unicode=True,
    )


def dump(result: SupportsToDict, output_format: str = "json", indent: int = 2) -> str:
    """Serialize ``result`` in ``output_format`` ("json" or "yaml")."""
    if output_format == "yaml":
        return to_yaml(result, indent)
    if output_format == "json":
        return to_json(result, indent)
    raise ValueError(f"Unknown output format: {output_format!r}")
