"""
Small mapping helpers shared by the parser and the output model.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping
from typing import Any

# Event key of transient ("always") transitions
TRANSIENT_EVENT = ""


def merge_transitions(items: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    """
    Merge single-key mappings left to right into one mapping.

    Ordinary keys overwrite: the last value wins but the key keeps the
    position of its first appearance. The transient key ``""`` accumulates
    instead, so that several guarded eventless transitions survive in
    declaration order::

        >>> merge_transitions([{"GO": "a"}, {"": "b"}, {"GO": "c"}, {"": "d"}])
        {'GO': 'c', '': ['b', 'd']}
    """
    merged: dict[str, Any] = {}
    for item in items:
        for key, value in item.items():
            if key == TRANSIENT_EVENT:
                merged.setdefault(TRANSIENT_EVENT, []).append(value)
            else:
                merged[key] = value
    return merged


def omit(keys: Collection[str], mapping: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``mapping`` without ``keys``."""
    return {key: value for key, value in mapping.items() if key not in keys}
