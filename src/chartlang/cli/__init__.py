"""
chartlang CLI Package.

- main.py: the ``chartlang`` application and its commands
- utils.py: shared utilities (version, logging, source loading)
"""

from chartlang.cli.main import app, main
from chartlang.cli.utils import get_version, version_callback

__all__ = [
    "app",
    "main",
    "get_version",
    "version_callback",
]
