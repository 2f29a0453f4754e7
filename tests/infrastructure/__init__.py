"""
Unified test infrastructure for ponyml.

Modules:
- file_utils: Utilities for creating files and directories
- parse_utils: Shortcuts for parsing template snippets
- cli_utils: Running the command-line interface
"""

from .file_utils import write
from .parse_utils import parse, parse_children, parse_child, sources, texts
from .cli_utils import run_cli

__all__ = [
    # File utilities
    "write",

    # Parsing utilities
    "parse", "parse_children", "parse_child", "sources", "texts",

    # CLI utilities
    "run_cli",
]
