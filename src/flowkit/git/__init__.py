"""Git process execution and output parsing.

This package provides:
    - AsyncRepo: Non-blocking git commands
    - ExecutionResult: Captured stdout/stderr/exit code
    - Parsers for `git branch`-style listings and ref names
"""

from __future__ import annotations

from .client import AsyncRepo, ExecutionResult, run_git
from .parsing import (
    BRANCH_MARKER_CHARS,
    get_branch_names,
    get_remote_names,
    normalize_newlines,
    strip_refs_heads,
    trim_branch_name,
)

__all__ = [
    "AsyncRepo",
    "BRANCH_MARKER_CHARS",
    "ExecutionResult",
    "get_branch_names",
    "get_remote_names",
    "normalize_newlines",
    "run_git",
    "strip_refs_heads",
    "trim_branch_name",
]
