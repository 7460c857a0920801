"""git-flow workflow support.

This package provides:
    - BranchType / try_classify: flow namespaces and ref classification
    - Command builders for `git flow` subcommands
    - actions_for: which actions apply to a branch type
    - GitFlow: session operations against a repository
"""

from __future__ import annotations

from .commands import (
    FlowCommand,
    finish_command,
    init_command,
    list_command,
    publish_command,
    pull_command,
    resolve_base_branch,
    start_command,
)
from .ops import CommandOutcome, GitFlow, HeadInfo, open_flow
from .policy import ActionAvailability, actions_for
from .types import BRANCH_TYPES, BranchType, ClassifiedRef, try_classify

__all__ = [
    "ActionAvailability",
    "BRANCH_TYPES",
    "BranchType",
    "ClassifiedRef",
    "CommandOutcome",
    "FlowCommand",
    "GitFlow",
    "HeadInfo",
    "actions_for",
    "finish_command",
    "init_command",
    "list_command",
    "open_flow",
    "publish_command",
    "pull_command",
    "resolve_base_branch",
    "start_command",
    "try_classify",
]
