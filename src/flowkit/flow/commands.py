"""Builders for `git flow` command lines.

Each builder returns a FlowCommand: the argument vector passed to the git
executable (starting with ``flow``) and whether running it changes the
repository. Builders validate names but never touch the repository.
"""

from __future__ import annotations

from dataclasses import dataclass

from flowkit.core.result import ValidationError

from .types import BranchType


@dataclass(frozen=True, slots=True)
class FlowCommand:
    args: tuple[str, ...]
    mutating: bool = True

    @property
    def display(self) -> str:
        return "git " + " ".join(self.args)

    def __str__(self) -> str:
        return self.display


def _require_name(name: str, what: str = "branch name") -> str:
    cleaned = name.strip()
    if not cleaned:
        raise ValidationError(f"A {what} is required.")
    return cleaned


def resolve_base_branch(branch_type: BranchType, base: str | None = None) -> str | None:
    """Pick the start point for a new branch of the given type.

    Releases always start from develop, so no base is passed. Support
    branches start from HEAD. Other types use ``base`` when given.
    """
    if branch_type is BranchType.RELEASE:
        return None
    if branch_type is BranchType.SUPPORT:
        return "HEAD"
    if base and base.strip():
        return base.strip()
    return None


def init_command() -> FlowCommand:
    return FlowCommand(("flow", "init", "-d"))


def list_command(branch_type: BranchType) -> FlowCommand:
    return FlowCommand(("flow", branch_type.value), mutating=False)


def start_command(
    branch_type: BranchType, name: str, base: str | None = None
) -> FlowCommand:
    args = ["flow", branch_type.value, "start", _require_name(name)]
    resolved = resolve_base_branch(branch_type, base)
    if resolved:
        args.append(resolved)
    return FlowCommand(tuple(args))


def publish_command(branch_type: BranchType, name: str) -> FlowCommand:
    return FlowCommand(("flow", branch_type.value, "publish", _require_name(name)))


def pull_command(branch_type: BranchType, remote: str, name: str) -> FlowCommand:
    return FlowCommand(
        (
            "flow",
            branch_type.value,
            "pull",
            _require_name(remote, "remote name"),
            _require_name(name),
        )
    )


def finish_command(
    branch_type: BranchType, name: str, *, push: bool = False, squash: bool = False
) -> FlowCommand:
    args = ["flow", branch_type.value, "finish"]
    if push:
        args.append("-p")
    if squash:
        args.append("-S")
    args.append(_require_name(name))
    return FlowCommand(tuple(args))


__all__ = [
    "FlowCommand",
    "finish_command",
    "init_command",
    "list_command",
    "publish_command",
    "pull_command",
    "resolve_base_branch",
    "start_command",
]
