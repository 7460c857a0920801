"""Which git-flow actions make sense for a branch type.

Support branches are long-lived and are never finished, published or
pulled through git-flow. Only hotfix and release finishes push tags, so
push-after-finish is limited to those. Releases always branch from develop.
"""

from __future__ import annotations

from dataclasses import dataclass, fields

from .types import BranchType

_PUSH_ON_FINISH = frozenset({BranchType.HOTFIX, BranchType.RELEASE})


@dataclass(frozen=True, slots=True)
class ActionAvailability:
    finish: bool
    push_after_finish: bool
    squash: bool
    publish: bool
    pull: bool
    pull_panel: bool
    base_branch: bool

    def enabled(self) -> list[str]:
        return [f.name for f in fields(self) if getattr(self, f.name)]


def actions_for(
    branch_type: BranchType, has_branches: bool, has_remotes: bool = True
) -> ActionAvailability:
    managed = branch_type is not BranchType.SUPPORT
    return ActionAvailability(
        finish=has_branches and managed,
        push_after_finish=has_branches and branch_type in _PUSH_ON_FINISH,
        squash=has_branches and managed,
        publish=has_branches and managed,
        pull=has_branches and has_remotes and managed,
        pull_panel=managed,
        base_branch=branch_type is not BranchType.RELEASE,
    )


__all__ = ["ActionAvailability", "actions_for"]
