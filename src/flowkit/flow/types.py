"""git-flow branch types and ref classification."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class BranchType(str, Enum):
    """Branch namespaces managed by git-flow, in matching order."""

    FEATURE = "feature"
    BUGFIX = "bugfix"
    HOTFIX = "hotfix"
    RELEASE = "release"
    SUPPORT = "support"

    @property
    def prefix(self) -> str:
        return f"{self.value}/"

    def __str__(self) -> str:
        return self.value


BRANCH_TYPES: tuple[BranchType, ...] = tuple(BranchType)


@dataclass(frozen=True, slots=True)
class ClassifiedRef:
    branch_type: BranchType
    branch_name: str


def try_classify(current_ref: str) -> ClassifiedRef | None:
    """Split a short ref like 'feature/login' into its flow type and name.

    The ref must already have ``refs/heads/`` removed. Matching is a
    case-sensitive prefix test; the first type in declaration order wins.
    The remaining name may be empty ('feature/' -> (FEATURE, '')). Refs
    outside every namespace, such as 'main' or 'develop', return None.
    """
    for branch_type in BranchType:
        prefix = branch_type.prefix
        if current_ref.startswith(prefix):
            return ClassifiedRef(branch_type, current_ref[len(prefix) :])
    return None


__all__ = ["BRANCH_TYPES", "BranchType", "ClassifiedRef", "try_classify"]
