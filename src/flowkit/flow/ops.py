"""git-flow session operations.

GitFlow wraps an AsyncRepo and provides the workflow used by the CLI:
    - Initialisation check and `git flow init -d`
    - Per-type branch listing, memoised for the session
    - HEAD inspection with flow classification
    - start / publish / pull / finish with dry-run support
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from flowkit.core.result import Err, GitError, Ok, Result
from flowkit.git.client import AsyncRepo
from flowkit.git.parsing import get_branch_names, normalize_newlines, strip_refs_heads

from . import commands
from .commands import FlowCommand
from .types import BranchType, ClassifiedRef, try_classify

logger = logging.getLogger(__name__)

GITFLOW_MASTER_KEY = "gitflow.branch.master"


@dataclass(frozen=True)
class HeadInfo:
    ref: str
    short_ref: str
    classified: ClassifiedRef | None

    @property
    def detached(self) -> bool:
        return not self.ref


@dataclass(frozen=True)
class CommandOutcome:
    command: FlowCommand
    exit_code: int
    output: str
    skipped: bool = False

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class GitFlow:
    """git-flow operations against a single repository."""

    def __init__(self, repo: AsyncRepo, *, dry_run: bool = False) -> None:
        self._repo = repo
        self._dry_run = dry_run
        self._branches: dict[BranchType, list[str]] = {}

    @property
    def repo(self) -> AsyncRepo:
        return self._repo

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    async def is_initialised(self) -> bool:
        value = await self._repo.config_get(GITFLOW_MASTER_KEY)
        return bool(value and value.strip())

    async def remotes(self) -> Result[list[str], GitError]:
        return await self._repo.remote_names()

    async def local_branches(self) -> Result[list[str], GitError]:
        return await self._repo.local_branches()

    async def list_branches(self, branch_type: BranchType) -> Result[list[str], GitError]:
        """Return the branches git-flow knows for a type.

        A failing `git flow <type>` (e.g. git-flow not initialised) yields an
        empty list. Successful listings are cached until invalidated.
        """
        if branch_type in self._branches:
            return Ok(list(self._branches[branch_type]))

        match await self._repo.execute(*commands.list_command(branch_type).args):
            case Err(err):
                return Err(err)
            case Ok(result):
                if not result.exited_successfully:
                    logger.debug(
                        "git flow %s exited with %s; treating as no branches",
                        branch_type.value,
                        result.exit_code,
                    )
                    branches: list[str] = []
                else:
                    branches = get_branch_names(result.stdout)

        self._branches[branch_type] = branches
        return Ok(list(branches))

    def invalidate(self, branch_type: BranchType | None = None) -> None:
        if branch_type is None:
            self._branches.clear()
        else:
            self._branches.pop(branch_type, None)

    async def current_head(self) -> HeadInfo:
        ref = await self._repo.symbolic_head()
        short_ref = strip_refs_heads(ref)
        return HeadInfo(ref=ref, short_ref=short_ref, classified=try_classify(short_ref))

    async def run(self, command: FlowCommand) -> Result[CommandOutcome, GitError]:
        """Execute a git-flow command and capture its combined output."""
        if self._dry_run and command.mutating:
            logger.info("dry-run: %s", command.display)
            return Ok(CommandOutcome(command=command, exit_code=0, output="", skipped=True))

        match await self._repo.execute(*command.args):
            case Err(err):
                return Err(err)
            case Ok(result):
                pass

        logger.info("%s (exit code: %s)", command.display, result.exit_code)
        return Ok(
            CommandOutcome(
                command=command,
                exit_code=result.exit_code,
                output=normalize_newlines(result.all_output),
            )
        )

    async def init(self) -> Result[CommandOutcome, GitError]:
        outcome = await self.run(commands.init_command())
        if _succeeded(outcome):
            self.invalidate()
        return outcome

    async def start(
        self, branch_type: BranchType, name: str, base: str | None = None
    ) -> Result[CommandOutcome, GitError]:
        outcome = await self.run(commands.start_command(branch_type, name, base))
        if _succeeded(outcome):
            self.invalidate(branch_type)
        return outcome

    async def publish(self, branch_type: BranchType, name: str) -> Result[CommandOutcome, GitError]:
        return await self.run(commands.publish_command(branch_type, name))

    async def pull(
        self, branch_type: BranchType, remote: str, name: str
    ) -> Result[CommandOutcome, GitError]:
        return await self.run(commands.pull_command(branch_type, remote, name))

    async def finish(
        self,
        branch_type: BranchType,
        name: str,
        *,
        push: bool = False,
        squash: bool = False,
    ) -> Result[CommandOutcome, GitError]:
        outcome = await self.run(
            commands.finish_command(branch_type, name, push=push, squash=squash)
        )
        if _succeeded(outcome):
            self.invalidate(branch_type)
        return outcome


def _succeeded(outcome: Result[CommandOutcome, GitError]) -> bool:
    match outcome:
        case Ok(value):
            return value.succeeded and not value.skipped
        case _:
            return False


async def open_flow(
    path: Path | str = ".",
    *,
    executable: str = "git",
    timeout: float = 30.0,
    dry_run: bool = False,
) -> Result[GitFlow, GitError]:
    """Open the repository at ``path`` and wrap it in a GitFlow session."""
    match await AsyncRepo.open(path, executable=executable, timeout=timeout):
        case Ok(repo):
            return Ok(GitFlow(repo, dry_run=dry_run))
        case Err(err):
            return Err(err)


__all__ = ["CommandOutcome", "GitFlow", "HeadInfo", "open_flow"]
