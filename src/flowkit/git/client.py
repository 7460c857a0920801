from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from flowkit.core.result import Err, GitError, Ok, Result

from .parsing import get_branch_names, get_remote_names, trim_branch_name

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class ExecutionResult:
    """Captured outcome of one git invocation."""

    stdout: str
    stderr: str
    exit_code: int

    @property
    def exited_successfully(self) -> bool:
        return self.exit_code == 0

    @property
    def all_output(self) -> str:
        if self.stdout and self.stderr:
            separator = "" if self.stdout.endswith("\n") else "\n"
            return f"{self.stdout}{separator}{self.stderr}"
        return self.stdout or self.stderr


def _decode(raw: bytes | None) -> str:
    return (raw or b"").decode("utf-8", errors="replace")


async def run_git(
    cwd: Path,
    *args: str,
    executable: str = "git",
    timeout: float = DEFAULT_TIMEOUT,
) -> Result[ExecutionResult, GitError]:
    """Run git and capture its output.

    A non-zero exit is reported through ExecutionResult, not as Err. Err is
    reserved for git not starting at all or exceeding the timeout.
    """
    if not cwd.exists():
        return Err(GitError("Repository path does not exist", context={"cwd": str(cwd)}))

    logger.debug("git %s (cwd=%s)", " ".join(args), cwd)
    try:
        process = await asyncio.create_subprocess_exec(
            executable,
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            stdin=asyncio.subprocess.DEVNULL,
            cwd=cwd,
        )
    except FileNotFoundError:
        return Err(
            GitError(f"{executable} executable not found on PATH", context={"cwd": str(cwd)})
        )
    except OSError as exc:
        return Err(
            GitError(
                "Failed to start git",
                context={"cwd": str(cwd), "args": list(args), "error": str(exc)},
            )
        )

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return Err(
            GitError(
                f"git {' '.join(args)} timed out after {timeout:g}s",
                context={"cwd": str(cwd)},
            )
        )

    returncode = process.returncode if process.returncode is not None else -1
    return Ok(ExecutionResult(stdout=_decode(stdout), stderr=_decode(stderr), exit_code=returncode))


async def _resolve_worktree(path: Path, executable: str, timeout: float) -> Result[Path, GitError]:
    match await run_git(path, "rev-parse", "--show-toplevel", executable=executable, timeout=timeout):
        case Err(err):
            return Err(err)
        case Ok(result):
            if not result.exited_successfully:
                detail = result.stderr.strip() or "Not a git repository"
                return Err(GitError(detail, context={"path": str(path)}))
            return Ok(Path(result.stdout.strip()).resolve())


class AsyncRepo:
    """Async git wrapper built on subprocess plumbing."""

    def __init__(
        self, root: Path, *, executable: str = "git", timeout: float = DEFAULT_TIMEOUT
    ) -> None:
        self._root = root
        self._executable = executable
        self._timeout = timeout

    @property
    def path(self) -> Path:
        return self._root

    @classmethod
    async def open(
        cls,
        path: Path | str = ".",
        *,
        executable: str = "git",
        timeout: float = DEFAULT_TIMEOUT,
    ) -> Result[AsyncRepo, GitError]:
        root = Path(path).expanduser()
        match await _resolve_worktree(root, executable, timeout):
            case Ok(resolved_root):
                return Ok(cls(resolved_root, executable=executable, timeout=timeout))
            case Err(err):
                return Err(err)

    async def execute(self, *args: str) -> Result[ExecutionResult, GitError]:
        """Run git in this repository, tolerating non-zero exits."""
        return await run_git(self._root, *args, executable=self._executable, timeout=self._timeout)

    async def get_output(self, *args: str) -> Result[str, GitError]:
        """Run git and return stdout, turning a non-zero exit into Err."""
        match await self.execute(*args):
            case Err(err):
                return Err(err)
            case Ok(result):
                if not result.exited_successfully:
                    detail = result.stderr.strip() or result.stdout.strip()
                    return Err(
                        GitError(
                            detail or f"git {' '.join(args)} failed",
                            context={
                                "cwd": str(self._root),
                                "args": list(args),
                                "returncode": result.exit_code,
                            },
                        )
                    )
                return Ok(result.stdout)

    async def local_branches(self) -> Result[list[str], GitError]:
        result = await self.get_output("branch")
        return result.map(get_branch_names)

    async def remote_names(self) -> Result[list[str], GitError]:
        result = await self.get_output("remote")
        return result.map(get_remote_names)

    async def symbolic_head(self) -> str:
        """Return the full symbolic ref of HEAD, or '' when detached or unreadable."""
        match await self.execute("symbolic-ref", "--quiet", "HEAD"):
            case Ok(result) if result.exited_successfully:
                return trim_branch_name(result.stdout)
            case _:
                return ""

    async def config_get(self, key: str) -> str | None:
        match await self.execute("config", "--get", key):
            case Ok(result) if result.exited_successfully:
                return result.stdout.strip() or None
            case _:
                return None


__all__ = ["AsyncRepo", "ExecutionResult", "run_git"]
