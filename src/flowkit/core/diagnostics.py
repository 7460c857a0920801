"""System diagnostics and health checks.

Provides diagnostic checks behind `flowkit doctor`:
    - External tool availability (git, git-flow)
    - Configuration validation
    - Repository and git-flow initialisation
"""

from __future__ import annotations

import asyncio
import json
import shutil
import tomllib
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field

from flowkit.core.config import AppConfig
from flowkit.core.result import Err, Ok
from flowkit.flow.ops import open_flow


class ExternalTool(BaseModel):
    name: str
    binary: str
    version_args: list[str] = Field(default_factory=lambda: ["--version"])
    required: bool = True
    install_hint: str | None = None


@dataclass
class ToolCheck:
    tool: ExternalTool
    status: str
    version: str | None
    message: str | None = None


class DiagnosticCheck(ABC):
    name: str

    @abstractmethod
    async def run(self) -> tuple[str, str]:
        """Run the diagnostic and return (status, message)."""


class ConfigCheck(DiagnosticCheck):
    def __init__(self, config: AppConfig, config_path: Path | None) -> None:
        self.config = config
        self.config_path = config_path
        self.name = "Config"

    async def run(self) -> tuple[str, str]:
        if self.config_path is None or not self.config_path.exists():
            return "ok", "No config file; using defaults and environment."

        try:
            raw = self.config_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            return "error", f"Cannot read config file {self.config_path}: {exc}"

        try:
            if self.config_path.suffix.lower() == ".json":
                json.loads(raw)
            else:
                tomllib.loads(raw)
        except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
            return "error", f"Invalid config file {self.config_path}: {exc}"
        return "ok", f"Configuration valid ({self.config_path})."


class RepositoryCheck(DiagnosticCheck):
    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self.name = "Repository"

    async def run(self) -> tuple[str, str]:
        match await open_flow(
            self.config.user.repo_path,
            executable=self.config.git.executable,
            timeout=self.config.git.timeout,
        ):
            case Err(err):
                return "error", err.message
            case Ok(flow):
                pass

        if await flow.is_initialised():
            return "ok", f"git-flow initialised in {flow.repo.path}"
        return "warn", f"git-flow not initialised in {flow.repo.path}; run `flowkit flow init`."


TOOL_TIMEOUT = 10.0

DEFAULT_TOOLS: list[ExternalTool] = [
    ExternalTool(
        name="Git", binary="git", install_hint="Install via your package manager (brew, apt, etc.)"
    ),
    ExternalTool(
        name="git-flow",
        binary="git",
        version_args=["flow", "version"],
        install_hint="Install git-flow (AVH edition) via your package manager.",
    ),
]


def _select_tools(names: Iterable[str] | None) -> list[ExternalTool]:
    if not names:
        return DEFAULT_TOOLS

    requested = {name.lower() for name in names}
    selected = [
        tool
        for tool in DEFAULT_TOOLS
        if tool.name.lower() in requested or tool.binary.lower() in requested
    ]
    return selected or DEFAULT_TOOLS


def _decode(raw: bytes | None) -> str:
    return (raw or b"").decode("utf-8", errors="replace")


async def _check_tool(tool: ExternalTool, timeout: float = TOOL_TIMEOUT) -> ToolCheck:
    resolved = shutil.which(tool.binary)
    if not resolved:
        return ToolCheck(tool=tool, status="missing", version=None, message=tool.install_hint)

    try:
        process = await asyncio.create_subprocess_exec(
            resolved,
            *tool.version_args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            stdin=asyncio.subprocess.DEVNULL,
        )
    except FileNotFoundError:
        return ToolCheck(tool=tool, status="missing", version=None, message=tool.install_hint)
    except OSError as exc:
        return ToolCheck(tool=tool, status="error", version=None, message=str(exc))

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return ToolCheck(
            tool=tool, status="error", version=None, message=f"timed out after {timeout:g}s"
        )

    output = _decode(stdout).strip() or _decode(stderr).strip()
    version = output.splitlines()[0] if output else None

    if process.returncode != 0:
        return ToolCheck(
            tool=tool, status="error", version=version, message=output or "version command failed"
        )

    return ToolCheck(tool=tool, status="ok", version=version, message=None)


async def _run_doctor(tools: list[ExternalTool]) -> list[ToolCheck]:
    tasks = [asyncio.create_task(_check_tool(tool)) for tool in tools]
    return await asyncio.gather(*tasks)


async def _run_deep_checks(
    config: AppConfig, config_path: Path | None
) -> list[tuple[str, str, str]]:
    diag_checks: list[DiagnosticCheck] = [
        ConfigCheck(config, config_path),
        RepositoryCheck(config),
    ]
    results = await asyncio.gather(*(check.run() for check in diag_checks))
    return [
        (check.name, status, message)
        for check, (status, message) in zip(diag_checks, results, strict=True)
    ]


async def run_diagnostics_suite(
    config: AppConfig,
    config_path: Path | None,
    tool_names: list[str] | None,
) -> tuple[list[tuple[str, str, str]], list[ToolCheck]]:
    """Run deep checks and tool checks in parallel."""
    tools = _select_tools(tool_names)
    deep_checks_task = asyncio.create_task(_run_deep_checks(config, config_path))
    tools_task = asyncio.create_task(_run_doctor(tools))
    return await asyncio.gather(deep_checks_task, tools_task)
