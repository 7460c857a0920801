from __future__ import annotations

import asyncio
from typing import TypeVar

import typer
from rich import box
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from flowkit.core.console import console
from flowkit.core.decorators import handle_exceptions
from flowkit.core.result import Err, GitError, Ok, Result, ValidationError
from flowkit.flow import (
    BRANCH_TYPES,
    BranchType,
    CommandOutcome,
    GitFlow,
    HeadInfo,
    actions_for,
    open_flow,
)

app = typer.Typer(help="Drive the git-flow branching workflow.")
T = TypeVar("T")


@app.callback()
def _flow_callback(ctx: typer.Context) -> None:
    """Entry point for git-flow commands."""


def _unwrap_result(result: Result[T, GitError]) -> T:
    match result:
        case Ok(value):
            return value
        case Err(err):
            console.print(f"[red]{escape(str(err))}[/red]")
            raise typer.Exit(code=1)


async def _open(ctx: typer.Context) -> Result[GitFlow, GitError]:
    config = ctx.obj.config
    return await open_flow(
        config.user.repo_path,
        executable=config.git.executable,
        timeout=config.git.timeout,
        dry_run=config.user.dry_run,
    )


async def _require_initialised(flow: GitFlow) -> None:
    if not await flow.is_initialised():
        raise ValidationError(
            "git-flow is not initialised in this repository. Run `flowkit flow init` first.",
            context={"repo": str(flow.repo.path)},
        )


def _render_outcome(outcome: CommandOutcome) -> None:
    if outcome.skipped:
        console.print(f"[yellow]dry-run:[/yellow] {escape(outcome.command.display)}")
        return

    if outcome.succeeded:
        console.print(f"[green]ok[/green] {escape(outcome.command.display)}")
        if outcome.output.strip():
            console.print(Panel(escape(outcome.output.rstrip()), box=box.SIMPLE))
        return

    console.print(
        f"[red]failed[/red] {escape(outcome.command.display)} (exit code {outcome.exit_code})"
    )
    if outcome.output.strip():
        console.print(Panel(f"[red]{escape(outcome.output.rstrip())}[/red]", box=box.SIMPLE))
    raise typer.Exit(code=1)


def _render_head(head: HeadInfo) -> None:
    if head.detached:
        console.print("[yellow]HEAD is detached.[/yellow]")
        return
    if head.classified is None:
        console.print(f"HEAD: [cyan]{escape(head.short_ref)}[/cyan] (not a flow branch)")
        return
    console.print(
        f"HEAD: [cyan]{escape(head.short_ref)}[/cyan] "
        f"({head.classified.branch_type.value} "
        f"[bold]{escape(head.classified.branch_name)}[/bold])"
    )


@app.command("init")
@handle_exceptions
def init(ctx: typer.Context) -> None:
    """Initialise git-flow with default branch names (git flow init -d)."""

    async def _run() -> CommandOutcome | None:
        flow = _unwrap_result(await _open(ctx))
        if await flow.is_initialised():
            return None
        return _unwrap_result(await flow.init())

    outcome = asyncio.run(_run())
    if outcome is None:
        console.print("[green]git-flow is already initialised.[/green]")
        return
    _render_outcome(outcome)


@app.command("list")
@handle_exceptions
def list_branches(
    ctx: typer.Context,
    branch_type: BranchType = typer.Argument(..., help="Branch type to list."),
) -> None:
    """List the git-flow branches of one type."""

    async def _collect() -> tuple[list[str], HeadInfo]:
        flow = _unwrap_result(await _open(ctx))
        await _require_initialised(flow)
        branches = _unwrap_result(await flow.list_branches(branch_type))
        return branches, await flow.current_head()

    branches, head = asyncio.run(_collect())
    if not branches:
        console.print(f"[yellow]No {branch_type.value} branches exist.[/yellow]")
        return

    current = head.classified
    table = Table(title=f"{branch_type.value} branches", box=box.SIMPLE_HEAVY, expand=True)
    table.add_column("", no_wrap=True)
    table.add_column("Branch", style="cyan", no_wrap=True)
    for name in branches:
        is_current = (
            current is not None
            and current.branch_type is branch_type
            and current.branch_name == name
        )
        table.add_row("*" if is_current else "", escape(name), style="bold" if is_current else None)
    console.print(table)


@app.command("start")
@handle_exceptions
def start(
    ctx: typer.Context,
    branch_type: BranchType = typer.Argument(..., help="Branch type to start."),
    name: str = typer.Argument(..., help="Branch name without the type prefix."),
    base: str | None = typer.Option(
        None, "--base", "-b", help="Base branch (ignored for release and support)."
    ),
) -> None:
    """Start a new feature/bugfix/hotfix/release/support branch."""
    if base and not actions_for(branch_type, has_branches=False).base_branch:
        console.print(
            f"[yellow]{branch_type.value} branches do not take a base branch; ignoring --base.[/yellow]"
        )

    async def _run() -> CommandOutcome:
        flow = _unwrap_result(await _open(ctx))
        await _require_initialised(flow)
        return _unwrap_result(await flow.start(branch_type, name, base))

    _render_outcome(asyncio.run(_run()))


@app.command("publish")
@handle_exceptions
def publish(
    ctx: typer.Context,
    branch_type: BranchType = typer.Argument(...),
    name: str = typer.Argument(..., help="Branch name without the type prefix."),
) -> None:
    """Publish a flow branch to the remote."""
    if not actions_for(branch_type, has_branches=True).publish:
        raise ValidationError(f"{branch_type.value} branches cannot be published with git-flow.")

    async def _run() -> CommandOutcome:
        flow = _unwrap_result(await _open(ctx))
        await _require_initialised(flow)
        return _unwrap_result(await flow.publish(branch_type, name))

    _render_outcome(asyncio.run(_run()))


@app.command("pull")
@handle_exceptions
def pull(
    ctx: typer.Context,
    branch_type: BranchType = typer.Argument(...),
    name: str = typer.Argument(..., help="Branch name without the type prefix."),
    remote: str | None = typer.Option(
        None, "--remote", help="Remote to pull from (defaults to git.default_remote)."
    ),
) -> None:
    """Pull a flow branch from a remote."""
    remote_name = remote or ctx.obj.config.git.default_remote

    async def _run() -> CommandOutcome:
        flow = _unwrap_result(await _open(ctx))
        await _require_initialised(flow)
        remotes = _unwrap_result(await flow.remotes())
        if not actions_for(branch_type, has_branches=True, has_remotes=bool(remotes)).pull:
            raise ValidationError(
                f"Cannot pull {branch_type.value} branches.",
                context={"remotes": ", ".join(remotes) or "none"},
            )
        if remote_name not in remotes:
            raise ValidationError(
                f"Unknown remote '{remote_name}'.", context={"remotes": ", ".join(remotes)}
            )
        return _unwrap_result(await flow.pull(branch_type, remote_name, name))

    _render_outcome(asyncio.run(_run()))


@app.command("finish")
@handle_exceptions
def finish(
    ctx: typer.Context,
    branch_type: BranchType = typer.Argument(...),
    name: str = typer.Argument(..., help="Branch name without the type prefix."),
    push: bool = typer.Option(False, "--push", "-p", help="Push after finishing."),
    squash: bool = typer.Option(False, "--squash", "-S", help="Squash the branch when merging."),
) -> None:
    """Finish a flow branch, merging it back."""
    actions = actions_for(branch_type, has_branches=True)
    if not actions.finish:
        raise ValidationError(f"{branch_type.value} branches cannot be finished with git-flow.")
    if push and not actions.push_after_finish:
        raise ValidationError("--push is only available for hotfix and release branches.")

    async def _run() -> CommandOutcome:
        flow = _unwrap_result(await _open(ctx))
        await _require_initialised(flow)
        return _unwrap_result(await flow.finish(branch_type, name, push=push, squash=squash))

    _render_outcome(asyncio.run(_run()))


@app.command("status")
@handle_exceptions
def status(
    ctx: typer.Context,
    branch_type: BranchType | None = typer.Argument(None, help="Limit to one branch type."),
) -> None:
    """Show HEAD, flow branches per type, and which actions apply."""
    types = [branch_type] if branch_type else list(BRANCH_TYPES)

    async def _collect() -> tuple[HeadInfo, list[str], dict[BranchType, list[str]]]:
        flow = _unwrap_result(await _open(ctx))
        await _require_initialised(flow)
        remotes = _unwrap_result(await flow.remotes())
        listed = {bt: _unwrap_result(await flow.list_branches(bt)) for bt in types}
        return await flow.current_head(), remotes, listed

    head, remotes, listed = asyncio.run(_collect())
    _render_head(head)

    table = Table(title="git-flow", box=box.SIMPLE_HEAVY, expand=True)
    table.add_column("Type", style="cyan", no_wrap=True)
    table.add_column("Branches", style="white")
    table.add_column("Actions", style="white")
    for bt in types:
        branches = listed[bt]
        actions = actions_for(bt, has_branches=bool(branches), has_remotes=bool(remotes))
        table.add_row(
            bt.value,
            escape(", ".join(branches)) or "[dim]none[/dim]",
            ", ".join(actions.enabled()) or "[dim]none[/dim]",
        )
    console.print(table)
