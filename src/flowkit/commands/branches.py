from __future__ import annotations

import asyncio

import typer
from rich import box
from rich.markup import escape
from rich.table import Table

from flowkit.core.console import console
from flowkit.core.decorators import handle_exceptions
from flowkit.core.result import Err, GitError, Ok, Result
from flowkit.flow import GitFlow, HeadInfo, open_flow, try_classify


async def _open(ctx: typer.Context) -> Result[GitFlow, GitError]:
    config = ctx.obj.config
    return await open_flow(
        config.user.repo_path,
        executable=config.git.executable,
        timeout=config.git.timeout,
    )


@handle_exceptions
def branches(ctx: typer.Context) -> None:
    """List local branches, marking the checked-out one."""

    async def _collect() -> Result[tuple[list[str], HeadInfo], GitError]:
        match await _open(ctx):
            case Err(err):
                return Err(err)
            case Ok(flow):
                match await flow.local_branches():
                    case Err(err):
                        return Err(err)
                    case Ok(names):
                        return Ok((names, await flow.current_head()))

    match asyncio.run(_collect()):
        case Err(err):
            console.print(f"[red]Error: {escape(err.message)}[/red]")
            raise typer.Exit(code=1)
        case Ok(payload):
            names, head = payload

    if not names:
        console.print("[yellow]No local branches.[/yellow]")
        return

    table = Table(title="Local branches", box=box.SIMPLE_HEAVY, expand=True)
    table.add_column("", no_wrap=True)
    table.add_column("Branch", style="cyan", no_wrap=True)
    table.add_column("Flow type", style="white", no_wrap=True)
    for name in names:
        is_current = name == head.short_ref
        table.add_row(
            "*" if is_current else "",
            escape(name),
            _flow_type_label(name),
            style="bold" if is_current else None,
        )
    console.print(table)


def _flow_type_label(name: str) -> str:
    classified = try_classify(name)
    return classified.branch_type.value if classified else ""


@handle_exceptions
def head(ctx: typer.Context) -> None:
    """Show the checked-out branch and its git-flow classification."""

    async def _collect() -> Result[HeadInfo, GitError]:
        match await _open(ctx):
            case Err(err):
                return Err(err)
            case Ok(flow):
                return Ok(await flow.current_head())

    match asyncio.run(_collect()):
        case Err(err):
            console.print(f"[red]Error: {escape(err.message)}[/red]")
            raise typer.Exit(code=1)
        case Ok(info):
            pass

    if info.detached:
        console.print("[yellow]HEAD is detached.[/yellow]")
        return

    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_row("Ref", escape(info.ref))
    table.add_row("Branch", escape(info.short_ref))
    if info.classified is None:
        table.add_row("Flow type", "[dim]none[/dim]")
    else:
        table.add_row("Flow type", info.classified.branch_type.value)
        table.add_row("Flow name", escape(info.classified.branch_name) or "[dim](empty)[/dim]")
    console.print(table)
