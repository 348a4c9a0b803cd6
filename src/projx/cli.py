"""Typer CLI for projx: project-scoped buffer commands."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from result import Err, Result

from projx.config import Config, load_config

if TYPE_CHECKING:
    from projx.services.project_service import ProjectService

app = typer.Typer(
    name="projx",
    help="Project-scoped buffer operations: open, kill, revisit and search by project.",
    no_args_is_help=True,
)

type ServiceCall[T] = Callable[[ProjectService], Awaitable[Result[T, str]]]

PromptOption = Annotated[
    bool, typer.Option("--prompt", "-p", help="Prompt for the project instead of the current one")
]


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Annotated[
        Path | None, typer.Option("--config", help="Path to a projx config.toml")
    ] = None,
    cache_dir: Annotated[
        Path | None, typer.Option("--cache-dir", help="Directory holding the workspace database")
    ] = None,
    selection: Annotated[
        str | None, typer.Option("--selection", help="Selection strategy: strict, narrowing, qt")
    ] = None,
    project_dirs: Annotated[
        list[Path] | None,
        typer.Option("--project-dir", help="Directory whose children are projects (repeatable)"),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    """Load configuration shared by every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        ctx.obj = load_config(
            config_path,
            cache_dir=cache_dir,
            selection_strategy=selection,
            project_dirs=tuple(project_dirs) if project_dirs else None,
        )
    except ValueError as exc:
        typer.echo(f"Invalid configuration: {exc}", err=True)
        raise typer.Exit(2) from exc


@app.command("open")
def open_files(
    ctx: typer.Context,
    paths: Annotated[list[Path], typer.Argument(help="Files to open")],
) -> None:
    """Open files as buffers; the last one gets focus."""
    buffers = _unwrap(_run(ctx.obj, lambda s: s.open_files([str(p) for p in paths])))
    for buffer in buffers:
        typer.echo(f"Opened {buffer.name} ({buffer.path})")


@app.command("scratch")
def scratch(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Buffer name")] = "*scratch*",
) -> None:
    """Create a buffer that visits no file and focus it."""
    buffer = _unwrap(_run(ctx.obj, lambda s: s.create_scratch(name)))
    typer.echo(f"Created {buffer.name}")


@app.command("buffers")
def list_buffers(
    ctx: typer.Context,
    show_all: Annotated[
        bool, typer.Option("--all", "-a", help="Include projects without open buffers")
    ] = False,
) -> None:
    """List open buffers grouped by project."""
    projects = _unwrap(_run(ctx.obj, lambda s: s.list_projects(live_only=not show_all)))
    for project in projects:
        typer.echo(f"{project.name} [{project.project_type}] {project.root}")
        for buffer in project.buffers:
            typer.echo(f"  {buffer.name}\t{buffer.path}")


@app.command("find-file-in-project")
def find_file_in_project(ctx: typer.Context) -> None:
    """Open one file chosen from the current project."""
    buffer = _unwrap(_run(ctx.obj, lambda s: s.find_file()))
    typer.echo(f"Opened {buffer.name} ({buffer.path})")


@app.command("open-all-project-files")
def open_all_project_files(ctx: typer.Context, prompt: PromptOption = False) -> None:
    """Open every file of the project."""
    report = _unwrap(_run(ctx.obj, lambda s: s.open_all(explicit=prompt)))
    typer.echo(f"Opened files of {report.root}: {report}")


@app.command("kill-project-buffers")
def kill_project_buffers(ctx: typer.Context, prompt: PromptOption = False) -> None:
    """Close every buffer visiting a file of the project."""
    report = _unwrap(_run(ctx.obj, lambda s: s.kill(explicit=prompt)))
    typer.echo(f"Killed buffers of {report.root}: {report}")


@app.command("revisit-project")
def revisit_project(
    ctx: typer.Context,
    find_file: Annotated[
        bool, typer.Option("--find-file", "-f", help="Open a file in the project instead")
    ] = False,
    reveal: Annotated[
        bool, typer.Option("--reveal", help="Show the project root in the file manager")
    ] = False,
) -> None:
    """Pick a known project and go to its root (printed, for `cd $(...)`)."""
    result = _unwrap(_run(ctx.obj, lambda s: s.revisit(open_file=find_file)))
    if result.buffer is not None:
        typer.echo(f"Opened {result.buffer.name} ({result.buffer.path})")
        return
    typer.echo(result.root)
    if reveal:
        from projx.ui.desktop import reveal_root

        if not reveal_root(result.root):
            typer.echo(f"Could not reveal {result.root}", err=True)


@app.command("grep-project")
def grep_project(
    ctx: typer.Context,
    pattern: Annotated[str, typer.Argument(help="Extended regular expression")],
) -> None:
    """Search the current project's files."""
    for hit in _unwrap(_run(ctx.obj, lambda s: s.grep(pattern))):
        typer.echo(str(hit))


@app.command("project-todo-list")
def project_todo_list(ctx: typer.Context) -> None:
    """List lines tagged with the configured TODO tokens."""
    config: Config = ctx.obj
    for hit in _unwrap(_run(config, lambda s: s.todo(config.todo_tokens))):
        typer.echo(str(hit))


def _run[T](config: Config, call: ServiceCall[T]) -> Result[T, str]:
    return asyncio.run(_call(config, call))


async def _call[T](config: Config, call: ServiceCall[T]) -> Result[T, str]:
    """Build the services, run one call, and shut down."""
    from projx.services.container import ServiceContainer

    try:
        container = await ServiceContainer.create(config)
    except ValueError as exc:
        return Err(str(exc))
    try:
        return await call(container.project_service)
    finally:
        await container.close()


def _unwrap[T](result: Result[T, str]) -> T:
    if isinstance(result, Err):
        typer.echo(f"Error: {result.err_value}", err=True)
        raise typer.Exit(1)
    return result.ok_value
