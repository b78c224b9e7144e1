"""
Click-based CLI for element-cli.
"""

import json
import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from .application.services import LifecycleService
from .config import ElementConfig
from .domain.results import CommandResult

console = Console()

_HINTS = {
    "auth": "Check that ELEMENT_TOKEN holds a valid, unexpired token.",
    "network": "Check ELEMENT_REGISTRY_URL and your network connection.",
    "not_found": "The block ID in your settings file is unknown to the registry.",
}


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _service(ctx: click.Context) -> LifecycleService:
    service = ctx.obj.get("service") if ctx.obj else None
    if service is None:
        try:
            config = ElementConfig.from_env()
        except ValidationError as e:
            console.print(f"[red]✗ Invalid configuration:[/red] {e}")
            sys.exit(1)
        service = LifecycleService(config=config)
    return service


def _report(result: CommandResult, json_output: bool) -> None:
    """Render a CommandResult and exit non-zero on failure"""
    if json_output:
        click.echo(json.dumps(result.as_json_dict(), indent=2, sort_keys=True))
    elif result.success:
        lines = result.message.splitlines() or [""]
        console.print(f"[green]✓[/green] {lines[0]}")
        for line in lines[1:]:
            console.print(f"  {line}")
    else:
        console.print(f"[red]✗ Error:[/red] {result.message}")
        hint = _HINTS.get(str(result.data.get("category", "")))
        if hint:
            console.print(f"  [yellow]{hint}[/yellow]")
        if result.skewed:
            console.print(
                "  [yellow]⚠ The registry already accepted this change; "
                "local settings or branches are out of sync.[/yellow]"
            )
    if result.exit_code:
        sys.exit(result.exit_code)


def _workspace(workspace: str) -> Path:
    return Path(workspace).resolve()


json_option = click.option(
    "--json", "json_output", is_flag=True, help="Print a machine-readable result"
)
workspace_argument = click.argument(
    "workspace", type=click.Path(exists=True, file_okay=False), required=False, default="."
)


@click.group()
@click.version_option(version="2.1.0", prog_name="element")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Element CLI for publishing blocks to the block registry"""
    ctx.ensure_object(dict)
    _configure_logging(verbose)


@cli.command()
@click.option("--name", "-n", help="Block display name (default: package.json name)")
@click.option("--category", "-c", required=True, help="Block category")
@click.option(
    "--categories",
    help="Comma-separated list of allowed categories to validate against",
)
@json_option
@workspace_argument
@click.pass_context
def publish(
    ctx: click.Context,
    name: str | None,
    category: str,
    categories: str | None,
    json_output: bool,
    workspace: str,
) -> None:
    """Publish a new block and stage version 1"""
    allowed = [c.strip() for c in categories.split(",") if c.strip()] if categories else None
    result = _service(ctx).publish(
        workspace=_workspace(workspace), name=name, category=category, categories=allowed
    )
    _report(result, json_output)


@cli.command()
@click.option(
    "--toggle-public",
    "--public",
    "-p",
    "toggle_public",
    is_flag=True,
    help="Flip the staged version's visibility",
)
@click.option("--unminified", is_flag=True, help="Upload the build without minifying it")
@json_option
@workspace_argument
@click.pass_context
def update(
    ctx: click.Context,
    toggle_public: bool,
    unminified: bool,
    json_output: bool,
    workspace: str,
) -> None:
    """Upload the current build to the active staging version"""
    result = _service(ctx).update(
        workspace=_workspace(workspace), toggle_public=toggle_public, unminified=unminified
    )
    _report(result, json_output)


@cli.command("new-major-version")
@json_option
@workspace_argument
@click.pass_context
def new_major_version(ctx: click.Context, json_output: bool, workspace: str) -> None:
    """Stage the current build as the next major version"""
    result = _service(ctx).new_major_version(workspace=_workspace(workspace))
    _report(result, json_output)


@cli.command()
@click.option("--note", "-m", required=True, help="Release note")
@json_option
@workspace_argument
@click.pass_context
def release(ctx: click.Context, note: str, json_output: bool, workspace: str) -> None:
    """Release the active version to production"""
    result = _service(ctx).release(workspace=_workspace(workspace), note=note)
    _report(result, json_output)


@cli.command()
@json_option
@workspace_argument
@click.pass_context
def rollback(ctx: click.Context, json_output: bool, workspace: str) -> None:
    """Roll production back from the active version"""
    result = _service(ctx).rollback(workspace=_workspace(workspace))
    _report(result, json_output)


@cli.command()
@json_option
@workspace_argument
@click.pass_context
def details(ctx: click.Context, json_output: bool, workspace: str) -> None:
    """Show the active version and name of the block"""
    result = _service(ctx).details(workspace=_workspace(workspace))
    _report(result, json_output)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
