"""CLI command for checking an image for updates."""

import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from regwatch.models.image import ImageReference, ImageResult
from regwatch.models.version import SelectionPolicy, UpdateType

console = Console()


def check_cmd(
    image: str = typer.Argument(..., help="Image reference (e.g., ghcr.io/owner/name:1.4.2)"),
    digest: Optional[List[str]] = typer.Option(
        None,
        "--digest",
        "-d",
        help="Locally deployed digest (repeatable)",
    ),
    ignore: UpdateType = typer.Option(
        UpdateType.NONE,
        "--ignore",
        "-i",
        help="Granularity of change to ignore",
        case_sensitive=False,
    ),
    policy: Optional[SelectionPolicy] = typer.Option(
        None,
        "--policy",
        "-p",
        help="How the newest version is picked (default from config: latest)",
        case_sensitive=False,
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file path",
    ),
    insecure: bool = typer.Option(False, "--insecure", help="Use plain HTTP"),
    username: Optional[str] = typer.Option(
        None, "--username", "-u", envvar="REGWATCH_USERNAME", help="Registry username"
    ),
    password: Optional[str] = typer.Option(
        None, "--password", envvar="REGWATCH_PASSWORD", help="Registry password or token"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """
    Check whether an image has a newer version or a changed digest.

    Exits with status 1 if the check failed.

    Example:
        regwatch check ghcr.io/owner/name:1.4.2 --digest sha256:abc --ignore major
    """
    from regwatch.core.resolver import UpdateResolver
    from regwatch.utils.config import load_config
    from regwatch.utils.errors import ConfigurationError

    try:
        reference = ImageReference.parse(image)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)

    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(2)

    registry_config = config.registry_for(reference.registry)
    overrides: dict = {}
    if insecure:
        overrides["insecure"] = True
    if username and password:
        overrides["username"] = username
        overrides["password"] = password
    if overrides:
        registry_config = registry_config.model_copy(update=overrides)

    resolver = UpdateResolver(config=config, policy=policy)

    with console.status(f"Checking {reference}..."):
        result = resolver.check_reference(
            reference,
            digest or [],
            ignore_update_type=ignore,
            registry_config=registry_config,
        )

    if as_json:
        typer.echo(json.dumps(result.model_dump(mode="json"), indent=2, default=str))
    else:
        _print_terminal_report(result)

    if not result.success:
        raise typer.Exit(1)


def _print_terminal_report(result: ImageResult) -> None:
    """Print a rich terminal report."""
    console.print()

    if result.error:
        status = "[bold red]FAILED[/bold red]"
    elif result.has_update:
        status = "[bold yellow]UPDATE AVAILABLE[/bold yellow]"
    else:
        status = "[bold green]UP TO DATE[/bold green]"

    console.print(
        Panel(
            f"[bold]Image:[/bold] {result.reference}\n[bold]Status:[/bold] {status}",
            title="Update Check",
        )
    )

    if result.error:
        console.print(f"[red]Error:[/red] {escape(str(result.error))}")
        return

    table = Table()
    table.add_column("Field", style="bold")
    table.add_column("Value")

    if result.version_info:
        table.add_row("Current version", result.version_info.current_tag.format())
        latest = result.version_info.latest_remote_tag
        table.add_row("Newer version", latest.format() if latest else "-")

    if result.digest_info:
        local = ", ".join(sorted(result.digest_info.local_digests)) or "-"
        table.add_row("Local digests", local)
        table.add_row("Remote digest", result.digest_info.remote_digest or "-")

    console.print(table)
