"""Main CLI entry point for regwatch."""

import typer
from rich.console import Console

from regwatch.cli import check

app = typer.Typer(
    name="regwatch",
    help="Find newer versions of container images in their registries.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

app.command(name="check")(check.check_cmd)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output"),
) -> None:
    """
    regwatch: find newer versions of container images in their registries.

    - [bold]check[/bold]: Report a newer tag or a changed digest for an image
    """
    from regwatch.utils.logging import configure_logging

    if verbose:
        configure_logging(level="DEBUG")
    elif quiet:
        configure_logging(level="ERROR")
    else:
        configure_logging(level="WARNING")


@app.command()
def version() -> None:
    """Show the regwatch version."""
    from regwatch import __version__

    console.print(f"regwatch version {__version__}")


if __name__ == "__main__":
    app()
