import asyncio
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

import Dir_Backup.cli.backup as backup_cli
from Dir_Backup.core.models import RunOutcome

console = Console(stderr=True)


def configure_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@click.command()
@click.argument("source", type=click.Path(path_type=Path))
@click.argument("destination", required=False, type=click.Path(path_type=Path))
@click.option("--log", "log_path", type=click.Path(path_type=Path), help="Backup log file")
@click.option("--ignore", "ignore_patterns", multiple=True, help="Entry name or glob to leave out")
@click.option("--root", "project_root", type=click.Path(path_type=Path), help="Directory holding data/settings.json")
@click.option("-v", "--verbose", is_flag=True, help="Debug output")
def main(source, destination, log_path, ignore_patterns, project_root, verbose):
    """Back up SOURCE into DESTINATION if it changed since the last backup."""
    configure_logging(verbose)

    try:
        result = asyncio.run(
            backup_cli.run(
                source,
                destination,
                project_root=project_root,
                log_path=log_path,
                ignore_patterns=list(ignore_patterns),
            )
        )
    except (OSError, ValueError) as e:
        console.print(f"[red]Could not load settings:[/red] {e}")
        sys.exit(1)

    if not result.ok:
        console.print(f"[red]Error occurred during backup:[/red] {result.error}")
        if not result.log_written:
            console.print("[bold red]The failure could not be written to the backup log[/bold red]")
        sys.exit(1)

    if result.outcome is RunOutcome.SKIPPED:
        console.print("[yellow]No changes detected since last backup[/yellow]")
    else:
        console.print(f"[green]Backup created:[/green] {result.archive_path}")


if __name__ == "__main__":
    main()
