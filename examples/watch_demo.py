#!/usr/bin/env python3
"""
Demonstration script for the changewatch listener.

Selects the best backend for this machine, watches a directory and prints
every batch of changed files as it arrives.

Usage:
    python examples/watch_demo.py [--watch-dir PATH] [--duration SECONDS] [--polling]
"""

import logging
import logging.config
import time
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from changewatch import ChangeBatch, ListenerConfig, select_and_init
from changewatch.config import LogLevel

logger = logging.getLogger(__name__)

# Initialize rich console
console = Console()


def create_batch_table(batch: ChangeBatch) -> Table:
    """Create a rich table for one change batch."""
    table = Table(title=f"🔔 {len(batch)} file(s) changed", show_header=True)
    table.add_column("Path", style="cyan")
    table.add_column("Backend", style="dim", width=10)

    for path in batch.sorted_paths():
        table.add_row(path, batch.backend.value)

    return table


@click.command()
@click.option(
    '--watch-dir',
    '-d',
    type=click.Path(path_type=Path, file_okay=False),
    default=Path('.'),
    help='Directory to watch',
)
@click.option('--duration', '-t', type=int, default=60, help='Seconds to watch before exiting')
@click.option('--polling', '-p', is_flag=True, help='Force the polling backend')
@click.option('--absolute', '-a', is_flag=True, help='Report absolute paths')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
def main(watch_dir: Path, duration: int, polling: bool, absolute: bool, verbose: bool):
    """
    Watch a directory and print the files whose content changes.

    Example usage:

        # Watch the current directory for a minute
        python examples/watch_demo.py

        # Watch a project with the polling backend for two minutes
        python examples/watch_demo.py -d /path/to/project -t 120 --polling
    """
    config = ListenerConfig(
        force_polling=polling,
        relativate_paths=not absolute,
        log_level=LogLevel.DEBUG if verbose else LogLevel.INFO,
    )
    logging.config.dictConfig(config.get_log_config())

    listener = select_and_init(watch_dir, config=config)
    listener.on_change(lambda batch: console.print(create_batch_table(batch)))

    console.print(
        Panel.fit(
            f"👀 Watching [bold]{listener.root_directory}[/bold]\n"
            f"Backend: [cyan]{listener.backend_kind.value}[/cyan]  "
            f"Tracked files: [green]{listener.seed_checksums()}[/green]",
            title="changewatch",
            border_style="blue",
        )
    )

    try:
        listener.start()
        time.sleep(duration)
    except KeyboardInterrupt:
        console.print("\n⚡ [yellow]Interrupted by user[/yellow]")
    except Exception as e:
        console.print(f"❌ [red]Watch failed:[/red] {e}")
        logger.exception("Full error details:")
        return 1
    finally:
        listener.stop()

    console.print("🛑 [bold green]Stopped[/bold green]")
    return 0


if __name__ == '__main__':
    exit(main())
