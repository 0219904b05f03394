"""Main CLI application."""

import sys

import click
from rich.console import Console
from rich.traceback import Traceback

from mouse_idle_stats.core.config import ConfigManager
from mouse_idle_stats.core.log_handle import LogHandle
from mouse_idle_stats.monitor.runner import MonitorRunner

error_console = Console(stderr=True)


@click.command()
@click.option(
    "--keep-os-alive",
    is_flag=True,
    help="Jitter the pointer while it is idle so the OS does not sleep or lock",
)
def cli(keep_os_alive: bool) -> None:
    """Mouse Idle Stats - measure how long the mouse pointer sits idle.

    Runs until interrupted (Ctrl+C or SIGTERM), logging every idle episode
    and the running total.

    Example:
        mouse-idle-stats --keep-os-alive
    """
    config = ConfigManager({"keep_alive": {"enabled": keep_os_alive}})
    log = LogHandle.configure(config.get("logging.level"))

    runner = MonitorRunner(config, log=log)
    exit_code = runner.run()

    if runner.error is not None:
        error = runner.error
        error_console.print("[red]Error:[/red] idle detection stopped unexpectedly")
        error_console.print(Traceback.from_exception(type(error), error, error.__traceback__))

    sys.exit(exit_code)


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
