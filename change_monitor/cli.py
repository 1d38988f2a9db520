"""
Copyright 2024, Zep Software, Inc.

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import asyncio
import contextlib
import logging
import signal
from pathlib import Path

import typer
from dotenv import load_dotenv

from change_monitor.bootstrap import ensure_watch_folder
from change_monitor.config import MonitorConfig
from change_monitor.diff import compute_added_lines
from change_monitor.engine import ChangeBatchingEngine
from change_monitor.errors import ConfigurationError, WatchRootError
from change_monitor.watcher import ChangeMonitor

# Loads .env from CWD if present, so CHANGE_MONITOR_CONFIG can live there
load_dotenv()

logger = logging.getLogger(__name__)

cli_app = typer.Typer(
    help='Watch a set of text files and periodically report the lines added to them.'
)

# Define app as an alias for cli_app to support package entry points
app = cli_app


# --- Typer Option Constants ---
CONFIG_OPTION = typer.Option(
    None,
    '--config',
    '-c',
    help='Path to a YAML or JSON config file. Defaults to CHANGE_MONITOR_CONFIG or ./config.json.',
)
INTERVAL_OPTION = typer.Option(
    None, '--interval', '-i', min=0.1, help='Seconds between change reports (overrides config).'
)
LOG_LEVEL_OPTION = typer.Option(None, '--log-level', '-l', help='Logging level (overrides config).')
INIT_OPTION = typer.Option(
    None, '--init/--no-init', help='Create the watch folder and missing files before watching.'
)
OLD_FILE_ARGUMENT = typer.Argument(..., exists=True, dir_okay=False, readable=True)
NEW_FILE_ARGUMENT = typer.Argument(..., exists=True, dir_okay=False, readable=True)


def _configure_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


def _load_config(config_path: Path | None) -> MonitorConfig:
    try:
        if config_path is not None:
            return MonitorConfig.from_yaml(config_path)
        return MonitorConfig.from_env()
    except ConfigurationError as err:
        typer.echo(f'Could not load configuration: {err.message}', err=True)
        raise typer.Exit(code=1) from err


async def _run_monitor(config: MonitorConfig):
    """Watch until SIGINT/SIGTERM, then shut down cleanly."""
    loop = asyncio.get_running_loop()
    stop_requested = asyncio.Event()
    for sig in (signal.SIGINT, signal.SIGTERM):
        # add_signal_handler is unavailable on Windows; Ctrl+C still raises there
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, stop_requested.set)

    engine = ChangeBatchingEngine(config.path, config.files)
    seeded = engine.seed_from_disk()
    logger.info(f'Captured initial content of {len(seeded)} file(s)')

    monitor = ChangeMonitor(engine, flush_interval=config.flush_interval)
    monitor.start(loop)
    try:
        await stop_requested.wait()
    finally:
        await monitor.stop()


@cli_app.command()
def run(
    config_path: Path | None = CONFIG_OPTION,
    interval: float | None = INTERVAL_OPTION,
    log_level: str | None = LOG_LEVEL_OPTION,
    init_folder: bool | None = INIT_OPTION,
):
    """
    Watches the configured files and reports added lines every flush interval.
    Runs until interrupted with Ctrl+C or SIGTERM.
    """
    config = _load_config(config_path)
    if interval is not None:
        config.flush_interval = interval
    _configure_logging(log_level or config.log_level)

    create_missing = config.create_missing if init_folder is None else init_folder
    if create_missing:
        ensure_watch_folder(config.path, config.files)

    try:
        asyncio.run(_run_monitor(config))
    except WatchRootError as err:
        logger.error(err.message)
        raise typer.Exit(code=1) from err
    except KeyboardInterrupt:
        logger.info('Interrupted')


@cli_app.command()
def init(config_path: Path | None = CONFIG_OPTION):
    """
    Creates the watch folder and any missing watched file, then exits.
    """
    config = _load_config(config_path)
    _configure_logging(config.log_level)

    created = ensure_watch_folder(config.path, config.files)
    if created:
        for path in created:
            typer.echo(f'Created {path}')
    else:
        typer.echo(f'Watch folder {config.path} already set up.')


@cli_app.command()
def diff(
    old_file: Path = OLD_FILE_ARGUMENT,
    new_file: Path = NEW_FILE_ARGUMENT,
):
    """
    Prints the lines of NEW_FILE that the monitor would report as added to OLD_FILE.
    """
    result = compute_added_lines(
        old_file.read_text(encoding='utf-8'), new_file.read_text(encoding='utf-8')
    )
    if result.unchanged:
        typer.echo('No content change.')
        return
    for line in result.added_lines:
        typer.echo(line)


if __name__ == '__main__':
    cli_app()
