"""Command-line interface for Task Explorer."""

import asyncio
import logging
from pathlib import Path

import click

from .core.config import Configuration, find_config_file
from .core.engine import TaskEngine
from .core.models import Workspace
from .core.reporting import JsonReporter, TextReporter, count_tasks


async def _watch(engine: TaskEngine, reporter, interval: float) -> None:
    """Re-render the tree whenever a watched task file changes."""
    watcher = engine.create_watcher()
    watcher.prime()
    reporter(await engine.refresh())

    while True:
        await asyncio.sleep(interval)
        events = watcher.poll()
        if not events:
            continue
        for event in events:
            await engine.handle_file_event(event)
        reporter(await engine.refresh())


@click.command()
@click.argument(
    "folders",
    nargs=-1,
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Configuration file (default: .taskexplorer.yml in the first folder that has one)",
)
@click.option(
    "--type",
    "-t",
    "types",
    multiple=True,
    help="Run specific detector(s). Can be specified multiple times.",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    help="Output format (default: text)",
)
@click.option("--watch", "-w", is_flag=True, help="Keep running and re-render on file changes")
@click.option(
    "--interval",
    type=click.FloatRange(min=0.1),
    default=1.0,
    show_default=True,
    help="Polling interval in seconds for --watch",
)
@click.option(
    "--verbose", "-v", count=True, help="Increase verbosity (-v for INFO, -vv for DEBUG)"
)
@click.option(
    "--list-detectors", is_flag=True, help="List available detectors and exit"
)
def main(folders, config_path, types, format, watch, interval, verbose, list_detectors):
    """
    Task Explorer - Discover build and automation tasks.

    Scans each FOLDER (default: current directory) for Ant, Gradle, Make,
    npm, Grunt, Gulp, TypeScript, VS Code and script tasks and prints them
    as a tree.
    """
    # Setup logging
    if verbose == 1:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    elif verbose >= 2:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    folder_paths = list(folders) or [Path(".")]
    workspace = Workspace.from_paths(folder_paths)
    config = Configuration.load(config_path or find_config_file([f.path for f in workspace.folders]))

    engine = TaskEngine(workspace, config, detectors=list(types) if types else None)

    # List detectors and exit
    if list_detectors:
        click.echo("Available detectors:")
        for meta in engine.list_detectors():
            click.echo(f"  - {meta['name']}: {meta['description']}")
        return

    if format == "json":
        json_reporter = JsonReporter()

        def render(tree):
            click.echo(json_reporter.report(tree))
    else:
        render = TextReporter().report

    if watch:
        try:
            asyncio.run(_watch(engine, render, interval))
        except KeyboardInterrupt:
            pass
        raise SystemExit(0)

    tree = asyncio.run(engine.refresh())
    render(tree)

    # Exit code based on tasks found
    if count_tasks(tree) > 0:
        raise SystemExit(0)
    else:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
