"""CLI entry point for the lineage hook."""

import logging
from io import StringIO
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from lineagehook.bridge.base import BridgeError
from lineagehook.bridge.snapshot import SnapshotBridge
from lineagehook.dispatch.executor import DispatchRejectedError
from lineagehook.events.extractor import extract_context
from lineagehook.events.loader import load_events
from lineagehook.hook import LineageHook
from lineagehook.notification.base import NotifierError
from lineagehook.notification.formatters import JsonFormatter, TextFormatter
from lineagehook.notification.models import NotificationMessage
from lineagehook.operations import OPERATION_MAP, UnknownOperationError, action_for
from lineagehook.query.normalizer import QueryNormalizer
from lineagehook.translator.errors import TranslationError
from lineagehook.translator.translator import EventTranslator
from lineagehook.utils.config import HookSettings, load_config

app = typer.Typer(
    name="lineagehook",
    help="Translate SQL engine operations into metadata catalog notifications.",
    invoke_without_command=False,
)
console = Console()
err_console = Console(stderr=True)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Show debug logging",
    ),
):
    """Lineage Hook - catalog notifications from engine events."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


def _parse_options(raw_options: Optional[List[str]]) -> Dict[str, Any]:
    """Parse ``key=value`` strings into a dict.

    Raises:
        ValueError: If an option has no '='
    """
    options: Dict[str, Any] = {}
    for raw in raw_options or []:
        key, sep, value = raw.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Invalid option '{raw}'. Expected key=value.")
        options[key.strip()] = value
    return options


@app.command()
def operations() -> None:
    """
    List every known engine operation and how it is handled.

    Examples:

        lineagehook operations
    """
    table = Table(title="Operations", title_style="bold")
    table.add_column("Operation Name", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Action", style="green")

    for raw_name, kind in sorted(OPERATION_MAP.items()):
        table.add_row(raw_name, kind.name, action_for(kind).value)

    console.print(table)
    console.print(f"[dim]Total: {len(OPERATION_MAP)} operation(s)[/dim]")


@app.command()
def translate(
    event_file: Path = typer.Argument(
        ...,
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="Path to a JSON or JSON-lines file of recorded events",
    ),
    catalog: Path = typer.Option(
        ...,
        "--catalog",
        "-c",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="Path to a catalog snapshot JSON file",
    ),
    cluster: Optional[str] = typer.Option(
        None,
        "--cluster",
        help="Cluster name used in qualified names (default: primary, or from config)",
    ),
    dialect: Optional[str] = typer.Option(
        None,
        "--dialect",
        "-d",
        help="SQL dialect for query normalization (default: hive, or from config)",
    ),
    output_format: Optional[str] = typer.Option(
        None,
        "--output-format",
        "-f",
        help="Output format: 'text' or 'json' (default: text)",
    ),
    output_file: Optional[Path] = typer.Option(
        None,
        "--output-file",
        "-o",
        help="Write output to file instead of stdout",
    ),
) -> None:
    """
    Translate recorded events into notification messages without sending them.

    Configuration can be set in lineagehook.toml in the current directory.
    CLI arguments override configuration file values.

    Examples:

        # Show the messages for each event
        lineagehook translate events.jsonl --catalog catalog.json

        # Export to JSON
        lineagehook translate events.jsonl -c catalog.json -f json -o messages.json
    """
    settings = HookSettings.from_config(load_config())
    cluster = cluster or settings.cluster_name
    dialect = dialect or settings.dialect
    output_format = output_format or "text"

    if output_format not in ["text", "json"]:
        err_console.print(
            f"[red]Error:[/red] Invalid output format '{output_format}'. "
            "Use 'text' or 'json'."
        )
        raise typer.Exit(1)

    try:
        bridge = SnapshotBridge.from_file(catalog, cluster_name=cluster)
        events = load_events(event_file)
        translator = EventTranslator(
            bridge, normalizer=QueryNormalizer(dialect, settings.mask_literals)
        )

        batches: List[List[NotificationMessage]] = []
        for index, event in enumerate(events):
            try:
                batches.append(translator.translate(extract_context(event)))
            except (UnknownOperationError, BridgeError, TranslationError) as e:
                err_console.print(
                    f"[yellow]Warning:[/yellow] Skipping event {index} "
                    f"({event.operation_name}): {e}"
                )
                batches.append([])

        if output_format == "text":
            if output_file:
                string_buffer = StringIO()
                file_console = Console(file=string_buffer, force_terminal=False)
                TextFormatter.format(batches, file_console)
                output_file.write_text(string_buffer.getvalue(), encoding="utf-8")
                console.print(
                    f"[green]Success:[/green] Messages written to {output_file}"
                )
            else:
                TextFormatter.format(batches, console)
        else:
            formatted = JsonFormatter.format(batches)
            if output_file:
                output_file.write_text(formatted, encoding="utf-8")
                console.print(
                    f"[green]Success:[/green] Messages written to {output_file}"
                )
            else:
                print(formatted)

    except FileNotFoundError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except Exception as e:
        err_console.print(f"[red]Error:[/red] Unexpected error: {e}")
        raise typer.Exit(1)


@app.command()
def replay(
    event_file: Path = typer.Argument(
        ...,
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="Path to a JSON or JSON-lines file of recorded events",
    ),
    catalog: Path = typer.Option(
        ...,
        "--catalog",
        "-c",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="Path to a catalog snapshot JSON file",
    ),
    notifier: Optional[str] = typer.Option(
        None,
        "--notifier",
        "-n",
        help="Notifier name (default: console, or from config)",
    ),
    notifier_option: Optional[List[str]] = typer.Option(
        None,
        "--notifier-option",
        help="Notifier option in key=value format (repeatable)",
    ),
    synchronous: Optional[bool] = typer.Option(
        None,
        "--sync/--async",
        help="Translate inline or on the dispatch executor (default: from config)",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        exists=True,
        dir_okay=False,
        help="Path to a lineagehook.toml file",
    ),
) -> None:
    """
    Run recorded events through the full hook and deliver the messages.

    Examples:

        # Print messages to the console
        lineagehook replay events.jsonl --catalog catalog.json

        # Append messages to a JSON-lines file
        lineagehook replay events.jsonl -c catalog.json -n jsonl \\
            --notifier-option path=lineage.jsonl
    """
    settings = HookSettings.from_config(load_config(config_file))

    try:
        options = _parse_options(notifier_option)
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    overrides: Dict[str, Any] = {}
    if notifier:
        overrides["notifier"] = notifier
        overrides["notifier_options"] = options
    elif options:
        overrides["notifier_options"] = {**settings.notifier_options, **options}
    if synchronous is not None:
        overrides["synchronous"] = synchronous
    settings = settings.model_copy(update=overrides)

    try:
        bridge = SnapshotBridge.from_file(catalog, cluster_name=settings.cluster_name)
        events = load_events(event_file)
        hook = LineageHook.from_settings(settings, bridge)
    except NotifierError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except FileNotFoundError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    with hook:
        for index, event in enumerate(events):
            try:
                hook.run(event)
            except DispatchRejectedError as e:
                err_console.print(
                    f"[yellow]Warning:[/yellow] Event {index} rejected: {e}"
                )

    table = Table(title="Replay", title_style="bold")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("events", str(len(events)))
    for key, value in hook.stats.items():
        table.add_row(key, str(value))
    err_console.print(table)


if __name__ == "__main__":
    app()
