"""Output formatters for notification message lists."""

import json
from typing import List, Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from lineagehook.notification.models import (
    EntityCreateRequest,
    EntityDeleteRequest,
    EntityPartialUpdateRequest,
    MessageList,
    NotificationMessage,
)


def _describe(message: NotificationMessage) -> tuple:
    """Return (message type, entity type, key, detail) for display."""
    if isinstance(message, EntityCreateRequest):
        types = ", ".join(dict.fromkeys(e.type_name for e in message.entities))
        keys = "\n".join(e.qualified_name or "" for e in message.entities)
        return ("CREATE", types, keys, f"{len(message.entities)} entities")
    if isinstance(message, EntityPartialUpdateRequest):
        new_key = message.entity.qualified_name or ""
        return ("UPDATE", message.type_name, message.attribute_value, f"-> {new_key}")
    if isinstance(message, EntityDeleteRequest):
        return ("DELETE", message.type_name, message.attribute_value, "")
    raise TypeError(f"Unsupported message type {type(message).__name__}")


class TextFormatter:
    """Format message lists as Rich tables for terminal display."""

    @staticmethod
    def format(
        batches: Sequence[Sequence[NotificationMessage]], console: Console
    ) -> None:
        """
        Print one table per event.

        Args:
            batches: Message lists, one per translated event
            console: Rich Console instance for output
        """
        if not any(batches):
            console.print("[yellow]No notifications produced.[/yellow]")
            return

        for i, messages in enumerate(batches):
            if i > 0:
                console.print()

            table = Table(title=f"Event {i}", title_style="bold")
            table.add_column("#", style="dim")
            table.add_column("Message", style="cyan")
            table.add_column("Entity Type", style="magenta")
            table.add_column("Key", style="green")
            table.add_column("Detail")

            if not messages:
                table.add_row("", Text("(no messages)", style="dim"), "", "", "")

            for index, message in enumerate(messages):
                kind, type_name, key, detail = _describe(message)
                table.add_row(str(index), kind, type_name, key, detail)

            console.print(table)
            console.print(f"[dim]Total: {len(messages)} message(s)[/dim]")


class JsonFormatter:
    """Format message lists as JSON."""

    @staticmethod
    def format(batches: Sequence[Sequence[NotificationMessage]]) -> str:
        """
        Format message lists as JSON.

        Output format:
        {
          "events": [
            {"event_index": 0, "messages": [{"type": "ENTITY_CREATE", ...}]}
          ]
        }

        Args:
            batches: Message lists, one per translated event

        Returns:
            JSON-formatted string
        """
        events: List[dict] = []
        for i, messages in enumerate(batches):
            events.append(
                {
                    "event_index": i,
                    "messages": MessageList.dump_python(list(messages), mode="json"),
                }
            )
        return json.dumps({"events": events}, indent=2)
