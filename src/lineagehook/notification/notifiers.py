"""Built-in notifier implementations."""

import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from rich.console import Console

from lineagehook.notification.base import Notifier, NotifierError
from lineagehook.notification.models import MessageList, NotificationMessage


class JsonLinesNotifier(Notifier):
    """Append each event's message list to a file as one JSON line.

    Configuration:
        - path (required): Output file, created if missing.

    Example:
        >>> notifier = JsonLinesNotifier()
        >>> notifier.configure({"path": "lineage.jsonl"})
        >>> notifier.submit(messages)
        True
    """

    def __init__(self) -> None:
        self._path: Optional[Path] = None
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return "jsonl"

    def configure(self, config: Optional[Dict[str, Any]] = None) -> None:
        config = config or {}
        path = config.get("path")
        if not path:
            raise NotifierError(
                "The jsonl notifier requires a 'path' option. "
                "Set it under [lineagehook.notifier.options] or pass "
                "--notifier-option path=<file>."
            )
        self._path = Path(path)

    def submit(self, messages: Sequence[NotificationMessage]) -> bool:
        if self._path is None:
            raise NotifierError("jsonl notifier is not configured")

        line = MessageList.dump_json(list(messages)).decode("utf-8")
        try:
            # Writers share the file across worker threads
            with self._lock:
                with open(self._path, "a", encoding="utf-8") as f:
                    f.write(line + "\n")
        except OSError as e:
            raise NotifierError(f"Cannot write to {self._path}: {e}") from e
        return True


class ConsoleNotifier(Notifier):
    """Pretty-print each message list as JSON on the terminal."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console or Console()
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return "console"

    def configure(self, config: Optional[Dict[str, Any]] = None) -> None:
        config = config or {}
        if config.get("stderr"):
            self._console = Console(stderr=True)

    def submit(self, messages: Sequence[NotificationMessage]) -> bool:
        payload = MessageList.dump_json(list(messages)).decode("utf-8")
        with self._lock:
            self._console.print_json(payload)
        return True


class MemoryNotifier(Notifier):
    """Keep delivered batches in memory, in delivery order."""

    def __init__(self) -> None:
        self._batches: List[List[NotificationMessage]] = []
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return "memory"

    def submit(self, messages: Sequence[NotificationMessage]) -> bool:
        with self._lock:
            self._batches.append(list(messages))
        return True

    @property
    def batches(self) -> List[List[NotificationMessage]]:
        """Copy of every batch received so far."""
        with self._lock:
            return [list(batch) for batch in self._batches]

    @property
    def messages(self) -> List[NotificationMessage]:
        """All received messages, flattened in delivery order."""
        with self._lock:
            return [message for batch in self._batches for message in batch]
