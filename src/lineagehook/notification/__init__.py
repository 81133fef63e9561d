"""Notification messages and the notifier plugin system.

Built-in notifiers:
- `jsonl`: append each event's messages to a JSON-lines file
- `console`: pretty-print messages on the terminal
- `memory`: keep messages in memory (in-process consumers, tests)

Example:
    >>> from lineagehook.notification import get_notifier
    >>> notifier = get_notifier("jsonl")
    >>> notifier.configure({"path": "lineage.jsonl"})
"""

from lineagehook.notification.base import Notifier, NotifierError, RetryingNotifier
from lineagehook.notification.emitter import NotificationEmitter
from lineagehook.notification.models import (
    Entity,
    EntityCreateRequest,
    EntityDeleteRequest,
    EntityPartialUpdateRequest,
    MessageList,
    NotificationMessage,
)
from lineagehook.notification.notifiers import (
    ConsoleNotifier,
    JsonLinesNotifier,
    MemoryNotifier,
)
from lineagehook.notification.registry import (
    clear_registry,
    get_notifier,
    list_notifiers,
    register_notifier,
)

__all__ = [
    # Models
    "Entity",
    "EntityCreateRequest",
    "EntityDeleteRequest",
    "EntityPartialUpdateRequest",
    "MessageList",
    "NotificationMessage",
    # Notifiers
    "Notifier",
    "NotifierError",
    "RetryingNotifier",
    "ConsoleNotifier",
    "JsonLinesNotifier",
    "MemoryNotifier",
    "NotificationEmitter",
    # Registry functions
    "get_notifier",
    "list_notifiers",
    "register_notifier",
    "clear_registry",
]
