"""Host engine events and their normalized translation context."""

from lineagehook.events.extractor import extract_context, get_user
from lineagehook.events.loader import load_events
from lineagehook.events.models import (
    DatabaseSnapshot,
    EntityRef,
    EventContext,
    FieldSchema,
    HookEvent,
    StorageSnapshot,
    TableSnapshot,
)

__all__ = [
    "DatabaseSnapshot",
    "EntityRef",
    "EventContext",
    "FieldSchema",
    "HookEvent",
    "StorageSnapshot",
    "TableSnapshot",
    "extract_context",
    "get_user",
    "load_events",
]
