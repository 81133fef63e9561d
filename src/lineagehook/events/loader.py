"""Load recorded host events from disk."""

import json
from pathlib import Path
from typing import List

from pydantic import TypeAdapter

from lineagehook.events.models import HookEvent
from lineagehook.utils.file_utils import (
    read_bytes,
    validate_json_lines,
    validate_python,
)

_EVENT = TypeAdapter(HookEvent)
_EVENT_LIST = TypeAdapter(List[HookEvent])


def load_events(file_path: Path) -> List[HookEvent]:
    """
    Load events from a JSON or JSON-lines file.

    Accepted layouts:
    - a single JSON object (one event)
    - a JSON array of events
    - one JSON event object per line (blank lines ignored)

    Args:
        file_path: Path to the events file

    Returns:
        Events in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the content is not valid JSON or doesn't match the event schema
    """
    content = read_bytes(file_path).strip()
    if not content:
        return []

    try:
        data = json.loads(content)
    except ValueError:
        # Not a single document, try one event per line
        return validate_json_lines(_EVENT, content, file_path)

    if isinstance(data, list):
        return validate_python(_EVENT_LIST, data, file_path)
    return [validate_python(_EVENT, data, file_path)]
