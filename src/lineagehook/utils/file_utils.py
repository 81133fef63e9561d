"""Read catalog snapshots and event logs into pydantic models.

Validation errors are re-raised as ValueError naming the file (and line, for
JSON-lines input) so the CLI can report them without a traceback.
"""

from pathlib import Path
from typing import Any, List, TypeVar

from pydantic import TypeAdapter, ValidationError

T = TypeVar("T")


def read_bytes(file_path: Path) -> bytes:
    """
    Read a record file as raw bytes.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the path exists but is not a regular file
    """
    if not file_path.is_file():
        if file_path.exists():
            raise ValueError(f"Not a regular file: {file_path}")
        raise FileNotFoundError(f"No such file: {file_path}")
    return file_path.read_bytes()


def validate_json(adapter: TypeAdapter[T], content: bytes, source: Path) -> T:
    """Validate one JSON document."""
    try:
        return adapter.validate_json(content)
    except ValidationError as e:
        raise ValueError(f"{source}: {_summarize(e)}") from e


def validate_python(adapter: TypeAdapter[T], data: Any, source: Path) -> T:
    """Validate already-decoded JSON data."""
    try:
        return adapter.validate_python(data)
    except ValidationError as e:
        raise ValueError(f"{source}: {_summarize(e)}") from e


def validate_json_lines(
    adapter: TypeAdapter[T], content: bytes, source: Path
) -> List[T]:
    """Validate one JSON document per non-blank line."""
    records = []
    for lineno, line in enumerate(content.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            records.append(adapter.validate_json(line))
        except ValidationError as e:
            raise ValueError(f"{source}, line {lineno}: {_summarize(e)}") from e
    return records


def _summarize(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "<root>"
    count = error.error_count()
    suffix = f" (+{count - 1} more)" if count > 1 else ""
    return f"{first['msg']} at {location}{suffix}"
