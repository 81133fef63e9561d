"""Notifier registry with plugin discovery via entry points.

This module handles discovering and instantiating notifiers from Python
entry points, allowing third-party packages to register custom delivery
channels (e.g., a message broker producer).
"""

import logging
from importlib.metadata import entry_points
from typing import Dict, List, Type

from lineagehook.notification.base import Notifier, NotifierError
from lineagehook.notification.notifiers import (
    ConsoleNotifier,
    JsonLinesNotifier,
    MemoryNotifier,
)

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "lineagehook.notifiers"

_BUILTIN_NOTIFIERS: Dict[str, Type[Notifier]] = {
    "jsonl": JsonLinesNotifier,
    "console": ConsoleNotifier,
    "memory": MemoryNotifier,
}

# Cache for discovered notifiers
_notifier_cache: Dict[str, Type[Notifier]] = {}
_discovery_done: bool = False


def _discover_notifiers() -> None:
    """Discover notifiers from entry points.

    Built-in notifiers are always available, even when the package is not
    installed with its entry point metadata.
    """
    global _discovery_done, _notifier_cache

    if _discovery_done:
        return

    for name, notifier_class in _BUILTIN_NOTIFIERS.items():
        _notifier_cache.setdefault(name, notifier_class)

    for ep in entry_points(group=ENTRY_POINT_GROUP):
        try:
            notifier_class = ep.load()
        except Exception as e:
            # Plugins with missing optional dependencies are skipped
            logger.debug("Skipping notifier plugin %s: %s", ep.name, e)
            continue
        if isinstance(notifier_class, type) and issubclass(notifier_class, Notifier):
            _notifier_cache[ep.name] = notifier_class

    _discovery_done = True


def get_notifier(name: str) -> Notifier:
    """Get a new notifier instance by name.

    Args:
        name: The name of the notifier (e.g., "jsonl").

    Returns:
        An unconfigured instance of the requested notifier.

    Raises:
        NotifierError: If the notifier is not found.
    """
    _discover_notifiers()

    if name not in _notifier_cache:
        available = ", ".join(sorted(_notifier_cache.keys()))
        raise NotifierError(
            f"Unknown notifier '{name}'. Available notifiers: {available or 'none'}"
        )

    return _notifier_cache[name]()


def list_notifiers() -> List[str]:
    """List all available notifier names, sorted."""
    _discover_notifiers()
    return sorted(_notifier_cache.keys())


def register_notifier(name: str, notifier_class: Type[Notifier]) -> None:
    """Register a notifier programmatically.

    Args:
        name: The name to register the notifier under.
        notifier_class: The notifier class to register.

    Raises:
        ValueError: If notifier_class is not a subclass of Notifier.
    """
    if not isinstance(notifier_class, type) or not issubclass(notifier_class, Notifier):
        raise ValueError(f"{notifier_class} must be a subclass of Notifier")

    _discover_notifiers()
    _notifier_cache[name] = notifier_class


def clear_registry() -> None:
    """Clear the notifier registry.

    This is primarily useful for testing.
    """
    global _discovery_done, _notifier_cache
    _notifier_cache.clear()
    _discovery_done = False
