"""Configuration management for lineagehook.

Loads configuration from lineagehook.toml in the current working directory.
"""

import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel
from rich.console import Console

from lineagehook.global_models import DEFAULT_CLUSTER_NAME

console = Console(stderr=True)

DEFAULT_MIN_THREADS = 1
DEFAULT_MAX_THREADS = 5
DEFAULT_KEEP_ALIVE_MS = 10
DEFAULT_QUEUE_SIZE = 10000
DEFAULT_SHUTDOWN_WAIT_SECONDS = 3.0
DEFAULT_DIALECT = "hive"
DEFAULT_NUM_RETRIES = 3


class DispatchConfig(BaseModel):
    """Configuration for event dispatch.

    All fields are optional.
    """

    synchronous: Optional[bool] = None
    min_threads: Optional[int] = None
    max_threads: Optional[int] = None
    keep_alive_ms: Optional[int] = None
    queue_size: Optional[int] = None
    shutdown_wait_seconds: Optional[float] = None


class NotifierConfig(BaseModel):
    """Configuration for the notifier.

    Options are passed verbatim to the notifier's configure() method.
    """

    name: Optional[str] = None
    options: Optional[Dict[str, Any]] = None


class ConfigSettings(BaseModel):
    """Configuration settings for lineagehook.

    All fields are optional. None values indicate the setting was not
    specified in the config file.
    """

    cluster_name: Optional[str] = None
    dialect: Optional[str] = None
    mask_literals: Optional[bool] = None
    num_retries: Optional[int] = None
    dispatch: Optional[DispatchConfig] = None
    notifier: Optional[NotifierConfig] = None


class HookSettings(BaseModel):
    """Fully resolved settings with defaults applied."""

    cluster_name: str = DEFAULT_CLUSTER_NAME
    dialect: str = DEFAULT_DIALECT
    mask_literals: bool = True
    num_retries: int = DEFAULT_NUM_RETRIES
    synchronous: bool = False
    min_threads: int = DEFAULT_MIN_THREADS
    max_threads: int = DEFAULT_MAX_THREADS
    keep_alive_ms: int = DEFAULT_KEEP_ALIVE_MS
    queue_size: int = DEFAULT_QUEUE_SIZE
    shutdown_wait_seconds: float = DEFAULT_SHUTDOWN_WAIT_SECONDS
    notifier: Optional[str] = None
    notifier_options: Dict[str, Any] = {}

    @classmethod
    def from_config(cls, config: ConfigSettings) -> "HookSettings":
        """Apply defaults to whatever the config file left unset."""
        values: Dict[str, Any] = {
            "cluster_name": config.cluster_name,
            "dialect": config.dialect,
            "mask_literals": config.mask_literals,
            "num_retries": config.num_retries,
        }
        if config.dispatch:
            values.update(config.dispatch.model_dump())
        if config.notifier:
            values["notifier"] = config.notifier.name
            values["notifier_options"] = config.notifier.options
        return cls(**{k: v for k, v in values.items() if v is not None})


def find_config_file(start_path: Optional[Path] = None) -> Optional[Path]:
    """Find lineagehook.toml in the current working directory.

    Args:
        start_path: Starting directory to search for config file.
                   Defaults to current working directory.

    Returns:
        Path to config file if found, None otherwise.
    """
    if start_path is None:
        start_path = Path.cwd()

    config_path = start_path / "lineagehook.toml"

    if config_path.exists() and config_path.is_file():
        return config_path

    return None


def load_config(config_path: Optional[Path] = None) -> ConfigSettings:
    """Load configuration from lineagehook.toml.

    Priority order:
    1. Explicit config_path parameter
    2. lineagehook.toml in current working directory
    3. Empty ConfigSettings (all None)

    Args:
        config_path: Optional explicit path to config file.
                    If not provided, searches current working directory.

    Returns:
        ConfigSettings with values from TOML file or None for unset fields.
        Always returns a valid ConfigSettings object, even on errors.

    Error Handling:
        - Missing file: Returns empty ConfigSettings (silent)
        - Malformed TOML: Warns user and returns empty ConfigSettings
        - Invalid values: Warns user and returns empty ConfigSettings
        - Unknown keys: Ignored (forward compatibility)
    """
    if config_path is None:
        config_path = find_config_file()

    if config_path is None:
        return ConfigSettings()

    try:
        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)

        hook_config = toml_data.get("lineagehook", {})

        # Pydantic will validate types and ignore unknown fields
        try:
            return ConfigSettings(**hook_config)
        except Exception as e:
            console.print(
                f"[yellow]Warning:[/yellow] Invalid configuration in {config_path}: {e}",
            )
            console.print("[yellow]Using default settings[/yellow]")
            return ConfigSettings()

    except tomllib.TOMLDecodeError as e:
        console.print(
            f"[yellow]Warning:[/yellow] Failed to parse {config_path}: {e}",
        )
        console.print("[yellow]Using default settings[/yellow]")
        return ConfigSettings()

    except OSError as e:
        console.print(
            f"[yellow]Warning:[/yellow] Could not read {config_path}: {e}",
        )
        console.print("[yellow]Using default settings[/yellow]")
        return ConfigSettings()
