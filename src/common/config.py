"""Shared configuration utilities."""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Any, Callable, Generic, TypeVar

import yaml

T = TypeVar("T")


def find_config_path(
    config_name: str | None,
    config_dir: Path,
    default_name: str = "default",
    env_var: str | None = None,
) -> Path:
    """Find a config file from a name or a path.

    Args:
        config_name: Config name (without .yaml), a path to a YAML file, or
            None to use env_var / default_name
        config_dir: Directory holding named config files
        default_name: Config name used when nothing else is given
        env_var: Environment variable that may hold the config name

    Returns:
        Path to the config file

    Raises:
        FileNotFoundError: If the config file doesn't exist
    """
    if config_name is None:
        config_name = os.environ.get(env_var, default_name) if env_var else default_name

    if "/" in config_name or config_name.endswith((".yaml", ".yml")):
        config_path = Path(config_name)
    else:
        config_path = config_dir / f"{config_name}.yaml"

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    return config_path


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file; an empty file gives an empty dict."""
    with open(path) as f:
        return yaml.safe_load(f) or {}


class ConfigSingleton(Generic[T]):
    """Lazily loaded process-wide config holder.

    Example:
        >>> _manager = ConfigSingleton(load_my_config)
        >>> get_config = _manager.get
        >>> set_config = _manager.set
        >>> reset_config = _manager.reset
    """

    def __init__(self, loader: Callable[[], T] | None = None):
        self._config: T | None = None
        self._loader = loader
        self._lock = threading.Lock()

    def get(self) -> T:
        """Get the config, loading it on first use."""
        if self._config is None:
            with self._lock:
                if self._config is None:
                    if self._loader is None:
                        raise RuntimeError("No config loaded and no loader set")
                    self._config = self._loader()
        return self._config

    def set(self, config: T) -> None:
        with self._lock:
            self._config = config

    def reset(self) -> None:
        """Drop the current config so the next get() reloads it."""
        with self._lock:
            self._config = None
