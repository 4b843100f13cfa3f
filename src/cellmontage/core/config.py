"""
Runtime configuration for cellmontage-tools.

Provides global settings that can be modified at runtime, plus helpers
for reading and writing processing settings files.

Environment Variables:
    CELLMONTAGE_OUTPUT_DIR   Directory for exported figures (default: ./output)
"""

from __future__ import annotations

import json
import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from cellmontage.core.constants import DEFAULT_OUTPUT_DIR, ENV_OUTPUT_DIR
from cellmontage.core.types import ProcessingConfig

logger = logging.getLogger(__name__)


@dataclass
class RuntimeConfig:
    """Global runtime configuration."""

    verbose: bool = False
    """Enable verbose output for debugging ROI search and scaling."""

    output: TextIO = field(default_factory=lambda: sys.stderr)
    """Output stream for verbose messages."""

    def vprint(self, *args, **kwargs) -> None:
        """Print message only if verbose mode is enabled."""
        if self.verbose:
            print(*args, file=self.output, **kwargs)


# Global singleton instance
_config = RuntimeConfig()


def get_config() -> RuntimeConfig:
    """Get the global runtime configuration."""
    return _config


def set_verbose(enabled: bool) -> None:
    """Enable or disable verbose mode."""
    _config.verbose = enabled


def is_verbose() -> bool:
    """Check if verbose mode is enabled."""
    return _config.verbose


def vprint(*args, **kwargs) -> None:
    """Print message only if verbose mode is enabled."""
    _config.vprint(*args, **kwargs)


def get_output_dir() -> Path:
    """
    Get the output directory from environment or default location.

    Checks:
        1. CELLMONTAGE_OUTPUT_DIR environment variable
        2. ./output relative to the working directory

    The directory is created if needed.
    """
    env_path = os.environ.get(ENV_OUTPUT_DIR)
    path = Path(env_path) if env_path else Path.cwd() / DEFAULT_OUTPUT_DIR
    path.mkdir(parents=True, exist_ok=True)
    return path


def load_processing_config(path: str | Path) -> ProcessingConfig:
    """
    Load processing settings from a JSON file.

    Args:
        path: Settings file with camelCase keys (e.g. ``targetWidth``)

    Returns:
        ProcessingConfig with defaults for any missing keys

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a JSON object or holds invalid values
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid settings file {path.name}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Settings file must contain a JSON object, got {type(data).__name__}")

    logger.debug("Loaded settings from %s: %s", path, sorted(data))
    return ProcessingConfig.from_dict(data)


def save_processing_config(config: ProcessingConfig, path: str | Path) -> Path:
    """
    Write processing settings to a JSON file.

    Args:
        config: Settings to write
        path: Output path (will add .json if needed)

    Returns:
        Path to the saved file
    """
    path = Path(path)
    if path.suffix.lower() != ".json":
        path = path.with_suffix(".json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2)
    return path
