"""Shared output utilities for CLI verbs."""

import json
import sys
from pathlib import Path
from typing import Dict

from aiblock.primitives.config import RenderConfig


def print_result(result: Dict, compact: bool = False) -> None:
    """Print a result dict as JSON to stdout."""
    indent = None if compact else 2
    print(json.dumps(result, indent=indent, default=str))


def die(msg: str, code: int = 1) -> None:
    """Print error to stderr and exit."""
    print(f"error: {msg}", file=sys.stderr)
    sys.exit(code)


def read_source(path: str) -> str:
    """Read a markdown file, exiting if it cannot be read."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        die(f"cannot read {path}: {e.strerror or e}")


def load_config(project_path: str) -> RenderConfig:
    """Load the render config, exiting on configuration errors."""
    from aiblock.loaders.config_loader import load_render_config
    from aiblock.primitives.errors import ConfigurationError
    from aiblock.settings import get_settings

    override = get_settings().config_file
    try:
        return load_render_config(
            Path(project_path),
            override_path=Path(override) if override else None,
        )
    except ConfigurationError as e:
        die(e.message)
