"""Configuration loaders."""

from aiblock.loaders.config_loader import (
    ConfigLoader,
    clear_config_cache,
    load_render_config,
)

__all__ = ["ConfigLoader", "clear_config_cache", "load_render_config"]
