"""aiblock: ::: ai containers for markdown-it-py with source line sync."""

__version__ = "0.1.0"

from aiblock.markdown import create_markdown, render_markdown
from aiblock.plugin import ai_container_plugin, source_line_plugin
from aiblock.primitives import RenderConfig, render_block

__all__ = [
    "create_markdown",
    "render_markdown",
    "ai_container_plugin",
    "source_line_plugin",
    "RenderConfig",
    "render_block",
]
