"""Markdown renderer factory with ai containers and line annotations."""

import logging
from typing import Any, Dict, List, Optional

from markdown_it import MarkdownIt

from aiblock.plugin import ai_container_plugin, source_line_plugin
from aiblock.primitives.config import RenderConfig
from aiblock.primitives.locator import Block

# preview-style extras on top of CommonMark
EXTRA_RULES = ["table", "strikethrough"]


def create_markdown(
    config: Optional[RenderConfig] = None,
    annotate: bool = True,
    log: Optional[logging.Logger] = None,
    locate_only: bool = False,
) -> MarkdownIt:
    """Build a renderer with the ai container rule installed.

    With annotate, block elements carry the position attribute. With
    locate_only, containers are found but left unrendered.
    """
    config = config or RenderConfig()
    md = MarkdownIt("commonmark").enable(EXTRA_RULES)
    if annotate:
        md.use(source_line_plugin, attr=config.position_attr)
    md.use(ai_container_plugin, config=config, log=log, locate_only=locate_only)
    return md


def render_markdown(
    text: str,
    config: Optional[RenderConfig] = None,
    env: Optional[Dict[str, Any]] = None,
) -> str:
    """Render a markdown document to HTML."""
    return create_markdown(config).render(text, env if env is not None else {})


def find_blocks(text: str, config: Optional[RenderConfig] = None) -> List[Block]:
    """Locate every ai container the host parser recognizes, in order.

    Containers inside fenced or indented code are not containers, so the
    document is parsed rather than scanned line by line. Containers are
    not rendered.
    """
    md = create_markdown(config, annotate=False, locate_only=True)
    return [
        token.meta["ai_block"]
        for token in md.parse(text, {})
        if token.type == "html_block" and "ai_block" in token.meta
    ]
