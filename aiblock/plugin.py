"""markdown-it-py plugins.

ai_container_plugin registers the ::: ai block rule ahead of fences, so it
also wins over any generic ::: container plugin registered later.

source_line_plugin is the position-sync layer: it tags every block token
that has a source map with its zero-based line. Field text rendered from
inside an ai container goes through the same rule, which is why those
annotations are shifted afterwards.
"""

import logging
from typing import Optional

from markdown_it import MarkdownIt
from markdown_it.rules_block import StateBlock
from markdown_it.rules_core import StateCore

from aiblock.constants import POSITION_ATTR
from aiblock.primitives.config import RenderConfig
from aiblock.primitives.container import render_block
from aiblock.primitives.locator import SourceDocument, locate_block, match_opener

logger = logging.getLogger(__name__)

# constructs an ai container may interrupt
_ALT = ["paragraph", "reference", "blockquote", "list"]

# tokens whose attributes never reach the output
_UNANNOTATED = ("inline", "html_block")


def ai_container_plugin(
    md: MarkdownIt,
    config: Optional[RenderConfig] = None,
    log: Optional[logging.Logger] = None,
    locate_only: bool = False,
) -> None:
    """Render ::: ai containers as position-annotated fieldsets.

    With locate_only, blocks are recorded on their tokens but not rendered,
    so no field text goes through the renderer.
    """
    config = config or RenderConfig()
    log = log or logger

    def ai_container(state: StateBlock, startLine: int, endLine: int, silent: bool):
        doc = SourceDocument.from_state(state, endLine)

        if silent:
            markup = match_opener(
                doc, startLine, config.container_name, config.min_marker_len
            )
            return markup is not None

        block = locate_block(
            doc, startLine, config.container_name, config.min_marker_len
        )
        if block is None:
            return False

        log.debug(f"ai container at lines {block.start_line}-{block.end_line}")
        fragment = ""
        if not locate_only:
            fragment = render_block(
                block, state.md.render, state.env, config=config, log=log
            )

        token = state.push("html_block", "", 0)
        token.content = fragment
        token.map = [block.start_line, block.end_line + 1]
        token.markup = block.markup
        token.meta["ai_block"] = block

        state.line = block.end_line + 1
        return True

    md.block.ruler.before("fence", "ai_container", ai_container, {"alt": _ALT})


def source_line_plugin(md: MarkdownIt, attr: str = POSITION_ATTR) -> None:
    """Tag block tokens with their zero-based source line."""

    def source_line(state: StateCore) -> None:
        for token in state.tokens:
            if token.map and token.nesting >= 0 and token.type not in _UNANNOTATED:
                token.attrSet(attr, str(token.map[0]))

    md.core.ruler.push("source_line", source_line)
