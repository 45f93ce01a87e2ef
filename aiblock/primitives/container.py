"""Container assembly for one located block.

Runs the whole pipeline for a block: field extraction, windowing,
segment rendering, and the outer fieldset. A block that cannot be rendered
becomes an inline diagnostic at the block's own line, so the rest of the
document still renders.
"""

import html
import logging
from typing import Any, Dict, List, Optional, Tuple

from aiblock.constants import POSITION_ATTR, CssClass
from aiblock.primitives.config import RenderConfig
from aiblock.primitives.errors import AiBlockError
from aiblock.primitives.fields import AiFields, Field, parse_fields
from aiblock.primitives.locator import Block
from aiblock.primitives.offsets import Formatter, render_segments
from aiblock.primitives.segments import Segment, segment_prompt, segment_response

logger = logging.getLogger(__name__)


def field_line(block: Block, field: Field) -> int:
    """Absolute line of a field's key."""
    return block.start_line + 1 + field.line_offset


def text_line(block: Block, field: Field) -> int:
    """Absolute line of a field's first text line."""
    return block.start_line + 1 + field.text_line


def diagnostic_html(
    start_line: int,
    title: str,
    detail: Optional[str] = None,
    position_attr: str = POSITION_ATTR,
) -> str:
    body = f"  <p><strong>{html.escape(title)}</strong></p>\n"
    if detail:
        body += f"  <pre>{html.escape(detail)}</pre>\n"
    return (
        f'<div class="{CssClass.CONTAINER} {CssClass.ERROR}" '
        f'{position_attr}="{start_line}">\n{body}</div>\n'
    )


def build_segments(
    fields: AiFields, config: RenderConfig
) -> Tuple[List[Segment], List[Segment]]:
    """Window prompt and response under the configured policies."""
    prompt = segment_prompt(fields.prompt.text, config.prompt_window)
    response = segment_response(
        fields.response.text,
        config.response_window,
        config.region_window,
        config.interrupt_window,
    )
    return prompt, response


def _parse(block: Block, config: RenderConfig) -> AiFields:
    try:
        return parse_fields(
            block.raw_content, config.container_name, config.min_marker_len
        )
    except AiBlockError as e:
        if e.line is not None:
            e.line = block.start_line + 1 + e.line
        raise


def _diagnostic_for(block: Block, error: AiBlockError, config: RenderConfig) -> str:
    detail = error.message
    if error.line is not None:
        detail = f"line {error.line}: {detail}"
    return diagnostic_html(block.start_line, error.title, detail, config.position_attr)


def _legend(block: Block, fields: AiFields, config: RenderConfig) -> str:
    legend = html.escape(config.container_name)
    if fields.model.found and fields.model.text:
        legend += (
            f' <span class="{CssClass.MODEL}" '
            f'{config.position_attr}="{field_line(block, fields.model)}">'
            f"{html.escape(fields.model.text)}</span>"
        )
    return legend


def render_block(
    block: Block,
    render: Formatter,
    env: Any = None,
    config: Optional[RenderConfig] = None,
    strict: bool = False,
    log: Optional[logging.Logger] = None,
) -> str:
    """Render a located block as one container fragment.

    Args:
        block: The located block.
        render: The host's markdown renderer, called once per segment.
        env: Host render environment, forwarded to every call.
        config: Render configuration (defaults when omitted).
        strict: Fail the whole block when a segment fails to render.
        log: Logger, defaults to the module logger.

    Returns:
        The container markup, or a diagnostic tagged with the block's line.
    """
    config = config or RenderConfig()
    log = log or logger
    attr = config.position_attr

    try:
        fields = _parse(block, config)
        prompt_segments, response_segments = build_segments(fields, config)
        log.debug(
            f"Container at line {block.start_line}: "
            f"{len(prompt_segments)} prompt / {len(response_segments)} response segments"
        )

        prompt_html = render_segments(
            prompt_segments,
            text_line(block, fields.prompt),
            render,
            env,
            position_attr=attr,
            strict=strict,
            log=log,
        )
        response_html = render_segments(
            response_segments,
            text_line(block, fields.response),
            render,
            env,
            position_attr=attr,
            hard_breaks=config.hard_breaks,
            strict=strict,
            log=log,
        )
    except AiBlockError as e:
        log.warning(f"Container at line {block.start_line}: {e.message}")
        return _diagnostic_for(block, e, config)

    return (
        f'<fieldset class="{CssClass.CONTAINER}" {attr}="{block.start_line}">\n'
        f"  <legend>{_legend(block, fields, config)}</legend>\n"
        f'  <div class="{CssClass.PROMPT}" {attr}="{field_line(block, fields.prompt)}">'
        f"{prompt_html}</div>\n"
        f'  <hr class="{CssClass.SEPARATOR}">\n'
        f'  <div class="{CssClass.RESPONSE}" {attr}="{field_line(block, fields.response)}">'
        f"{response_html}</div>\n"
        f"</fieldset>\n"
    )


def _describe_segments(block: Block, field: Field, segments: List[Segment]) -> List[Dict]:
    base = text_line(block, field)
    return [
        {
            "start": base + s.source_line_start if s.mapped else None,
            "end": base + s.source_line_end if s.mapped else None,
            "text": s.text,
        }
        for s in segments
    ]


def describe_block(block: Block, config: Optional[RenderConfig] = None) -> Dict[str, Any]:
    """Describe a block's fields and segments with absolute lines.

    Used by `aiblock inspect`. Fields are parsed and windowed, never
    rendered.
    """
    config = config or RenderConfig()
    result: Dict[str, Any] = {
        "start_line": block.start_line,
        "end_line": block.end_line,
        "closed": block.closed,
    }

    try:
        fields = _parse(block, config)
    except AiBlockError as e:
        result["error"] = {"title": e.title, "message": e.message, "line": e.line}
        return result

    prompt_segments, response_segments = build_segments(fields, config)
    result["version_count"] = fields.version_count
    result["fields"] = {
        f.name: {
            "found": f.found,
            "line": field_line(block, f),
            "text_line": text_line(block, f),
            "lines": f.line_count,
        }
        for f in (fields.prompt, fields.model, fields.response)
    }
    result["segments"] = {
        "prompt": _describe_segments(block, fields.prompt, prompt_segments),
        "response": _describe_segments(block, fields.response, response_segments),
    }
    return result
