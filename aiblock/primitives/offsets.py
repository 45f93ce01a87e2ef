"""Segment rendering with absolute position annotations.

Each mapped segment goes through the host's markdown renderer on its own.
The renderer numbers lines from zero at the start of the text it was given,
so every position attribute in its output is shifted afterwards by the
segment's absolute start line. Only attributes of the exact form
` data-line="<digits>"` are touched.
"""

import copy
import html
import logging
import re
from typing import Any, Callable, Dict, Iterable, MutableMapping, Optional

from aiblock.constants import FENCE_PATTERN, POSITION_ATTR, CssClass
from aiblock.primitives.errors import SegmentRenderError
from aiblock.primitives.segments import Segment

logger = logging.getLogger(__name__)

# render(text, env) -> markup
Formatter = Callable[[str, Any], str]

# env keys markdown-it fills while parsing; a field's link definitions
# must not resolve links in the host document
PARSER_ENV_KEYS = ("references", "duplicate_refs")


def _position_pattern(attr: str) -> "re.Pattern[str]":
    return re.compile(r'(?<=\s)%s="(\d+)"' % re.escape(attr))


def shift_positions(markup: str, offset: int, attr: str = POSITION_ATTR) -> str:
    """Add offset to every position attribute in markup."""
    return _position_pattern(attr).sub(
        lambda m: f'{attr}="{int(m.group(1)) + offset}"', markup
    )


def elided_html(segment: Segment) -> str:
    return f'<p class="{CssClass.ELIDED}"><em>{html.escape(segment.text)}</em></p>\n'


def with_hard_breaks(text: str) -> str:
    """Append two spaces to each line so newlines render as line breaks.

    Lines of fenced code, fences included, are left as they are.
    """
    lines = []
    fence = None
    for line in text.split("\n"):
        match = FENCE_PATTERN.match(line)
        if fence is None:
            if match:
                fence = match.group(1)
                lines.append(line)
            else:
                lines.append(line + "  ")
            continue

        if match and match.group(1)[0] == fence[0] and len(match.group(1)) >= len(fence):
            fence = None
        lines.append(line)
    return "\n".join(lines)


def _snapshot_env(env: Any) -> Dict[str, Any]:
    if not isinstance(env, MutableMapping):
        return {}
    return {key: copy.copy(env[key]) for key in PARSER_ENV_KEYS if key in env}


def _restore_env(env: Any, saved: Dict[str, Any]) -> None:
    """Put back the parser-owned env keys a nested render may have written."""
    if not isinstance(env, MutableMapping):
        return
    for key in PARSER_ENV_KEYS:
        if key in saved:
            env[key] = saved[key]
        else:
            env.pop(key, None)


def render_segment(
    segment: Segment,
    text_start_line: int,
    render: Formatter,
    env: Any,
    position_attr: str = POSITION_ATTR,
    hard_breaks: bool = False,
    strict: bool = False,
    log: Optional[logging.Logger] = None,
) -> str:
    """Render one segment.

    Args:
        segment: Segment to render.
        text_start_line: Absolute line of the field's first text line.
        render: The host's markdown renderer.
        env: Host render environment, forwarded as is. Link definitions
            the renderer records in it are rolled back afterwards.
        position_attr: Attribute carrying line numbers.
        hard_breaks: Render newlines as line breaks.
        strict: Raise on renderer failure instead of isolating it.
        log: Logger for isolated failures, defaults to the module logger.

    Returns:
        Markup for the segment. Elided segments carry no position attribute.

    Raises:
        SegmentRenderError: The renderer failed and strict is set.
    """
    log = log or logger

    if not segment.mapped:
        return elided_html(segment)

    absolute = text_start_line + segment.source_line_start
    text = with_hard_breaks(segment.text) if hard_breaks else segment.text

    saved = _snapshot_env(env)
    try:
        markup = render(text, env)
    except Exception as e:
        error = SegmentRenderError(
            f"renderer failed on lines {absolute}-"
            f"{text_start_line + segment.source_line_end}: {e}",
            line=absolute,
            cause=e,
        )
        if strict:
            raise error from e
        log.warning(error.message)
        return (
            f'<pre class="{CssClass.ERROR} {CssClass.SEGMENT_ERROR}">'
            f"{html.escape(segment.text)}</pre>\n"
        )
    finally:
        _restore_env(env, saved)

    return shift_positions(markup, absolute, position_attr)


def render_segments(
    segments: Iterable[Segment],
    text_start_line: int,
    render: Formatter,
    env: Any,
    position_attr: str = POSITION_ATTR,
    hard_breaks: bool = False,
    strict: bool = False,
    log: Optional[logging.Logger] = None,
) -> str:
    """Render segments in order and concatenate the markup."""
    return "".join(
        render_segment(
            segment,
            text_start_line,
            render,
            env,
            position_attr=position_attr,
            hard_breaks=hard_breaks,
            strict=strict,
            log=log,
        )
        for segment in segments
    )
