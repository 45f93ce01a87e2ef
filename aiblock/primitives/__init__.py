"""aiblock primitives: the per-block render pipeline."""

from aiblock.primitives.errors import (
    AiBlockError,
    ConfigurationError,
    EmptyBlockError,
    MissingFieldsError,
    NestedBlockError,
    SegmentRenderError,
)
from aiblock.primitives.locator import Block, SourceDocument, locate_block, match_opener
from aiblock.primitives.fields import (
    AiFields,
    Field,
    extract_literal_field,
    extract_simple_field,
    parse_fields,
)
from aiblock.primitives.interrupts import Interrupt, Region, find_interrupts, split_regions
from aiblock.primitives.segments import (
    Segment,
    WindowPolicy,
    apply_window,
    segment_prompt,
    segment_response,
)
from aiblock.primitives.config import RenderConfig
from aiblock.primitives.offsets import render_segment, render_segments, shift_positions
from aiblock.primitives.container import describe_block, diagnostic_html, render_block

__all__ = [
    # Errors
    "AiBlockError",
    "ConfigurationError",
    "EmptyBlockError",
    "MissingFieldsError",
    "NestedBlockError",
    "SegmentRenderError",
    # Locator
    "Block",
    "SourceDocument",
    "locate_block",
    "match_opener",
    # Fields
    "AiFields",
    "Field",
    "extract_literal_field",
    "extract_simple_field",
    "parse_fields",
    # Interrupts
    "Interrupt",
    "Region",
    "find_interrupts",
    "split_regions",
    # Segments
    "Segment",
    "WindowPolicy",
    "apply_window",
    "segment_prompt",
    "segment_response",
    # Rendering
    "RenderConfig",
    "render_segment",
    "render_segments",
    "shift_positions",
    "describe_block",
    "diagnostic_html",
    "render_block",
]
