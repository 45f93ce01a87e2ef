"""Block locator for ::: ai containers.

Reads a line-indexed view of the host document, recognizes an opening
marker followed by the container name, and scans forward for the closing
marker. An unclosed container is closed by the end of the document.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from aiblock.constants import (
    CLOSING_MARKER,
    CODE_INDENT,
    CONTAINER_NAME,
    MARKER_CHAR,
    MIN_MARKER_LEN,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceDocument:
    """Read-only, zero-based line view over a host document.

    Built either from plain text or over the line caches of a markdown-it
    block state. The sequences are shared with the host, never copied or
    mutated.

    Attributes:
        src: Full document source.
        line_begins: Start offset of each line.
        line_ends: End offset of each line (exclusive, before the newline).
        shifts: Distance from line_begins to the first non-space character.
        indents: Indentation width of each line, tabs expanded.
        line_count: Number of lines visible to the locator.
        base_indent: Indentation the host requires for the current block.
    """

    src: str
    line_begins: Sequence[int]
    line_ends: Sequence[int]
    shifts: Sequence[int]
    indents: Sequence[int]
    line_count: int
    base_indent: int = 0

    @classmethod
    def from_text(cls, text: str) -> "SourceDocument":
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        begins, ends, shifts, indents = [], [], [], []
        pos = 0
        raw_lines = text.split("\n")
        if text.endswith("\n"):
            raw_lines.pop()
        for raw in raw_lines:
            begins.append(pos)
            ends.append(pos + len(raw))
            shifts.append(len(raw) - len(raw.lstrip(" \t")))
            indents.append(_indent_width(raw))
            pos += len(raw) + 1
        return cls(text, begins, ends, shifts, indents, len(begins))

    @classmethod
    def from_state(cls, state: Any, end_line: int) -> "SourceDocument":
        """View over a markdown-it StateBlock, bounded by end_line."""
        return cls(
            src=state.src,
            line_begins=state.bMarks,
            line_ends=state.eMarks,
            shifts=state.tShift,
            indents=state.sCount,
            line_count=end_line,
            base_indent=state.blkIndent,
        )

    def line(self, index: int) -> str:
        """Line text relative to the host block, indentation as spaces.

        Inside blockquotes the host moves line_begins past the quote
        marker and its padding, so indentation is rebuilt from the width.
        """
        first = self.line_begins[index] + self.shifts[index]
        return " " * self.indent(index) + self.src[first : self.line_ends[index]]

    def indent(self, index: int) -> int:
        return max(self.indents[index] - self.base_indent, 0)


@dataclass(frozen=True)
class Block:
    """One located container.

    Attributes:
        start_line: Absolute line of the opening marker.
        end_line: Absolute line of the closing marker, or the document end
            when the container was auto-closed.
        raw_content: Verbatim text of the lines strictly between the markers.
        markup: The opening marker characters.
        closed: False when no closing marker was found.
    """

    start_line: int
    end_line: int
    raw_content: str
    markup: str = CLOSING_MARKER
    closed: bool = True


def _indent_width(line: str) -> int:
    width = 0
    for ch in line:
        if ch == " ":
            width += 1
        elif ch == "\t":
            width += 4 - width % 4
        else:
            break
    return width


def match_opener(
    doc: SourceDocument,
    start_line: int,
    container_name: str = CONTAINER_NAME,
    min_marker_len: int = MIN_MARKER_LEN,
) -> Optional[str]:
    """Check whether an opening marker starts at start_line.

    Side-effect free. Returns the marker characters on a match, else None.
    """
    if start_line >= doc.line_count:
        return None

    # if it's indented more than 3 spaces, it should be a code block
    if doc.indent(start_line) >= CODE_INDENT:
        return None

    text = doc.line(start_line).lstrip()
    markup = text[: len(text) - len(text.lstrip(MARKER_CHAR))]
    if len(markup) < min_marker_len:
        return None

    params = text[len(markup) :].strip()
    if params != container_name:
        return None

    return markup


def locate_block(
    doc: SourceDocument,
    start_line: int,
    container_name: str = CONTAINER_NAME,
    min_marker_len: int = MIN_MARKER_LEN,
) -> Optional[Block]:
    """Locate the container opened at start_line.

    Returns None when start_line does not open a container.
    """
    markup = match_opener(doc, start_line, container_name, min_marker_len)
    if markup is None:
        return None

    closing_line = -1
    for next_line in range(start_line + 1, doc.line_count):
        if doc.line(next_line).strip() == CLOSING_MARKER:
            closing_line = next_line
            break

    closed = closing_line >= 0
    if not closed:
        # unclosed block is closed by the end of the document
        closing_line = doc.line_count
        logger.debug(
            f"Container at line {start_line} auto-closed at line {closing_line}"
        )

    raw_content = "\n".join(doc.line(i) for i in range(start_line + 1, closing_line))

    return Block(
        start_line=start_line,
        end_line=closing_line,
        raw_content=raw_content,
        markup=markup,
        closed=closed,
    )
