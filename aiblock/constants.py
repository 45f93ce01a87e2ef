"""aiblock constants

Centralized constants for the container markers, field names, marker patterns
and the markup emitted around rendered fields.
"""

import re

# Opening marker is a run of at least MIN_MARKER_LEN marker chars followed by
# the container name. The closing line is exactly CLOSING_MARKER once trimmed.
MARKER_CHAR = ":"
MIN_MARKER_LEN = 3
CONTAINER_NAME = "ai"
CLOSING_MARKER = ":::"

# Attribute read by the preview's scroll sync. Value is a zero-based line.
POSITION_ATTR = "data-line"

# Lines indented this far are indented code, never a container.
CODE_INDENT = 4

UNMAPPED = -1


class FieldName:
    """Field name constants."""

    PROMPT = "prompt"
    MODEL = "model"
    RESPONSE = "response"
    VERSIONS = "versions"

    LITERAL = [PROMPT, RESPONSE]
    SIMPLE = [MODEL]
    ALL = [PROMPT, MODEL, RESPONSE]


class WindowKind:
    """Window policy kinds."""

    HEAD = "head"
    TAIL = "tail"
    HEAD_TAIL = "head_tail"

    ALL = [HEAD, TAIL, HEAD_TAIL]


class CssClass:
    """Class names on the emitted fragment."""

    CONTAINER = "ai-container"
    ERROR = "ai-error"
    PROMPT = "ai-prompt"
    RESPONSE = "ai-response"
    MODEL = "ai-model"
    SEPARATOR = "ai-separator"
    ELIDED = "ai-elided"
    SEGMENT_ERROR = "ai-segment-error"


# Elision texts, keyed by window kind. {count} is the number of hidden lines.
ELIDED_TEXT = {
    WindowKind.HEAD: "... ({count} more lines)",
    WindowKind.TAIL: "... ({count} lines above)",
    WindowKind.HEAD_TAIL: "... ({count} lines)",
}

# **Interrupt:** on a line of its own
INTERRUPT_PATTERN = re.compile(r"^\s*\*\*Interrupt:\*\*\s*$")

# **Thinking:**, **Edit:**, **Bash:** ...
LABEL_PATTERN = re.compile(r"^\s*\*\*[A-Z][a-z]+:\*\*")

# Any line that starts a sibling key
SIBLING_KEY_PATTERN = re.compile(r"^\s*\w+:\s*")

VERSIONS_PATTERN = re.compile(r"^\s*versions:\s*$")
LIST_ITEM_PATTERN = re.compile(r"^(\s*-\s+)")

# `name: |` opens a literal field, `name: value` is a simple one
LITERAL_KEY_PATTERN = re.compile(r"^\s*(\w+):\s*\|[-+]?\s*$")
SIMPLE_KEY_PATTERN = re.compile(r"^\s*(\w+):\s*(.+?)\s*$")

# ``` or ~~~ opening or closing a fenced code block
FENCE_PATTERN = re.compile(r"^\s*(`{3,}|~{3,})")
