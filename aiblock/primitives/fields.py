"""Field extraction for ai container bodies.

The body is a YAML-like list of keys, but it is not parsed as YAML: literal
fields (`prompt: |`) carry arbitrary markdown, including fenced code at
column 0 and dedented lists, which a YAML parser would reject or end early.
A literal field only ends at a line that is indented less than its content
and looks like a sibling key.

Every field keeps its line offset from the first line after the opening
marker so rendered output can point back into the document.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from aiblock.constants import (
    CONTAINER_NAME,
    LIST_ITEM_PATTERN,
    LITERAL_KEY_PATTERN,
    MARKER_CHAR,
    MIN_MARKER_LEN,
    SIBLING_KEY_PATTERN,
    SIMPLE_KEY_PATTERN,
    VERSIONS_PATTERN,
    FieldName,
)
from aiblock.primitives.errors import (
    EmptyBlockError,
    MissingFieldsError,
    NestedBlockError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Field:
    """A named value extracted from a container body.

    Attributes:
        name: Field key.
        text: Dedented field text, blank edge lines removed.
        line_offset: Line of the key, relative to the first body line.
        body_offset: Lines between the key line and the first text line.
        found: False when the field is absent.
    """

    name: str
    text: str = ""
    line_offset: int = 0
    body_offset: int = 0
    found: bool = False

    @property
    def text_line(self) -> int:
        """Line of the first text line, relative to the first body line."""
        return self.line_offset + self.body_offset

    @property
    def line_count(self) -> int:
        return len(self.text.split("\n")) if self.text else 0


@dataclass(frozen=True)
class AiFields:
    """Fields of one container."""

    prompt: Field = field(default_factory=lambda: Field(FieldName.PROMPT))
    model: Field = field(default_factory=lambda: Field(FieldName.MODEL))
    response: Field = field(default_factory=lambda: Field(FieldName.RESPONSE))
    version_count: int = 0

    @property
    def empty(self) -> bool:
        return not (self.prompt.found or self.model.found or self.response.found)


def dedent_lines(lines: List[str]) -> Tuple[str, int]:
    """Remove common indentation and blank edge lines.

    Returns (text, leading) where leading is the number of blank lines
    dropped from the front.
    """
    indents = [len(line) - len(line.lstrip()) for line in lines if line.strip()]
    if not indents:
        return "", 0

    min_indent = min(indents)
    dedented = [line[min_indent:] if line.strip() else "" for line in lines]

    start = 0
    while not dedented[start]:
        start += 1
    end = len(dedented)
    while not dedented[end - 1]:
        end -= 1

    return "\n".join(dedented[start:end]), start


def _collect_literal(lines: List[str], start: int) -> Tuple[List[str], int]:
    """Collect the body of a literal field whose key is on line start - 1.

    Returns the collected lines and the index of the first line past them.
    """
    collected: List[str] = []
    base_indent: Optional[int] = None
    index = start

    while index < len(lines):
        line = lines[index]

        if not line.strip():
            collected.append("")
            index += 1
            continue

        indent = len(line) - len(line.lstrip())

        # First non-empty line sets base indentation for content
        if base_indent is None:
            if indent == 0:
                break
            base_indent = indent
        elif indent < base_indent and SIBLING_KEY_PATTERN.match(line):
            break

        # Anything else stays, whatever its indentation
        collected.append(line)
        index += 1

    return collected, index


def _scan_fields(lines: List[str], base_offset: int) -> Dict[str, Field]:
    """Find every key, first occurrence wins.

    Literal bodies are skipped so keys written inside them are never taken
    for fields.
    """
    found: Dict[str, Field] = {}
    index = 0

    while index < len(lines):
        line = lines[index]

        literal = LITERAL_KEY_PATTERN.match(line)
        if literal:
            body, end = _collect_literal(lines, index + 1)
            name = literal.group(1)
            if name not in found:
                text, leading = dedent_lines(body)
                found[name] = Field(
                    name=name,
                    text=text,
                    line_offset=base_offset + index,
                    body_offset=1 + leading,
                    found=True,
                )
            index = max(end, index + 1)
            continue

        simple = SIMPLE_KEY_PATTERN.match(line)
        if simple and simple.group(1) not in found:
            found[simple.group(1)] = Field(
                name=simple.group(1),
                text=simple.group(2).strip(),
                line_offset=base_offset + index,
                found=True,
            )
        index += 1

    return found


def _working_lines(lines: List[str]) -> Tuple[List[str], int, int]:
    """Narrow the body to its first version when keys sit under `versions:`.

    Returns (lines, base_offset, version_count). The first returned line is
    the first list item with its `- ` marker removed; base_offset is the
    number of body lines before that item.
    """
    for index, line in enumerate(lines):
        if not VERSIONS_PATTERN.match(line):
            continue

        first: Optional[int] = None
        marker_indent = 0
        end = len(lines)
        count = 0
        for item_index in range(index + 1, len(lines)):
            item = LIST_ITEM_PATTERN.match(lines[item_index])
            if not item:
                continue
            indent = len(item.group(1)) - len(item.group(1).lstrip())
            if first is None:
                first = item_index
                marker_indent = indent
                count = 1
            elif indent == marker_indent and SIBLING_KEY_PATTERN.match(
                lines[item_index][len(item.group(1)) :]
            ):
                # markdown bullets inside a field are not versions
                if count == 1:
                    end = item_index
                count += 1

        if first is None:
            return lines, 0, 0

        marker = LIST_ITEM_PATTERN.match(lines[first]).group(1)
        working = [lines[first][len(marker) :]] + lines[first + 1 : end]
        return working, first, count

    return lines, 0, 0


def _opening_pattern(container_name: str, min_marker_len: int) -> "re.Pattern[str]":
    return re.compile(
        r"^\s*%s{%d,}\s*%s\s*$"
        % (re.escape(MARKER_CHAR), min_marker_len, re.escape(container_name))
    )


def extract_literal_field(
    content: str, field_name: str, base_line_offset: int = 0
) -> Field:
    """Extract a literal (`name: |`) field.

    A one-line `name: value` is accepted too. Absent fields come back empty
    with offset 0.
    """
    found = _scan_fields(content.split("\n"), base_line_offset)
    return found.get(field_name, Field(field_name))


def extract_simple_field(
    content: str, field_name: str, base_line_offset: int = 0
) -> Field:
    """Extract a simple (`name: value`) field."""
    found = _scan_fields(content.split("\n"), base_line_offset)
    result = found.get(field_name)
    if result is None or result.body_offset:
        # a literal opener is not a simple value
        return Field(field_name)
    return result


def parse_fields(
    raw_content: str,
    container_name: str = CONTAINER_NAME,
    min_marker_len: int = MIN_MARKER_LEN,
) -> AiFields:
    """Parse the body of one container into its fields.

    Raises:
        EmptyBlockError: The body is blank.
        NestedBlockError: The body opens another container.
        MissingFieldsError: None of prompt, model, response is present.
    """
    if not raw_content.strip():
        raise EmptyBlockError("no YAML content")

    lines = raw_content.split("\n")

    opening = _opening_pattern(container_name, min_marker_len)
    for index, line in enumerate(lines):
        if opening.match(line):
            raise NestedBlockError(
                f"'{line.strip()}' opened inside another {container_name} container",
                line=index,
            )

    working, base_offset, version_count = _working_lines(lines)
    found = _scan_fields(working, base_offset)

    model = found.get(FieldName.MODEL)
    if model is not None and model.body_offset:
        model = None

    fields = AiFields(
        prompt=found.get(FieldName.PROMPT, Field(FieldName.PROMPT)),
        model=model or Field(FieldName.MODEL),
        response=found.get(FieldName.RESPONSE, Field(FieldName.RESPONSE)),
        version_count=version_count,
    )

    if fields.empty:
        raise MissingFieldsError(
            "expected at least one of: " + ", ".join(FieldName.ALL)
        )

    logger.debug(
        f"Parsed fields: prompt@{fields.prompt.line_offset} "
        f"model@{fields.model.line_offset} response@{fields.response.line_offset}"
    )
    return fields
