"""Tests for field extraction from ai container bodies."""

import pytest

from aiblock.primitives.errors import (
    EmptyBlockError,
    MissingFieldsError,
    NestedBlockError,
)
from aiblock.primitives.fields import (
    Field,
    dedent_lines,
    extract_literal_field,
    extract_simple_field,
    parse_fields,
)

DIRECT = """prompt: |
  Tell me about markdown
model: test-model
response: |
  Markdown is great!"""

VERSIONS = """versions:
  - prompt: |
      What is the capital of France?
    model: claude-3-5-sonnet
    response: |
      The capital of France is Paris."""


class TestDirectFields:
    """Fields written directly in the body."""

    def test_offsets_and_text(self):
        """Each field reports its key line and dedented text."""
        fields = parse_fields(DIRECT)
        assert fields.prompt.text == "Tell me about markdown"
        assert fields.prompt.line_offset == 0
        assert fields.prompt.text_line == 1
        assert fields.model.text == "test-model"
        assert fields.model.line_offset == 2
        assert fields.response.text == "Markdown is great!"
        assert fields.response.line_offset == 3
        assert fields.response.text_line == 4
        assert fields.version_count == 0

    def test_multiline_literal(self):
        """Literal fields keep every line, in order."""
        fields = parse_fields("prompt: |\n  Line 1\n  Line 2\n  Line 3\nmodel: m")
        assert fields.prompt.text == "Line 1\nLine 2\nLine 3"
        assert fields.prompt.line_count == 3

    def test_leading_blank_lines_shift_text_line(self):
        """Blank lines before the text are dropped but counted."""
        fields = parse_fields("prompt: |\n\n\n  Hello\n  World\n\nresponse: |\n  ok")
        assert fields.prompt.text == "Hello\nWorld"
        assert fields.prompt.line_offset == 0
        assert fields.prompt.body_offset == 3
        assert fields.prompt.text_line == 3
        assert fields.response.line_offset == 6

    def test_blank_lines_before_first_key(self):
        """Keys after leading blank body lines keep their real offset."""
        fields = parse_fields("\n\nmodel: m")
        assert fields.model.line_offset == 2

    def test_inner_blank_lines_kept(self):
        """Blank lines inside a literal are part of it."""
        fields = parse_fields("response: |\n  one\n\n  two")
        assert fields.response.text == "one\n\ntwo"

    def test_trailing_spaces_kept(self):
        """Markdown hard breaks survive extraction."""
        fields = parse_fields("response: |\n  one  \n  two")
        assert fields.response.text == "one  \ntwo"


class TestVersions:
    """Fields nested in a versions list."""

    def test_first_version_offsets(self):
        """Offsets count from the first body line, not the list item."""
        fields = parse_fields(VERSIONS)
        assert fields.prompt.text == "What is the capital of France?"
        assert fields.prompt.line_offset == 1
        assert fields.model.text == "claude-3-5-sonnet"
        assert fields.model.line_offset == 3
        assert fields.response.text == "The capital of France is Paris."
        assert fields.response.line_offset == 4
        assert fields.version_count == 1

    def test_second_version_not_merged(self):
        """A second version neither leaks into nor replaces the first."""
        content = VERSIONS + (
            "\n  - prompt: |\n      Second\n    model: other\n    response: |\n      Two"
        )
        fields = parse_fields(content)
        assert fields.version_count == 2
        assert fields.response.text == "The capital of France is Paris."
        assert fields.model.text == "claude-3-5-sonnet"

    def test_bullets_in_response_are_not_versions(self):
        """Markdown bullets at the list indent stay in the response."""
        content = VERSIONS + "\n  - first bullet\n  - second bullet"
        fields = parse_fields(content)
        assert fields.version_count == 1
        assert "- first bullet" in fields.response.text


class TestLiteralTolerance:
    """Embedded markdown does not end a literal field early."""

    def test_fence_at_column_zero(self):
        """Fenced code at column 0 stays inside the field."""
        content = (
            "prompt: |\n"
            "  Show code\n"
            "response: |\n"
            "  Here:\n"
            "```python\n"
            "x = 1\n"
            "```\n"
            "  Done.\n"
            "model: m"
        )
        fields = parse_fields(content)
        assert "```python" in fields.response.text
        assert "x = 1" in fields.response.text
        assert fields.response.text.endswith("Done.")
        assert "model: m" not in fields.response.text
        assert fields.model.text == "m"
        assert fields.model.line_offset == 8

    def test_dedented_list(self):
        """A list less indented than the content is kept."""
        fields = parse_fields("response: |\n    Intro\n  - a\n  - b\n")
        assert fields.response.text == "  Intro\n- a\n- b"

    def test_key_like_line_at_content_indent(self):
        """A key-like line at the content indent is text."""
        fields = parse_fields("prompt: |\n  note: keep me\n  end\nmodel: m")
        assert fields.prompt.text == "note: keep me\nend"

    def test_keys_inside_literal_are_skipped(self):
        """A model written inside the prompt is not the model."""
        fields = parse_fields("prompt: |\n  model: fake\nmodel: real")
        assert fields.model.text == "real"
        assert fields.model.line_offset == 2

    def test_literal_at_column_zero_is_empty(self):
        """A literal whose next line is at column 0 has no body."""
        fields = parse_fields("prompt: |\nresponse: |\n  hi")
        assert fields.prompt.found
        assert fields.prompt.text == ""
        assert fields.response.text == "hi"

    def test_chomping_indicators(self):
        """`|-` and `|+` open literal fields too."""
        fields = parse_fields("prompt: |-\n  a\nresponse: |+\n  b")
        assert fields.prompt.text == "a"
        assert fields.response.text == "b"

    def test_one_line_prompt(self):
        """A literal field given as a one-line value is accepted."""
        fields = parse_fields("prompt: What is 2+2?\nresponse: |\n  4")
        assert fields.prompt.text == "What is 2+2?"
        assert fields.prompt.text_line == 0


class TestExtractors:
    """Single-field extractors."""

    def test_absent_literal(self):
        """Absent field: empty text, offset 0, no exception."""
        assert extract_literal_field("model: x", "prompt") == Field("prompt")

    def test_absent_simple(self):
        """Absent simple field is empty too."""
        result = extract_simple_field("prompt: |\n  hi", "model")
        assert result.text == ""
        assert result.line_offset == 0
        assert not result.found

    def test_simple_field_ignores_literal_opener(self):
        """`model: |` is not a simple value."""
        assert extract_simple_field("model: |\n  x", "model").text == ""

    def test_first_match_wins(self):
        """Repeated keys: only the first is honored."""
        assert extract_simple_field("model: a\nmodel: b", "model").text == "a"

    def test_base_line_offset(self):
        """A base offset is added to the field offset."""
        result = extract_literal_field("x: 1\nprompt: |\n  hi", "prompt", 5)
        assert result.line_offset == 6
        assert result.text == "hi"

    def test_simple_value_trimmed(self):
        """Simple values are trimmed."""
        assert extract_simple_field("  model:   gpt   ", "model").text == "gpt"


class TestDedent:
    """dedent_lines."""

    def test_dedent_and_count_leading(self):
        """Common indent removed, leading blanks counted."""
        assert dedent_lines(["", "    a", "      b", ""]) == ("a\n  b", 1)

    def test_all_blank(self):
        """Only blank lines give empty text."""
        assert dedent_lines(["", "  "]) == ("", 0)


class TestParseErrors:
    """parse_fields failures."""

    def test_empty_body(self):
        """A blank body raises EmptyBlockError."""
        with pytest.raises(EmptyBlockError):
            parse_fields("  \n \n")

    def test_no_fields(self):
        """A body without known fields raises MissingFieldsError."""
        with pytest.raises(MissingFieldsError):
            parse_fields("just some text\nmore: text")

    def test_nested_container(self):
        """An opener inside the body raises NestedBlockError."""
        with pytest.raises(NestedBlockError) as exc_info:
            parse_fields("prompt: |\n  ::: ai\n  inner\nresponse: |\n  ok")
        assert exc_info.value.line == 1

    def test_other_containers_are_fine(self):
        """Other ::: containers inside a field are plain text."""
        fields = parse_fields("prompt: |\n  ::: note\n  inner\n  :::")
        assert "::: note" in fields.prompt.text
