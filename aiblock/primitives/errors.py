"""Error types for aiblock primitives.

Locating a block never raises: a non-match is reported as a plain False or
None so the host can fall back to its default handling. These errors cover
blocks that were found but cannot be rendered as a container:
- Parsing: empty body, no recognizable fields, nested containers
- Rendering: the recursive formatter failed on one segment
- Configuration: bad window policy or config file
"""

from typing import Optional


class AiBlockError(Exception):
    """Base exception for ai container failures.

    Attributes:
        message: Error description.
        line: Optional line the error refers to. Field parsing reports
            lines relative to the block body; the container layer turns
            them into document lines.
    """

    title = "AI container error"

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line


class EmptyBlockError(AiBlockError):
    """The container has no content between its markers."""

    title = "Empty AI container"


class MissingFieldsError(AiBlockError):
    """The container body holds none of the known fields."""

    title = "Error parsing AI container YAML:"


class NestedBlockError(AiBlockError):
    """An ai container was opened inside another one.

    Nesting is unsupported; the outer block is reported instead of being
    rendered twice.
    """

    title = "Nested AI containers are not supported"


class SegmentRenderError(AiBlockError):
    """The recursive formatter raised on one segment.

    Attributes:
        message: Description of the error.
        line: Absolute line of the segment's first line.
        cause: The exception raised by the formatter.
    """

    title = "Failed to render segment"

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, line=line)
        self.cause = cause


class ConfigurationError(AiBlockError):
    """Render configuration error (unknown policy, invalid value, etc).

    Attributes:
        message: Description of the error.
        field: Optional config key that failed.
    """

    title = "Invalid AI container configuration"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field
