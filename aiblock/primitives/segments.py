"""Content windowing for field text.

Long prompts and transcripts are cut down before rendering. Every kept
slice remembers the field lines it came from; cut lines are replaced by a
synthetic elision segment that maps to no source line.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from aiblock.constants import ELIDED_TEXT, UNMAPPED, WindowKind
from aiblock.primitives.errors import ConfigurationError
from aiblock.primitives.interrupts import RegionKind, split_regions


@dataclass(frozen=True)
class WindowPolicy:
    """How many lines of a text to keep, and from which end.

    Attributes:
        kind: One of head, tail, head_tail.
        first: Lines kept from the start (head, head_tail).
        last: Lines kept from the end (tail, head_tail).
    """

    kind: str
    first: int = 0
    last: int = 0

    @classmethod
    def head(cls, lines: int) -> "WindowPolicy":
        return cls(WindowKind.HEAD, first=lines)

    @classmethod
    def tail(cls, lines: int) -> "WindowPolicy":
        return cls(WindowKind.TAIL, last=lines)

    @classmethod
    def head_tail(cls, first: int, last: int) -> "WindowPolicy":
        return cls(WindowKind.HEAD_TAIL, first=first, last=last)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], name: str = "window") -> "WindowPolicy":
        """Build a policy from `{policy: head, lines: 10}` style config.

        Raises:
            ConfigurationError: Unknown policy or invalid size.
        """
        if not isinstance(data, dict):
            raise ConfigurationError(f"{name} must be a mapping", field=name)

        kind = data.get("policy")
        if kind not in WindowKind.ALL:
            raise ConfigurationError(
                f"{name}: unknown policy {kind!r}, expected one of "
                + ", ".join(WindowKind.ALL),
                field=name,
            )

        try:
            if kind == WindowKind.HEAD:
                policy = cls.head(int(data["lines"]))
            elif kind == WindowKind.TAIL:
                policy = cls.tail(int(data["lines"]))
            else:
                policy = cls.head_tail(int(data["first"]), int(data["last"]))
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(f"{name}: invalid size ({e})", field=name)

        if policy.first < 0 or policy.last < 0:
            raise ConfigurationError(f"{name}: sizes must not be negative", field=name)
        return policy

    @property
    def size(self) -> int:
        return self.first + self.last

    def to_dict(self) -> Dict[str, Any]:
        if self.kind == WindowKind.HEAD_TAIL:
            return {"policy": self.kind, "first": self.first, "last": self.last}
        return {"policy": self.kind, "lines": self.size}


@dataclass(frozen=True)
class Segment:
    """A slice of field text, or a synthetic elision marker.

    Mapped segments carry an inclusive range of field lines; synthetic
    segments carry -1 for both bounds.
    """

    text: str
    source_line_start: int = UNMAPPED
    source_line_end: int = UNMAPPED

    @property
    def mapped(self) -> bool:
        return self.source_line_start != UNMAPPED

    def shifted(self, offset: int) -> "Segment":
        if not self.mapped:
            return self
        return Segment(
            self.text,
            self.source_line_start + offset,
            self.source_line_end + offset,
        )


def _mapped(lines: List[str], start: int, end: int) -> Optional[Segment]:
    if start >= end:
        return None
    return Segment("\n".join(lines[start:end]), start, end - 1)


def _elided(kind: str, count: int) -> Segment:
    return Segment(ELIDED_TEXT[kind].format(count=count))


def apply_window(lines: List[str], policy: WindowPolicy) -> List[Segment]:
    """Window lines under policy.

    Line numbers are relative to lines[0]. Text at or under the window size
    comes back as one mapped segment.
    """
    total = len(lines)
    if total == 0:
        return []

    if total <= policy.size:
        return [_mapped(lines, 0, total)]

    if policy.kind == WindowKind.HEAD:
        parts = [_mapped(lines, 0, policy.first), _elided(policy.kind, total - policy.first)]
    elif policy.kind == WindowKind.TAIL:
        parts = [
            _elided(policy.kind, total - policy.last),
            _mapped(lines, total - policy.last, total),
        ]
    else:
        parts = [
            _mapped(lines, 0, policy.first),
            _elided(policy.kind, total - policy.size),
            _mapped(lines, total - policy.last, total),
        ]

    return [part for part in parts if part is not None]


def _trim_blank(lines: List[str], start: int, end: int) -> Tuple[int, int]:
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return start, end


def segment_prompt(text: str, policy: WindowPolicy) -> List[Segment]:
    """Window prompt text."""
    if not text:
        return []
    return apply_window(text.split("\n"), policy)


def segment_response(
    text: str,
    policy: WindowPolicy,
    region_policy: WindowPolicy,
    interrupt_policy: WindowPolicy,
) -> List[Segment]:
    """Window response text, interrupt-aware.

    Without interrupts the whole text falls under policy. With interrupts,
    content regions fall under region_policy, interrupt bodies under
    interrupt_policy, and marker lines are kept as they are.
    """
    if not text:
        return []

    lines = text.split("\n")
    regions = split_regions(lines)
    if not regions:
        return apply_window(lines, policy)

    segments: List[Segment] = []
    for region in regions:
        start, end = _trim_blank(lines, region.start, region.end)
        if start >= end:
            continue

        if region.kind == RegionKind.MARKER:
            segments.append(_mapped(lines, start, end))
            continue

        window = region_policy if region.kind == RegionKind.CONTENT else interrupt_policy
        for segment in apply_window(lines[start:end], window):
            segments.append(segment.shifted(start))

    return segments
