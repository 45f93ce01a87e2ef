"""Interrupt analysis for response text.

A response transcript may contain `**Interrupt:**` lines where the user
stepped in. Each interrupt is paired with the next labeled marker
(`**Thinking:**`, `**Edit:**`, ...), which splits the text into regions that
are windowed differently: surrounding content keeps its head and tail, the
interrupt body keeps its head.
"""

from dataclasses import dataclass
from typing import List, Optional

from aiblock.constants import INTERRUPT_PATTERN, LABEL_PATTERN, UNMAPPED


class RegionKind:
    """Region kinds."""

    CONTENT = "content"
    MARKER = "marker"
    BODY = "body"


@dataclass(frozen=True)
class Interrupt:
    """One interrupt and the lines it owns.

    Attributes:
        line: Line of the interrupt marker.
        label_line: Line of the paired labeled marker, or -1 if none.
        body_end: Exclusive end of the interrupt body.
        region_end: Exclusive end of the content after the label, which is
            the next interrupt or the end of the text.
    """

    line: int
    label_line: int
    body_end: int
    region_end: int

    @property
    def has_label(self) -> bool:
        return self.label_line != UNMAPPED


@dataclass(frozen=True)
class Region:
    """A half-open line range [start, end) of one kind."""

    kind: str
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start


def find_interrupts(lines: List[str]) -> List[Interrupt]:
    """Find interrupts and pair each with its labeled marker.

    The label search stops at the next interrupt; an interrupt without a
    label owns every line up to that interrupt or the end of the text.
    """
    positions = [i for i, line in enumerate(lines) if INTERRUPT_PATTERN.match(line)]

    interrupts = []
    for n, line in enumerate(positions):
        next_interrupt = positions[n + 1] if n + 1 < len(positions) else len(lines)

        label_line = UNMAPPED
        for candidate in range(line + 1, next_interrupt):
            if LABEL_PATTERN.match(lines[candidate]):
                label_line = candidate
                break

        interrupts.append(
            Interrupt(
                line=line,
                label_line=label_line,
                body_end=label_line if label_line != UNMAPPED else next_interrupt,
                region_end=next_interrupt,
            )
        )

    return interrupts


def split_regions(
    lines: List[str], interrupts: Optional[List[Interrupt]] = None
) -> List[Region]:
    """Split text into ordered, non-overlapping regions.

    Returns an empty list when the text has no interrupts. Otherwise the
    regions cover every line exactly once, in order.
    """
    if interrupts is None:
        interrupts = find_interrupts(lines)
    if not interrupts:
        return []

    regions: List[Region] = []
    pos = 0

    for interrupt in interrupts:
        if interrupt.line > pos:
            regions.append(Region(RegionKind.CONTENT, pos, interrupt.line))

        regions.append(Region(RegionKind.MARKER, interrupt.line, interrupt.line + 1))

        if interrupt.body_end > interrupt.line + 1:
            regions.append(
                Region(RegionKind.BODY, interrupt.line + 1, interrupt.body_end)
            )

        if interrupt.has_label:
            label = interrupt.label_line
            regions.append(Region(RegionKind.MARKER, label, label + 1))
            if interrupt.region_end > label + 1:
                regions.append(
                    Region(RegionKind.CONTENT, label + 1, interrupt.region_end)
                )

        pos = interrupt.region_end

    return regions
