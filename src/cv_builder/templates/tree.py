"""Visual tree produced by the template renderer.

The tree is layout-aware (regions) but format-agnostic: the text, HTML,
DOCX and PDF outputs all walk the same structure.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Entry:
    title: str
    subtitle: str = ""
    dates: str = ""
    details: tuple[str, ...] = ()  # optional one-liners (grade, credential id...)
    bullets: tuple[str, ...] = ()


@dataclass(frozen=True)
class SectionBlock:
    section_type: str
    heading: str
    style: str  # "entries", "paragraph", "inline"
    entries: tuple[Entry, ...] = ()
    text: str = ""


@dataclass(frozen=True)
class Header:
    name: str
    title: str = ""
    contact: tuple[str, ...] = ()
    extras: tuple[str, ...] = ()  # work permit and similar


@dataclass(frozen=True)
class Region:
    name: str  # "main" or "sidebar"
    blocks: tuple[SectionBlock, ...] = ()


@dataclass(frozen=True)
class RenderedCV:
    template_id: str
    template_name: str
    layout: str  # "single-column" or "two-column"
    header: Header
    regions: tuple[Region, ...] = field(default_factory=tuple)
    theme: str = ""

    def iter_blocks(self) -> Iterator[SectionBlock]:
        for region in self.regions:
            yield from region.blocks

    def section_types(self) -> list[str]:
        """Types of every rendered section, region by region."""
        return [block.section_type for block in self.iter_blocks()]

    def region(self, name: str) -> Region | None:
        for region in self.regions:
            if region.name == name:
                return region
        return None

    def block(self, section_type: str) -> SectionBlock | None:
        for block in self.iter_blocks():
            if block.section_type == section_type:
                return block
        return None
