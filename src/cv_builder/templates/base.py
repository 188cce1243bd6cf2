"""Base class for template layout strategies."""

from __future__ import annotations

from abc import ABC

from cv_builder.models.document import CVDocument
from cv_builder.templates.contract import build_header, build_section_blocks
from cv_builder.templates.tree import Region, RenderedCV, SectionBlock


class CVTemplate(ABC):
    """A layout strategy over the shared section contract.

    Subclasses pick a region for each section type and may rename headings.
    They never decide visibility or order: blocks arrive already filtered
    and sorted, and each region keeps the order it receives them in.
    """

    id: str = ""
    name: str = ""
    description: str = ""
    layout: str = "single-column"
    theme: str = "professional"
    sidebar_sections: frozenset[str] = frozenset()
    heading_overrides: dict[str, str] = {}

    def region_for(self, section_type: str) -> str:
        return "sidebar" if section_type in self.sidebar_sections else "main"

    def heading_for(self, block: SectionBlock) -> str:
        return self.heading_overrides.get(block.section_type, block.heading)

    def render(self, document: CVDocument) -> RenderedCV:
        main: list[SectionBlock] = []
        sidebar: list[SectionBlock] = []
        for block in build_section_blocks(document):
            heading = self.heading_for(block)
            if heading != block.heading:
                block = SectionBlock(
                    block.section_type, heading, block.style, block.entries, block.text
                )
            target = sidebar if self.region_for(block.section_type) == "sidebar" else main
            target.append(block)

        regions = [Region("main", tuple(main))]
        if self.layout == "two-column":
            regions.append(Region("sidebar", tuple(sidebar)))
        return RenderedCV(
            template_id=self.id,
            template_name=self.name,
            layout=self.layout,
            header=build_header(document),
            regions=tuple(regions),
            theme=self.theme,
        )
