"""Plain-text output for the terminal and for quick previews."""

from __future__ import annotations

from cv_builder.models.document import CVDocument
from cv_builder.templates.tree import Entry, RenderedCV, SectionBlock


def _entry_lines(entry: Entry) -> list[str]:
    head = entry.title
    if entry.subtitle:
        head = f"{head}, {entry.subtitle}"
    if entry.dates:
        head = f"{head} ({entry.dates})"
    lines = [head]
    lines.extend(f"  {detail}" for detail in entry.details)
    lines.extend(f"  - {bullet}" for bullet in entry.bullets)
    return lines


def _block_lines(block: SectionBlock) -> list[str]:
    lines = [block.heading.upper()]
    if block.style == "entries":
        for entry in block.entries:
            lines.extend(_entry_lines(entry))
    else:
        lines.extend(block.text.splitlines() or [""])
    return lines


def tree_to_text(rendered: RenderedCV) -> str:
    header = rendered.header
    lines = [header.name or "(no name)"]
    if header.title:
        lines.append(header.title)
    if header.contact:
        lines.append(" | ".join(header.contact))
    lines.extend(header.extras)
    for block in rendered.iter_blocks():
        lines.append("")
        lines.extend(_block_lines(block))
    return "\n".join(lines) + "\n"


def render_text(document: CVDocument, template_id: str | None = None) -> str:
    """Render *document* as plain text; regions are written one after another."""
    from cv_builder.templates import render

    return tree_to_text(render(document, template_id))
