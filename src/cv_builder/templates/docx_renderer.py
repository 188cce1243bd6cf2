"""DOCX output renderer: walks the visual tree with python-docx."""

from __future__ import annotations

import re
from pathlib import Path

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt, RGBColor

from cv_builder.models.document import CVDocument
from cv_builder.templates.tree import Entry, RenderedCV, SectionBlock

_HEADING_COLOUR = RGBColor(0x1F, 0x4E, 0x79)


def generate_docx(
    document: CVDocument,
    output_path: str | Path,
    template_id: str | None = None,
) -> Path:
    """Generate a .docx for *document* using the layout of *template_id*."""
    from cv_builder.templates import render

    return tree_to_docx(render(document, template_id), output_path)


def tree_to_docx(rendered: RenderedCV, output_path: str | Path) -> Path:
    """Write a rendered tree to *output_path*.

    Word has no reliable two-column flow, so sidebar blocks follow the main
    column; each region keeps its own order.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    doc = Document()
    font = doc.styles["Normal"].font
    font.name = "Times New Roman" if rendered.theme == "classic" else "Calibri"
    font.size = Pt(10.5)

    _render_header(doc, rendered)
    for block in rendered.iter_blocks():
        _render_section(doc, block)

    doc.save(str(output_path))
    return output_path


def _render_header(doc: Document, rendered: RenderedCV) -> None:
    header = rendered.header
    name = doc.add_heading(header.name or "Curriculum Vitae", level=1)
    if rendered.theme == "classic":
        name.alignment = WD_ALIGN_PARAGRAPH.CENTER
    if header.title:
        p = doc.add_paragraph()
        run = p.add_run(header.title)
        run.font.size = Pt(12)
    if header.contact:
        p = doc.add_paragraph(" | ".join(header.contact))
        p.runs[0].font.size = Pt(9)
    for extra in header.extras:
        doc.add_paragraph(extra)


def _render_section(doc: Document, block: SectionBlock) -> None:
    """Render one CV section into the document."""
    heading = doc.add_heading(block.heading, level=2)
    heading.runs[0].font.color.rgb = _HEADING_COLOUR

    if block.style == "entries":
        for entry in block.entries:
            _render_entry(doc, entry)
        return

    if block.section_type == "summary":
        for line in _md_to_plain(block.text).split("\n"):
            if line.strip():
                _add_rich_text(doc.add_paragraph(), line.strip())
        return

    doc.add_paragraph(block.text)


def _render_entry(doc: Document, entry: Entry) -> None:
    p = doc.add_paragraph()
    title = p.add_run(entry.title)
    title.bold = True
    if entry.subtitle:
        p.add_run(f", {entry.subtitle}")
    if entry.dates:
        dates = p.add_run(f"  ({entry.dates})")
        dates.italic = True
        dates.font.size = Pt(9)
    for detail in entry.details:
        doc.add_paragraph(detail)
    for bullet in entry.bullets:
        doc.add_paragraph(bullet, style="List Bullet")


def _add_rich_text(paragraph, text: str) -> None:
    """Add text to a paragraph with bold formatting preserved."""
    text = re.sub(r"\[([^\]]+)\]\([^)]+\)", r"\1", text)
    parts = re.split(r"(\*{2,3}.+?\*{2,3})", text)
    for part in parts:
        bold_match = re.match(r"\*{2,3}(.+?)\*{2,3}", part)
        if bold_match:
            run = paragraph.add_run(bold_match.group(1))
            run.bold = True
        elif part:
            paragraph.add_run(part)


def _md_to_plain(md: str) -> str:
    """Strip the markdown a summary may carry, keeping bold markers."""
    text = re.sub(r"^#{1,6}\s+", "", md, flags=re.MULTILINE)
    text = re.sub(r"^[-*]\s+", "", text, flags=re.MULTILINE)
    text = re.sub(r"(?<!\*)\*(?!\*)(.+?)(?<!\*)\*(?!\*)", r"\1", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()
