from __future__ import annotations

import logging

from cv_builder.models.document import CVDocument
from cv_builder.templates import render
from cv_builder.templates.html_renderer import tree_to_html

logger = logging.getLogger(__name__)


def render_pdf(document: CVDocument, template_id: str | None = None) -> bytes:
    """Render *document* to PDF bytes through the template's HTML."""
    html = tree_to_html(render(document, template_id))
    return html_to_pdf(html)


def html_to_pdf(html: str) -> bytes:
    """Convert HTML string to PDF bytes using WeasyPrint, with fpdf2 fallback."""
    try:
        from weasyprint import HTML
        return HTML(string=html).write_pdf()
    except (ImportError, OSError):
        logger.warning("WeasyPrint not available, using fpdf2 fallback")
        from cv_builder.export.pdf_fallback import html_to_pdf_fpdf2
        return html_to_pdf_fpdf2(html)
