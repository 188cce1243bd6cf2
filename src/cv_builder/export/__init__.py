"""PDF export for cv-builder."""
from cv_builder.export.pdf_renderer import html_to_pdf, render_pdf
from cv_builder.export.service import PdfRenderService

__all__ = ["PdfRenderService", "html_to_pdf", "render_pdf"]
