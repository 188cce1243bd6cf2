"""PDF rendering collaborator with staged progress reporting."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from cv_builder.errors import CVBuilderError, RenderError
from cv_builder.export.pdf_renderer import html_to_pdf
from cv_builder.models.document import CVDocument
from cv_builder.templates import render
from cv_builder.templates.html_renderer import tree_to_html

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, str], None]

STAGE_PREPARING = "preparing"
STAGE_RENDERING = "rendering"
STAGE_FINALIZING = "finalizing"


class PdfRenderService:
    """Turns a document snapshot into PDF bytes.

    ``on_progress(percent, stage)`` is called with a non-decreasing percent
    from 0 to 100. Any failure surfaces as ``RenderError``.
    """

    def __init__(self, converter: Callable[[str], bytes] = html_to_pdf):
        self._converter = converter

    async def render(
        self,
        document: CVDocument,
        template_id: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> bytes:
        report = on_progress or (lambda percent, stage: None)
        report(0, STAGE_PREPARING)
        try:
            html = tree_to_html(render(document, template_id))
        except CVBuilderError as exc:
            raise RenderError(f"Could not prepare document: {exc}") from exc
        report(25, STAGE_PREPARING)

        report(30, STAGE_RENDERING)
        try:
            pdf = await asyncio.to_thread(self._converter, html)
        except Exception as exc:
            logger.error("PDF conversion failed: %s", exc)
            raise RenderError(f"PDF conversion failed: {exc}") from exc
        report(80, STAGE_RENDERING)

        report(90, STAGE_FINALIZING)
        if not pdf or not pdf.startswith(b"%PDF"):
            raise RenderError("PDF renderer returned an empty or invalid file")
        report(100, STAGE_FINALIZING)
        logger.info("Rendered PDF: %d bytes, template=%s", len(pdf), template_id)
        return pdf
