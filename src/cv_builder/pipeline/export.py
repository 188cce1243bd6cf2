"""Export orchestration: one export at a time, written straight to disk.

Exports read a snapshot and never touch the store, so a failed export
cannot change the document or its dirty flag.
"""

from __future__ import annotations

import asyncio
import logging
import re
import time
from dataclasses import dataclass
from pathlib import Path

from cv_builder.errors import RenderError, TemplateNotFoundError
from cv_builder.export.service import (
    STAGE_FINALIZING,
    STAGE_PREPARING,
    STAGE_RENDERING,
    PdfRenderService,
    ProgressCallback,
)
from cv_builder.models.document import CVDocument
from cv_builder.templates import DEFAULT_TEMPLATE_ID, get_template
from cv_builder.templates.docx_renderer import generate_docx
from cv_builder.templates.html_renderer import render_html, save_html

logger = logging.getLogger(__name__)

IDLE = "idle"
EXPORTING = "exporting"
FAILED = "failed"

EXPORT_FORMATS = ("pdf", "docx", "html")


@dataclass(frozen=True)
class ExportResult:
    path: Path
    format: str
    template_id: str
    size: int
    elapsed_seconds: float = 0.0


def default_filename(document: CVDocument, template_id: str, fmt: str) -> str:
    """``jane-byrne-cv-dublin.pdf``; ``cv-dublin.pdf`` when the name is blank."""
    slug = re.sub(r"[^a-z0-9]+", "-", document.personal.full_name.lower()).strip("-")
    stem = f"{slug}-cv" if slug else "cv"
    return f"{stem}-{template_id}.{fmt}"


class ExportOrchestrator:
    """Serialises exports and tracks ``idle | exporting | failed``."""

    def __init__(
        self,
        renderer: PdfRenderService | None = None,
        *,
        output_dir: str | Path = "./output",
        default_template: str = DEFAULT_TEMPLATE_ID,
    ):
        self.renderer = renderer or PdfRenderService()
        self.output_dir = Path(output_dir)
        self.default_template = default_template
        self.state = IDLE
        self.last_error: str | None = None
        self._lock = asyncio.Lock()

    def _destination(
        self,
        document: CVDocument,
        fmt: str,
        template_id: str,
        destination: str | Path | None,
    ) -> Path:
        if destination is None:
            return self.output_dir / default_filename(document, template_id, fmt)
        path = Path(destination).expanduser()
        if path.is_dir():
            return path / default_filename(document, template_id, fmt)
        return path

    async def export(
        self,
        document: CVDocument,
        fmt: str = "pdf",
        *,
        template_id: str | None = None,
        destination: str | Path | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> ExportResult:
        """Render *document* as *fmt* and write it out. Raises ``RenderError``."""
        if fmt not in EXPORT_FORMATS:
            raise RenderError(
                f"Unsupported export format {fmt!r}. Use one of: {', '.join(EXPORT_FORMATS)}"
            )
        template_id = template_id or document.template_id or self.default_template
        try:
            get_template(template_id)
        except TemplateNotFoundError as exc:
            raise RenderError(str(exc)) from exc

        report = on_progress or (lambda percent, stage: None)
        async with self._lock:
            self.state = EXPORTING
            self.last_error = None
            started = time.monotonic()
            try:
                path = self._destination(document, fmt, template_id, destination)
                path.parent.mkdir(parents=True, exist_ok=True)
                if fmt == "pdf":
                    data = await self.renderer.render(document, template_id, report)
                    await asyncio.to_thread(path.write_bytes, data)
                elif fmt == "docx":
                    report(0, STAGE_PREPARING)
                    report(30, STAGE_RENDERING)
                    await asyncio.to_thread(generate_docx, document, path, template_id)
                    report(90, STAGE_FINALIZING)
                    report(100, STAGE_FINALIZING)
                else:
                    report(0, STAGE_PREPARING)
                    html = render_html(document, template_id)
                    report(50, STAGE_RENDERING)
                    save_html(html, path)
                    report(100, STAGE_FINALIZING)
            except RenderError as exc:
                self._fail(str(exc))
                raise
            except OSError as exc:
                self._fail(f"Could not write export: {exc}")
                raise RenderError(f"Could not write export: {exc}") from exc

            self.state = IDLE
            elapsed = time.monotonic() - started
            size = path.stat().st_size
            logger.info("Exported %s (%s, %d bytes) in %.2fs", path, template_id, size, elapsed)
            return ExportResult(path, fmt, template_id, size, round(elapsed, 3))

    def _fail(self, message: str) -> None:
        self.state = FAILED
        self.last_error = message
        logger.error("Export failed: %s", message)
