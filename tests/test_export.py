"""Tests for the PDF render service and the export orchestrator."""

from __future__ import annotations

import asyncio

import pytest

from cv_builder.errors import RenderError
from cv_builder.export.service import PdfRenderService
from cv_builder.pipeline import export as export_mod
from cv_builder.pipeline.export import ExportOrchestrator, default_filename


def _fake_converter(html: str) -> bytes:
    return b"%PDF-1.7 " + html[:20].encode()


class TestPdfRenderService:
    @pytest.mark.asyncio
    async def test_progress_is_staged_and_monotonic(self, jane_document):
        calls: list[tuple[int, str]] = []
        service = PdfRenderService(converter=_fake_converter)

        pdf = await service.render(jane_document, "dublin", lambda p, s: calls.append((p, s)))

        assert pdf.startswith(b"%PDF")
        percents = [p for p, _ in calls]
        assert percents == sorted(percents)
        assert percents[0] == 0 and percents[-1] == 100
        stages = [s for _, s in calls]
        assert stages.index("preparing") < stages.index("rendering") < stages.index("finalizing")

    @pytest.mark.asyncio
    async def test_converter_failure_is_render_error(self, jane_document):
        def broken(html: str) -> bytes:
            raise RuntimeError("engine crashed")

        with pytest.raises(RenderError, match="engine crashed"):
            await PdfRenderService(converter=broken).render(jane_document, "dublin")

    @pytest.mark.asyncio
    async def test_invalid_output_is_render_error(self, jane_document):
        with pytest.raises(RenderError):
            await PdfRenderService(converter=lambda html: b"").render(jane_document)


class TestExportOrchestrator:
    def test_default_filename(self, jane_document, blank_document):
        assert default_filename(jane_document, "dublin", "pdf") == "jane-byrne-cv-dublin.pdf"
        assert default_filename(blank_document, "london", "docx") == "cv-london.docx"

    @pytest.mark.asyncio
    async def test_pdf_export_writes_file(self, tmp_path, jane_document):
        orchestrator = ExportOrchestrator(
            PdfRenderService(converter=_fake_converter), output_dir=tmp_path
        )
        result = await orchestrator.export(jane_document, "pdf")
        assert result.path == tmp_path / "jane-byrne-cv-dublin.pdf"
        assert result.path.read_bytes().startswith(b"%PDF")
        assert result.size == result.path.stat().st_size
        assert orchestrator.state == export_mod.IDLE

    @pytest.mark.asyncio
    async def test_docx_and_html_exports(self, tmp_path, full_document):
        orchestrator = ExportOrchestrator(output_dir=tmp_path)
        docx = await orchestrator.export(full_document, "docx", template_id="harvard")
        html = await orchestrator.export(full_document, "html", template_id="stockholm")
        assert docx.path.suffix == ".docx" and docx.path.exists()
        assert "Jane Byrne" in html.path.read_text(encoding="utf-8")

    @pytest.mark.asyncio
    async def test_destination_directory(self, tmp_path, jane_document):
        orchestrator = ExportOrchestrator(PdfRenderService(converter=_fake_converter))
        result = await orchestrator.export(jane_document, "pdf", destination=tmp_path)
        assert result.path.parent == tmp_path

    @pytest.mark.asyncio
    async def test_unknown_format_and_template(self, jane_document):
        orchestrator = ExportOrchestrator()
        with pytest.raises(RenderError):
            await orchestrator.export(jane_document, "odt")
        with pytest.raises(RenderError):
            await orchestrator.export(jane_document, "pdf", template_id="paris")

    @pytest.mark.asyncio
    async def test_failure_sets_failed_state(self, tmp_path, jane_document):
        def broken(html: str) -> bytes:
            raise RuntimeError("boom")

        orchestrator = ExportOrchestrator(PdfRenderService(converter=broken), output_dir=tmp_path)
        with pytest.raises(RenderError):
            await orchestrator.export(jane_document)
        assert orchestrator.state == export_mod.FAILED
        assert "boom" in orchestrator.last_error

    @pytest.mark.asyncio
    async def test_exports_are_serialised(self, tmp_path, jane_document):
        active = 0
        peak = 0

        class SlowService(PdfRenderService):
            async def render(self, document, template_id=None, on_progress=None):
                nonlocal active, peak
                active += 1
                peak = max(peak, active)
                await asyncio.sleep(0.01)
                active -= 1
                return b"%PDF-slow"

        orchestrator = ExportOrchestrator(SlowService(), output_dir=tmp_path)
        await asyncio.gather(
            orchestrator.export(jane_document, template_id="dublin"),
            orchestrator.export(jane_document, template_id="london"),
        )
        assert peak == 1
