"""Tests for the document store: dirty tracking, coalesced saves, load/reset."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from cv_builder.errors import DocumentNotFoundError, PersistenceError, RenderError, ValidationError
from cv_builder.pipeline.export import ExportResult
from cv_builder.store import DocumentStore


class TestDirtyTracking:
    def test_new_store_is_clean(self, store):
        assert not store.has_unsaved_changes
        assert store.revision == 0

    def test_mutation_marks_dirty(self, store, experience_payload):
        store.add_experience(experience_payload)
        assert store.has_unsaved_changes
        assert store.document.get_section("experience").items[0].company == "Acme"

    def test_noop_mutation_stays_clean(self, store):
        store.toggle_section_visibility("personal", True)
        assert not store.has_unsaved_changes

    def test_rejected_mutation_changes_nothing(self, store):
        before = store.document
        with pytest.raises(ValidationError):
            store.add_experience({"company": "Acme"})
        assert store.document is before
        assert not store.has_unsaved_changes

    def test_toggle_flips_visibility(self, store):
        assert store.document.is_visible("awards") is False
        store.toggle_section_visibility("awards")
        assert store.document.is_visible("awards") is True

    def test_subscribe_and_unsubscribe(self, store):
        events = []
        unsubscribe = store.subscribe(lambda event, s: events.append(event))
        store.update_personal(title="Engineer")
        unsubscribe()
        store.update_personal(title="Senior Engineer")
        assert events == ["change"]


class TestSave:
    @pytest.mark.asyncio
    async def test_save_clears_dirty(self, store, mock_repository):
        store.update_personal(full_name="Jane Byrne")
        assert await store.save_document() is True
        assert not store.has_unsaved_changes
        assert store.last_saved is not None
        mock_repository.save.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_clean_save_skips_repository(self, store, mock_repository):
        assert await store.save_document() is True
        mock_repository.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failure_keeps_document_and_dirty_flag(self, store, mock_repository):
        mock_repository.save.side_effect = PersistenceError("disk full")
        store.update_personal(full_name="Jane Byrne")
        events = []
        store.subscribe(lambda event, s: events.append(event))

        assert await store.save_document() is False
        assert store.has_unsaved_changes
        assert store.error == "disk full"
        assert store.document.personal.full_name == "Jane Byrne"
        assert "save-failed" in events
        assert not store.is_saving

    @pytest.mark.asyncio
    async def test_concurrent_saves_coalesce(self, mock_repository):
        release = asyncio.Event()
        saved = []

        async def slow_save(document):
            saved.append(document)
            await release.wait()
            return True

        mock_repository.save.side_effect = slow_save
        store = DocumentStore(mock_repository)

        store.update_personal(full_name="Jane")
        first = asyncio.ensure_future(store.save_document())
        while not saved:
            await asyncio.sleep(0)
        store.update_personal(full_name="Jane Byrne")
        second = asyncio.ensure_future(store.save_document())
        await asyncio.sleep(0)

        # Only one repository call may be in flight
        assert len(saved) == 1
        release.set()
        assert await first is True
        assert await second is True

        assert len(saved) == 2
        assert saved[-1].personal.full_name == "Jane Byrne"
        assert not store.has_unsaved_changes

    @pytest.mark.asyncio
    async def test_edit_during_save_stays_dirty(self, mock_repository):
        release = asyncio.Event()

        started = asyncio.Event()

        async def slow_save(document):
            started.set()
            await release.wait()
            return True

        mock_repository.save.side_effect = slow_save
        store = DocumentStore(mock_repository)
        store.update_personal(full_name="Jane")
        task = asyncio.ensure_future(store.save_document())
        await started.wait()
        store.update_personal(full_name="Jane Byrne")
        release.set()
        assert await task is True
        assert store.has_unsaved_changes

    @pytest.mark.asyncio
    async def test_forced_save_writes_clean_document(self, store, mock_repository):
        store.reset_document()
        assert not store.has_unsaved_changes
        assert await store.save_document(force=True) is True
        assert mock_repository.save.await_args.args[0] is store.document


class TestLoadAndReset:
    @pytest.mark.asyncio
    async def test_load_replaces_document(self, store, mock_repository, jane_document):
        mock_repository.load.return_value = jane_document
        store.update_personal(title="Engineer")
        assert await store.load_document() is True
        assert store.document is jane_document
        assert not store.has_unsaved_changes

    @pytest.mark.asyncio
    async def test_load_not_found(self, store, mock_repository):
        mock_repository.load.side_effect = DocumentNotFoundError("none")
        before = store.document
        assert await store.load_document("missing") is False
        assert store.document is before
        assert store.error is None

    @pytest.mark.asyncio
    async def test_load_failure_sets_error(self, store, mock_repository):
        mock_repository.load.side_effect = PersistenceError("locked")
        assert await store.load_document() is False
        assert store.error == "locked"

    def test_reset_gives_blank_clean_document(self, store, experience_payload):
        store.add_experience(experience_payload)
        old_id = store.document.id
        events = []
        store.subscribe(lambda event, s: events.append(event))

        store.reset_document()

        assert store.document.id != old_id
        assert store.document.get_section("experience").items == ()
        assert not store.has_unsaved_changes
        assert events == ["reset"]


class TestExport:
    @pytest.mark.asyncio
    async def test_export_success(self, mock_repository, jane_document, tmp_path):
        result = ExportResult(tmp_path / "cv.pdf", "pdf", "dublin", 1234, 0.1)
        exporter = MagicMock()
        exporter.export = AsyncMock(return_value=result)
        store = DocumentStore(mock_repository, exporter=exporter, document=jane_document)

        assert await store.download_pdf() is True
        assert store.pdf_generation.progress == 100
        assert not store.pdf_generation.is_generating
        assert not store.has_unsaved_changes
        args = exporter.export.await_args
        assert args.args[0] is jane_document

    @pytest.mark.asyncio
    async def test_export_failure_records_error(self, mock_repository, jane_document):
        exporter = MagicMock()
        exporter.export = AsyncMock(side_effect=RenderError("engine missing"))
        store = DocumentStore(mock_repository, exporter=exporter, document=jane_document)

        assert await store.export("pdf") is None
        assert store.pdf_generation.error == "engine missing"
        assert store.document is jane_document

    @pytest.mark.asyncio
    async def test_export_without_exporter(self, store):
        assert await store.export() is None
        assert store.pdf_generation.error

    @pytest.mark.asyncio
    async def test_activity_is_logged(self, mock_repository):
        activity = MagicMock()
        store = DocumentStore(mock_repository, activity=activity, session_id="s1")
        store.update_personal(full_name="Jane Byrne")
        await store.save_document()
        log = activity.save_log.call_args.args[0]
        assert log.action == "save"
        assert log.session_id == "s1"
        assert log.success is True
