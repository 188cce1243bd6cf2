"""Tests for SQLite document persistence."""

from __future__ import annotations

import sqlite3
from unittest.mock import patch

import pytest

from cv_builder import operations
from cv_builder.errors import DocumentNotFoundError, PersistenceError
from cv_builder.storage.document_repository import DocumentRepository


@pytest.fixture
def repository(tmp_path) -> DocumentRepository:
    return DocumentRepository(tmp_path / "documents.db", retry_attempts=2)


class TestDocumentRepository:
    @pytest.mark.asyncio
    async def test_round_trip(self, repository, full_document):
        assert await repository.save(full_document) is True
        loaded = await repository.load(full_document.id)
        assert loaded == full_document

    @pytest.mark.asyncio
    async def test_save_is_idempotent(self, repository, jane_document):
        assert await repository.save(jane_document) is True
        assert await repository.save(jane_document) is False
        assert len(await repository.list_documents()) == 1

    @pytest.mark.asyncio
    async def test_changed_content_is_written(self, repository, jane_document):
        await repository.save(jane_document)
        edited = operations.update_personal(jane_document, title="Staff Engineer")
        assert await repository.save(edited) is True
        loaded = await repository.load(jane_document.id)
        assert loaded.personal.title == "Staff Engineer"

    @pytest.mark.asyncio
    async def test_load_latest(self, repository, blank_document, jane_document):
        await repository.save(blank_document)
        await repository.save(jane_document)
        latest = await repository.load()
        assert latest.id == jane_document.id

    @pytest.mark.asyncio
    async def test_not_found(self, repository):
        with pytest.raises(DocumentNotFoundError):
            await repository.load()
        with pytest.raises(DocumentNotFoundError):
            await repository.load("missing")

    @pytest.mark.asyncio
    async def test_list_and_delete(self, repository, jane_document):
        await repository.save(jane_document)
        listed = await repository.list_documents()
        assert listed[0].full_name == "Jane Byrne"
        assert await repository.delete(jane_document.id) is True
        assert await repository.delete(jane_document.id) is False

    def test_corrupt_row(self, repository, jane_document):
        repository.save_sync(jane_document)
        with sqlite3.connect(str(repository.db_path)) as conn:
            conn.execute("UPDATE documents SET content_json = '{not json'")
        with pytest.raises(PersistenceError, match="corrupt"):
            repository.load_sync(jane_document.id)

    def test_locked_database_is_retried_then_wrapped(self, repository, jane_document):
        calls = []

        def locked(document):
            calls.append(document)
            raise sqlite3.OperationalError("database is locked")

        with patch.object(repository, "_save", side_effect=locked):
            with pytest.raises(PersistenceError, match="locked"):
                repository.save_sync(jane_document)
        assert len(calls) == 2
