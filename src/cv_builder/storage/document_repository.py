"""SQLite persistence for CV documents.

Saves are idempotent: writing the same content twice leaves one row and
reports that nothing changed. Blocking sqlite calls run in a worker thread
so the event loop driving the editor never waits on disk.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from cv_builder.errors import DocumentNotFoundError, PersistenceError
from cv_builder.models.document import CVDocument, deserialize_document, serialize_document

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".cv-builder" / "documents.db"


@dataclass(frozen=True)
class StoredDocument:
    """Listing row: enough to pick a document without loading it."""

    id: str
    full_name: str
    template_id: str | None
    updated_at: datetime


class DocumentRepository:
    """SQLite-backed document store with WAL mode and retried writes."""

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH, retry_attempts: int = 3):
        self.db_path = Path(db_path)
        self.retry_attempts = retry_attempts
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path), timeout=5.0)
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS documents (
                    id TEXT PRIMARY KEY,
                    full_name TEXT NOT NULL DEFAULT '',
                    template_id TEXT,
                    content_json TEXT NOT NULL,
                    content_hash TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_exponential(multiplier=0.05, max=1),
            retry=retry_if_exception_type(sqlite3.OperationalError),
            reraise=True,
        )

    def _run(self, func, *args):
        """Run *func* with retries on transient sqlite errors (locked database)."""
        try:
            for attempt in self._retrying():
                with attempt:
                    return func(*args)
        except sqlite3.Error as exc:
            logger.error("Document storage failed: %s", exc)
            raise PersistenceError(f"Document storage failed: {exc}") from exc

    # --- sync API ---------------------------------------------------------

    def save_sync(self, document: CVDocument) -> bool:
        """Persist *document*. Returns False when the stored copy was identical."""
        return self._run(self._save, document)

    def load_sync(self, document_id: str | None = None) -> CVDocument:
        """Load by id, or the most recently updated document when id is None."""
        return self._run(self._load, document_id)

    def list_sync(self, limit: int = 20) -> list[StoredDocument]:
        return self._run(self._list, limit)

    def delete_sync(self, document_id: str) -> bool:
        return self._run(self._delete, document_id)

    # --- async API (the store's collaborator contract) ---------------------

    async def save(self, document: CVDocument) -> bool:
        return await asyncio.to_thread(self.save_sync, document)

    async def load(self, document_id: str | None = None) -> CVDocument:
        return await asyncio.to_thread(self.load_sync, document_id)

    async def list_documents(self, limit: int = 20) -> list[StoredDocument]:
        return await asyncio.to_thread(self.list_sync, limit)

    async def delete(self, document_id: str) -> bool:
        return await asyncio.to_thread(self.delete_sync, document_id)

    # --- sqlite ------------------------------------------------------------

    def _save(self, document: CVDocument) -> bool:
        # Hash the content without the timestamp so re-saving unchanged
        # content is a no-op even if updated_at moved.
        content_hash = hashlib.sha256(
            document.model_dump_json(exclude={"updated_at"}).encode("utf-8")
        ).hexdigest()
        with self._connect() as conn:
            row = conn.execute(
                "SELECT content_hash FROM documents WHERE id = ?", (document.id,)
            ).fetchone()
            if row is not None and row[0] == content_hash:
                logger.debug("Document %s unchanged, skipping write", document.id)
                return False
            conn.execute(
                """INSERT OR REPLACE INTO documents
                   (id, full_name, template_id, content_json, content_hash, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (
                    document.id,
                    document.personal.full_name,
                    document.template_id,
                    serialize_document(document),
                    content_hash,
                    document.updated_at.isoformat(),
                ),
            )
        logger.info("Saved document %s", document.id)
        return True

    def _load(self, document_id: str | None) -> CVDocument:
        with self._connect() as conn:
            if document_id is None:
                row = conn.execute(
                    "SELECT content_json FROM documents ORDER BY updated_at DESC LIMIT 1"
                ).fetchone()
            else:
                row = conn.execute(
                    "SELECT content_json FROM documents WHERE id = ?", (document_id,)
                ).fetchone()
        if row is None:
            raise DocumentNotFoundError(
                "No saved document" if document_id is None else f"Document {document_id} not found"
            )
        try:
            return deserialize_document(row[0])
        except ValueError as exc:
            raise PersistenceError(f"Stored document is corrupt: {exc}") from exc

    def _list(self, limit: int) -> list[StoredDocument]:
        with self._connect() as conn:
            rows = conn.execute(
                """SELECT id, full_name, template_id, updated_at FROM documents
                   ORDER BY updated_at DESC LIMIT ?""",
                (limit,),
            ).fetchall()
        return [
            StoredDocument(row[0], row[1], row[2], datetime.fromisoformat(row[3]))
            for row in rows
        ]

    def _delete(self, document_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM documents WHERE id = ?", (document_id,))
            return cursor.rowcount > 0
