"""Document store: owns the live document and its transient editor state.

All mutations go through named methods that delegate to the pure functions
in ``cv_builder.operations``. Each one swaps in a new frozen snapshot and
bumps ``revision``; the document is dirty while ``revision`` is ahead of the
last revision that reached the repository.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from cv_builder import operations
from cv_builder.errors import (
    ConcurrencyViolation,
    DocumentNotFoundError,
    PersistenceError,
    RenderError,
)
from cv_builder.logging.models import ActivityLog
from cv_builder.models.document import CVDocument, create_default_document, utc_now

if TYPE_CHECKING:
    from cv_builder.logging.activity_store import ActivityStore
    from cv_builder.pipeline.export import ExportOrchestrator, ExportResult

logger = logging.getLogger(__name__)

Listener = Callable[[str, "DocumentStore"], None]


class Repository(Protocol):
    async def save(self, document: CVDocument) -> Any: ...

    async def load(self, document_id: str | None = None) -> CVDocument: ...


@dataclass
class PdfGenerationState:
    is_generating: bool = False
    progress: int = 0
    stage: str = ""
    error: str | None = None


class DocumentStore:
    """Single owner of the live ``CVDocument``.

    Listeners registered with :meth:`subscribe` receive an event name
    (``"change"``, ``"saving"``, ``"saved"``, ``"save-failed"``, ``"load"``,
    ``"reset"``, ``"export"``) and the store itself.
    """

    def __init__(
        self,
        repository: Repository,
        *,
        exporter: ExportOrchestrator | None = None,
        document: CVDocument | None = None,
        activity: ActivityStore | None = None,
        session_id: str = "anonymous",
    ):
        self._repository = repository
        self._exporter = exporter
        self._activity = activity
        self.session_id = session_id
        self._document = document or create_default_document()
        self._revision = 0
        self._saved_revision = 0
        self._listeners: list[Listener] = []
        self._save_task: asyncio.Task | None = None
        self._resave_requested = False

        self.is_saving = False
        self.error: str | None = None
        self.last_saved: datetime | None = None
        self.pdf_generation = PdfGenerationState()

    # --- state --------------------------------------------------------------

    @property
    def document(self) -> CVDocument:
        return self._document

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def has_unsaved_changes(self) -> bool:
        return self._revision != self._saved_revision

    def subscribe(self, callback: Listener) -> Callable[[], None]:
        """Register *callback*; returns a function that unregisters it."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self, event: str) -> None:
        for listener in list(self._listeners):
            listener(event, self)

    def _apply(self, operation: Callable[..., CVDocument], *args: Any) -> CVDocument:
        updated = operation(self._document, *args)
        if updated is not self._document:
            self._document = updated
            self._revision += 1
            self._notify("change")
        return updated

    def _mark_clean(self) -> None:
        self._revision += 1
        self._saved_revision = self._revision

    # --- personal, summary, skills -----------------------------------------

    def update_personal(self, **fields: Any) -> CVDocument:
        return self._apply(lambda doc: operations.update_personal(doc, **fields))

    def update_summary(self, markdown: str) -> CVDocument:
        return self._apply(operations.update_summary, markdown)

    def update_skills(self, items: list[str] | tuple[str, ...]) -> CVDocument:
        return self._apply(operations.update_skills, items)

    def add_skill(self, skill: str) -> CVDocument:
        return self._apply(operations.add_skill, skill)

    def remove_skill(self, index: int) -> CVDocument:
        return self._apply(operations.remove_skill, index)

    # --- list sections ------------------------------------------------------

    def add_item(self, section_type: str, payload: Any) -> CVDocument:
        return self._apply(operations.add_item, section_type, payload)

    def update_item(self, section_type: str, index: int, payload: Any) -> CVDocument:
        return self._apply(operations.update_item, section_type, index, payload)

    def remove_item(self, section_type: str, index: int) -> CVDocument:
        return self._apply(operations.remove_item, section_type, index)

    def move_item(self, section_type: str, from_index: int, to_index: int) -> CVDocument:
        return self._apply(operations.move_item, section_type, from_index, to_index)

    def add_experience(self, item: Any) -> CVDocument:
        return self.add_item("experience", item)

    def update_experience(self, index: int, item: Any) -> CVDocument:
        return self.update_item("experience", index, item)

    def remove_experience(self, index: int) -> CVDocument:
        return self.remove_item("experience", index)

    def add_education(self, item: Any) -> CVDocument:
        return self.add_item("education", item)

    def update_education(self, index: int, item: Any) -> CVDocument:
        return self.update_item("education", index, item)

    def remove_education(self, index: int) -> CVDocument:
        return self.remove_item("education", index)

    def add_certification(self, item: Any) -> CVDocument:
        return self.add_item("certifications", item)

    def update_certification(self, index: int, item: Any) -> CVDocument:
        return self.update_item("certifications", index, item)

    def remove_certification(self, index: int) -> CVDocument:
        return self.remove_item("certifications", index)

    def add_language(self, item: Any) -> CVDocument:
        return self.add_item("languages", item)

    def update_language(self, index: int, item: Any) -> CVDocument:
        return self.update_item("languages", index, item)

    def remove_language(self, index: int) -> CVDocument:
        return self.remove_item("languages", index)

    def add_volunteer(self, item: Any) -> CVDocument:
        return self.add_item("volunteer", item)

    def update_volunteer(self, index: int, item: Any) -> CVDocument:
        return self.update_item("volunteer", index, item)

    def remove_volunteer(self, index: int) -> CVDocument:
        return self.remove_item("volunteer", index)

    def add_award(self, item: Any) -> CVDocument:
        return self.add_item("awards", item)

    def update_award(self, index: int, item: Any) -> CVDocument:
        return self.update_item("awards", index, item)

    def remove_award(self, index: int) -> CVDocument:
        return self.remove_item("awards", index)

    def add_publication(self, item: Any) -> CVDocument:
        return self.add_item("publications", item)

    def update_publication(self, index: int, item: Any) -> CVDocument:
        return self.update_item("publications", index, item)

    def remove_publication(self, index: int) -> CVDocument:
        return self.remove_item("publications", index)

    def add_reference(self, item: Any) -> CVDocument:
        return self.add_item("references", item)

    def update_reference(self, index: int, item: Any) -> CVDocument:
        return self.update_item("references", index, item)

    def remove_reference(self, index: int) -> CVDocument:
        return self.remove_item("references", index)

    def set_references_mode(self, mode: str) -> CVDocument:
        return self._apply(operations.set_references_mode, mode)

    # --- layout -------------------------------------------------------------

    def toggle_section_visibility(self, section_type: str, visible: bool | None = None) -> CVDocument:
        """Flip a section's visibility, or set it when *visible* is given."""
        if visible is None:
            visible = not self._document.is_visible(section_type)
        return self._apply(operations.set_section_visibility, section_type, visible)

    def move_section(self, section_id: str, to_index: int) -> CVDocument:
        return self._apply(operations.move_section, section_id, to_index)

    def reorder_sections(self, from_index: int, to_index: int) -> CVDocument:
        return self._apply(operations.reorder_sections, from_index, to_index)

    def reset_section_order(self) -> CVDocument:
        return self._apply(operations.reset_section_order)

    def set_template(self, template_id: str) -> CVDocument:
        return self._apply(operations.set_template, template_id)

    # --- persistence --------------------------------------------------------

    def _ensure_no_save_in_flight(self) -> None:
        if self._save_task is not None and not self._save_task.done():
            raise ConcurrencyViolation("A save is already in flight")

    async def save_document(self, *, force: bool = False) -> bool:
        """Persist the latest snapshot; *force* writes it even when clean.

        A call made while a save is in flight does not start a second
        repository call: it asks the running save to go round once more
        with the newest snapshot and waits for that result.
        """
        try:
            self._ensure_no_save_in_flight()
        except ConcurrencyViolation:
            logger.debug("Save in flight, coalescing request")
            self._resave_requested = True
            return await asyncio.shield(self._save_task)

        if not self.has_unsaved_changes and not force:
            return True

        self._save_task = asyncio.ensure_future(self._save_loop())
        return await asyncio.shield(self._save_task)

    async def _save_loop(self) -> bool:
        self.is_saving = True
        self._notify("saving")
        try:
            while True:
                self._resave_requested = False
                snapshot, revision = self._document, self._revision
                started = time.monotonic()
                try:
                    await self._repository.save(snapshot)
                except PersistenceError as exc:
                    logger.warning("Save failed for %s: %s", snapshot.id, exc)
                    self.error = str(exc)
                    self._log_activity("save", snapshot, started, error=str(exc))
                    self._notify("save-failed")
                    return False

                # A reset during the save already moved the clean mark forward
                self._saved_revision = max(self._saved_revision, revision)
                self.last_saved = utc_now()
                self.error = None
                self._log_activity("save", snapshot, started)
                if not (self._resave_requested and self.has_unsaved_changes):
                    return True
        finally:
            self.is_saving = False
            self._notify("saved")

    async def load_document(self, document_id: str | None = None) -> bool:
        """Replace the live document with a stored one. False when nothing loaded."""
        started = time.monotonic()
        try:
            document = await self._repository.load(document_id)
        except DocumentNotFoundError:
            logger.info("No stored document for %s", document_id or "latest")
            return False
        except PersistenceError as exc:
            logger.warning("Load failed: %s", exc)
            self.error = str(exc)
            self._notify("save-failed")
            return False

        self._document = document
        self._mark_clean()
        self.error = None
        self._log_activity("load", document, started)
        self._notify("load")
        return True

    def reset_document(self) -> CVDocument:
        """Discard the live document for a blank one. Callers confirm first."""
        self._document = create_default_document()
        self._mark_clean()
        self.error = None
        self.pdf_generation = PdfGenerationState()
        self._log_activity("reset", self._document, time.monotonic())
        self._notify("reset")
        return self._document

    # --- export -------------------------------------------------------------

    def _on_progress(self, percent: int, stage: str) -> None:
        self.pdf_generation.progress = percent
        self.pdf_generation.stage = stage
        self._notify("export")

    async def export(
        self,
        fmt: str = "pdf",
        template_id: str | None = None,
        destination: str | Path | None = None,
    ) -> ExportResult | None:
        """Export the current snapshot. Leaves the dirty flag alone."""
        if self._exporter is None:
            self.pdf_generation.error = "No exporter configured"
            return None

        self.pdf_generation = PdfGenerationState(is_generating=True, stage="preparing")
        self._notify("export")
        snapshot = self._document
        started = time.monotonic()
        try:
            result = await self._exporter.export(
                snapshot,
                fmt,
                template_id=template_id,
                destination=destination,
                on_progress=self._on_progress,
            )
        except RenderError as exc:
            self.pdf_generation.is_generating = False
            self.pdf_generation.error = str(exc)
            self._log_activity("export", snapshot, started, error=str(exc), export_format=fmt)
            self._notify("export")
            return None

        self.pdf_generation.is_generating = False
        self.pdf_generation.progress = 100
        self._log_activity(
            "export",
            snapshot,
            started,
            export_format=fmt,
            template_id=result.template_id,
            bytes_written=result.size,
        )
        self._notify("export")
        return result

    async def download_pdf(
        self,
        template_id: str | None = None,
        destination: str | Path | None = None,
    ) -> bool:
        return await self.export("pdf", template_id=template_id, destination=destination) is not None

    # --- activity -----------------------------------------------------------

    def _log_activity(
        self,
        action: str,
        document: CVDocument,
        started: float,
        *,
        error: str | None = None,
        **fields: Any,
    ) -> None:
        if self._activity is None:
            return
        fields.setdefault("template_id", document.template_id)
        log = ActivityLog(
            session_id=self.session_id,
            action=action,
            document_id=document.id,
            elapsed_seconds=round(time.monotonic() - started, 3),
            success=error is None,
            error_message=error,
            **fields,
        )
        try:
            self._activity.save_log(log)
        except sqlite3.Error as exc:
            logger.warning("Could not record %s activity: %s", action, exc)
