"""Builder session: wires the store, autosave, exporter and activity log."""

from __future__ import annotations

import logging
from collections.abc import Callable

from cv_builder.config import AppConfig
from cv_builder.export.service import PdfRenderService
from cv_builder.logging.activity_store import ActivityStore
from cv_builder.models.document import CVDocument
from cv_builder.pipeline.autosave import AutosaveController
from cv_builder.pipeline.export import ExportOrchestrator
from cv_builder.storage.document_repository import DocumentRepository
from cv_builder.store import DocumentStore

logger = logging.getLogger(__name__)

LEAVE_PROMPT = "You have unsaved changes. Leave and discard them?"
RESET_PROMPT = "Reset the CV? Unsaved changes will be lost."

Confirm = Callable[[str], bool]


class BuilderSession:
    """One editing session over one live document."""

    def __init__(
        self,
        store: DocumentStore,
        *,
        autosave: AutosaveController | None = None,
        activity: ActivityStore | None = None,
    ):
        self.store = store
        self.autosave = autosave
        self.activity = activity

    @classmethod
    def from_config(cls, config: AppConfig, *, session_id: str = "anonymous") -> BuilderSession:
        repository = DocumentRepository(
            config.storage.resolved_db_path,
            retry_attempts=config.storage.retry_attempts,
        )
        activity = ActivityStore(config.activity.resolved_db_path) if config.activity.enabled else None
        exporter = ExportOrchestrator(
            PdfRenderService(),
            output_dir=config.export.resolved_output_dir,
            default_template=config.export.default_template,
        )
        store = DocumentStore(
            repository, exporter=exporter, activity=activity, session_id=session_id
        )
        autosave = AutosaveController(store, config.autosave)
        return cls(store, autosave=autosave, activity=activity)

    @property
    def document(self) -> CVDocument:
        return self.store.document

    async def open(self, document_id: str | None = None) -> bool:
        """Load a stored document (the latest by default); keep the blank one otherwise."""
        loaded = await self.store.load_document(document_id)
        if not loaded and document_id is None:
            logger.info("Starting a new CV")
        return loaded

    async def save(self) -> bool:
        if self.autosave is not None:
            return await self.autosave.save_now()
        return await self.store.save_document()

    async def request_leave(self, confirm: Confirm) -> bool:
        """True when the session may end. Prompts only if there are unsaved changes."""
        if self.store.has_unsaved_changes and not confirm(LEAVE_PROMPT):
            return False
        await self.close()
        return True

    def request_reset(self, confirm: Confirm) -> bool:
        """Reset to a blank document. Prompts only if there are unsaved changes."""
        if self.store.has_unsaved_changes and not confirm(RESET_PROMPT):
            return False
        self.store.reset_document()
        return True

    async def close(self) -> None:
        if self.autosave is not None:
            await self.autosave.close()
