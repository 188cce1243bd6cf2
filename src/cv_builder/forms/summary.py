from __future__ import annotations

from cv_builder.forms.base import SectionForm
from cv_builder.store import DocumentStore
from cv_builder.validation.types import SUMMARY_MAX_LENGTH, SUMMARY_MIN_LENGTH


class SummaryForm(SectionForm):
    """Professional summary; empty clears the section, otherwise 50-1000 characters."""

    section_type = "summary"
    fields = ("markdown",)
    labels = {"markdown": "Professional summary"}

    def __init__(self, store: DocumentStore):
        super().__init__(store)
        self.values["markdown"] = store.document.get_section("summary").markdown

    @property
    def character_count(self) -> int:
        return len(self.values["markdown"].strip())

    @property
    def remaining(self) -> int:
        return SUMMARY_MAX_LENGTH - self.character_count

    @property
    def is_long_enough(self) -> bool:
        return self.character_count == 0 or self.character_count >= SUMMARY_MIN_LENGTH

    def clean(self) -> str:
        return self.values["markdown"].strip()

    def commit(self, payload: str) -> None:
        self.store.update_summary(payload)
