from __future__ import annotations

from typing import Any

from cv_builder.forms.base import SectionForm
from cv_builder.store import DocumentStore
from cv_builder.validation.rules import WORK_PERMITS, format_irish_phone


class PersonalInfoForm(SectionForm):
    section_type = "personal"
    fields = ("full_name", "title", "email", "phone", "address", "linkedin", "website", "work_permit")
    labels = {
        "full_name": "Full name",
        "title": "Professional title",
        "email": "Email",
        "phone": "Phone number",
        "address": "Address",
        "linkedin": "LinkedIn URL",
        "website": "Website",
        "work_permit": "Work permit status",
    }
    required = ("full_name", "title", "email", "phone", "address")
    choices = {"work_permit": WORK_PERMITS}

    def __init__(self, store: DocumentStore):
        super().__init__(store)
        personal = store.document.personal
        for name in self.fields:
            value = getattr(personal, name)
            self.values[name] = "" if value is None else value

    def clean(self) -> dict[str, Any]:
        payload = super().clean()
        if payload["phone"]:
            payload["phone"] = format_irish_phone(payload["phone"])
        payload["work_permit"] = payload["work_permit"].lower() or None
        return payload

    def commit(self, payload: dict[str, Any]) -> None:
        self.store.update_personal(**payload)
