from __future__ import annotations

from typing import Any

from cv_builder.forms.base import ItemForm
from cv_builder.operations import REFERENCE_MODES
from cv_builder.validation.rules import format_irish_phone


class ReferenceForm(ItemForm):
    """A detailed reference contact; the section mode is set separately."""

    section_type = "references"
    fields = ("name", "title", "company", "email", "phone", "relationship")
    labels = {
        "name": "Reference name",
        "title": "Reference title",
        "company": "Company name",
        "email": "Email",
        "phone": "Phone number",
        "relationship": "Relationship",
    }
    required = ("name", "title", "company", "email", "phone")

    def clean(self) -> dict[str, Any]:
        payload = super().clean()
        if payload["phone"]:
            payload["phone"] = format_irish_phone(payload["phone"])
        return payload

    def set_mode(self, mode: str) -> bool:
        """Switch between "on-request" and "detailed"; False for an unknown mode."""
        if mode not in REFERENCE_MODES:
            self.errors = {"mode": [f"References mode must be one of {', '.join(REFERENCE_MODES)}"]}
            return False
        self.errors = {}
        self.store.set_references_mode(mode)
        return True
