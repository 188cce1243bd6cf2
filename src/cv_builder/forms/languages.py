from __future__ import annotations

from typing import Any

from cv_builder.forms.base import ItemForm
from cv_builder.validation.rules import PROFICIENCY_LEVELS


class LanguageForm(ItemForm):
    section_type = "languages"
    fields = ("name", "proficiency", "certification")
    labels = {
        "name": "Language name",
        "proficiency": "Proficiency",
        "certification": "Certification",
    }
    required = ("name", "proficiency")
    choices = {"proficiency": PROFICIENCY_LEVELS}

    def clean(self) -> dict[str, Any]:
        payload = super().clean()
        payload["proficiency"] = payload["proficiency"].lower()
        return payload
