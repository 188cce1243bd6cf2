from __future__ import annotations

from typing import Any

from cv_builder.forms.base import DatedItemForm, parse_lines


class ExperienceForm(DatedItemForm):
    """Work experience; bullets are typed one per line."""

    section_type = "experience"
    fields = ("company", "role", "start", "end", "bullets")
    labels = {
        "company": "Company name",
        "role": "Job title/role",
        "start": "Start date",
        "end": "End date",
        "bullets": "Achievements/responsibilities",
    }
    required = ("company", "role", "start")

    def load(self, item: Any) -> None:
        super().load(item)
        self.values["bullets"] = "\n".join(item.bullets)

    def clean(self) -> dict[str, Any]:
        payload = super().clean()
        payload["bullets"] = parse_lines(self.values["bullets"])
        return payload
