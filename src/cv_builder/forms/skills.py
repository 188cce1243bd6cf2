from __future__ import annotations

from cv_builder.forms.base import SectionForm, parse_list
from cv_builder.store import DocumentStore


class SkillsForm(SectionForm):
    """Skills typed as one comma- or newline-separated list."""

    section_type = "skills"
    fields = ("skills",)
    labels = {"skills": "Skills"}

    def __init__(self, store: DocumentStore):
        super().__init__(store)
        self.values["skills"] = ", ".join(store.document.get_section("skills").items)

    def clean(self) -> list[str]:
        # Case-insensitive de-duplication, first spelling wins
        seen: set[str] = set()
        skills: list[str] = []
        for skill in parse_list(self.values["skills"]):
            if skill.lower() not in seen:
                seen.add(skill.lower())
                skills.append(skill)
        return skills

    def commit(self, payload: list[str]) -> None:
        self.store.update_skills(payload)
