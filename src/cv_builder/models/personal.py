"""Pydantic model for the personal details header."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, BeforeValidator

from cv_builder.validation.types import (
    DraftAddress,
    DraftEmail,
    DraftFullName,
    DraftIrishPhone,
    DraftTitle,
    OptionalLinkedIn,
    OptionalUrl,
    blank_to_none,
)

WorkPermit = Literal["eu-citizen", "stamp-1", "stamp-4", "critical-skills", "other"]


class PersonalInfo(BaseModel):
    """Always present and always rendered; blank fields are unfilled drafts."""

    full_name: DraftFullName = ""
    title: DraftTitle = ""
    email: DraftEmail = ""
    phone: DraftIrishPhone = ""  # +353 format
    address: DraftAddress = "Dublin, Ireland"
    linkedin: OptionalLinkedIn = None
    website: OptionalUrl = None
    work_permit: Annotated[WorkPermit | None, BeforeValidator(blank_to_none)] = None

    model_config = {"frozen": True, "extra": "forbid"}

    def contact_lines(self) -> list[str]:
        """Non-empty contact details in display order."""
        lines = [self.email, self.phone, self.address, self.linkedin, self.website]
        return [line for line in lines if line and line.strip()]

    @property
    def is_complete(self) -> bool:
        return all(
            value.strip()
            for value in (self.full_name, self.title, self.email, self.phone, self.address)
        )
