"""Section variants of a CV document, discriminated by ``type``."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from cv_builder.models.items import (
    AwardItem,
    CertificationItem,
    EducationItem,
    ExperienceItem,
    LanguageItem,
    PublicationItem,
    ReferenceItem,
    VolunteerItem,
)
from cv_builder.validation.types import SkillName, SummaryText

SectionType = Literal[
    "summary",
    "experience",
    "education",
    "skills",
    "certifications",
    "languages",
    "volunteer",
    "awards",
    "publications",
    "references",
]

SECTION_TYPES: tuple[str, ...] = (
    "summary",
    "experience",
    "education",
    "skills",
    "certifications",
    "languages",
    "volunteer",
    "awards",
    "publications",
    "references",
)

# Upper bound on entries per list section, enforced on every mutation
SECTION_CAPACITY: dict[str, int] = {
    "experience": 10,
    "education": 5,
    "skills": 20,
    "certifications": 10,
    "languages": 8,
    "volunteer": 5,
    "awards": 6,
    "publications": 10,
    "references": 4,
}

ITEM_MODELS: dict[str, type[BaseModel]] = {
    "experience": ExperienceItem,
    "education": EducationItem,
    "certifications": CertificationItem,
    "languages": LanguageItem,
    "volunteer": VolunteerItem,
    "awards": AwardItem,
    "publications": PublicationItem,
    "references": ReferenceItem,
}

ReferencesMode = Literal["on-request", "detailed"]

_FROZEN = {"frozen": True, "extra": "forbid"}


class SummarySection(BaseModel):
    type: Literal["summary"] = "summary"
    markdown: SummaryText = ""  # markdown-lite

    model_config = _FROZEN


class ExperienceSection(BaseModel):
    type: Literal["experience"] = "experience"
    items: Annotated[tuple[ExperienceItem, ...], Field(max_length=SECTION_CAPACITY["experience"])] = ()

    model_config = _FROZEN


class EducationSection(BaseModel):
    type: Literal["education"] = "education"
    items: Annotated[tuple[EducationItem, ...], Field(max_length=SECTION_CAPACITY["education"])] = ()

    model_config = _FROZEN


class SkillsSection(BaseModel):
    type: Literal["skills"] = "skills"
    items: Annotated[tuple[SkillName, ...], Field(max_length=SECTION_CAPACITY["skills"])] = ()

    model_config = _FROZEN


class CertificationsSection(BaseModel):
    type: Literal["certifications"] = "certifications"
    items: Annotated[
        tuple[CertificationItem, ...], Field(max_length=SECTION_CAPACITY["certifications"])
    ] = ()

    model_config = _FROZEN


class LanguagesSection(BaseModel):
    type: Literal["languages"] = "languages"
    items: Annotated[tuple[LanguageItem, ...], Field(max_length=SECTION_CAPACITY["languages"])] = ()

    model_config = _FROZEN


class VolunteerSection(BaseModel):
    type: Literal["volunteer"] = "volunteer"
    items: Annotated[tuple[VolunteerItem, ...], Field(max_length=SECTION_CAPACITY["volunteer"])] = ()

    model_config = _FROZEN


class AwardsSection(BaseModel):
    type: Literal["awards"] = "awards"
    items: Annotated[tuple[AwardItem, ...], Field(max_length=SECTION_CAPACITY["awards"])] = ()

    model_config = _FROZEN


class PublicationsSection(BaseModel):
    type: Literal["publications"] = "publications"
    items: Annotated[
        tuple[PublicationItem, ...], Field(max_length=SECTION_CAPACITY["publications"])
    ] = ()

    model_config = _FROZEN


class ReferencesSection(BaseModel):
    type: Literal["references"] = "references"
    mode: ReferencesMode = "on-request"
    items: Annotated[tuple[ReferenceItem, ...], Field(max_length=SECTION_CAPACITY["references"])] = ()

    model_config = _FROZEN


Section = Annotated[
    Union[
        SummarySection,
        ExperienceSection,
        EducationSection,
        SkillsSection,
        CertificationsSection,
        LanguagesSection,
        VolunteerSection,
        AwardsSection,
        PublicationsSection,
        ReferencesSection,
    ],
    Field(discriminator="type"),
]

SECTION_MODELS: dict[str, type[BaseModel]] = {
    "summary": SummarySection,
    "experience": ExperienceSection,
    "education": EducationSection,
    "skills": SkillsSection,
    "certifications": CertificationsSection,
    "languages": LanguagesSection,
    "volunteer": VolunteerSection,
    "awards": AwardsSection,
    "publications": PublicationsSection,
    "references": ReferencesSection,
}


def empty_section(section_type: str) -> BaseModel:
    """A fresh, empty section of the given type."""
    return SECTION_MODELS[section_type]()


def section_is_empty(section: BaseModel) -> bool:
    """True when a section has nothing to render.

    References in ``on-request`` mode are never empty: they render the
    "available upon request" line.
    """
    if isinstance(section, SummarySection):
        return not section.markdown.strip()
    if isinstance(section, ReferencesSection):
        return section.mode == "detailed" and not section.items
    return not section.items
