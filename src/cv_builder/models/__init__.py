"""Data models for the CV document."""

from cv_builder.models.document import (
    CVDocument,
    create_default_document,
    deserialize_document,
    serialize_document,
)
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
from cv_builder.models.personal import PersonalInfo
from cv_builder.models.sections import (
    ITEM_MODELS,
    SECTION_CAPACITY,
    SECTION_TYPES,
    AwardsSection,
    CertificationsSection,
    EducationSection,
    ExperienceSection,
    LanguagesSection,
    PublicationsSection,
    ReferencesSection,
    Section,
    SkillsSection,
    SummarySection,
    VolunteerSection,
    section_is_empty,
)

__all__ = [
    "AwardItem",
    "AwardsSection",
    "CVDocument",
    "CertificationItem",
    "CertificationsSection",
    "EducationItem",
    "EducationSection",
    "ExperienceItem",
    "ExperienceSection",
    "ITEM_MODELS",
    "LanguageItem",
    "LanguagesSection",
    "PersonalInfo",
    "PublicationItem",
    "PublicationsSection",
    "ReferenceItem",
    "ReferencesSection",
    "SECTION_CAPACITY",
    "SECTION_TYPES",
    "Section",
    "SkillsSection",
    "SummarySection",
    "VolunteerItem",
    "VolunteerSection",
    "create_default_document",
    "deserialize_document",
    "section_is_empty",
    "serialize_document",
]
