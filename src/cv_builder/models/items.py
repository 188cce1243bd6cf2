"""Pydantic models for the list entries of each CV section."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from cv_builder.validation import rules
from cv_builder.validation.types import (
    Email,
    EndDate,
    IrishPhone,
    OptionalUrl,
    optional_text,
    optional_year_month,
    text,
    year_month,
)

StartDate = year_month("Start date")
IssueDate = year_month("Date")
ExpiryDate = optional_year_month("Expiry date")

CompanyName = text("Company name", 1, 100)
RoleName = text("Job title/role", 1, 100)
Bullet = text("Achievement/responsibility", 1, 500)
Institution = text("Institution name", 1, 100)
Degree = text("Degree/qualification name", 1, 100)
FieldOfStudy = text("Field of study", 1, 100)
Grade = optional_text("Grade", 50)
CertificationName = text("Certification name", 2, 150)
IssuerName = text("Issuer name", 2, 100)
CredentialId = optional_text("Credential ID", 100)
LanguageName = text("Language name", 2, 50)
LanguageCertification = optional_text("Certification", 100)
OrganizationName = text("Organization name", 2, 100)
VolunteerRole = text("Role", 2, 100)
VolunteerDescription = text("Description", 10, 300)
AwardName = text("Award name", 2, 150)
AwardDescription = optional_text("Description", 200)
PublicationTitle = text("Title", 2, 200)
PublicationName = text("Publication name", 2, 150)
Authors = optional_text("Authors", 200)
ReferenceName = text("Reference name", 2, 100)
ReferenceTitle = text("Reference title", 2, 100)
Relationship = optional_text("Relationship", 100)

Proficiency = Literal["native", "fluent", "professional", "intermediate", "basic"]

MAX_BULLETS = 8


def _check_range(end: str | None, info: ValidationInfo, start_field: str = "start") -> str | None:
    start = info.data.get(start_field)
    if not rules.date_range_ok(start, end):
        raise ValueError("End date must not be before start date")
    return end


class ExperienceItem(BaseModel):
    company: CompanyName
    role: RoleName
    start: StartDate  # YYYY-MM
    end: EndDate = None  # YYYY-MM | "Present"
    bullets: Annotated[tuple[Bullet, ...], Field(min_length=1, max_length=MAX_BULLETS)]

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("end")
    @classmethod
    def _end_not_before_start(cls, value: str | None, info: ValidationInfo) -> str | None:
        return _check_range(value, info)


class EducationItem(BaseModel):
    institution: Institution
    degree: Degree
    field: FieldOfStudy
    start: StartDate
    end: EndDate = None
    grade: Grade = None

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("end")
    @classmethod
    def _end_not_before_start(cls, value: str | None, info: ValidationInfo) -> str | None:
        return _check_range(value, info)


class CertificationItem(BaseModel):
    name: CertificationName
    issuer: IssuerName
    date: IssueDate
    expiry_date: ExpiryDate = None
    credential_id: CredentialId = None

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("expiry_date")
    @classmethod
    def _expiry_after_issue(cls, value: str | None, info: ValidationInfo) -> str | None:
        issued = info.data.get("date")
        if value is not None and issued and value <= issued:
            raise ValueError("Expiry date must be after issue date")
        return value


class LanguageItem(BaseModel):
    name: LanguageName
    proficiency: Proficiency
    certification: LanguageCertification = None

    model_config = {"frozen": True, "extra": "forbid"}


class VolunteerItem(BaseModel):
    organization: OrganizationName
    role: VolunteerRole
    start: StartDate
    end: EndDate = None
    description: VolunteerDescription

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("end")
    @classmethod
    def _end_not_before_start(cls, value: str | None, info: ValidationInfo) -> str | None:
        return _check_range(value, info)


class AwardItem(BaseModel):
    name: AwardName
    issuer: IssuerName
    date: IssueDate
    description: AwardDescription = None

    model_config = {"frozen": True, "extra": "forbid"}


class PublicationItem(BaseModel):
    title: PublicationTitle
    publication: PublicationName
    date: IssueDate
    url: OptionalUrl = None
    authors: Authors = None

    model_config = {"frozen": True, "extra": "forbid"}


class ReferenceItem(BaseModel):
    name: ReferenceName
    title: ReferenceTitle
    company: CompanyName
    email: Email
    phone: IrishPhone
    relationship: Relationship = None

    model_config = {"frozen": True, "extra": "forbid"}
