"""Annotated pydantic field types built from the rules in ``rules.py``.

Each factory returns an ``Annotated`` type whose validator raises
``ValueError`` with a user-facing message. The document models use these
types so the same checks run whether a payload comes from a form, the CLI or
a stored document.
"""

from __future__ import annotations

from typing import Annotated, Any, Callable

from pydantic import AfterValidator, BeforeValidator

from cv_builder.validation import rules

SUMMARY_MIN_LENGTH = 50
SUMMARY_MAX_LENGTH = 1000
SKILL_MIN_LENGTH = 2
SKILL_MAX_LENGTH = 50


def blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _length_check(label: str, min_length: int, max_length: int) -> Callable[[str], str]:
    def _check(value: str) -> str:
        if len(value.strip()) < min_length:
            if min_length <= 1:
                raise ValueError(f"{label} is required")
            raise ValueError(f"{label} must be at least {min_length} characters")
        if len(value) > max_length:
            raise ValueError(f"{label} must be at most {max_length} characters")
        return value

    return _check


def text(label: str, min_length: int = 1, max_length: int = 100) -> Any:
    """Required string with length bounds."""
    return Annotated[str, AfterValidator(_length_check(label, min_length, max_length))]


def optional_text(label: str, max_length: int = 100) -> Any:
    """Optional string; blank input is stored as None."""

    def _check(value: str | None) -> str | None:
        if value is not None and len(value) > max_length:
            raise ValueError(f"{label} must be at most {max_length} characters")
        return value

    return Annotated[str | None, BeforeValidator(blank_to_none), AfterValidator(_check)]


def year_month(label: str) -> Any:
    def _check(value: str) -> str:
        if not rules.is_year_month(value):
            raise ValueError(f"{label} must be in YYYY-MM format")
        return value

    return Annotated[str, AfterValidator(_check)]


def optional_year_month(label: str) -> Any:
    def _check(value: str | None) -> str | None:
        if value is not None and not rules.is_year_month(value):
            raise ValueError(f"{label} must be in YYYY-MM format")
        return value

    return Annotated[str | None, BeforeValidator(blank_to_none), AfterValidator(_check)]


def _end_date_check(value: str | None) -> str | None:
    if value is not None and not rules.is_end_date(value):
        raise ValueError('End date must be in YYYY-MM format or "Present"')
    return value


def _irish_phone_check(value: str) -> str:
    if not rules.is_irish_phone(value):
        raise ValueError(
            "Please enter a valid Irish phone number "
            "(+353 8X XXX XXXX mobile or +353 1 XXX XXXX landline)"
        )
    return value


def _email_check(value: str) -> str:
    if not rules.is_email(value):
        raise ValueError("Please enter a valid email address")
    if len(value) > 100:
        raise ValueError("Email must be at most 100 characters")
    return value


def _url_check(value: str | None) -> str | None:
    if value is not None and not rules.is_http_url(value):
        raise ValueError("Must be a valid http(s) URL")
    return value


def _linkedin_check(value: str | None) -> str | None:
    if value is not None and not rules.is_linkedin_url(value):
        raise ValueError("Must be a LinkedIn profile URL")
    return value


def _summary_check(value: str) -> str:
    length = len(value.strip())
    if length == 0:
        return value
    if length < SUMMARY_MIN_LENGTH:
        raise ValueError(
            f"Professional summary must be at least {SUMMARY_MIN_LENGTH} characters"
        )
    if length > SUMMARY_MAX_LENGTH:
        raise ValueError(
            f"Professional summary must be at most {SUMMARY_MAX_LENGTH} characters"
        )
    return value


def _when_filled(check: Callable[[str], str]) -> Callable[[str], str]:
    """Skip *check* for blank drafts of the personal record."""

    def _wrapped(value: str) -> str:
        if not value.strip():
            return value
        return check(value)

    return _wrapped


def _name_check(value: str) -> str:
    if not rules.is_person_name(value):
        raise ValueError(
            "Full name can only contain letters, spaces, hyphens, apostrophes, and periods"
        )
    return value


def _address_check(value: str) -> str:
    if not rules.has_irish_locality(value):
        raise ValueError('Address must include Dublin or Ireland (e.g. "Dublin 2, Ireland")')
    return value


EndDate = Annotated[str | None, BeforeValidator(blank_to_none), AfterValidator(_end_date_check)]
IrishPhone = Annotated[str, AfterValidator(_irish_phone_check)]
Email = Annotated[str, AfterValidator(_email_check)]
OptionalUrl = Annotated[str | None, BeforeValidator(blank_to_none), AfterValidator(_url_check)]
OptionalLinkedIn = Annotated[
    str | None, BeforeValidator(blank_to_none), AfterValidator(_linkedin_check)
]
SummaryText = Annotated[str, AfterValidator(_summary_check)]
SkillName = text("Skill", SKILL_MIN_LENGTH, SKILL_MAX_LENGTH)

# Personal record fields: blank while the user has not filled them in yet
DraftFullName = Annotated[
    str,
    AfterValidator(_when_filled(_length_check("Full name", 2, 100))),
    AfterValidator(_when_filled(_name_check)),
]
DraftTitle = Annotated[str, AfterValidator(_when_filled(_length_check("Professional title", 2, 150)))]
DraftEmail = Annotated[str, AfterValidator(_when_filled(_email_check))]
DraftIrishPhone = Annotated[str, AfterValidator(_when_filled(_irish_phone_check))]
DraftAddress = Annotated[
    str,
    AfterValidator(_when_filled(_length_check("Address", 5, 200))),
    AfterValidator(_when_filled(_address_check)),
]
