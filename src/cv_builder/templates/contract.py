"""Section-iteration contract shared by every template.

Visibility and order are decided here, once, from the section registry.
Templates only choose where each block goes and how it is styled.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from cv_builder.models.document import CVDocument
from cv_builder.models.sections import section_is_empty
from cv_builder.registry import get_ordered_sections
from cv_builder.templates.tree import Entry, Header, SectionBlock

ON_REQUEST_TEXT = "References available upon request"

_WORK_PERMIT_LABELS = {
    "eu-citizen": "EU Citizen",
    "stamp-1": "Stamp 1 (General Employment Permit)",
    "stamp-4": "Stamp 4",
    "critical-skills": "Critical Skills Employment Permit",
    "other": "Other work authorisation",
}


def format_date_range(start: str | None, end: str | None) -> str:
    """``"2020-01 - 2021-06"`` or ``"2020-01 - Present"``; no end date shows the start alone."""
    if not start:
        return end or ""
    if not end:
        return start
    return f"{start} - {end}"


def _details(*values: str | None) -> tuple[str, ...]:
    return tuple(value for value in values if value)


def build_header(document: CVDocument) -> Header:
    personal = document.personal
    extras: tuple[str, ...] = ()
    if personal.work_permit:
        extras = (_WORK_PERMIT_LABELS.get(personal.work_permit, personal.work_permit),)
    return Header(
        name=personal.full_name,
        title=personal.title,
        contact=tuple(personal.contact_lines()),
        extras=extras,
    )


# --- type-specific block builders -----------------------------------------


def _summary(section: Any, heading: str) -> SectionBlock:
    return SectionBlock("summary", heading, "paragraph", text=section.markdown.strip())


def _skills(section: Any, heading: str) -> SectionBlock:
    return SectionBlock("skills", heading, "inline", text=", ".join(section.items))


def _experience(section: Any, heading: str) -> SectionBlock:
    entries = tuple(
        Entry(
            title=item.role,
            subtitle=item.company,
            dates=format_date_range(item.start, item.end),
            bullets=item.bullets,
        )
        for item in section.items
    )
    return SectionBlock("experience", heading, "entries", entries=entries)


def _education(section: Any, heading: str) -> SectionBlock:
    entries = tuple(
        Entry(
            title=f"{item.degree} in {item.field}",
            subtitle=item.institution,
            dates=format_date_range(item.start, item.end),
            details=_details(f"Grade: {item.grade}" if item.grade else None),
        )
        for item in section.items
    )
    return SectionBlock("education", heading, "entries", entries=entries)


def _certifications(section: Any, heading: str) -> SectionBlock:
    entries = tuple(
        Entry(
            title=item.name,
            subtitle=item.issuer,
            dates=item.date,
            details=_details(
                f"Expires {item.expiry_date}" if item.expiry_date else None,
                f"Credential ID: {item.credential_id}" if item.credential_id else None,
            ),
        )
        for item in section.items
    )
    return SectionBlock("certifications", heading, "entries", entries=entries)


def _languages(section: Any, heading: str) -> SectionBlock:
    entries = tuple(
        Entry(
            title=item.name,
            subtitle=item.proficiency.capitalize(),
            details=_details(item.certification),
        )
        for item in section.items
    )
    return SectionBlock("languages", heading, "entries", entries=entries)


def _volunteer(section: Any, heading: str) -> SectionBlock:
    entries = tuple(
        Entry(
            title=item.role,
            subtitle=item.organization,
            dates=format_date_range(item.start, item.end),
            details=(item.description,),
        )
        for item in section.items
    )
    return SectionBlock("volunteer", heading, "entries", entries=entries)


def _awards(section: Any, heading: str) -> SectionBlock:
    entries = tuple(
        Entry(
            title=item.name,
            subtitle=item.issuer,
            dates=item.date,
            details=_details(item.description),
        )
        for item in section.items
    )
    return SectionBlock("awards", heading, "entries", entries=entries)


def _publications(section: Any, heading: str) -> SectionBlock:
    entries = tuple(
        Entry(
            title=item.title,
            subtitle=item.publication,
            dates=item.date,
            details=_details(item.authors, item.url),
        )
        for item in section.items
    )
    return SectionBlock("publications", heading, "entries", entries=entries)


def _references(section: Any, heading: str) -> SectionBlock:
    if section.mode == "on-request":
        return SectionBlock("references", heading, "paragraph", text=ON_REQUEST_TEXT)
    entries = tuple(
        Entry(
            title=item.name,
            subtitle=f"{item.title}, {item.company}",
            details=_details(item.relationship, item.email, item.phone),
        )
        for item in section.items
    )
    return SectionBlock("references", heading, "entries", entries=entries)


_BUILDERS: dict[str, Callable[[Any, str], SectionBlock]] = {
    "summary": _summary,
    "experience": _experience,
    "education": _education,
    "skills": _skills,
    "certifications": _certifications,
    "languages": _languages,
    "volunteer": _volunteer,
    "awards": _awards,
    "publications": _publications,
    "references": _references,
}


def build_section_blocks(document: CVDocument) -> list[SectionBlock]:
    """Blocks for every visible, non-empty section, in display order."""
    blocks: list[SectionBlock] = []
    for entry in get_ordered_sections(document.section_visibility, document.section_order):
        builder = _BUILDERS.get(entry.id)
        if builder is None:
            continue  # personal lives in the header
        section = document.get_section(entry.id)
        if section is None or section_is_empty(section):
            continue
        blocks.append(builder(section, entry.label))
    return blocks
