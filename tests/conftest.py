"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from cv_builder import operations
from cv_builder.models.document import CVDocument, create_default_document
from cv_builder.store import DocumentStore


@pytest.fixture
def experience_payload() -> dict:
    return {
        "company": "Acme",
        "role": "Engineer",
        "start": "2020-01",
        "end": "Present",
        "bullets": ["Shipped X"],
    }


@pytest.fixture
def education_payload() -> dict:
    return {
        "institution": "Trinity College Dublin",
        "degree": "BSc",
        "field": "Computer Science",
        "start": "2014-09",
        "end": "2018-06",
        "grade": "First Class Honours",
    }


@pytest.fixture
def language_payload() -> dict:
    return {"name": "Irish", "proficiency": "fluent"}


@pytest.fixture
def blank_document() -> CVDocument:
    return create_default_document()


@pytest.fixture
def jane_document(experience_payload) -> CVDocument:
    """Jane Byrne: one experience entry and two skills, nothing else filled in."""
    doc = create_default_document()
    doc = operations.update_personal(doc, full_name="Jane Byrne")
    doc = operations.add_item(doc, "experience", experience_payload)
    doc = operations.update_skills(doc, ["TypeScript", "React"])
    return doc


@pytest.fixture
def full_document(jane_document, education_payload, language_payload) -> CVDocument:
    """Every section has content and every section is visible."""
    doc = operations.update_personal(
        jane_document,
        title="Senior Software Engineer",
        email="jane.byrne@example.ie",
        phone="+353 87 123 4567",
        address="Dublin 2, Ireland",
        linkedin="https://www.linkedin.com/in/janebyrne",
        work_permit="eu-citizen",
    )
    doc = operations.update_summary(
        doc,
        "Engineer with **eight years** of experience building web platforms "
        "for Irish fintech companies.",
    )
    doc = operations.add_item(doc, "education", education_payload)
    doc = operations.add_item(doc, "certifications", {
        "name": "AWS Solutions Architect",
        "issuer": "Amazon Web Services",
        "date": "2022-03",
        "expiry_date": "2025-03",
        "credential_id": "AWS-123",
    })
    doc = operations.add_item(doc, "languages", language_payload)
    doc = operations.add_item(doc, "volunteer", {
        "organization": "CoderDojo",
        "role": "Mentor",
        "start": "2019-01",
        "description": "Teaching children to code on Saturday mornings",
    })
    doc = operations.add_item(doc, "awards", {
        "name": "Engineer of the Year",
        "issuer": "Acme",
        "date": "2023-12",
    })
    doc = operations.add_item(doc, "publications", {
        "title": "Scaling payments in Ireland",
        "publication": "Irish Tech News",
        "date": "2021-05",
        "url": "https://irishtechnews.ie/scaling-payments",
    })
    doc = operations.set_references_mode(doc, "detailed")
    doc = operations.add_item(doc, "references", {
        "name": "Mary Murphy",
        "title": "CTO",
        "company": "Acme",
        "email": "mary@acme.ie",
        "phone": "+353 1 234 5678",
    })
    for section_type in ("languages", "volunteer", "awards", "publications", "references"):
        doc = operations.set_section_visibility(doc, section_type, True)
    return doc


@pytest.fixture
def mock_repository() -> AsyncMock:
    repo = AsyncMock()
    repo.save.return_value = True
    return repo


@pytest.fixture
def store(mock_repository) -> DocumentStore:
    return DocumentStore(mock_repository)
