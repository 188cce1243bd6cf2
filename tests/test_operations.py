"""Tests for the pure document operations."""

from __future__ import annotations

import pytest

from cv_builder import operations
from cv_builder.errors import ValidationError
from cv_builder.registry import resolve_order


class TestExperience:
    def test_end_before_start_rejected(self, blank_document, experience_payload):
        payload = {**experience_payload, "start": "2022-01", "end": "2021-01"}
        with pytest.raises(ValidationError) as exc_info:
            operations.add_item(blank_document, "experience", payload)
        assert "End date must not be before start date" in exc_info.value.messages_for("end")

    def test_present_end_accepted(self, blank_document, experience_payload):
        doc = operations.add_item(
            blank_document, "experience", {**experience_payload, "start": "2022-01"}
        )
        assert doc.get_section("experience").items[0].end == "Present"

    def test_input_document_untouched(self, blank_document, experience_payload):
        operations.add_item(blank_document, "experience", experience_payload)
        assert blank_document.get_section("experience").items == ()

    def test_updated_at_moves(self, blank_document, experience_payload):
        doc = operations.add_item(blank_document, "experience", experience_payload)
        assert doc.updated_at >= blank_document.updated_at

    def test_update_and_remove(self, jane_document, experience_payload):
        doc = operations.update_item(
            jane_document, "experience", 0, {**experience_payload, "company": "Globex"}
        )
        assert doc.get_section("experience").items[0].company == "Globex"
        doc = operations.remove_item(doc, "experience", 0)
        assert doc.get_section("experience").items == ()

    def test_bad_index(self, jane_document, experience_payload):
        with pytest.raises(ValidationError) as exc_info:
            operations.update_item(jane_document, "experience", 3, experience_payload)
        assert exc_info.value.fields == ["index"]

    def test_move_item(self, jane_document, experience_payload):
        doc = operations.add_item(
            jane_document, "experience", {**experience_payload, "company": "Globex"}
        )
        doc = operations.move_item(doc, "experience", 1, 0)
        assert [i.company for i in doc.get_section("experience").items] == ["Globex", "Acme"]


class TestCapacity:
    def test_ninth_language_rejected(self, blank_document):
        doc = blank_document
        for i in range(8):
            doc = operations.add_item(doc, "languages", {"name": f"Language {i}", "proficiency": "basic"})
        assert len(doc.get_section("languages").items) == 8

        with pytest.raises(ValidationError) as exc_info:
            operations.add_item(doc, "languages", {"name": "Irish", "proficiency": "native"})
        assert exc_info.value.messages_for("items") == ["Maximum 8 languages allowed"]

    def test_capacity_checked_before_payload(self, blank_document):
        doc = blank_document
        for i in range(6):
            doc = operations.add_item(doc, "awards", {"name": f"Award {i}", "issuer": "Acme", "date": "2020-01"})
        with pytest.raises(ValidationError) as exc_info:
            operations.add_item(doc, "awards", {})
        assert exc_info.value.fields == ["items"]

    def test_twenty_first_skill_rejected(self, blank_document):
        doc = operations.update_skills(blank_document, [f"Skill {i}" for i in range(20)])
        with pytest.raises(ValidationError):
            operations.add_skill(doc, "One more")


class TestSkillsAndSummary:
    def test_add_and_remove_skill(self, blank_document):
        doc = operations.add_skill(blank_document, "Python")
        doc = operations.add_item(doc, "skills", "SQL")
        assert doc.get_section("skills").items == ("Python", "SQL")
        doc = operations.remove_item(doc, "skills", 0)
        assert doc.get_section("skills").items == ("SQL",)

    def test_summary_too_short(self, blank_document):
        with pytest.raises(ValidationError):
            operations.update_summary(blank_document, "Short")

    def test_summary_cleared(self, full_document):
        doc = operations.update_summary(full_document, "")
        assert doc.get_section("summary").markdown == ""


class TestPersonal:
    def test_update_merges_fields(self, jane_document):
        doc = operations.update_personal(jane_document, title="Engineer")
        assert doc.personal.full_name == "Jane Byrne"
        assert doc.personal.title == "Engineer"

    def test_invalid_phone_leaves_document(self, jane_document):
        with pytest.raises(ValidationError) as exc_info:
            operations.update_personal(jane_document, phone="555-1234", title="Engineer")
        assert exc_info.value.fields == ["phone"]
        assert jane_document.personal.title == ""

    def test_unknown_field(self, jane_document):
        with pytest.raises(ValidationError):
            operations.update_personal(jane_document, nickname="JB")


class TestVisibilityAndOrder:
    def test_hide_and_show(self, blank_document):
        doc = operations.set_section_visibility(blank_document, "experience", False)
        assert doc.is_visible("experience") is False
        doc = operations.set_section_visibility(doc, "experience", True)
        assert doc.is_visible("experience") is True

    def test_personal_cannot_be_hidden(self, blank_document):
        with pytest.raises(ValidationError):
            operations.set_section_visibility(blank_document, "personal", False)
        assert operations.set_section_visibility(blank_document, "personal", True) is blank_document

    def test_unknown_section(self, blank_document):
        with pytest.raises(ValidationError):
            operations.set_section_visibility(blank_document, "hobbies", False)

    def test_move_section(self, blank_document):
        doc = operations.move_section(blank_document, "skills", 1)
        assert resolve_order(doc.section_order)[:3] == ["personal", "skills", "summary"]

    def test_personal_is_pinned(self, blank_document):
        with pytest.raises(ValidationError):
            operations.move_section(blank_document, "skills", 0)
        with pytest.raises(ValidationError):
            operations.reorder_sections(blank_document, 0, 3)

    def test_reset_section_order(self, blank_document):
        doc = operations.move_section(blank_document, "skills", 1)
        assert operations.reset_section_order(doc).section_order is None


class TestReferencesAndTemplate:
    def test_references_mode(self, blank_document):
        doc = operations.set_references_mode(blank_document, "detailed")
        assert doc.get_section("references").mode == "detailed"
        with pytest.raises(ValidationError):
            operations.set_references_mode(doc, "sometimes")

    def test_set_template(self, blank_document):
        assert operations.set_template(blank_document, "stockholm").template_id == "stockholm"

    def test_unknown_template(self, blank_document):
        with pytest.raises(ValidationError) as exc_info:
            operations.set_template(blank_document, "paris")
        assert exc_info.value.fields == ["template_id"]
