"""Tests for the template renderer and its output adapters."""

from __future__ import annotations

import pytest

from cv_builder import operations
from cv_builder.errors import TemplateNotFoundError
from cv_builder.templates import TEMPLATES, get_template, list_templates, render
from cv_builder.templates.contract import build_section_blocks, format_date_range
from cv_builder.templates.html_renderer import render_html, save_html
from cv_builder.templates.text_renderer import render_text

TEMPLATE_IDS = sorted(TEMPLATES)


class TestRegistry:
    def test_at_least_four_templates(self):
        assert len(list_templates()) >= 4
        assert {"dublin", "stockholm", "london", "harvard", "dublin-tech"} <= set(TEMPLATES)

    def test_unknown_template(self):
        with pytest.raises(TemplateNotFoundError) as exc_info:
            get_template("paris")
        assert "Available:" in str(exc_info.value)

    def test_document_template_used_by_default(self, jane_document):
        doc = operations.set_template(jane_document, "stockholm")
        assert render(doc).template_id == "stockholm"
        assert render(jane_document).template_id == "dublin"


class TestContract:
    def test_date_range_format(self):
        assert format_date_range("2020-01", "Present") == "2020-01 - Present"
        assert format_date_range("2020-01", "2021-06") == "2020-01 - 2021-06"
        assert format_date_range("2020-01", None) == "2020-01"

    def test_missing_end_is_not_shown_as_present(self, jane_document, education_payload):
        payload = {**education_payload, "end": None}
        doc = operations.add_item(jane_document, "education", payload)
        entry = render(doc, "dublin").block("education").entries[0]
        assert entry.dates == "2014-09"
        assert "Present" not in entry.dates

    def test_blocks_follow_registry_not_storage_order(self, full_document):
        reversed_doc = full_document.model_copy(
            update={"sections": tuple(reversed(full_document.sections))}
        )
        assert [b.section_type for b in build_section_blocks(reversed_doc)] == [
            b.section_type for b in build_section_blocks(full_document)
        ]

    def test_custom_order_respected(self, jane_document):
        doc = operations.move_section(jane_document, "skills", 1)
        assert [b.section_type for b in build_section_blocks(doc)] == ["skills", "experience"]

    def test_optional_fields_omitted(self, jane_document, education_payload):
        payload = {**education_payload, "grade": ""}
        doc = operations.add_item(jane_document, "education", payload)
        education = next(b for b in build_section_blocks(doc) if b.section_type == "education")
        assert education.entries[0].details == ()

    def test_references_on_request(self, jane_document):
        doc = operations.set_section_visibility(jane_document, "references", True)
        block = next(b for b in build_section_blocks(doc) if b.section_type == "references")
        assert block.text == "References available upon request"


class TestJaneByrneScenario:
    @pytest.mark.parametrize("template_id", TEMPLATE_IDS)
    def test_renders_exactly_experience_and_skills(self, jane_document, template_id):
        tree = render(jane_document, template_id)
        assert tree.header.name == "Jane Byrne"
        assert sorted(tree.section_types()) == ["experience", "skills"]

        experience = tree.block("experience")
        assert len(experience.entries) == 1
        assert experience.entries[0].dates == "2020-01 - Present"
        assert tree.block("skills").text == "TypeScript, React"

    @pytest.mark.parametrize("template_id", TEMPLATE_IDS)
    def test_text_output_has_no_empty_headings(self, jane_document, template_id):
        text = render_text(jane_document, template_id)
        assert "Jane Byrne" in text
        assert "2020-01 - Present" in text
        assert "TypeScript, React" in text
        for heading in ("EDUCATION", "CERTIFICATIONS", "LANGUAGES", "REFERENCES"):
            assert heading not in text


class TestTemplateEquivalence:
    def test_same_section_set_in_every_template(self, full_document):
        sets = {tid: set(render(full_document, tid).section_types()) for tid in TEMPLATE_IDS}
        first = sets[TEMPLATE_IDS[0]]
        assert all(s == first for s in sets.values())
        assert "awards" in first

    def test_hiding_awards_hides_it_everywhere(self, full_document):
        doc = operations.set_section_visibility(full_document, "awards", False)
        for template_id in TEMPLATE_IDS:
            assert "awards" not in render(doc, template_id).section_types()

    def test_regions_keep_global_order(self, full_document):
        doc = operations.move_section(full_document, "languages", 1)
        tree = render(doc, "stockholm")
        sidebar = [b.section_type for b in tree.region("sidebar").blocks]
        assert sidebar == ["languages", "education", "skills", "certifications"]

    def test_single_column_has_no_sidebar(self, full_document):
        tree = render(full_document, "dublin")
        assert tree.region("sidebar") is None
        assert tree.layout == "single-column"


class TestHtml:
    def test_render_html_contains_content(self, full_document):
        html = render_html(full_document, "dublin")
        assert "<html" in html
        assert "Jane Byrne" in html
        assert "<strong>eight years</strong>" in html

    def test_html_escapes_user_text(self, jane_document):
        doc = operations.update_summary(
            jane_document, "<script>alert(1)</script> " + "Experienced engineer " * 3
        )
        html = render_html(doc, "london")
        assert "<script>alert(1)</script>" not in html

    def test_two_column_markup(self, full_document):
        html = render_html(full_document, "dublin-tech")
        assert 'class="cv-region cv-sidebar"' in html
        assert "Technical Skills" in html

    def test_save_html(self, tmp_path, jane_document):
        path = save_html(render_html(jane_document), tmp_path / "out" / "cv.html")
        assert path.exists()
        assert "Jane Byrne" in path.read_text(encoding="utf-8")
