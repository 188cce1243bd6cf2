"""Template rendering: one shared section contract, several layouts."""

from __future__ import annotations

from cv_builder.errors import TemplateNotFoundError
from cv_builder.models.document import CVDocument
from cv_builder.templates.base import CVTemplate
from cv_builder.templates.dublin import DublinTemplate
from cv_builder.templates.dublin_tech import DublinTechTemplate
from cv_builder.templates.harvard import HarvardTemplate
from cv_builder.templates.london import LondonTemplate
from cv_builder.templates.stockholm import StockholmTemplate
from cv_builder.templates.tree import Entry, Header, Region, RenderedCV, SectionBlock

DEFAULT_TEMPLATE_ID = "dublin"

TEMPLATES: dict[str, CVTemplate] = {
    template.id: template
    for template in (
        DublinTemplate(),
        StockholmTemplate(),
        LondonTemplate(),
        HarvardTemplate(),
        DublinTechTemplate(),
    )
}


def list_templates() -> list[CVTemplate]:
    return list(TEMPLATES.values())


def get_template(template_id: str) -> CVTemplate:
    try:
        return TEMPLATES[template_id]
    except KeyError:
        raise TemplateNotFoundError(template_id, list(TEMPLATES)) from None


def render(document: CVDocument, template_id: str | None = None) -> RenderedCV:
    """Render *document* with *template_id* (the document's own template by default)."""
    template_id = template_id or document.template_id or DEFAULT_TEMPLATE_ID
    return get_template(template_id).render(document)


__all__ = [
    "CVTemplate",
    "DEFAULT_TEMPLATE_ID",
    "Entry",
    "Header",
    "Region",
    "RenderedCV",
    "SectionBlock",
    "TEMPLATES",
    "get_template",
    "list_templates",
    "render",
]
