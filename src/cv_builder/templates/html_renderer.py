from __future__ import annotations

import logging
from pathlib import Path

import markdown
from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup, escape

from cv_builder.models.document import CVDocument
from cv_builder.templates.tree import RenderedCV

logger = logging.getLogger(__name__)

HTML_TEMPLATES_DIR = Path(__file__).parent / "html"
CSS_THEMES_DIR = Path(__file__).parent.parent / "export" / "css_themes"


def _summary_html(text: str) -> Markup:
    # User text is escaped before markdown runs, so only markdown markup survives
    return Markup(markdown.markdown(str(escape(text)), extensions=["nl2br"]))


def load_theme_css(theme: str) -> str:
    css_path = CSS_THEMES_DIR / f"{theme}.css"
    if not css_path.exists():
        logger.warning("CSS theme %s not found, using professional", theme)
        css_path = CSS_THEMES_DIR / "professional.css"
    return css_path.read_text(encoding="utf-8")


def tree_to_html(rendered: RenderedCV) -> str:
    """Render a visual tree to a standalone, themed HTML page."""
    env = Environment(
        loader=FileSystemLoader(str(HTML_TEMPLATES_DIR)),
        autoescape=True,
    )
    env.filters["summary_html"] = _summary_html
    template = env.get_template("cv.html.j2")
    title = rendered.header.name or "Curriculum Vitae"
    return template.render(
        cv=rendered,
        title=title,
        css=Markup(load_theme_css(rendered.theme)),
    )


def render_html(document: CVDocument, template_id: str | None = None) -> str:
    from cv_builder.templates import render

    return tree_to_html(render(document, template_id))


def save_html(html_content: str, output_path: str | Path) -> Path:
    """Save HTML content to file."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(html_content, encoding="utf-8")
    return path
