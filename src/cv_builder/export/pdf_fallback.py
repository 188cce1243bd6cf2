"""Fallback PDF renderer using fpdf2 (pure Python, no system deps)."""

from __future__ import annotations

import html
import logging
import re
from pathlib import Path

from fpdf import FPDF
from fpdf.enums import XPos, YPos

logger = logging.getLogger(__name__)

# Unicode TTF fonts (Irish names and addresses need fadas: á é í ó ú)
_UNICODE_FONT_PATHS = [
    # macOS
    "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
    "/Library/Fonts/Arial Unicode.ttf",
    # Linux (apt install fonts-dejavu-core)
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    # Linux (apt install fonts-liberation)
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    # Windows
    "C:/Windows/Fonts/arial.ttf",
]

_TAG_RE = re.compile(r"<(/?)(h[1-3]|p|li|ul|ol|br)\b[^>]*?/?>", re.IGNORECASE)


def _find_unicode_font() -> str | None:
    """Search for a Unicode-capable TTF font on the system."""
    for path in _UNICODE_FONT_PATHS:
        if Path(path).exists() and path.endswith(".ttf"):
            return path
    return None


def html_to_pdf_fpdf2(html_content: str) -> bytes:
    """Fallback PDF generation using fpdf2 when WeasyPrint is unavailable."""
    body_match = re.search(r"<body[^>]*>(.*?)</body>", html_content, re.DOTALL)
    body = body_match.group(1) if body_match else html_content

    pdf = FPDF()
    pdf.set_auto_page_break(auto=True, margin=20)
    pdf.add_page()

    font_name = "Helvetica"
    unicode_font = _find_unicode_font()
    if unicode_font:
        try:
            pdf.add_font("UnicodeFont", "", unicode_font)
            font_name = "UnicodeFont"
        except (OSError, RuntimeError):
            logger.debug("Failed to load font %s", unicode_font)

    pdf.set_font(font_name, size=10)

    for line_type, text in _parse_html_to_lines(body):
        safe_text = _safe_text(text, pdf)
        if line_type == "h1":
            pdf.set_font_size(16)
            _line(pdf, 10, safe_text)
            pdf.line(pdf.l_margin, pdf.get_y(), pdf.w - pdf.r_margin, pdf.get_y())
            pdf.ln(3)
            pdf.set_font_size(10)
        elif line_type == "h2":
            pdf.ln(3)
            pdf.set_font_size(13)
            _line(pdf, 8, safe_text)
            pdf.ln(2)
            pdf.set_font_size(10)
        elif line_type == "h3":
            pdf.ln(2)
            pdf.set_font_size(11)
            _line(pdf, 7, safe_text)
            pdf.set_font_size(10)
        elif line_type == "bullet":
            _line(pdf, 6, f"  - {safe_text}")
        elif line_type == "text" and safe_text.strip():
            _line(pdf, 6, safe_text)
        elif line_type == "break":
            pdf.ln(3)

    return bytes(pdf.output())


def _line(pdf: FPDF, height: float, text: str) -> None:
    pdf.multi_cell(0, height, text, new_x=XPos.LMARGIN, new_y=YPos.NEXT)


def _safe_text(text: str, pdf: FPDF) -> str:
    """Ensure text is encodable by the current font. Replace if needed."""
    if pdf.is_ttf_font:
        return text
    # Built-in fonts (Helvetica etc.) are latin-1 only
    try:
        text.encode("latin-1")
        return text
    except UnicodeEncodeError:
        return text.encode("latin-1", errors="replace").decode("latin-1")


def _parse_html_to_lines(body_html: str) -> list[tuple[str, str]]:
    """Parse simple HTML into (type, text) pairs."""
    lines: list[tuple[str, str]] = []
    body_html = re.sub(r"<(style|script)[^>]*>.*?</\1>", "", body_html, flags=re.DOTALL)
    current_tag = "text"
    position = 0
    for match in _TAG_RE.finditer(body_html):
        _append_text(lines, current_tag, body_html[position:match.start()])
        position = match.end()
        closing = match.group(1) == "/"
        tag = match.group(2).lower()
        if closing:
            if tag in ("ul", "ol"):
                lines.append(("break", ""))
            current_tag = "text"
        elif tag in ("h1", "h2", "h3"):
            current_tag = tag
        elif tag == "li":
            current_tag = "bullet"
        elif tag == "br":
            lines.append(("break", ""))
        elif tag == "p":
            current_tag = "text"
    _append_text(lines, current_tag, body_html[position:])
    return lines


def _append_text(lines: list[tuple[str, str]], kind: str, fragment: str) -> None:
    text = _strip_html(fragment)
    if text:
        lines.append((kind, text))


def _strip_html(text: str) -> str:
    """Remove HTML tags, collapse whitespace and decode entities."""
    text = re.sub(r"<[^>]+>", " ", text)
    text = re.sub(r"\s+", " ", html.unescape(text))
    return text.strip()
