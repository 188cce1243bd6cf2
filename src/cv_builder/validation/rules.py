"""Pure format checks used by the document schemas and the forms.

Nothing in here performs I/O; every function is safe to call on each
keystroke.
"""

from __future__ import annotations

import re
from urllib.parse import urlparse

PRESENT = "Present"

YEAR_MONTH_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")

# +353 8X XXX XXXX / +353 9X XXX XXXX
_MOBILE_RE = re.compile(r"^\+353\s?[89]\d\s?\d{3}\s?\d{4}$")
# +353 1 XXX XXXX
_DUBLIN_LANDLINE_RE = re.compile(r"^\+353\s?1\s?\d{3}\s?\d{4}$")
# Regional landlines, e.g. Cork +353 21 XXX XXXX
_REGIONAL_LANDLINE_RE = re.compile(r"^\+353\s?[2-7]\d\s?\d{3}\s?\d{4}$")

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")
_NAME_CHARS_RE = re.compile(r"^[^\W\d_]+(?:[\s'’.\-]+[^\W\d_]+)*\.?$")

# Eircode: routing key (letter + 2 digits, or D6W) and a 4 character identifier
_EIRCODE_RE = re.compile(
    r"\b(?:[AC-FHKNPRTV-Y]\d{2}|D6W)\s?[AC-FHKNPRTV-Y0-9]{4}\b", re.IGNORECASE
)

IRISH_LOCALITIES = frozenset(
    {
        "dublin", "ireland", "eire",
        "carlow", "cavan", "clare", "cork", "donegal", "galway", "kerry",
        "kildare", "kilkenny", "laois", "leitrim", "limerick", "longford",
        "louth", "mayo", "meath", "monaghan", "offaly", "roscommon", "sligo",
        "tipperary", "waterford", "westmeath", "wexford", "wicklow",
        "dun laoghaire", "swords", "tallaght", "drogheda", "dundalk",
        "athlone", "navan", "bray", "ennis", "tralee",
    }
)

PROFICIENCY_LEVELS = ("native", "fluent", "professional", "intermediate", "basic")
WORK_PERMITS = ("eu-citizen", "stamp-1", "stamp-4", "critical-skills", "other")


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def is_year_month(value: str) -> bool:
    """True for zero-padded ``YYYY-MM`` strings."""
    return bool(YEAR_MONTH_RE.match(value))


def is_end_date(value: str) -> bool:
    """True for ``YYYY-MM`` or the literal ``"Present"``."""
    return value == PRESENT or is_year_month(value)


def date_range_ok(start: str | None, end: str | None) -> bool:
    """Check that *end* does not precede *start*.

    Fixed-width ``YYYY-MM`` strings sort lexically, so plain string
    comparison is enough. An open or ``Present`` end is always fine, and so
    is a pair we cannot compare because one side is malformed (that side
    gets its own format error).
    """
    if not start or not end or end == PRESENT:
        return True
    if not (is_year_month(start) and is_year_month(end)):
        return True
    return end >= start


def is_irish_phone(value: str) -> bool:
    return classify_irish_phone(value) is not None


def classify_irish_phone(value: str) -> str | None:
    """Return ``"mobile"``, ``"landline"`` or None for an unrecognised number."""
    value = value.strip()
    if _MOBILE_RE.match(value):
        return "mobile"
    if _DUBLIN_LANDLINE_RE.match(value) or _REGIONAL_LANDLINE_RE.match(value):
        return "landline"
    return None


def format_irish_phone(value: str) -> str:
    """Normalise an Irish number to the spaced international form.

    Accepts ``0871234567``, ``00353 87 123 4567``, ``+353871234567`` and
    similar. Returns the input unchanged when it cannot be parsed.
    """
    digits = re.sub(r"\D", "", value)
    if digits.startswith("00353"):
        national = digits[5:]
    elif digits.startswith("353"):
        national = digits[3:]
    elif digits.startswith("0"):
        national = digits[1:]
    else:
        return value

    if len(national) == 8 and national.startswith("1"):
        return f"+353 1 {national[1:4]} {national[4:]}"
    if len(national) == 9 and national[0] in "23456789":
        return f"+353 {national[:2]} {national[2:5]} {national[5:]}"
    return value


def has_irish_locality(address: str) -> bool:
    """True when the address names Dublin, Ireland, a county or an Eircode."""
    lowered = address.lower()
    tokens = set(re.findall(r"[a-zÀ-ɏ]+", lowered))
    for locality in IRISH_LOCALITIES:
        if " " in locality:
            if locality in lowered:
                return True
        elif locality in tokens:
            return True
    return bool(_EIRCODE_RE.search(address))


def is_email(value: str) -> bool:
    return bool(_EMAIL_RE.match(value.strip()))


def is_person_name(value: str) -> bool:
    """Letters plus spaces, hyphens, apostrophes and periods (Seán Ó Briain)."""
    return bool(_NAME_CHARS_RE.match(value.strip()))


def is_http_url(value: str) -> bool:
    parsed = urlparse(value.strip())
    return parsed.scheme in ("http", "https") and "." in (parsed.hostname or "")


def is_linkedin_url(value: str) -> bool:
    """Accept LinkedIn profile links with or without a scheme."""
    candidate = value.strip()
    if "://" not in candidate:
        candidate = f"https://{candidate}"
    parsed = urlparse(candidate)
    host = (parsed.hostname or "").lower()
    return parsed.scheme in ("http", "https") and (
        host == "linkedin.com" or host.endswith(".linkedin.com")
    )
