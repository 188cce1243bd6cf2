"""Validation library: pure format rules and the field types built on them.

Model-aware entry points (``validate_item`` and friends) live in
``cv_builder.validation.schemas`` and are imported from there explicitly.
"""
from cv_builder.validation.rules import (
    PRESENT,
    classify_irish_phone,
    date_range_ok,
    format_irish_phone,
    has_irish_locality,
    is_email,
    is_end_date,
    is_http_url,
    is_irish_phone,
    is_linkedin_url,
    is_year_month,
)

__all__ = [
    "PRESENT",
    "classify_irish_phone",
    "date_range_ok",
    "format_irish_phone",
    "has_irish_locality",
    "is_email",
    "is_end_date",
    "is_http_url",
    "is_irish_phone",
    "is_linkedin_url",
    "is_year_month",
]
