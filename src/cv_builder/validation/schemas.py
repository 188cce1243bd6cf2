"""Schema-driven validation at the mutation boundary.

Every payload that reaches a document operation goes through one of these
functions first. A payload may be a model instance or a plain mapping; either
way it is re-validated from scratch, so a half-built instance (for example
one made with ``model_construct``) cannot slip through.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import pydantic
from pydantic import BaseModel, TypeAdapter

from cv_builder.errors import ValidationError
from cv_builder.models.items import MAX_BULLETS
from cv_builder.models.personal import PersonalInfo
from cv_builder.models.sections import (
    ITEM_MODELS,
    SECTION_CAPACITY,
    SECTION_MODELS,
    Section,
)
from cv_builder.validation.types import SkillName, SummaryText

_SECTION_ADAPTER = TypeAdapter(Section)
_SKILLS_ADAPTER = TypeAdapter(tuple[SkillName, ...])
_SUMMARY_ADAPTER = TypeAdapter(SummaryText)

_CAPACITY_LABELS = {
    "experience": "work experiences",
    "education": "education entries",
    "skills": "skills",
    "certifications": "certifications",
    "languages": "languages",
    "volunteer": "volunteer experiences",
    "awards": "awards",
    "publications": "publications",
    "references": "references",
}

_STRIP_PREFIXES = ("Value error, ", "Assertion failed, ")


def _message(error: dict[str, Any], field: str) -> str:
    kind = error.get("type", "")
    ctx = error.get("ctx") or {}
    if kind == "too_short" and field.split(".")[-1] == "bullets":
        return "At least one achievement or responsibility is required"
    if kind == "too_long" and field.split(".")[-1] == "bullets":
        return f"Maximum {MAX_BULLETS} achievements/responsibilities allowed"
    if kind == "too_short":
        return f"At least {ctx.get('min_length', 1)} entries are required"
    if kind == "too_long" and "max_length" in ctx:
        return f"At most {ctx['max_length']} entries are allowed"
    if kind == "missing":
        return "This field is required"
    if kind == "extra_forbidden":
        return "Unknown field"
    message = error.get("msg", "Invalid value")
    for prefix in _STRIP_PREFIXES:
        if message.startswith(prefix):
            return message[len(prefix):]
    return message


def collect_errors(exc: pydantic.ValidationError, prefix: str = "") -> dict[str, list[str]]:
    """Translate a pydantic error into ``{dotted.path: [messages]}``."""
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        # Discriminated unions add the tag to the location; drop it
        loc = [str(part) for part in error.get("loc", ())]
        field = ".".join(part for part in loc if part not in SECTION_MODELS) or "__root__"
        if prefix:
            field = prefix if field == "__root__" else f"{prefix}.{field}"
        errors.setdefault(field, []).append(_message(error, field))
    return errors


def _as_mapping(payload: Any) -> Any:
    if isinstance(payload, BaseModel):
        return payload.model_dump()
    return payload


def _validate_model(model: type[BaseModel], payload: Any) -> BaseModel:
    data = _as_mapping(payload)
    if not isinstance(data, Mapping):
        raise ValidationError(f"Expected a {model.__name__} payload")
    try:
        return model.model_validate(dict(data))
    except pydantic.ValidationError as exc:
        raise ValidationError(collect_errors(exc)) from None


def item_model(section_type: str) -> type[BaseModel]:
    try:
        return ITEM_MODELS[section_type]
    except KeyError:
        raise ValidationError(
            f"Section {section_type!r} does not hold list items", field="type"
        ) from None


def validate_item(section_type: str, payload: Any) -> BaseModel:
    """Validate one list entry for *section_type* and return the model."""
    return _validate_model(item_model(section_type), payload)


def validate_personal(payload: Any) -> PersonalInfo:
    return _validate_model(PersonalInfo, payload)


def validate_summary(markdown: str) -> str:
    try:
        return _SUMMARY_ADAPTER.validate_python(markdown)
    except pydantic.ValidationError as exc:
        raise ValidationError(collect_errors(exc, "markdown")) from None


def validate_skills(items: Sequence[str]) -> tuple[str, ...]:
    if isinstance(items, str):
        raise ValidationError("Skills must be a list of strings", field="items")
    cleaned = tuple(items)
    if len(cleaned) > SECTION_CAPACITY["skills"]:
        raise _capacity_error("skills")
    try:
        return _SKILLS_ADAPTER.validate_python(cleaned)
    except pydantic.ValidationError as exc:
        raise ValidationError(collect_errors(exc, "items")) from None


def validate_section(payload: Any) -> BaseModel:
    """Validate a whole section (any variant) from a model or mapping."""
    try:
        return _SECTION_ADAPTER.validate_python(_as_mapping(payload))
    except pydantic.ValidationError as exc:
        raise ValidationError(collect_errors(exc)) from None


def check_capacity(section_type: str, current_count: int) -> None:
    """Raise when one more entry would exceed the section's bound."""
    limit = SECTION_CAPACITY.get(section_type)
    if limit is not None and current_count >= limit:
        raise _capacity_error(section_type)


def _capacity_error(section_type: str) -> ValidationError:
    limit = SECTION_CAPACITY[section_type]
    label = _CAPACITY_LABELS.get(section_type, section_type)
    return ValidationError(f"Maximum {limit} {label} allowed", field="items")


def field_errors(section_type: str, payload: Any) -> dict[str, list[str]]:
    """Non-raising variant for inline form messages. Empty dict means valid."""
    try:
        if section_type == "personal":
            validate_personal(payload)
        elif section_type == "summary":
            validate_summary(payload)
        elif section_type == "skills":
            validate_skills(payload)
        else:
            validate_item(section_type, payload)
    except ValidationError as exc:
        return exc.errors
    return {}
