"""Pure document operations: ``CVDocument`` in, new ``CVDocument`` out.

Each operation validates its payload through the schema layer before
building the new document, so a rejected call leaves no trace. Documents
are frozen; nothing here mutates its input.
"""

from __future__ import annotations

from typing import Any

from cv_builder.errors import TemplateNotFoundError, ValidationError
from cv_builder.models.document import CVDocument, FrozenVisibility, utc_now
from cv_builder.models.personal import PersonalInfo
from cv_builder.models.sections import ITEM_MODELS, SECTION_TYPES
from cv_builder.registry import resolve_order
from cv_builder.validation import schemas

REFERENCE_MODES = ("on-request", "detailed")


def _touch(document: CVDocument, **changes: Any) -> CVDocument:
    return document.model_copy(update={**changes, "updated_at": utc_now()})


def _section(document: CVDocument, section_type: str) -> Any:
    if section_type not in SECTION_TYPES:
        raise ValidationError(f"Unknown section type: {section_type}", field="type")
    return document.get_section(section_type)


def _replace_section(document: CVDocument, section: Any) -> CVDocument:
    sections = tuple(
        section if existing.type == section.type else existing
        for existing in document.sections
    )
    return _touch(document, sections=sections)


def _check_index(items: tuple, index: int, section_type: str) -> None:
    if not 0 <= index < len(items):
        raise ValidationError(
            f"No {section_type} entry at position {index}", field="index"
        )


# --- personal -------------------------------------------------------------


def update_personal(document: CVDocument, **fields: Any) -> CVDocument:
    """Merge *fields* into the personal record; all-or-nothing."""
    merged = {**document.personal.model_dump(), **fields}
    personal = schemas.validate_personal(merged)
    return _touch(document, personal=personal)


def replace_personal(document: CVDocument, personal: PersonalInfo | dict) -> CVDocument:
    return _touch(document, personal=schemas.validate_personal(personal))


# --- summary and skills ---------------------------------------------------


def update_summary(document: CVDocument, markdown: str) -> CVDocument:
    markdown = schemas.validate_summary(markdown)
    section = _section(document, "summary")
    return _replace_section(document, section.model_copy(update={"markdown": markdown}))


def update_skills(document: CVDocument, items: list[str] | tuple[str, ...]) -> CVDocument:
    skills = schemas.validate_skills(items)
    section = _section(document, "skills")
    return _replace_section(document, section.model_copy(update={"items": skills}))


def add_skill(document: CVDocument, skill: str) -> CVDocument:
    current = _section(document, "skills").items
    schemas.check_capacity("skills", len(current))
    return update_skills(document, current + (skill,))


def remove_skill(document: CVDocument, index: int) -> CVDocument:
    current = _section(document, "skills").items
    _check_index(current, index, "skills")
    return update_skills(document, current[:index] + current[index + 1:])


# --- list sections --------------------------------------------------------


def add_item(document: CVDocument, section_type: str, payload: Any) -> CVDocument:
    """Append a validated entry to a list section, respecting its capacity."""
    if section_type == "skills":
        return add_skill(document, payload)
    schemas.item_model(section_type)
    section = _section(document, section_type)
    schemas.check_capacity(section_type, len(section.items))
    item = schemas.validate_item(section_type, payload)
    return _replace_section(
        document, section.model_copy(update={"items": section.items + (item,)})
    )


def update_item(document: CVDocument, section_type: str, index: int, payload: Any) -> CVDocument:
    if section_type == "skills":
        current = _section(document, "skills").items
        _check_index(current, index, section_type)
        return update_skills(document, current[:index] + (payload,) + current[index + 1:])
    schemas.item_model(section_type)
    section = _section(document, section_type)
    _check_index(section.items, index, section_type)
    item = schemas.validate_item(section_type, payload)
    items = section.items[:index] + (item,) + section.items[index + 1:]
    return _replace_section(document, section.model_copy(update={"items": items}))


def remove_item(document: CVDocument, section_type: str, index: int) -> CVDocument:
    if section_type == "skills":
        return remove_skill(document, index)
    schemas.item_model(section_type)
    section = _section(document, section_type)
    _check_index(section.items, index, section_type)
    items = section.items[:index] + section.items[index + 1:]
    return _replace_section(document, section.model_copy(update={"items": items}))


def move_item(document: CVDocument, section_type: str, from_index: int, to_index: int) -> CVDocument:
    """Reorder entries inside one list section."""
    section = _section(document, section_type)
    if section_type not in ITEM_MODELS and section_type != "skills":
        raise ValidationError(f"Section {section_type!r} has no entries to move", field="type")
    items = list(section.items)
    _check_index(section.items, from_index, section_type)
    _check_index(section.items, to_index, section_type)
    items.insert(to_index, items.pop(from_index))
    return _replace_section(document, section.model_copy(update={"items": tuple(items)}))


def set_references_mode(document: CVDocument, mode: str) -> CVDocument:
    if mode not in REFERENCE_MODES:
        raise ValidationError(
            f"References mode must be one of {', '.join(REFERENCE_MODES)}", field="mode"
        )
    section = _section(document, "references")
    return _replace_section(document, section.model_copy(update={"mode": mode}))


# --- visibility, order and template ---------------------------------------


def set_section_visibility(document: CVDocument, section_type: str, visible: bool) -> CVDocument:
    if section_type == "personal":
        if not visible:
            raise ValidationError("Personal details cannot be hidden", field="personal")
        return document
    _section(document, section_type)
    visibility = FrozenVisibility({**document.section_visibility, section_type: bool(visible)})
    return _touch(document, section_visibility=visibility)


def reorder_sections(document: CVDocument, from_index: int, to_index: int) -> CVDocument:
    """Move a section in display order; positions count ``personal`` as 0."""
    order = resolve_order(document.section_order)
    if not 0 <= from_index < len(order) or not 0 <= to_index < len(order):
        raise ValidationError("Section position out of range", field="index")
    if from_index == 0 or to_index == 0:
        raise ValidationError("Personal details always come first", field="index")
    order.insert(to_index, order.pop(from_index))
    return _touch(document, section_order=tuple(order))


def move_section(document: CVDocument, section_id: str, to_index: int) -> CVDocument:
    order = resolve_order(document.section_order)
    if section_id not in order:
        raise ValidationError(f"Unknown section type: {section_id}", field="type")
    return reorder_sections(document, order.index(section_id), to_index)


def reset_section_order(document: CVDocument) -> CVDocument:
    return _touch(document, section_order=None)


def set_template(document: CVDocument, template_id: str) -> CVDocument:
    from cv_builder.templates import get_template

    try:
        get_template(template_id)
    except TemplateNotFoundError as exc:
        raise ValidationError(str(exc), field="template_id") from None
    return _touch(document, template_id=template_id)
