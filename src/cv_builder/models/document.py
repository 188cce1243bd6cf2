"""The CV document aggregate and its JSON round-trip helpers."""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from cv_builder.models.personal import PersonalInfo
from cv_builder.models.sections import (
    SECTION_TYPES,
    Section,
    empty_section,
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class FrozenVisibility(dict):
    """Section visibility map that rejects in-place changes.

    Still a ``dict`` so pydantic serialises it as one; build a new map and
    go through ``operations.set_section_visibility`` to change it.
    """

    def _readonly(self, *args: Any, **kwargs: Any) -> None:
        raise TypeError("section_visibility is read-only; use set_section_visibility")

    __setitem__ = __delitem__ = __ior__ = _readonly
    clear = pop = popitem = setdefault = update = _readonly

    def __reduce__(self):
        return type(self), (dict(self),)


class CVDocument(BaseModel):
    """Root aggregate: personal header plus exactly one section per type.

    ``sections`` is storage order only. Display order comes from the
    section registry (optionally permuted by ``section_order``) and
    ``section_visibility``; an absent visibility key means visible.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    updated_at: datetime = Field(default_factory=utc_now)
    personal: PersonalInfo = Field(default_factory=PersonalInfo)
    sections: tuple[Section, ...] = ()
    section_visibility: dict[str, bool] = Field(default_factory=FrozenVisibility)
    section_order: tuple[str, ...] | None = None
    template_id: str | None = None

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("sections")
    @classmethod
    def _one_section_per_type(cls, sections: tuple) -> tuple:
        seen: set[str] = set()
        for section in sections:
            if section.type in seen:
                raise ValueError(f"Duplicate section type: {section.type}")
            seen.add(section.type)
        return sections

    @field_validator("section_visibility")
    @classmethod
    def _known_visibility_keys(cls, visibility: dict[str, bool]) -> dict[str, bool]:
        for key, visible in visibility.items():
            if key == "personal":
                if not visible:
                    raise ValueError("Personal details cannot be hidden")
            elif key not in SECTION_TYPES:
                raise ValueError(f"Unknown section type: {key}")
        return FrozenVisibility(visibility)

    @field_validator("section_order")
    @classmethod
    def _order_is_permutation(cls, order: tuple[str, ...] | None) -> tuple[str, ...] | None:
        if order is None:
            return None
        expected = {"personal", *SECTION_TYPES}
        if len(order) != len(expected) or set(order) != expected:
            raise ValueError("Section order must list every section exactly once")
        return order

    @model_validator(mode="before")
    @classmethod
    def _fill_missing_sections(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        sections = list(data.get("sections") or ())
        present = {
            section.get("type") if isinstance(section, dict) else getattr(section, "type", None)
            for section in sections
        }
        missing = [t for t in SECTION_TYPES if t not in present]
        if missing:
            # Documents saved before a section type existed get it appended empty
            data = {**data, "sections": sections + [empty_section(t) for t in missing]}
        return data

    def get_section(self, section_type: str) -> Any:
        for section in self.sections:
            if section.type == section_type:
                return section
        return None

    def is_visible(self, section_type: str) -> bool:
        if section_type == "personal":
            return True
        return self.section_visibility.get(section_type, True)


def create_default_document() -> CVDocument:
    """A blank document with every section present and registry visibility defaults."""
    from cv_builder.registry import SECTION_REGISTRY

    visibility = {
        config.id: config.default_visible
        for config in SECTION_REGISTRY
        if config.id != "personal"
    }
    return CVDocument(
        personal=PersonalInfo(),
        sections=tuple(empty_section(t) for t in SECTION_TYPES),
        section_visibility=visibility,
    )


def serialize_document(document: CVDocument) -> str:
    """Serialize a document to a JSON string."""
    return document.model_dump_json()


def deserialize_document(data: str | bytes | dict) -> CVDocument:
    """Rebuild a document from JSON text or an already-decoded mapping."""
    if isinstance(data, (str, bytes)):
        data = json.loads(data)
    return CVDocument.model_validate(data)
