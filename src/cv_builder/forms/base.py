"""Form state shared by every section editor.

A form keeps raw string drafts exactly as typed. ``validate()`` parses them
into a payload and collects inline messages from the schema layer; only a
clean form reaches the store, so a rejected submit leaves the document as
it was.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Any

from cv_builder.errors import ValidationError
from cv_builder.store import DocumentStore
from cv_builder.validation import schemas
from cv_builder.validation.rules import PRESENT

_BULLET_MARKER = re.compile(r"^\s*(?:[-*•]\s+)?")


def parse_lines(raw: str) -> list[str]:
    """One entry per non-blank line, list markers removed."""
    return [
        _BULLET_MARKER.sub("", line).strip()
        for line in raw.splitlines()
        if line.strip()
    ]


def parse_list(raw: str) -> list[str]:
    """Comma- or newline-separated values."""
    return [part.strip() for part in re.split(r"[,\n]", raw) if part.strip()]


class SectionForm(ABC):
    section_type: str = ""
    fields: tuple[str, ...] = ()
    labels: dict[str, str] = {}
    required: tuple[str, ...] = ()
    choices: dict[str, tuple[str, ...]] = {}

    def __init__(self, store: DocumentStore):
        self.store = store
        self.values: dict[str, str] = {name: "" for name in self.fields}
        self.errors: dict[str, list[str]] = {}

    def set(self, field: str, value: str) -> None:
        if field not in self.values:
            raise KeyError(f"{type(self).__name__} has no field {field!r}")
        self.values[field] = value

    def update(self, **values: str) -> None:
        for field, value in values.items():
            self.set(field, value)

    def label(self, field: str) -> str:
        return self.labels.get(field, field.replace("_", " ").capitalize())

    def error_for(self, field: str) -> str | None:
        """First message for *field* or any of its nested paths."""
        for key, messages in self.errors.items():
            if (key == field or key.startswith(f"{field}.")) and messages:
                return messages[0]
        return None

    def clean(self) -> Any:
        return {name: self.values[name].strip() for name in self.fields}

    def extra_errors(self) -> dict[str, list[str]]:
        return {}

    def validate(self) -> bool:
        errors: dict[str, list[str]] = {
            name: [f"{self.label(name)} is required"]
            for name in self.required
            if not self.values.get(name, "").strip()
        }
        for field, messages in schemas.field_errors(self.section_type, self.clean()).items():
            if field.split(".")[0] in errors:
                continue
            errors.setdefault(field, []).extend(messages)
        for field, messages in self.extra_errors().items():
            errors.setdefault(field, []).extend(messages)
        self.errors = errors
        return not errors

    @abstractmethod
    def commit(self, payload: Any) -> None:
        """Write a clean payload through the store."""

    def submit(self) -> bool:
        """Validate and, when clean, write through the store."""
        if not self.validate():
            return False
        self.commit(self.clean())
        return True


class ItemForm(SectionForm):
    """Editor for one entry of a list section; ``index`` None means a new entry."""

    def __init__(self, store: DocumentStore, index: int | None = None):
        super().__init__(store)
        self.index = index
        if index is not None:
            self.load(store.document.get_section(self.section_type).items[index])

    @property
    def is_editing(self) -> bool:
        return self.index is not None

    def load(self, item: Any) -> None:
        for name in self.fields:
            value = getattr(item, name, None)
            self.values[name] = "" if value is None else str(value)

    def extra_errors(self) -> dict[str, list[str]]:
        if self.index is not None:
            return {}
        count = len(self.store.document.get_section(self.section_type).items)
        try:
            schemas.check_capacity(self.section_type, count)
        except ValidationError as exc:
            return exc.errors
        return {}

    def commit(self, payload: Any) -> None:
        if self.index is None:
            self.store.add_item(self.section_type, payload)
            self.index = len(self.store.document.get_section(self.section_type).items) - 1
        else:
            self.store.update_item(self.section_type, self.index, payload)


class DatedItemForm(ItemForm):
    """Item form with a start date and an end date that may be "Present"."""

    def __init__(self, store: DocumentStore, index: int | None = None):
        self.present = False
        super().__init__(store, index)

    def load(self, item: Any) -> None:
        super().load(item)
        self.present = item.end == PRESENT
        if self.present:
            self.values["end"] = ""

    def clean(self) -> dict[str, Any]:
        payload = super().clean()
        if self.present:
            payload["end"] = PRESENT
        return payload
