"""Section registry: the single source of truth for section order and labels.

The sidebar, the forms and every template ask this module which sections to
show and in what order. None of them iterate ``document.sections`` directly,
so storage order never leaks into display order.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class SectionConfig:
    id: str
    label: str
    default_visible: bool
    priority: str  # "essential", "important", "optional", "academic"
    order: int
    icon: str = ""


@dataclass(frozen=True)
class OrderedSection:
    id: str
    label: str
    visible: bool


SECTION_REGISTRY: tuple[SectionConfig, ...] = (
    SectionConfig("personal", "Personal Info", True, "essential", 1, "user"),
    SectionConfig("summary", "Professional Summary", True, "essential", 2, "file-text"),
    SectionConfig("experience", "Work Experience", True, "essential", 3, "briefcase"),
    SectionConfig("education", "Education", True, "essential", 4, "graduation-cap"),
    SectionConfig("skills", "Skills & Competencies", True, "essential", 5, "wrench"),
    SectionConfig("certifications", "Certifications & Licenses", True, "important", 6, "award"),
    SectionConfig("languages", "Languages", False, "optional", 7, "globe"),
    SectionConfig("awards", "Awards & Achievements", False, "optional", 8, "trophy"),
    SectionConfig("publications", "Publications & Research", False, "academic", 9, "book-open"),
    SectionConfig("volunteer", "Volunteer Experience", False, "optional", 10, "heart"),
    SectionConfig("references", "References", False, "optional", 11, "users"),
)

SECTION_IDS: tuple[str, ...] = tuple(
    config.id for config in sorted(SECTION_REGISTRY, key=lambda c: c.order)
)

_BY_ID: dict[str, SectionConfig] = {config.id: config for config in SECTION_REGISTRY}


def get_section_config(section_id: str) -> SectionConfig | None:
    return _BY_ID.get(section_id)


def get_section_label(section_id: str) -> str:
    config = _BY_ID.get(section_id)
    return config.label if config else section_id


def is_section_visible(section_id: str, visibility: Mapping[str, bool] | None) -> bool:
    """Absent keys are visible; ``personal`` is visible whatever the mapping says."""
    if section_id == "personal":
        return True
    return (visibility or {}).get(section_id, True) is not False


def resolve_order(order: Sequence[str] | None = None) -> list[str]:
    """Display order of every section id.

    *order* is an optional per-document permutation. Unknown ids are
    dropped, ids missing from it keep their registry position at the end,
    and ``personal`` is pinned first.
    """
    if not order:
        return list(SECTION_IDS)
    seen: set[str] = set()
    resolved: list[str] = ["personal"]
    seen.add("personal")
    for section_id in order:
        if section_id in _BY_ID and section_id not in seen:
            resolved.append(section_id)
            seen.add(section_id)
    resolved.extend(section_id for section_id in SECTION_IDS if section_id not in seen)
    return resolved


def get_ordered_sections(
    visibility: Mapping[str, bool] | None = None,
    order: Sequence[str] | None = None,
    *,
    include_hidden: bool = False,
) -> list[OrderedSection]:
    """Sections in display order, hidden ones filtered out unless asked for."""
    result: list[OrderedSection] = []
    for section_id in resolve_order(order):
        visible = is_section_visible(section_id, visibility)
        if visible or include_hidden:
            result.append(OrderedSection(section_id, get_section_label(section_id), visible))
    return result


def group_sections_by_priority() -> dict[str, list[SectionConfig]]:
    groups: dict[str, list[SectionConfig]] = {
        "essential": [],
        "important": [],
        "optional": [],
        "academic": [],
    }
    for config in sorted(SECTION_REGISTRY, key=lambda c: c.order):
        groups[config.priority].append(config)
    return groups
