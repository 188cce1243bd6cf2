"""One editor form per CV section."""

from __future__ import annotations

from cv_builder.forms.awards import AwardForm
from cv_builder.forms.base import DatedItemForm, ItemForm, SectionForm
from cv_builder.forms.certifications import CertificationForm
from cv_builder.forms.education import EducationForm
from cv_builder.forms.experience import ExperienceForm
from cv_builder.forms.languages import LanguageForm
from cv_builder.forms.personal import PersonalInfoForm
from cv_builder.forms.publications import PublicationForm
from cv_builder.forms.references import ReferenceForm
from cv_builder.forms.skills import SkillsForm
from cv_builder.forms.summary import SummaryForm
from cv_builder.forms.volunteer import VolunteerForm
from cv_builder.store import DocumentStore

FORMS: dict[str, type[SectionForm]] = {
    "personal": PersonalInfoForm,
    "summary": SummaryForm,
    "experience": ExperienceForm,
    "education": EducationForm,
    "skills": SkillsForm,
    "certifications": CertificationForm,
    "languages": LanguageForm,
    "volunteer": VolunteerForm,
    "awards": AwardForm,
    "publications": PublicationForm,
    "references": ReferenceForm,
}


def form_for(section_type: str, store: DocumentStore, index: int | None = None) -> SectionForm:
    """Build the editor for *section_type*; *index* selects an entry to edit."""
    try:
        form_cls = FORMS[section_type]
    except KeyError:
        raise KeyError(f"No form for section {section_type!r}") from None
    if issubclass(form_cls, ItemForm):
        return form_cls(store, index)
    return form_cls(store)


__all__ = [
    "AwardForm",
    "CertificationForm",
    "DatedItemForm",
    "EducationForm",
    "ExperienceForm",
    "FORMS",
    "ItemForm",
    "LanguageForm",
    "PersonalInfoForm",
    "PublicationForm",
    "ReferenceForm",
    "SectionForm",
    "SkillsForm",
    "SummaryForm",
    "VolunteerForm",
    "form_for",
]
