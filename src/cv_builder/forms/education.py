from cv_builder.forms.base import DatedItemForm


class EducationForm(DatedItemForm):
    section_type = "education"
    fields = ("institution", "degree", "field", "start", "end", "grade")
    labels = {
        "institution": "Institution name",
        "degree": "Degree/qualification name",
        "field": "Field of study",
        "start": "Start date",
        "end": "End date",
        "grade": "Grade",
    }
    required = ("institution", "degree", "field", "start")
