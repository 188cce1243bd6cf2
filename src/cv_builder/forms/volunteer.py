from cv_builder.forms.base import DatedItemForm


class VolunteerForm(DatedItemForm):
    section_type = "volunteer"
    fields = ("organization", "role", "start", "end", "description")
    labels = {
        "organization": "Organization name",
        "role": "Role",
        "start": "Start date",
        "end": "End date",
        "description": "Description",
    }
    required = ("organization", "role", "start", "description")
