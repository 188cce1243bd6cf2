from cv_builder.forms.base import ItemForm


class AwardForm(ItemForm):
    section_type = "awards"
    fields = ("name", "issuer", "date", "description")
    labels = {
        "name": "Award name",
        "issuer": "Issuer name",
        "date": "Date",
        "description": "Description",
    }
    required = ("name", "issuer", "date")
