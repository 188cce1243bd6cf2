from cv_builder.forms.base import ItemForm


class PublicationForm(ItemForm):
    section_type = "publications"
    fields = ("title", "publication", "date", "url", "authors")
    labels = {
        "title": "Title",
        "publication": "Publication name",
        "date": "Date",
        "url": "URL",
        "authors": "Authors",
    }
    required = ("title", "publication", "date")
