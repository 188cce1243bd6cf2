from cv_builder.templates.base import CVTemplate


class DublinTemplate(CVTemplate):
    """Single-column layout aimed at Irish recruiters."""

    id = "dublin"
    name = "Dublin Professional"
    description = "Clean single-column layout preferred by Irish recruiters"
    layout = "single-column"
    theme = "professional"
